"""API routers package."""

from dblicence_api.routers import compliance, contracts, hosts, license_types

__all__ = [
    "compliance",
    "contracts",
    "hosts",
    "license_types",
]
