"""Repositories package."""

from dblicence_api.repositories.base import BaseRepository
from dblicence_api.repositories.cluster_repository import ClusterRepository
from dblicence_api.repositories.contract_repository import ContractRepository
from dblicence_api.repositories.entity_store import EntityStore, SqlEntityStore
from dblicence_api.repositories.host_repository import HostRepository
from dblicence_api.repositories.license_type_repository import LicenseTypeRepository

__all__ = [
    "BaseRepository",
    "ClusterRepository",
    "ContractRepository",
    "EntityStore",
    "HostRepository",
    "LicenseTypeRepository",
    "SqlEntityStore",
]
