"""SQLAlchemy ORM models package."""

from dblicence_api.models.orm.base import Base
from dblicence_api.models.orm.cluster import ClusterMemberORM, ClusterORM
from dblicence_api.models.orm.contract import ContractHostORM, ContractORM
from dblicence_api.models.orm.host import DatabaseLicenseORM, DatabaseORM, HostORM
from dblicence_api.models.orm.license_type import CoreFactorORM, LicenseTypeORM

__all__ = [
    "Base",
    "ClusterORM",
    "ClusterMemberORM",
    "ContractORM",
    "ContractHostORM",
    "CoreFactorORM",
    "DatabaseORM",
    "DatabaseLicenseORM",
    "HostORM",
    "LicenseTypeORM",
]
