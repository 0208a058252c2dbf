"""Domain models package."""

from dblicence_api.models.domain.alert import (
    Alert,
    AlertCategory,
    AlertCode,
    AlertInfo,
    AlertSeverity,
    AlertStatus,
)
from dblicence_api.models.domain.cluster import Cluster
from dblicence_api.models.domain.compliance import (
    ComplianceScope,
    ConsumptionRecord,
    PartCoverage,
    RecordCoverage,
)
from dblicence_api.models.domain.contract import Contract
from dblicence_api.models.domain.host import (
    Database,
    DatabaseLicense,
    DatabaseRole,
    DatabaseStatus,
    Host,
    MySQLDatabaseDetails,
    OracleDatabaseDetails,
    PrimaryDatabase,
    SQLServerDatabaseDetails,
    Technology,
)
from dblicence_api.models.domain.license_type import CoreFactor, LicenseMetric, LicenseType

__all__ = [
    "Alert",
    "AlertCategory",
    "AlertCode",
    "AlertInfo",
    "AlertSeverity",
    "AlertStatus",
    "Cluster",
    "ComplianceScope",
    "ConsumptionRecord",
    "Contract",
    "CoreFactor",
    "Database",
    "DatabaseLicense",
    "DatabaseRole",
    "DatabaseStatus",
    "Host",
    "LicenseMetric",
    "LicenseType",
    "MySQLDatabaseDetails",
    "OracleDatabaseDetails",
    "PartCoverage",
    "PrimaryDatabase",
    "RecordCoverage",
    "SQLServerDatabaseDetails",
    "Technology",
]
