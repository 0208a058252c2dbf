"""Data Transfer Objects package."""

from dblicence_api.models.dto.compliance import (
    ComplianceSummaryResponse,
    LicenseComplianceResponse,
    LicenseUsageResponse,
    PartComplianceResponse,
)
from dblicence_api.models.dto.contract import (
    ContractCreate,
    ContractListResponse,
    ContractResponse,
    ContractUpdate,
)
from dblicence_api.models.dto.host import LicenseIgnoredResponse, LicenseIgnoredUpdate
from dblicence_api.models.dto.license_type import (
    CoreFactorEntry,
    LicenseTypeCreate,
    LicenseTypeListResponse,
    LicenseTypeResponse,
    LicenseTypeUpdate,
)

__all__ = [
    "ComplianceSummaryResponse",
    "ContractCreate",
    "ContractListResponse",
    "ContractResponse",
    "ContractUpdate",
    "CoreFactorEntry",
    "LicenseComplianceResponse",
    "LicenseIgnoredResponse",
    "LicenseIgnoredUpdate",
    "LicenseTypeCreate",
    "LicenseTypeListResponse",
    "LicenseTypeResponse",
    "LicenseTypeUpdate",
    "LicenseUsageResponse",
    "PartComplianceResponse",
]
