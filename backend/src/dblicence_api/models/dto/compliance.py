"""Licence compliance DTOs."""

from pydantic import BaseModel

from dblicence_api.models.domain.license_type import LicenseMetric


class LicenseUsageResponse(BaseModel):
    """Consumption of one host or cluster for a contract part."""

    key: str
    cluster_name: str | None = None
    hostnames: list[str]
    consumed: float
    covered: float
    capacity_based: bool = False
    contract_ids: list[str] = []


class PartComplianceResponse(BaseModel):
    """Compliance verdict for one contract part."""

    license_type_id: str
    item_description: str = ""
    metric: LicenseMetric | None = None
    consumed: float
    covered: float
    unlimited: bool = False
    compliant: bool
    compliance: float  # covered / consumed, clamped to [0, 1] for display
    usages: list[LicenseUsageResponse] = []


class ComplianceSummaryResponse(BaseModel):
    """Aggregate compliance across all parts."""

    count: int  # Number of contract parts
    used: float
    covered: float
    compliant: bool


class LicenseComplianceResponse(BaseModel):
    """Per-part compliance plus the aggregate verdict."""

    technology: str
    items: list[PartComplianceResponse]
    summary: ComplianceSummaryResponse
