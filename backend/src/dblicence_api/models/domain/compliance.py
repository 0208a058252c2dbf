"""Compliance computation domain models."""

from datetime import datetime

from pydantic import BaseModel, Field

from dblicence_api.models.domain.host import Technology


class ComplianceScope(BaseModel):
    """Subset of the inventory a compliance computation looks at."""

    technology: Technology = Technology.ORACLE
    locations: list[str] = Field(default_factory=list)
    environment: str | None = None
    older_than: datetime | None = None  # None means the current snapshot

    class Config:
        """Pydantic config."""

        frozen = True


class ConsumptionRecord(BaseModel):
    """Units consumed for one contract part by one host or cluster."""

    license_type_id: str
    key: str  # "cluster_<name>" or "host_<hostname>"
    cluster_name: str | None = None
    hostnames: list[str] = Field(default_factory=list)
    consumed: float = Field(default=0.0, ge=0)
    capacity_based: bool = False  # Derived from the cluster CPU figure

    class Config:
        """Pydantic config."""

        frozen = True


class RecordCoverage(BaseModel):
    """Coverage drawn by one consumption record."""

    record: ConsumptionRecord
    covered: float = 0.0
    contract_ids: list[str] = Field(default_factory=list)

    @property
    def uncovered(self) -> float:
        """Units of the record still not covered."""
        return max(0.0, self.record.consumed - self.covered)


class PartCoverage(BaseModel):
    """Consumption and coverage totals for one contract part."""

    license_type_id: str
    consumed: float = 0.0
    covered: float = 0.0
    unlimited: bool = False
    usages: list[RecordCoverage] = Field(default_factory=list)
