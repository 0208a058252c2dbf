"""Licence type (contract part) catalogue domain model."""

from enum import StrEnum

from pydantic import BaseModel, Field

from dblicence_api.models.domain.host import Technology


class LicenseMetric(StrEnum):
    """How consumption of a licence type is measured."""

    PROCESSOR = "processor"  # Cores multiplied by the core factor
    NAMED_USER_PLUS = "named_user_plus"  # Observed user count
    PER_CORE = "per_core"  # Physical cores
    PER_SOCKET = "per_socket"  # Populated sockets


class CoreFactor(BaseModel):
    """Core factor applied to processors matching a model pattern."""

    processor_pattern: str
    factor: float = Field(gt=0)

    class Config:
        """Pydantic config."""

        from_attributes = True
        frozen = True

    def matches(self, cpu_model: str) -> bool:
        """Check whether the pattern appears in the CPU model (case-insensitive)."""
        return self.processor_pattern.lower() in cpu_model.lower()


class LicenseType(BaseModel):
    """Licence type reference data, looked up by part identifier."""

    id: str
    item_description: str = ""
    metric: LicenseMetric = LicenseMetric.PROCESSOR
    technology: Technology = Technology.ORACLE
    aliases: list[str] = Field(default_factory=list)
    core_factors: list[CoreFactor] = Field(default_factory=list)
    default_core_factor: float | None = Field(default=None, gt=0)

    class Config:
        """Pydantic config."""

        from_attributes = True
        frozen = True
