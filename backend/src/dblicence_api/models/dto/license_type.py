"""Licence type catalogue DTOs."""

from pydantic import BaseModel, Field

from dblicence_api.models.domain.host import Technology
from dblicence_api.models.domain.license_type import LicenseMetric


class CoreFactorEntry(BaseModel):
    """Core factor row as sent and returned by the API."""

    processor_pattern: str = Field(min_length=1, max_length=255)
    factor: float = Field(gt=0, le=4)

    class Config:
        """Pydantic config."""

        from_attributes = True


class LicenseTypeCreate(BaseModel):
    """Create a new licence type."""

    id: str = Field(min_length=1, max_length=32, pattern=r"^[A-Za-z0-9_\-]+$")
    item_description: str = Field(default="", max_length=500)
    metric: LicenseMetric = LicenseMetric.PROCESSOR
    technology: Technology = Technology.ORACLE
    aliases: list[str] = Field(default_factory=list, max_length=50)
    core_factors: list[CoreFactorEntry] = Field(default_factory=list, max_length=100)
    default_core_factor: float | None = Field(default=None, gt=0, le=4)


class LicenseTypeUpdate(BaseModel):
    """Update a licence type."""

    item_description: str | None = Field(default=None, max_length=500)
    metric: LicenseMetric | None = None
    aliases: list[str] | None = Field(default=None, max_length=50)
    core_factors: list[CoreFactorEntry] | None = Field(default=None, max_length=100)
    default_core_factor: float | None = Field(default=None, gt=0, le=4)


class LicenseTypeResponse(BaseModel):
    """Licence type response."""

    id: str
    item_description: str
    metric: LicenseMetric
    technology: Technology
    aliases: list[str] = []
    core_factors: list[CoreFactorEntry] = []
    default_core_factor: float | None = None

    class Config:
        """Pydantic config."""

        from_attributes = True


class LicenseTypeListResponse(BaseModel):
    """List of licence types."""

    items: list[LicenseTypeResponse]
    total: int
