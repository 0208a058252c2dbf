"""Contract domain model."""

from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from dblicence_api.models.domain.host import Technology


class Contract(BaseModel):
    """Negotiated entitlement for one contract part."""

    id: UUID
    contract_id: str = ""
    csi: str = ""  # Customer support identifier
    license_type_id: str
    technology: Technology = Technology.ORACLE
    unlimited: bool = False
    basket: bool = False
    restricted: bool = False
    licenses_count: float = Field(default=0.0, ge=0)
    hosts: list[str] = Field(default_factory=list)

    class Config:
        """Pydantic config."""

        from_attributes = True
        frozen = True

    @model_validator(mode="before")
    @classmethod
    def unlimited_implies_basket(cls, data: Any) -> Any:
        """Unlimited contracts always pool their coverage."""
        if isinstance(data, dict) and data.get("unlimited"):
            return {**data, "basket": True}
        return data
