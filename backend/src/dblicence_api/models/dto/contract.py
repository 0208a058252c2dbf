"""Contract DTOs."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from dblicence_api.models.domain.host import Technology


class ContractCreate(BaseModel):
    """Create a new contract."""

    contract_id: str = Field(default="", max_length=100)
    csi: str = Field(default="", max_length=100)
    license_type_id: str = Field(min_length=1, max_length=32)
    technology: Technology = Technology.ORACLE
    unlimited: bool = False
    basket: bool = False
    restricted: bool = False
    licenses_count: float = Field(default=0, ge=0, le=1000000)
    hosts: list[str] = Field(default_factory=list, max_length=10000)


class ContractUpdate(BaseModel):
    """Update a contract."""

    contract_id: str | None = Field(default=None, max_length=100)
    csi: str | None = Field(default=None, max_length=100)
    unlimited: bool | None = None
    basket: bool | None = None
    restricted: bool | None = None
    licenses_count: float | None = Field(default=None, ge=0, le=1000000)
    hosts: list[str] | None = Field(default=None, max_length=10000)


class ContractResponse(BaseModel):
    """Contract response."""

    id: UUID
    contract_id: str
    csi: str
    license_type_id: str
    item_description: str = ""
    metric: str | None = None
    technology: Technology
    unlimited: bool
    basket: bool
    restricted: bool
    licenses_count: float
    hosts: list[str] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ContractListResponse(BaseModel):
    """List of contracts."""

    items: list[ContractResponse]
    total: int
