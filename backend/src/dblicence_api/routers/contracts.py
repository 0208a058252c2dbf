"""Contracts router."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from dblicence_api.dependencies import get_contract_service
from dblicence_api.models.domain.host import Technology
from dblicence_api.models.dto.contract import (
    ContractCreate,
    ContractListResponse,
    ContractResponse,
    ContractUpdate,
)
from dblicence_api.services.contract_service import ContractService

router = APIRouter()


@router.get("", response_model=ContractListResponse)
async def list_contracts(
    service: Annotated[ContractService, Depends(get_contract_service)],
    technology: Technology | None = None,
) -> ContractListResponse:
    """List contracts, optionally for one technology."""
    return await service.list_contracts(technology)


@router.post("", response_model=ContractResponse, status_code=status.HTTP_201_CREATED)
async def create_contract(
    request: ContractCreate,
    service: Annotated[ContractService, Depends(get_contract_service)],
) -> ContractResponse:
    """Create a contract. Unlimited contracts are always stored as basket contracts."""
    return await service.create_contract(request)


@router.put("/{contract_id}", response_model=ContractResponse)
async def update_contract(
    contract_id: UUID,
    request: ContractUpdate,
    service: Annotated[ContractService, Depends(get_contract_service)],
) -> ContractResponse:
    """Update a contract."""
    return await service.update_contract(contract_id, request)


@router.delete("/{contract_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contract(
    contract_id: UUID,
    service: Annotated[ContractService, Depends(get_contract_service)],
) -> None:
    """Delete a contract."""
    await service.delete_contract(contract_id)
