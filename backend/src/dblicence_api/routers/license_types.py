"""Licence type catalogue router."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from dblicence_api.dependencies import get_license_type_service
from dblicence_api.models.domain.host import Technology
from dblicence_api.models.dto.license_type import (
    LicenseTypeCreate,
    LicenseTypeListResponse,
    LicenseTypeResponse,
    LicenseTypeUpdate,
)
from dblicence_api.services.license_type_service import LicenseTypeService

router = APIRouter()

LicenseTypeId = Annotated[str, Path(min_length=1, max_length=32, pattern=r"^[A-Za-z0-9_\-]+$")]


@router.get("", response_model=LicenseTypeListResponse)
async def list_license_types(
    service: Annotated[LicenseTypeService, Depends(get_license_type_service)],
    technology: Technology | None = None,
) -> LicenseTypeListResponse:
    """List licence types, optionally for one technology."""
    return await service.list_license_types(technology)


@router.post("", response_model=LicenseTypeResponse, status_code=status.HTTP_201_CREATED)
async def create_license_type(
    request: LicenseTypeCreate,
    service: Annotated[LicenseTypeService, Depends(get_license_type_service)],
) -> LicenseTypeResponse:
    """Create a licence type."""
    return await service.create_license_type(request)


@router.put("/{license_type_id}", response_model=LicenseTypeResponse)
async def update_license_type(
    license_type_id: LicenseTypeId,
    request: LicenseTypeUpdate,
    service: Annotated[LicenseTypeService, Depends(get_license_type_service)],
) -> LicenseTypeResponse:
    """Update a licence type."""
    return await service.update_license_type(license_type_id, request)


@router.delete("/{license_type_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_license_type(
    license_type_id: LicenseTypeId,
    service: Annotated[LicenseTypeService, Depends(get_license_type_service)],
) -> None:
    """Delete a licence type no contract references."""
    await service.delete_license_type(license_type_id)
