"""Hosts router."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path

from dblicence_api.dependencies import get_host_service
from dblicence_api.models.domain.host import Technology
from dblicence_api.models.dto.host import LicenseIgnoredResponse, LicenseIgnoredUpdate
from dblicence_api.services.host_service import HostService

router = APIRouter()


@router.put(
    "/{hostname}/databases/{dbname}/licenses/{license_type_id}/ignored",
    response_model=LicenseIgnoredResponse,
)
async def set_license_ignored(
    hostname: Annotated[str, Path(min_length=1, max_length=255)],
    dbname: Annotated[str, Path(min_length=1, max_length=255)],
    license_type_id: Annotated[str, Path(min_length=1, max_length=32)],
    request: LicenseIgnoredUpdate,
    service: Annotated[HostService, Depends(get_host_service)],
    technology: Technology = Technology.ORACLE,
) -> LicenseIgnoredResponse:
    """Mark a database licence as ignored so it no longer consumes units."""
    return await service.set_license_ignored(hostname, dbname, license_type_id, request, technology)
