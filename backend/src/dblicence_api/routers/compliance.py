"""Licence compliance router."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from dblicence_api.dependencies import get_compliance_service
from dblicence_api.models.domain.compliance import ComplianceScope
from dblicence_api.models.domain.host import Technology
from dblicence_api.models.dto.compliance import ComplianceSummaryResponse, LicenseComplianceResponse
from dblicence_api.services.compliance_service import ComplianceService

router = APIRouter()


def get_compliance_scope(
    technology: Technology = Technology.ORACLE,
    location: Annotated[list[str] | None, Query()] = None,
    environment: Annotated[str | None, Query(max_length=100)] = None,
    older_than: datetime | None = None,
) -> ComplianceScope:
    """Build the computation scope from query parameters."""
    return ComplianceScope(
        technology=technology,
        locations=[value for value in location or [] if value],
        environment=environment or None,
        older_than=older_than,
    )


@router.get("/licenses", response_model=LicenseComplianceResponse)
async def get_license_compliance(
    scope: Annotated[ComplianceScope, Depends(get_compliance_scope)],
    service: Annotated[ComplianceService, Depends(get_compliance_service)],
) -> LicenseComplianceResponse:
    """Get per-part licence compliance and the aggregate verdict."""
    return await service.compute_license_compliance(scope)


@router.get("/licenses/summary", response_model=ComplianceSummaryResponse)
async def get_license_compliance_summary(
    scope: Annotated[ComplianceScope, Depends(get_compliance_scope)],
    service: Annotated[ComplianceService, Depends(get_compliance_service)],
) -> ComplianceSummaryResponse:
    """Get the aggregate licence compliance only."""
    return await service.compute_summary(scope)
