"""Licence type catalogue service."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from dblicence_api.exceptions import (
    ConflictError,
    LicenseTypeAlreadyExistsError,
    LicenseTypeNotFoundError,
)
from dblicence_api.models.domain.host import Technology
from dblicence_api.models.dto.license_type import (
    LicenseTypeCreate,
    LicenseTypeListResponse,
    LicenseTypeResponse,
    LicenseTypeUpdate,
)
from dblicence_api.models.orm.license_type import LicenseTypeORM
from dblicence_api.repositories.contract_repository import ContractRepository
from dblicence_api.repositories.license_type_repository import LicenseTypeRepository

logger = logging.getLogger(__name__)


class LicenseTypeService:
    """Service for managing the licence type catalogue."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.license_type_repo = LicenseTypeRepository(session)
        self.contract_repo = ContractRepository(session)

    async def list_license_types(self, technology: Technology | None = None) -> LicenseTypeListResponse:
        """List licence types.

        Args:
            technology: Restrict to one technology

        Returns:
            LicenseTypeListResponse
        """
        rows = await self.license_type_repo.list_by_technology(technology.value if technology else None)
        items = [self._to_response(row) for row in rows]
        return LicenseTypeListResponse(items=items, total=len(items))

    async def get_license_type(self, license_type_id: str) -> LicenseTypeResponse:
        """Get a licence type.

        Raises:
            LicenseTypeNotFoundError: If the part identifier is unknown
        """
        row = await self.license_type_repo.get_by_id(license_type_id)
        if row is None:
            raise LicenseTypeNotFoundError(license_type_id)
        return self._to_response(row)

    async def create_license_type(self, data: LicenseTypeCreate) -> LicenseTypeResponse:
        """Create a licence type.

        Args:
            data: Licence type definition

        Returns:
            Created licence type

        Raises:
            LicenseTypeAlreadyExistsError: If the part identifier is taken
        """
        if await self.license_type_repo.get_by_id(data.id) is not None:
            raise LicenseTypeAlreadyExistsError(data.id)

        row = await self.license_type_repo.create_license_type(
            id=data.id,
            item_description=data.item_description,
            metric=data.metric.value,
            technology=data.technology.value,
            aliases=data.aliases,
            core_factors=[(entry.processor_pattern, entry.factor) for entry in data.core_factors],
            default_core_factor=data.default_core_factor,
        )
        logger.info(f"Created licence type {row.id}")
        return self._to_response(row)

    async def update_license_type(self, license_type_id: str, data: LicenseTypeUpdate) -> LicenseTypeResponse:
        """Update a licence type.

        Args:
            license_type_id: Part identifier
            data: Fields to change

        Returns:
            Updated licence type

        Raises:
            LicenseTypeNotFoundError: If the part identifier is unknown
        """
        row = await self.license_type_repo.get_by_id(license_type_id)
        if row is None:
            raise LicenseTypeNotFoundError(license_type_id)

        changes = data.model_dump(exclude_unset=True, exclude={"core_factors"})
        if "metric" in changes and changes["metric"] is not None:
            changes["metric"] = changes["metric"].value
        core_factors = None
        if data.core_factors is not None:
            core_factors = [(entry.processor_pattern, entry.factor) for entry in data.core_factors]

        row = await self.license_type_repo.update_license_type(row, core_factors=core_factors, **changes)
        return self._to_response(row)

    async def delete_license_type(self, license_type_id: str) -> None:
        """Delete a licence type that no contract references.

        Raises:
            LicenseTypeNotFoundError: If the part identifier is unknown
            ConflictError: If contracts still reference the licence type
        """
        if await self.license_type_repo.get_by_id(license_type_id) is None:
            raise LicenseTypeNotFoundError(license_type_id)
        if await self.contract_repo.count_by_license_type(license_type_id) > 0:
            raise ConflictError(
                "License type is referenced by contracts",
                {"license_type_id": license_type_id},
            )
        await self.license_type_repo.delete(license_type_id)
        logger.info(f"Deleted licence type {license_type_id}")

    @staticmethod
    def _to_response(row: LicenseTypeORM) -> LicenseTypeResponse:
        return LicenseTypeResponse.model_validate(row)
