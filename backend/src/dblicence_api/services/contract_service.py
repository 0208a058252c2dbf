"""Contract management service."""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from dblicence_api.exceptions import (
    ContractNotFoundError,
    LicenseTypeNotFoundError,
    TechnologyMismatchError,
)
from dblicence_api.models.domain.host import Technology
from dblicence_api.models.dto.contract import (
    ContractCreate,
    ContractListResponse,
    ContractResponse,
    ContractUpdate,
)
from dblicence_api.models.orm.contract import ContractORM
from dblicence_api.models.orm.license_type import LicenseTypeORM
from dblicence_api.repositories.contract_repository import ContractRepository
from dblicence_api.repositories.license_type_repository import LicenseTypeRepository

logger = logging.getLogger(__name__)


class ContractService:
    """Service for managing licence contracts."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.contract_repo = ContractRepository(session)
        self.license_type_repo = LicenseTypeRepository(session)

    async def list_contracts(self, technology: Technology | None = None) -> ContractListResponse:
        """List contracts.

        Args:
            technology: Restrict to one technology

        Returns:
            ContractListResponse
        """
        rows = await self.contract_repo.list_by_technology(technology.value if technology else None)
        catalogue = {
            row.id: row
            for row in await self.license_type_repo.list_by_technology(technology.value if technology else None)
        }
        items = [self._to_response(row, catalogue.get(row.license_type_id)) for row in rows]
        return ContractListResponse(items=items, total=len(items))

    async def create_contract(self, data: ContractCreate) -> ContractResponse:
        """Create a contract.

        An unlimited contract is stored as a basket contract.

        Args:
            data: Contract definition

        Returns:
            Created contract

        Raises:
            LicenseTypeNotFoundError: If the part identifier is unknown
            TechnologyMismatchError: If the part belongs to another technology
        """
        license_type = await self._get_license_type(data.license_type_id, data.technology)
        row = await self.contract_repo.create_contract(
            hosts=data.hosts,
            contract_id=data.contract_id,
            csi=data.csi,
            license_type_id=data.license_type_id,
            technology=data.technology.value,
            unlimited=data.unlimited,
            basket=data.basket or data.unlimited,
            restricted=data.restricted,
            licenses_count=data.licenses_count,
        )
        logger.info(f"Created contract {row.id} for part {row.license_type_id}")
        return self._to_response(row, license_type)

    async def update_contract(self, contract_id: UUID, data: ContractUpdate) -> ContractResponse:
        """Update a contract.

        Args:
            contract_id: Contract UUID
            data: Fields to change

        Returns:
            Updated contract

        Raises:
            ContractNotFoundError: If the contract does not exist
        """
        row = await self.contract_repo.get_by_id(contract_id)
        if row is None:
            raise ContractNotFoundError(str(contract_id))

        changes = data.model_dump(exclude_unset=True, exclude={"hosts"})
        changes = {key: value for key, value in changes.items() if value is not None}
        if changes.get("unlimited", row.unlimited):
            changes["basket"] = True

        row = await self.contract_repo.update_contract(row, hosts=data.hosts, **changes)
        license_type = await self.license_type_repo.get_by_id(row.license_type_id)
        return self._to_response(row, license_type)

    async def delete_contract(self, contract_id: UUID) -> None:
        """Delete a contract.

        Raises:
            ContractNotFoundError: If the contract does not exist
        """
        if not await self.contract_repo.delete_contract(contract_id):
            raise ContractNotFoundError(str(contract_id))
        logger.info(f"Deleted contract {contract_id}")

    async def _get_license_type(self, license_type_id: str, technology: Technology) -> LicenseTypeORM:
        license_type = await self.license_type_repo.get_by_id(license_type_id)
        if license_type is None:
            raise LicenseTypeNotFoundError(license_type_id)
        if license_type.technology != technology.value:
            raise TechnologyMismatchError(license_type_id, technology.value, license_type.technology)
        return license_type

    @staticmethod
    def _to_response(row: ContractORM, license_type: LicenseTypeORM | None) -> ContractResponse:
        return ContractResponse(
            id=row.id,
            contract_id=row.contract_id,
            csi=row.csi,
            license_type_id=row.license_type_id,
            item_description=license_type.item_description if license_type else "",
            metric=license_type.metric if license_type else None,
            technology=row.technology,
            unlimited=row.unlimited,
            basket=row.basket,
            restricted=row.restricted,
            licenses_count=row.licenses_count,
            hosts=[host.hostname for host in row.hosts],
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
