"""Contract repository."""

from uuid import UUID

from sqlalchemy import select

from dblicence_api.models.orm.contract import ContractHostORM, ContractORM
from dblicence_api.repositories.base import BaseRepository


class ContractRepository(BaseRepository[ContractORM]):
    """Repository for contract operations."""

    model = ContractORM

    async def list_by_technology(self, technology: str | None = None) -> list[ContractORM]:
        """List contracts, optionally restricted to one technology.

        Args:
            technology: Database technology, all when None

        Returns:
            Contracts with associated hosts, ordered by part and id
        """
        query = select(ContractORM).order_by(ContractORM.license_type_id, ContractORM.id)
        if technology:
            query = query.where(ContractORM.technology == technology)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count_by_license_type(self, license_type_id: str) -> int:
        """Count contracts referencing a licence type.

        Args:
            license_type_id: Contract part identifier

        Returns:
            Number of contracts
        """
        result = await self.session.execute(
            select(ContractORM.id).where(ContractORM.license_type_id == license_type_id)
        )
        return len(result.all())

    async def create_contract(self, hosts: list[str], **kwargs) -> ContractORM:
        """Create a new contract.

        Args:
            hosts: Associated hostnames
            **kwargs: Contract fields

        Returns:
            Created ContractORM
        """
        contract = ContractORM(**kwargs)
        contract.hosts = [ContractHostORM(hostname=hostname) for hostname in _unique(hosts)]
        self.session.add(contract)
        await self.session.flush()
        await self.session.refresh(contract)
        return contract

    async def update_contract(
        self,
        contract: ContractORM,
        hosts: list[str] | None = None,
        **kwargs,
    ) -> ContractORM:
        """Update a contract.

        Args:
            contract: Contract to update
            hosts: Replacement host list, unchanged when None
            **kwargs: Fields to update

        Returns:
            Updated ContractORM
        """
        for key, value in kwargs.items():
            if hasattr(contract, key):
                setattr(contract, key, value)
        if hosts is not None:
            contract.hosts.clear()
            await self.session.flush()
            contract.hosts.extend(ContractHostORM(hostname=hostname) for hostname in _unique(hosts))
        await self.session.flush()
        await self.session.refresh(contract)
        return contract

    async def delete_contract(self, contract_id: UUID) -> bool:
        """Delete a contract.

        Args:
            contract_id: Contract UUID

        Returns:
            True if deleted, False if not found
        """
        return await self.delete(contract_id)


def _unique(hostnames: list[str]) -> list[str]:
    """Drop blank and duplicate hostnames, keeping first occurrence order."""
    seen: set[str] = set()
    result = []
    for hostname in hostnames:
        hostname = hostname.strip()
        if hostname and hostname not in seen:
            seen.add(hostname)
            result.append(hostname)
    return result
