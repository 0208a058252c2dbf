"""Licence type catalogue repository."""

from sqlalchemy import select

from dblicence_api.models.orm.license_type import CoreFactorORM, LicenseTypeORM
from dblicence_api.repositories.base import BaseRepository


class LicenseTypeRepository(BaseRepository[LicenseTypeORM]):
    """Repository for licence type operations."""

    model = LicenseTypeORM

    async def list_by_technology(self, technology: str | None = None) -> list[LicenseTypeORM]:
        """List licence types, optionally restricted to one technology.

        Args:
            technology: Database technology, all when None

        Returns:
            Licence types ordered by part identifier
        """
        query = select(LicenseTypeORM).order_by(LicenseTypeORM.id)
        if technology:
            query = query.where(LicenseTypeORM.technology == technology)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def create_license_type(
        self,
        id: str,
        item_description: str,
        metric: str,
        technology: str,
        aliases: list[str],
        core_factors: list[tuple[str, float]],
        default_core_factor: float | None = None,
    ) -> LicenseTypeORM:
        """Create a new licence type.

        Args:
            id: Contract part identifier
            item_description: Human readable description
            metric: Licence metric
            technology: Database technology
            aliases: Alternative names reported by agents
            core_factors: Ordered (processor pattern, factor) pairs
            default_core_factor: Factor used when no pattern matches

        Returns:
            Created LicenseTypeORM
        """
        license_type = LicenseTypeORM(
            id=id,
            item_description=item_description,
            metric=metric,
            technology=technology,
            aliases=aliases,
            default_core_factor=default_core_factor,
            core_factors=self._build_core_factors(core_factors),
        )
        self.session.add(license_type)
        await self.session.flush()
        await self.session.refresh(license_type)
        return license_type

    async def update_license_type(
        self,
        license_type: LicenseTypeORM,
        core_factors: list[tuple[str, float]] | None = None,
        **kwargs,
    ) -> LicenseTypeORM:
        """Update a licence type.

        Args:
            license_type: Licence type to update
            core_factors: Replacement core factor table, unchanged when None
            **kwargs: Fields to update

        Returns:
            Updated LicenseTypeORM
        """
        for key, value in kwargs.items():
            if hasattr(license_type, key):
                setattr(license_type, key, value)
        if core_factors is not None:
            license_type.core_factors = self._build_core_factors(core_factors)
        await self.session.flush()
        await self.session.refresh(license_type)
        return license_type

    @staticmethod
    def _build_core_factors(core_factors: list[tuple[str, float]]) -> list[CoreFactorORM]:
        """Build ordered core factor rows."""
        return [
            CoreFactorORM(processor_pattern=pattern, factor=factor, position=position)
            for position, (pattern, factor) in enumerate(core_factors)
        ]
