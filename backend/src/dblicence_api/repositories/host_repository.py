"""Host repository."""

from datetime import datetime

from sqlalchemy import and_, func, select
from sqlalchemy.orm import selectinload

from dblicence_api.models.orm.host import DatabaseLicenseORM, DatabaseORM, HostORM
from dblicence_api.repositories.base import BaseRepository


class HostRepository(BaseRepository[HostORM]):
    """Repository for host snapshot operations."""

    model = HostORM

    async def list_current(
        self,
        technology: str,
        locations: list[str] | None = None,
        environment: str | None = None,
    ) -> list[HostORM]:
        """List non-archived hosts running at least one database of a technology.

        Args:
            technology: Database technology
            locations: Restrict to these locations (all when empty)
            environment: Restrict to this environment

        Returns:
            Hosts with databases and licences loaded, ordered by hostname
        """
        query = (
            select(HostORM)
            .where(HostORM.archived == False)  # noqa: E712
            .where(HostORM.databases.any(DatabaseORM.technology == technology))
            .options(selectinload(HostORM.databases).selectinload(DatabaseORM.licenses))
            .order_by(HostORM.hostname)
        )
        query = self._apply_scope(query, locations, environment)

        result = await self.session.execute(query)
        return list(result.scalars().unique().all())

    async def list_at(
        self,
        older_than: datetime,
        technology: str,
        locations: list[str] | None = None,
        environment: str | None = None,
    ) -> list[HostORM]:
        """List the latest snapshot of every host taken at or before a given time.

        Args:
            older_than: Upper bound of the snapshot creation time
            technology: Database technology
            locations: Restrict to these locations (all when empty)
            environment: Restrict to this environment

        Returns:
            Historical host snapshots ordered by hostname
        """
        latest = (
            select(HostORM.hostname, func.max(HostORM.created_at).label("created_at"))
            .where(HostORM.created_at <= older_than)
            .group_by(HostORM.hostname)
            .subquery()
        )
        query = (
            select(HostORM)
            .join(
                latest,
                and_(
                    HostORM.hostname == latest.c.hostname,
                    HostORM.created_at == latest.c.created_at,
                ),
            )
            .where(HostORM.databases.any(DatabaseORM.technology == technology))
            .options(selectinload(HostORM.databases).selectinload(DatabaseORM.licenses))
            .order_by(HostORM.hostname)
        )
        query = self._apply_scope(query, locations, environment)

        result = await self.session.execute(query)
        return list(result.scalars().unique().all())

    async def list_open_primary_databases(self, technology: str) -> list[tuple[str, DatabaseORM]]:
        """List open primary databases of the whole current inventory.

        Args:
            technology: Database technology

        Returns:
            (hostname, database) pairs ordered by hostname and database name
        """
        result = await self.session.execute(
            select(HostORM.hostname, DatabaseORM)
            .join(DatabaseORM, DatabaseORM.host_id == HostORM.id)
            .where(
                HostORM.archived == False,  # noqa: E712
                DatabaseORM.technology == technology,
                DatabaseORM.role == "primary",
                DatabaseORM.status == "open",
            )
            .options(selectinload(DatabaseORM.licenses))
            .order_by(HostORM.hostname, DatabaseORM.name)
        )
        return [(row[0], row[1]) for row in result.all()]

    async def get_current_license(
        self,
        hostname: str,
        dbname: str,
        license_type_id: str,
        technology: str,
    ) -> DatabaseLicenseORM | None:
        """Get a licence entry of a database on the current snapshot of a host.

        Args:
            hostname: Host name
            dbname: Database name
            license_type_id: Contract part identifier
            technology: Database technology

        Returns:
            DatabaseLicenseORM or None if not found
        """
        result = await self.session.execute(
            select(DatabaseLicenseORM)
            .join(DatabaseORM, DatabaseLicenseORM.database_id == DatabaseORM.id)
            .join(HostORM, DatabaseORM.host_id == HostORM.id)
            .where(
                HostORM.hostname == hostname,
                HostORM.archived == False,  # noqa: E712
                DatabaseORM.name == dbname,
                DatabaseORM.technology == technology,
                DatabaseLicenseORM.license_type_id == license_type_id,
            )
            .order_by(HostORM.created_at.desc(), DatabaseORM.db_id)
        )
        return result.scalars().first()

    async def update_license_ignored(
        self,
        license: DatabaseLicenseORM,
        ignored: bool,
        ignored_comment: str | None,
    ) -> DatabaseLicenseORM:
        """Update the ignored flag of a licence entry.

        Args:
            license: Licence entry to update
            ignored: New ignored state
            ignored_comment: Reason for ignoring

        Returns:
            Updated DatabaseLicenseORM
        """
        license.ignored = ignored
        license.ignored_comment = ignored_comment if ignored else None
        await self.session.flush()
        await self.session.refresh(license)
        return license

    @staticmethod
    def _apply_scope(query, locations: list[str] | None, environment: str | None):
        """Apply location and environment filters to a host query."""
        if locations:
            query = query.where(HostORM.location.in_(locations))
        if environment:
            query = query.where(HostORM.environment == environment)
        return query
