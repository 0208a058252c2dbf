"""Host database licence service."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from dblicence_api.exceptions import HostNotFoundError
from dblicence_api.models.domain.host import Technology
from dblicence_api.models.dto.host import LicenseIgnoredResponse, LicenseIgnoredUpdate
from dblicence_api.repositories.host_repository import HostRepository

logger = logging.getLogger(__name__)


class HostService:
    """Service for per-database licence settings of current hosts."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.host_repo = HostRepository(session)

    async def set_license_ignored(
        self,
        hostname: str,
        dbname: str,
        license_type_id: str,
        data: LicenseIgnoredUpdate,
        technology: Technology = Technology.ORACLE,
    ) -> LicenseIgnoredResponse:
        """Mark a database licence entry as ignored, or count it again.

        Ignored entries never consume units in compliance computations.

        Args:
            hostname: Host name
            dbname: Database name
            license_type_id: Contract part identifier
            data: New ignored state and comment
            technology: Technology of the database

        Returns:
            LicenseIgnoredResponse

        Raises:
            HostNotFoundError: If the host, database or licence entry does not exist
        """
        entry = await self.host_repo.get_current_license(
            hostname, dbname, license_type_id, technology.value
        )
        if entry is None:
            raise HostNotFoundError(hostname, dbname)

        entry = await self.host_repo.update_license_ignored(entry, data.ignored, data.ignored_comment)
        logger.info(f"Licence {license_type_id} of {dbname} on {hostname} ignored={entry.ignored}")
        return LicenseIgnoredResponse(
            hostname=hostname,
            dbname=dbname,
            license_type_id=license_type_id,
            ignored=entry.ignored,
            ignored_comment=entry.ignored_comment,
        )
