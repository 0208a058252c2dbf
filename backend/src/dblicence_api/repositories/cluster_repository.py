"""Cluster repository."""

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from dblicence_api.models.orm.cluster import ClusterORM
from dblicence_api.repositories.base import BaseRepository


class ClusterRepository(BaseRepository[ClusterORM]):
    """Repository for cluster operations."""

    model = ClusterORM

    async def list_with_members(self) -> list[ClusterORM]:
        """List all clusters with their member hosts.

        Returns:
            Clusters ordered by name
        """
        result = await self.session.execute(
            select(ClusterORM)
            .options(selectinload(ClusterORM.members))
            .order_by(ClusterORM.name)
        )
        return list(result.scalars().all())
