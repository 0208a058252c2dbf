"""Entity store adapter used by the compliance engine.

The engine only talks to the ``EntityStore`` protocol. ``SqlEntityStore`` is
the PostgreSQL implementation on top of the repositories; it converts ORM
rows into immutable domain models and turns driver failures into
``DataAccessError``.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dblicence_api.exceptions import DataAccessError
from dblicence_api.models.domain import (
    Cluster,
    ComplianceScope,
    Contract,
    Database,
    DatabaseLicense,
    Host,
    LicenseType,
    PrimaryDatabase,
    Technology,
)
from dblicence_api.models.orm import (
    ClusterORM,
    ContractORM,
    DatabaseORM,
    HostORM,
    LicenseTypeORM,
)
from dblicence_api.repositories.cluster_repository import ClusterRepository
from dblicence_api.repositories.contract_repository import ContractRepository
from dblicence_api.repositories.host_repository import HostRepository
from dblicence_api.repositories.license_type_repository import LicenseTypeRepository
from dblicence_api.utils.secure_logging import log_error

logger = logging.getLogger(__name__)


class EntityStore(Protocol):
    """Read access to inventory, topology and contract data."""

    async def list_current_hosts(self, scope: ComplianceScope) -> list[Host]:
        """List hosts in scope (historical snapshots when ``scope.older_than`` is set)."""
        ...

    async def list_open_primary_databases(self, technology: Technology) -> list[PrimaryDatabase]:
        """List open primary databases of the whole current inventory."""
        ...

    async def list_contracts_by_technology(self, technology: Technology) -> list[Contract]:
        """List contracts of a technology."""
        ...

    async def list_clusters(self) -> list[Cluster]:
        """List clusters with their member hostnames."""
        ...

    async def lookup_license_type(self, part_id: str) -> LicenseType | None:
        """Get a licence type by part identifier."""
        ...

    async def list_license_types(self, technology: Technology) -> list[LicenseType]:
        """List the licence type catalogue of a technology."""
        ...


# ============================================================================
# ORM to domain conversion
# ============================================================================


def database_from_orm(database: DatabaseORM) -> Database:
    """Convert a database row into its domain model."""
    details = None
    if database.details:
        details = {"technology": database.technology, **database.details}
    return Database(
        name=database.name,
        db_id=database.db_id,
        technology=database.technology,
        role=database.role,
        status=database.status,
        licenses=[DatabaseLicense.model_validate(entry) for entry in database.licenses],
        details=details,
    )


def host_from_orm(host: HostORM, technology: Technology) -> Host:
    """Convert a host snapshot into its domain model, keeping one technology."""
    return Host(
        hostname=host.hostname,
        location=host.location,
        environment=host.environment,
        cpu_model=host.cpu_model,
        cpu_sockets=host.cpu_sockets,
        cpu_cores=host.cpu_cores,
        cpu_threads=host.cpu_threads,
        cores_per_socket=host.cores_per_socket,
        cluster_name=host.cluster_name,
        archived=host.archived,
        created_at=host.created_at,
        databases=[
            database_from_orm(database)
            for database in sorted(host.databases, key=lambda d: d.name)
            if database.technology == technology
        ],
    )


def cluster_from_orm(cluster: ClusterORM) -> Cluster:
    """Convert a cluster row into its domain model."""
    return Cluster(
        name=cluster.name,
        cpu=cluster.cpu,
        hostnames=sorted(member.hostname for member in cluster.members),
    )


def contract_from_orm(contract: ContractORM) -> Contract:
    """Convert a contract row into its domain model."""
    return Contract(
        id=contract.id,
        contract_id=contract.contract_id,
        csi=contract.csi,
        license_type_id=contract.license_type_id,
        technology=contract.technology,
        unlimited=contract.unlimited,
        basket=contract.basket,
        restricted=contract.restricted,
        licenses_count=contract.licenses_count,
        hosts=[host.hostname for host in contract.hosts],
    )


def license_type_from_orm(license_type: LicenseTypeORM) -> LicenseType:
    """Convert a licence type row into its domain model."""
    return LicenseType.model_validate(license_type)


# ============================================================================
# SQL implementation
# ============================================================================


class SqlEntityStore:
    """Entity store backed by the PostgreSQL repositories."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the store with a database session."""
        self.session = session
        self.host_repo = HostRepository(session)
        self.cluster_repo = ClusterRepository(session)
        self.contract_repo = ContractRepository(session)
        self.license_type_repo = LicenseTypeRepository(session)

    @contextmanager
    def _access(self, operation: str) -> Iterator[None]:
        """Translate driver failures of one read into DataAccessError."""
        try:
            yield
        except SQLAlchemyError as e:
            log_error(logger, f"Entity store read failed: {operation}", e)
            raise DataAccessError(operation, e) from e

    async def list_current_hosts(self, scope: ComplianceScope) -> list[Host]:
        """List hosts in scope.

        Args:
            scope: Technology, location, environment and snapshot filter

        Returns:
            Hosts holding only databases of the scope technology
        """
        with self._access("list_current_hosts"):
            if scope.older_than is not None:
                rows = await self.host_repo.list_at(
                    scope.older_than,
                    scope.technology.value,
                    locations=scope.locations,
                    environment=scope.environment,
                )
            else:
                rows = await self.host_repo.list_current(
                    scope.technology.value,
                    locations=scope.locations,
                    environment=scope.environment,
                )
            return [host_from_orm(row, scope.technology) for row in rows]

    async def list_open_primary_databases(self, technology: Technology) -> list[PrimaryDatabase]:
        """List open primary databases of the whole current inventory.

        Args:
            technology: Database technology

        Returns:
            Primary databases with their hostnames
        """
        with self._access("list_open_primary_databases"):
            rows = await self.host_repo.list_open_primary_databases(technology.value)
            return [
                PrimaryDatabase(hostname=hostname, database=database_from_orm(database))
                for hostname, database in rows
            ]

    async def list_contracts_by_technology(self, technology: Technology) -> list[Contract]:
        """List contracts of a technology."""
        with self._access("list_contracts_by_technology"):
            rows = await self.contract_repo.list_by_technology(technology.value)
            return [contract_from_orm(row) for row in rows]

    async def list_clusters(self) -> list[Cluster]:
        """List clusters with their member hostnames."""
        with self._access("list_clusters"):
            rows = await self.cluster_repo.list_with_members()
            return [cluster_from_orm(row) for row in rows]

    async def lookup_license_type(self, part_id: str) -> LicenseType | None:
        """Get a licence type by part identifier."""
        with self._access("lookup_license_type"):
            row = await self.license_type_repo.get_by_id(part_id)
            return license_type_from_orm(row) if row else None

    async def list_license_types(self, technology: Technology) -> list[LicenseType]:
        """List the licence type catalogue of a technology."""
        with self._access("list_license_types"):
            rows = await self.license_type_repo.list_by_technology(technology.value)
            return [license_type_from_orm(row) for row in rows]
