"""Entity store conversion and error translation tests."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from dblicence_api.exceptions import DataAccessError
from dblicence_api.models.domain import (
    DatabaseRole,
    DatabaseStatus,
    LicenseMetric,
    OracleDatabaseDetails,
    Technology,
)
from dblicence_api.models.orm import (
    ClusterMemberORM,
    ClusterORM,
    ContractHostORM,
    ContractORM,
    CoreFactorORM,
    DatabaseLicenseORM,
    DatabaseORM,
    HostORM,
    LicenseTypeORM,
)
from dblicence_api.repositories.entity_store import (
    SqlEntityStore,
    cluster_from_orm,
    contract_from_orm,
    host_from_orm,
    license_type_from_orm,
)
from dblicence_api.repositories.host_repository import HostRepository


def _database(name: str, technology: str, **kwargs) -> DatabaseORM:
    return DatabaseORM(
        name=name,
        db_id="42",
        technology=technology,
        role=kwargs.pop("role", "primary"),
        status=kwargs.pop("status", "open"),
        details=kwargs.pop("details", None),
        licenses=kwargs.pop("licenses", []),
    )


def _host() -> HostORM:
    return HostORM(
        hostname="ora01",
        location="Milan",
        environment="PROD",
        cpu_model="Intel(R) Xeon(R)",
        cpu_sockets=2,
        cpu_cores=16,
        cpu_threads=32,
        cores_per_socket=8,
        cluster_name=None,
        archived=False,
        created_at=datetime(2026, 5, 1, tzinfo=UTC),
        databases=[
            _database(
                "ZETA",
                "oracle",
                role="standby",
                status="mounted",
                details={"edition": "EE", "dataguard": True},
            ),
            _database(
                "ERP",
                "oracle",
                licenses=[
                    DatabaseLicenseORM(
                        license_type_id="A90611",
                        name="Enterprise Edition",
                        count=1.0,
                        ignored=False,
                        ignored_comment=None,
                    )
                ],
            ),
            _database("shop", "mysql"),
        ],
    )


def _session(rows=None, error: Exception | None = None) -> AsyncMock:
    session = AsyncMock()
    if error is not None:
        session.execute.side_effect = error
    else:
        result = MagicMock()
        result.scalars.return_value.all.return_value = rows or []
        session.execute.return_value = result
    return session


class TestConverters:
    """ORM to domain conversion."""

    def test_host_keeps_only_requested_technology(self) -> None:
        host = host_from_orm(_host(), Technology.ORACLE)

        assert [db.name for db in host.databases] == ["ERP", "ZETA"]
        assert host.cpu_cores == 16
        assert host.location == "Milan"

    def test_database_fields(self) -> None:
        erp, zeta = host_from_orm(_host(), Technology.ORACLE).databases

        assert erp.licenses[0].license_type_id == "A90611"
        assert erp.licenses[0].in_use
        assert erp.is_primary_open
        assert zeta.role == DatabaseRole.STANDBY
        assert zeta.status == DatabaseStatus.MOUNTED
        assert zeta.details == OracleDatabaseDetails(edition="EE", dataguard=True)

    def test_cluster_members_are_sorted(self) -> None:
        cluster = ClusterORM(
            name="X",
            cpu=16.0,
            members=[ClusterMemberORM(hostname="vm2"), ClusterMemberORM(hostname="vm1")],
        )

        result = cluster_from_orm(cluster)

        assert result.hostnames == ["vm1", "vm2"]
        assert result.exposes_capacity

    def test_contract_hosts(self) -> None:
        contract = ContractORM(
            id=uuid4(),
            contract_id="C-1",
            csi="1234",
            license_type_id="A90611",
            technology="oracle",
            unlimited=True,
            basket=True,
            restricted=False,
            licenses_count=0.0,
            hosts=[ContractHostORM(hostname="ora01")],
        )

        result = contract_from_orm(contract)

        assert result.hosts == ["ora01"]
        assert result.unlimited and result.basket

    def test_license_type_core_factors(self) -> None:
        license_type = LicenseTypeORM(
            id="A90611",
            item_description="Oracle Database Enterprise Edition",
            metric="processor",
            technology="oracle",
            aliases=["Oracle EE"],
            default_core_factor=None,
            core_factors=[CoreFactorORM(processor_pattern="SPARC", factor=0.25, position=0)],
        )

        result = license_type_from_orm(license_type)

        assert result.metric == LicenseMetric.PROCESSOR
        assert result.aliases == ["Oracle EE"]
        assert result.core_factors[0].factor == 0.25


class TestSqlEntityStore:
    """Repository-backed store."""

    @pytest.mark.asyncio
    async def test_list_clusters(self) -> None:
        cluster = ClusterORM(name="X", cpu=8.0, members=[ClusterMemberORM(hostname="vm1")])
        store = SqlEntityStore(_session([cluster]))

        clusters = await store.list_clusters()

        assert [(c.name, c.hostnames) for c in clusters] == [("X", ["vm1"])]

    @pytest.mark.asyncio
    async def test_driver_error_becomes_data_access_error(self) -> None:
        error = OperationalError("SELECT 1", {}, ConnectionRefusedError("refused"))
        store = SqlEntityStore(_session(error=error))

        with pytest.raises(DataAccessError) as exc_info:
            await store.list_contracts_by_technology(Technology.ORACLE)

        assert exc_info.value.operation == "list_contracts_by_technology"
        assert exc_info.value.cause is error
        assert exc_info.value.details["error_type"] == "OperationalError"

    @pytest.mark.asyncio
    async def test_lookup_license_type(self) -> None:
        session = _session()
        session.get.return_value = LicenseTypeORM(
            id="A90611",
            item_description="Oracle Database Enterprise Edition",
            metric="processor",
            technology="oracle",
            aliases=[],
            default_core_factor=0.5,
            core_factors=[],
        )

        result = await SqlEntityStore(session).lookup_license_type("A90611")

        assert result.id == "A90611"
        assert result.default_core_factor == 0.5
        session.get.assert_awaited_once_with(LicenseTypeORM, "A90611")

    @pytest.mark.asyncio
    async def test_lookup_unknown_license_type(self) -> None:
        session = _session()
        session.get.return_value = None

        assert await SqlEntityStore(session).lookup_license_type("NOPE") is None


class TestHostRepository:
    """Host repository queries."""

    @pytest.mark.asyncio
    async def test_current_license_is_filtered_by_technology(self) -> None:
        entry = DatabaseLicenseORM(license_type_id="A90611", name="", count=1.0, ignored=False)
        session = _session()
        session.execute.return_value.scalars.return_value.first.return_value = entry

        result = await HostRepository(session).get_current_license("ora01", "ERP", "A90611", "mysql")

        assert result is entry
        statement = session.execute.await_args.args[0]
        compiled = statement.compile(dialect=postgresql.dialect())
        assert "databases.technology = " in str(compiled)
        assert "mysql" in compiled.params.values()
