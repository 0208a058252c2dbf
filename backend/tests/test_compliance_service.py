"""End-to-end compliance computation tests over the in-memory entity store."""

import random
from datetime import UTC, datetime
from uuid import UUID

import pytest

from dblicence_api.exceptions import DataAccessError
from dblicence_api.models.domain import (
    AlertCode,
    Cluster,
    ComplianceScope,
    Contract,
    CoreFactor,
    Database,
    DatabaseLicense,
    DatabaseRole,
    DatabaseStatus,
    Host,
    LicenseMetric,
    LicenseType,
    Technology,
)
from dblicence_api.models.dto.compliance import PartComplianceResponse
from dblicence_api.models.domain.compliance import PartCoverage
from dblicence_api.services.compliance_service import ComplianceService, part_compliance

EE = LicenseType(
    id="A90611",
    item_description="Oracle Database Enterprise Edition",
    metric=LicenseMetric.PROCESSOR,
    core_factors=[CoreFactor(processor_pattern="Xeon", factor=0.5)],
)
RAC = LicenseType(
    id="A90619",
    item_description="Real Application Clusters",
    metric=LicenseMetric.PROCESSOR,
    core_factors=[CoreFactor(processor_pattern="Xeon", factor=0.5)],
)


def _oracle_host(
    hostname: str,
    cores: int,
    *parts: str,
    role: DatabaseRole = DatabaseRole.PRIMARY,
    status: DatabaseStatus = DatabaseStatus.OPEN,
    dbname: str = "ERP",
    **kwargs,
) -> Host:
    return Host(
        hostname=hostname,
        cpu_model="Intel(R) Xeon(R) Gold",
        cpu_cores=cores,
        databases=[
            Database(
                name=dbname,
                db_id="100",
                technology=Technology.ORACLE,
                role=role,
                status=status,
                licenses=[DatabaseLicense(license_type_id=part, count=1) for part in parts],
            )
        ],
        **kwargs,
    )


def _contract(number: int, part: str, count: float, *hosts: str, **flags) -> Contract:
    return Contract(id=UUID(int=number), license_type_id=part, licenses_count=count, hosts=list(hosts), **flags)


@pytest.fixture
def service(store, alert_sink) -> ComplianceService:
    store.license_types.extend([EE, RAC])
    return ComplianceService(store, alert_sink)


class TestPartCompliance:
    """Per-part reduction."""

    @pytest.mark.parametrize(
        "consumed,covered,unlimited,compliant,ratio",
        [
            (12, 10, False, False, 10 / 12),
            (10, 12, False, True, 1.0),
            (0, 0, False, True, 1.0),
            (50, 0, True, True, 1.0),
            (4, 0, False, False, 0.0),
        ],
    )
    def test_verdict(self, consumed, covered, unlimited, compliant, ratio) -> None:
        part = PartCoverage(license_type_id="A90611", consumed=consumed, covered=covered, unlimited=unlimited)
        result: PartComplianceResponse = part_compliance(part, EE)

        assert result.compliant is compliant
        assert result.compliance == pytest.approx(ratio)
        assert result.item_description == EE.item_description
        assert result.metric == LicenseMetric.PROCESSOR

    def test_unknown_part_has_no_metric(self) -> None:
        result = part_compliance(PartCoverage(license_type_id="X"), None)
        assert result.metric is None
        assert result.item_description == ""


class TestComputeLicenseCompliance:
    """Full pipeline."""

    @pytest.mark.asyncio
    async def test_partially_covered_part_is_not_compliant(self, store, service) -> None:
        store.hosts.append(_oracle_host("ora01", 24, "A90611"))
        store.contracts.append(_contract(1, "A90611", 10, "ora01"))

        result = await service.compute_license_compliance(ComplianceScope())

        item = result.items[0]
        assert item.consumed == 12.0
        assert item.covered == 10.0
        assert not item.compliant
        assert item.compliance == pytest.approx(0.833, abs=1e-3)
        assert not result.summary.compliant

    @pytest.mark.asyncio
    async def test_consumption_without_contract(self, store, service) -> None:
        store.hosts.append(_oracle_host("ora01", 8, "A90611"))

        result = await service.compute_license_compliance(ComplianceScope())

        assert result.items[0].covered == 0.0
        assert not result.items[0].compliant

    @pytest.mark.asyncio
    async def test_unlimited_contract_is_compliant(self, store, service) -> None:
        store.hosts.append(_oracle_host("ora01", 64, "A90611"))
        store.contracts.append(_contract(1, "A90611", 0, unlimited=True))

        result = await service.compute_license_compliance(ComplianceScope())

        assert result.items[0].compliant
        assert result.items[0].compliance == 1.0

    @pytest.mark.asyncio
    async def test_contract_only_part_is_compliant(self, store, service) -> None:
        store.contracts.append(_contract(1, "A90619", 4))

        result = await service.compute_license_compliance(ComplianceScope())

        assert [item.license_type_id for item in result.items] == ["A90619"]
        assert result.items[0].consumed == 0.0
        assert result.items[0].compliant
        assert result.summary.compliant

    @pytest.mark.asyncio
    async def test_standby_inherits_primary_licenses(self, store, service, alert_sink) -> None:
        store.hosts.extend(
            [
                _oracle_host("primary01", 16, "A90611", "A90619"),
                _oracle_host("standby01", 8, role=DatabaseRole.STANDBY, status=DatabaseStatus.MOUNTED),
            ]
        )

        result = await service.compute_license_compliance(ComplianceScope())

        usages = {u.key: u.consumed for u in result.items[0].usages}
        assert usages == {"host_primary01": 8.0, "host_standby01": 4.0}
        assert result.summary.count == 2
        assert alert_sink.alerts == []

    @pytest.mark.asyncio
    async def test_primary_outside_scope_still_matches(self, store, service, alert_sink) -> None:
        store.hosts.extend(
            [
                _oracle_host("primary01", 16, "A90611", location="Milan"),
                _oracle_host(
                    "standby01",
                    8,
                    role=DatabaseRole.STANDBY,
                    status=DatabaseStatus.MOUNTED,
                    location="Rome",
                ),
            ]
        )

        result = await service.compute_license_compliance(ComplianceScope(locations=["Rome"]))

        assert [(u.key, u.consumed) for u in result.items[0].usages] == [("host_standby01", 4.0)]
        assert alert_sink.alerts == []

    @pytest.mark.asyncio
    async def test_missing_primary_raises_alert_and_keeps_going(self, store, service, alert_sink) -> None:
        store.hosts.extend(
            [
                _oracle_host("ora01", 8, "A90611"),
                _oracle_host("standby01", 8, role=DatabaseRole.STANDBY, dbname="ORPHAN"),
            ]
        )

        result = await service.compute_license_compliance(ComplianceScope())

        assert result.summary.used == 4.0
        assert [a.code for a in alert_sink.alerts] == [AlertCode.MISSING_PRIMARY_DATABASE]

    @pytest.mark.asyncio
    async def test_cluster_capacity_is_used(self, store, service) -> None:
        store.hosts.extend([_oracle_host("vm1", 6, "A90611"), _oracle_host("vm2", 10, "A90611")])
        store.clusters.append(Cluster(name="X", cpu=16, hostnames=["vm1", "vm2"]))

        result = await service.compute_license_compliance(ComplianceScope())

        assert [(u.key, u.consumed, u.hostnames) for u in result.items[0].usages] == [
            ("cluster_X", 8.0, ["vm1", "vm2"])
        ]

    @pytest.mark.asyncio
    async def test_summary_aggregates_parts(self, store, service) -> None:
        store.hosts.append(_oracle_host("ora01", 8, "A90611", "A90619"))
        store.contracts.extend([_contract(1, "A90611", 4), _contract(2, "A90619", 2)])

        summary = await service.compute_summary(ComplianceScope())

        assert summary.count == 2
        assert summary.used == 8.0
        assert summary.covered == 6.0
        assert not summary.compliant

    @pytest.mark.asyncio
    async def test_result_is_independent_of_input_order(self, store, service) -> None:
        hosts = [_oracle_host(f"ora{i:02}", 2 * i, "A90611", "A90619") for i in range(1, 9)]
        store.contracts.extend([_contract(1, "A90611", 10, "ora03"), _contract(2, "A90619", 6, basket=True)])

        store.hosts[:] = hosts
        first = await service.compute_license_compliance(ComplianceScope())
        random.Random(7).shuffle(store.hosts)
        second = await service.compute_license_compliance(ComplianceScope())

        assert first == second

    @pytest.mark.asyncio
    async def test_other_technologies_are_excluded(self, store, service) -> None:
        store.hosts.append(
            Host(
                hostname="my01",
                cpu_cores=4,
                databases=[
                    Database(
                        name="shop",
                        db_id="1",
                        technology=Technology.MYSQL,
                        licenses=[DatabaseLicense(license_type_id="A90611", count=1)],
                    )
                ],
            )
        )

        result = await service.compute_license_compliance(ComplianceScope())

        assert result.items == []
        assert result.summary.compliant

    @pytest.mark.asyncio
    async def test_historical_scope_reads_older_snapshot(self, store, service) -> None:
        store.hosts.extend(
            [
                _oracle_host("ora01", 4, "A90611", archived=True, created_at=datetime(2026, 1, 1, tzinfo=UTC)),
                _oracle_host("ora01", 16, "A90611", created_at=datetime(2026, 6, 1, tzinfo=UTC)),
            ]
        )

        current = await service.compute_license_compliance(ComplianceScope())
        history = await service.compute_license_compliance(
            ComplianceScope(older_than=datetime(2026, 3, 1, tzinfo=UTC))
        )

        assert current.summary.used == 8.0
        assert history.summary.used == 2.0

    @pytest.mark.asyncio
    async def test_entity_store_failure_is_fatal(self, store, service) -> None:
        store.hosts.append(_oracle_host("ora01", 8, "A90611"))
        store.fail_operation = "list_contracts_by_technology"

        with pytest.raises(DataAccessError) as exc_info:
            await service.compute_license_compliance(ComplianceScope())

        assert exc_info.value.operation == "list_contracts_by_technology"
