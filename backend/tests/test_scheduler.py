"""Scheduled compliance check tests."""

from contextlib import asynccontextmanager
from uuid import uuid4

import pytest

from dblicence_api import database
from dblicence_api.models.domain import (
    AlertCategory,
    AlertCode,
    Contract,
    Database,
    DatabaseLicense,
    Host,
    Technology,
)
from dblicence_api.models.dto.compliance import (
    ComplianceSummaryResponse,
    LicenseComplianceResponse,
    PartComplianceResponse,
)
from dblicence_api.repositories import entity_store
from dblicence_api.tasks import scheduler


def _result(*items: PartComplianceResponse) -> LicenseComplianceResponse:
    return LicenseComplianceResponse(
        technology="oracle",
        items=list(items),
        summary=ComplianceSummaryResponse(
            count=len(items),
            used=sum(i.consumed for i in items),
            covered=sum(i.covered for i in items),
            compliant=all(i.compliant for i in items),
        ),
    )


def _part(part_id: str, consumed: float, covered: float) -> PartComplianceResponse:
    return PartComplianceResponse(
        license_type_id=part_id,
        consumed=consumed,
        covered=covered,
        compliant=covered >= consumed,
        compliance=min(covered / consumed, 1.0) if consumed else 1.0,
    )


def test_alert_per_non_compliant_part() -> None:
    alerts = scheduler.non_compliance_alerts(_result(_part("A90611", 12, 10), _part("A90619", 2, 4)))

    assert len(alerts) == 1
    alert = alerts[0]
    assert alert.category == AlertCategory.LICENSE
    assert alert.code == AlertCode.LICENSE_NOT_COMPLIANT
    assert alert.affected_technology == Technology.ORACLE
    assert alert.description == "License A90611 is not compliant: 12 consumed, 10 covered"
    assert alert.other_info.license_type_id == "A90611"


def test_compliant_result_raises_nothing() -> None:
    assert scheduler.non_compliance_alerts(_result(_part("A90611", 2, 2))) == []


@pytest.mark.asyncio
async def test_job_publishes_alerts_for_each_technology(monkeypatch, store, alert_sink) -> None:
    store.hosts.append(
        Host(
            hostname="my01",
            cpu_cores=4,
            databases=[
                Database(
                    name="shop",
                    db_id="1",
                    technology=Technology.MYSQL,
                    licenses=[DatabaseLicense(license_type_id="MYSQL-EE", count=1)],
                )
            ],
        )
    )
    store.contracts.append(
        Contract(id=uuid4(), license_type_id="ORA-EE", technology=Technology.ORACLE, licenses_count=1)
    )

    @asynccontextmanager
    async def session_maker():
        yield None

    monkeypatch.setattr(database, "async_session_maker", session_maker)
    monkeypatch.setattr(entity_store, "SqlEntityStore", lambda session: store)

    await scheduler.check_license_compliance_job(alert_sink)

    assert [a.other_info.license_type_id for a in alert_sink.alerts] == ["MYSQL-EE"]
    assert alert_sink.alerts[0].affected_technology == Technology.MYSQL


@pytest.mark.asyncio
async def test_job_survives_store_failure(monkeypatch, store, alert_sink) -> None:
    store.fail_operation = "*"

    @asynccontextmanager
    async def session_maker():
        yield None

    monkeypatch.setattr(database, "async_session_maker", session_maker)
    monkeypatch.setattr(entity_store, "SqlEntityStore", lambda session: store)

    await scheduler.check_license_compliance_job(alert_sink)

    assert alert_sink.alerts == []
    assert store.calls.count("list_current_hosts") == len(Technology)


@pytest.mark.asyncio
async def test_scheduler_disabled_by_default() -> None:
    await scheduler.start_scheduler()

    assert scheduler._scheduler is None
    await scheduler.stop_scheduler()
