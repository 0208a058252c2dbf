"""Background compliance check using APScheduler."""

import logging
from datetime import UTC, datetime

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.exc import SQLAlchemyError

from dblicence_api.config import get_settings
from dblicence_api.exceptions import DbLicenceAPIError
from dblicence_api.models.domain.alert import (
    Alert,
    AlertCategory,
    AlertCode,
    AlertInfo,
    AlertSeverity,
)
from dblicence_api.models.domain.compliance import ComplianceScope
from dblicence_api.models.domain.host import Technology
from dblicence_api.models.dto.compliance import LicenseComplianceResponse
from dblicence_api.services.alert_service import AlertSink
from dblicence_api.utils.secure_logging import log_error

logger = logging.getLogger(__name__)

# Global scheduler instance
_scheduler: AsyncIOScheduler | None = None


def non_compliance_alerts(result: LicenseComplianceResponse) -> list[Alert]:
    """Build one warning alert per non-compliant part of a computation.

    Args:
        result: Compliance computation result

    Returns:
        Alerts in part order
    """
    now = datetime.now(UTC)
    return [
        Alert(
            category=AlertCategory.LICENSE,
            affected_technology=Technology(result.technology),
            code=AlertCode.LICENSE_NOT_COMPLIANT,
            severity=AlertSeverity.WARNING,
            description=(
                f"License {item.license_type_id} is not compliant: "
                f"{item.consumed:g} consumed, {item.covered:g} covered"
            ),
            date=now,
            other_info=AlertInfo(license_type_id=item.license_type_id),
        )
        for item in result.items
        if not item.compliant
    ]


async def check_license_compliance_job(alert_sink: AlertSink | None = None) -> None:
    """Background job recomputing compliance of every technology."""
    from dblicence_api.database import async_session_maker
    from dblicence_api.repositories.entity_store import SqlEntityStore
    from dblicence_api.services.alert_service import get_alert_publisher
    from dblicence_api.services.compliance_service import ComplianceService

    sink = alert_sink or get_alert_publisher()
    logger.info("Starting scheduled licence compliance check")

    for technology in Technology:
        async with async_session_maker() as session:
            try:
                service = ComplianceService(SqlEntityStore(session), sink)
                result = await service.compute_license_compliance(ComplianceScope(technology=technology))
            except (DbLicenceAPIError, SQLAlchemyError) as e:
                log_error(logger, f"Scheduled {technology} compliance check failed", e)
                continue

        alerts = non_compliance_alerts(result)
        for alert in alerts:
            sink.publish(alert)
        logger.info(f"Scheduled {technology} compliance check: {len(alerts)} non-compliant parts")


async def start_scheduler() -> None:
    """Start the background scheduler when the compliance check is enabled."""
    global _scheduler

    settings = get_settings()
    if settings.compliance_check_interval_minutes <= 0:
        logger.info("Scheduled compliance check disabled")
        return

    _scheduler = AsyncIOScheduler()
    _scheduler.add_job(
        check_license_compliance_job,
        trigger=IntervalTrigger(minutes=settings.compliance_check_interval_minutes),
        id="license_compliance_check",
        name="Check licence compliance",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    _scheduler.start()
    logger.info(
        f"Scheduler started, compliance check every {settings.compliance_check_interval_minutes} minutes"
    )


async def stop_scheduler() -> None:
    """Stop the background scheduler."""
    global _scheduler

    if _scheduler:
        _scheduler.shutdown(wait=False)
        _scheduler = None
        logger.info("Scheduler stopped")
