"""Alert domain model."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel

from dblicence_api.models.domain.host import Technology


class AlertCategory(StrEnum):
    """Alert category enum."""

    ENGINE = "engine"
    LICENSE = "license"
    AGENT = "agent"


class AlertCode(StrEnum):
    """Alert code enum."""

    MISSING_PRIMARY_DATABASE = "MISSING_PRIMARY_DATABASE"
    LICENSE_NOT_COMPLIANT = "LICENSE_NOT_COMPLIANT"


class AlertSeverity(StrEnum):
    """Alert severity enum."""

    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class AlertStatus(StrEnum):
    """Alert status enum."""

    NEW = "new"
    ACK = "ack"
    DISMISSED = "dismissed"


class AlertInfo(BaseModel):
    """Context attached to an alert."""

    hostname: str | None = None
    dbname: str | None = None
    license_type_id: str | None = None

    class Config:
        """Pydantic config."""

        extra = "forbid"
        frozen = True


class Alert(BaseModel):
    """Anomaly notification sent to the alert service."""

    category: AlertCategory
    affected_technology: Technology | None = None
    code: AlertCode
    severity: AlertSeverity
    status: AlertStatus = AlertStatus.NEW
    description: str
    date: datetime
    other_info: AlertInfo = AlertInfo()

    class Config:
        """Pydantic config."""

        frozen = True
