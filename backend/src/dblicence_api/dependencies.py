"""Dependency injection factories for FastAPI."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dblicence_api.database import get_db
from dblicence_api.repositories.entity_store import EntityStore, SqlEntityStore
from dblicence_api.services.alert_service import AlertSink, get_alert_publisher
from dblicence_api.services.compliance_service import ComplianceService
from dblicence_api.services.contract_service import ContractService
from dblicence_api.services.host_service import HostService
from dblicence_api.services.license_type_service import LicenseTypeService


def get_entity_store(db: AsyncSession = Depends(get_db)) -> EntityStore:
    """Get the entity store of the request session."""
    return SqlEntityStore(db)


def get_alert_sink() -> AlertSink:
    """Get the shared alert sink."""
    return get_alert_publisher()


def get_compliance_service(
    store: EntityStore = Depends(get_entity_store),
    alert_sink: AlertSink = Depends(get_alert_sink),
) -> ComplianceService:
    """Get ComplianceService instance."""
    return ComplianceService(store, alert_sink)


def get_license_type_service(db: AsyncSession = Depends(get_db)) -> LicenseTypeService:
    """Get LicenseTypeService instance."""
    return LicenseTypeService(db)


def get_contract_service(db: AsyncSession = Depends(get_db)) -> ContractService:
    """Get ContractService instance."""
    return ContractService(db)


def get_host_service(db: AsyncSession = Depends(get_db)) -> HostService:
    """Get HostService instance."""
    return HostService(db)
