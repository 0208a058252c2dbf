"""Licence unit calculation for database licence entries."""

import logging
from collections.abc import Iterable, Mapping

from dblicence_api.config import get_settings
from dblicence_api.models.domain.host import Database, DatabaseLicense, Host
from dblicence_api.models.domain.license_type import LicenseMetric, LicenseType

logger = logging.getLogger(__name__)


def build_catalogue(license_types: Iterable[LicenseType]) -> dict[str, LicenseType]:
    """Index licence types by part identifier and by alias.

    Part identifiers always win over an alias of another licence type.

    Args:
        license_types: Licence type catalogue

    Returns:
        Dict of identifier or alias to licence type
    """
    license_types = list(license_types)
    catalogue: dict[str, LicenseType] = {}
    for license_type in license_types:
        for alias in license_type.aliases:
            catalogue.setdefault(alias, license_type)
    for license_type in license_types:
        catalogue[license_type.id] = license_type
    return catalogue


class LicenseUnitCalculator:
    """Computes licence units consumed on a host from its CPU attributes.

    One calculator is used per compliance computation; fallback warnings are
    emitted once per (part, CPU model) within that computation.
    """

    def __init__(self, default_core_factor: float | None = None) -> None:
        """Initialize calculator.

        Args:
            default_core_factor: Factor used when neither the catalogue nor the
                licence type knows the CPU model (defaults to settings)
        """
        if default_core_factor is None:
            default_core_factor = get_settings().default_core_factor
        self.default_core_factor = default_core_factor
        self._warned: set[tuple[str, str]] = set()

    def core_factor(self, license_type: LicenseType, host: Host) -> float:
        """Get the core factor of a host's processor for a licence type.

        Args:
            license_type: Licence type with its ordered core factor table
            host: Host whose CPU model is matched

        Returns:
            Factor of the first matching pattern, else the fallback factor
        """
        for entry in license_type.core_factors:
            if entry.matches(host.cpu_model):
                return entry.factor

        factor = license_type.default_core_factor or self.default_core_factor
        warn_key = (license_type.id, host.cpu_model)
        if warn_key not in self._warned:
            self._warned.add(warn_key)
            logger.warning(
                f"No core factor for CPU model '{host.cpu_model}' on part {license_type.id}, "
                f"using {factor}"
            )
        return factor

    def units(
        self,
        license: DatabaseLicense,
        host: Host,
        license_type: LicenseType | None,
    ) -> float:
        """Compute the units a licence entry consumes on a host.

        Args:
            license: Database licence entry
            host: Host running the database
            license_type: Catalogue entry, None when the part is unknown

        Returns:
            Consumed units, 0 for ignored or unused entries
        """
        if not license.in_use:
            return 0.0
        if license_type is None:
            return license.count

        match license_type.metric:
            case LicenseMetric.PROCESSOR:
                return host.cpu_cores * self.core_factor(license_type, host)
            case LicenseMetric.PER_CORE:
                return float(host.cpu_cores)
            case LicenseMetric.PER_SOCKET:
                return float(host.cpu_sockets)
            case _:
                return license.count

    def recalculate_host(self, host: Host, catalogue: Mapping[str, LicenseType]) -> Host:
        """Return a copy of a host with every licence count recalculated.

        Args:
            host: Host snapshot
            catalogue: Licence types by identifier or alias

        Returns:
            New Host; the input is left untouched
        """
        databases = [self._recalculate_database(database, host, catalogue) for database in host.databases]
        return host.model_copy(update={"databases": databases})

    def _recalculate_database(
        self,
        database: Database,
        host: Host,
        catalogue: Mapping[str, LicenseType],
    ) -> Database:
        licenses = []
        for entry in database.licenses:
            license_type = resolve_license_type(entry, catalogue)
            update: dict = {"count": self.units(entry, host, license_type) if entry.in_use else entry.count}
            if license_type is not None:
                update["license_type_id"] = license_type.id
            licenses.append(entry.model_copy(update=update))
        return database.model_copy(update={"licenses": licenses})


def resolve_license_type(
    license: DatabaseLicense,
    catalogue: Mapping[str, LicenseType],
) -> LicenseType | None:
    """Find the catalogue entry of a licence by part identifier, then by name alias."""
    license_type = catalogue.get(license.license_type_id)
    if license_type is None and license.name:
        license_type = catalogue.get(license.name)
    if license_type is None:
        logger.debug(f"Unknown licence part {license.license_type_id}, keeping observed count")
    return license_type
