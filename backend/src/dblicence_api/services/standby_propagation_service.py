"""Licence propagation from primary databases to their standbys."""

import logging
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime

from dblicence_api.models.domain.alert import (
    Alert,
    AlertCategory,
    AlertCode,
    AlertInfo,
    AlertSeverity,
)
from dblicence_api.models.domain.host import Database, DatabaseLicense, Host, PrimaryDatabase
from dblicence_api.models.domain.license_type import LicenseType
from dblicence_api.services.alert_service import AlertSink
from dblicence_api.services.license_unit_service import LicenseUnitCalculator, resolve_license_type

logger = logging.getLogger(__name__)

PrimaryIndex = dict[tuple[str, str], PrimaryDatabase]


def index_primaries(primaries: Iterable[PrimaryDatabase]) -> PrimaryIndex:
    """Index open primary databases by (db_id, name).

    When several hosts run a primary with the same key, the one on the
    lexicographically smallest hostname is kept.

    Args:
        primaries: Open primary databases of the inventory

    Returns:
        Dict of correlation key to primary database
    """
    index: PrimaryIndex = {}
    for primary in primaries:
        current = index.get(primary.key)
        if current is None or primary.hostname < current.hostname:
            index[primary.key] = primary
    return index


class StandbyPropagationService:
    """Copies primary licence entries onto mounted or open standby databases."""

    def __init__(
        self,
        calculator: LicenseUnitCalculator,
        alert_sink: AlertSink,
        catalogue: Mapping[str, LicenseType],
    ) -> None:
        """Initialize service.

        Args:
            calculator: Unit calculator of the current computation
            alert_sink: Receiver of missing primary alerts
            catalogue: Licence types by identifier or alias
        """
        self.calculator = calculator
        self.alert_sink = alert_sink
        self.catalogue = catalogue
        self._alerted: set[tuple[str, str]] = set()

    def propagate(self, hosts: Iterable[Host], primaries: PrimaryIndex) -> list[Host]:
        """Apply primary licences to the standby databases of every host.

        Args:
            hosts: Hosts with recalculated licence counts
            primaries: Open primaries indexed by (db_id, name)

        Returns:
            New hosts; hosts without standbys are returned unchanged
        """
        return [self.propagate_host(host, primaries) for host in hosts]

    def propagate_host(self, host: Host, primaries: PrimaryIndex) -> Host:
        """Apply primary licences to the standby databases of one host."""
        if not any(database.needs_primary_licenses for database in host.databases):
            return host

        databases = []
        for database in host.databases:
            if database.needs_primary_licenses:
                database = self._propagate_database(host, database, primaries)
            databases.append(database)
        return host.model_copy(update={"databases": databases})

    def _propagate_database(self, host: Host, database: Database, primaries: PrimaryIndex) -> Database:
        primary = primaries.get((database.db_id, database.name))
        if primary is None:
            self._alert_missing_primary(host, database)
            return database

        licenses = list(database.licenses)
        positions = {entry.license_type_id: i for i, entry in enumerate(licenses)}
        for primary_license in primary.database.licenses:
            # Entries ignored on the primary are not inherited
            if not primary_license.in_use:
                continue

            license_type = resolve_license_type(primary_license, self.catalogue)
            part_id = license_type.id if license_type else primary_license.license_type_id
            units = self.calculator.units(
                DatabaseLicense(
                    license_type_id=part_id,
                    name=primary_license.name,
                    count=primary_license.count,
                ),
                host,
                license_type,
            )

            position = positions.get(part_id)
            if position is None:
                positions[part_id] = len(licenses)
                licenses.append(
                    DatabaseLicense(
                        license_type_id=part_id,
                        name=primary_license.name,
                        count=units,
                        propagated=True,
                    )
                )
            else:
                licenses[position] = licenses[position].model_copy(
                    update={"count": units, "propagated": True}
                )

        return database.model_copy(update={"licenses": licenses})

    def _alert_missing_primary(self, host: Host, database: Database) -> None:
        alert_key = (host.hostname, database.name)
        if alert_key in self._alerted:
            return
        self._alerted.add(alert_key)

        logger.warning(f"Missing primary database for standby {database.name} on {host.hostname}")
        self.alert_sink.publish(
            Alert(
                category=AlertCategory.ENGINE,
                affected_technology=database.technology,
                code=AlertCode.MISSING_PRIMARY_DATABASE,
                severity=AlertSeverity.WARNING,
                description=f"Missing primary database on standby database: {database.name}",
                date=datetime.now(UTC),
                other_info=AlertInfo(hostname=host.hostname, dbname=database.name),
            )
        )
