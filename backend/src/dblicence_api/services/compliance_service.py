"""Licence compliance computation.

Pipeline per invocation: load inventory, recalculate licence units per host,
propagate primary licences to standbys, aggregate by cluster, allocate
contract coverage and reduce to per-part verdicts. Nothing is cached between
invocations.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from dblicence_api.models.domain.cluster import Cluster
from dblicence_api.models.domain.compliance import ComplianceScope, PartCoverage
from dblicence_api.models.domain.contract import Contract
from dblicence_api.models.domain.host import Host
from dblicence_api.models.domain.license_type import LicenseType
from dblicence_api.models.dto.compliance import (
    ComplianceSummaryResponse,
    LicenseComplianceResponse,
    LicenseUsageResponse,
    PartComplianceResponse,
)
from dblicence_api.repositories.entity_store import EntityStore
from dblicence_api.services.alert_service import AlertSink
from dblicence_api.services.cluster_aggregation_service import ClusterAggregationService
from dblicence_api.services.contract_coverage_service import ContractCoverageService
from dblicence_api.services.license_unit_service import LicenseUnitCalculator, build_catalogue
from dblicence_api.services.standby_propagation_service import (
    PrimaryIndex,
    StandbyPropagationService,
    index_primaries,
)

logger = logging.getLogger(__name__)


@dataclass
class ComplianceContext:
    """Everything one compliance computation reads, loaded once."""

    scope: ComplianceScope
    hosts: list[Host]
    primaries: PrimaryIndex
    catalogue: dict[str, LicenseType]
    license_types: list[LicenseType]
    contracts: list[Contract]
    clusters: list[Cluster]
    calculator: LicenseUnitCalculator = field(default_factory=LicenseUnitCalculator)


def part_compliance(part: PartCoverage, license_type: LicenseType | None) -> PartComplianceResponse:
    """Build the verdict of one part.

    Args:
        part: Coverage totals of the part
        license_type: Catalogue entry, None when the part is unknown

    Returns:
        PartComplianceResponse
    """
    compliant = part.unlimited or part.covered >= part.consumed
    if part.unlimited or part.consumed == 0:
        ratio = 1.0
    else:
        ratio = min(part.covered / part.consumed, 1.0)

    return PartComplianceResponse(
        license_type_id=part.license_type_id,
        item_description=license_type.item_description if license_type else "",
        metric=license_type.metric if license_type else None,
        consumed=part.consumed,
        covered=part.covered,
        unlimited=part.unlimited,
        compliant=compliant,
        compliance=ratio,
        usages=[
            LicenseUsageResponse(
                key=usage.record.key,
                cluster_name=usage.record.cluster_name,
                hostnames=usage.record.hostnames,
                consumed=usage.record.consumed,
                covered=usage.covered,
                capacity_based=usage.record.capacity_based,
                contract_ids=usage.contract_ids,
            )
            for usage in part.usages
        ],
    )


def reduce_compliance(
    technology: str,
    parts: Mapping[str, PartCoverage],
    catalogue: Mapping[str, LicenseType],
) -> LicenseComplianceResponse:
    """Reduce part coverage to per-part verdicts and the aggregate.

    Args:
        technology: Technology of the computation
        parts: Coverage by part identifier
        catalogue: Licence types by identifier

    Returns:
        LicenseComplianceResponse sorted by part identifier
    """
    items = [part_compliance(parts[part_id], catalogue.get(part_id)) for part_id in sorted(parts)]
    summary = ComplianceSummaryResponse(
        count=len(items),
        used=sum(item.consumed for item in items),
        covered=sum(item.covered for item in items),
        compliant=all(item.compliant for item in items),
    )
    return LicenseComplianceResponse(technology=technology, items=items, summary=summary)


class ComplianceService:
    """Service computing licence compliance from the entity store."""

    def __init__(
        self,
        store: EntityStore,
        alert_sink: AlertSink,
        aggregator: ClusterAggregationService | None = None,
        resolver: ContractCoverageService | None = None,
    ) -> None:
        """Initialize service.

        Args:
            store: Entity store to read from
            alert_sink: Receiver of alerts raised during the computation
            aggregator: Cluster aggregator, built from settings when omitted
            resolver: Contract coverage resolver
        """
        self.store = store
        self.alert_sink = alert_sink
        self.aggregator = aggregator or ClusterAggregationService()
        self.resolver = resolver or ContractCoverageService()

    async def load_context(self, scope: ComplianceScope) -> ComplianceContext:
        """Read everything a computation needs from the entity store.

        Args:
            scope: Computation scope

        Returns:
            ComplianceContext for this invocation

        Raises:
            DataAccessError: If the entity store cannot be read
        """
        hosts = await self.store.list_current_hosts(scope)
        primaries = await self.store.list_open_primary_databases(scope.technology)
        license_types = await self.store.list_license_types(scope.technology)
        contracts = await self.store.list_contracts_by_technology(scope.technology)
        clusters = await self.store.list_clusters()

        return ComplianceContext(
            scope=scope,
            hosts=hosts,
            primaries=index_primaries(primaries),
            catalogue=build_catalogue(license_types),
            license_types=license_types,
            contracts=contracts,
            clusters=clusters,
        )

    def evaluate(self, context: ComplianceContext) -> LicenseComplianceResponse:
        """Run the computation pipeline on a loaded context.

        Args:
            context: Loaded computation context

        Returns:
            LicenseComplianceResponse
        """
        hosts = [context.calculator.recalculate_host(host, context.catalogue) for host in context.hosts]
        propagator = StandbyPropagationService(context.calculator, self.alert_sink, context.catalogue)
        hosts = propagator.propagate(hosts, context.primaries)

        records = self.aggregator.aggregate(hosts, context.clusters)
        parts = self.resolver.resolve(records, context.contracts)

        catalogue = {license_type.id: license_type for license_type in context.license_types}
        return reduce_compliance(context.scope.technology.value, parts, catalogue)

    async def compute_license_compliance(self, scope: ComplianceScope) -> LicenseComplianceResponse:
        """Compute licence compliance of a scope.

        Args:
            scope: Technology, location, environment and snapshot filter

        Returns:
            Per-part verdicts plus the aggregate

        Raises:
            DataAccessError: If the entity store cannot be read
        """
        context = await self.load_context(scope)
        result = self.evaluate(context)
        logger.info(
            f"Computed {scope.technology} compliance: {result.summary.count} parts, "
            f"used {result.summary.used}, compliant={result.summary.compliant}"
        )
        return result

    async def compute_summary(self, scope: ComplianceScope) -> ComplianceSummaryResponse:
        """Compute only the aggregate compliance of a scope."""
        result = await self.compute_license_compliance(scope)
        return result.summary
