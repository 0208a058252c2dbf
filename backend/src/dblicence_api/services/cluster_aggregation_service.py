"""Consumption aggregation by host and virtualization cluster."""

import logging
from collections.abc import Iterable

from dblicence_api.config import get_settings
from dblicence_api.models.domain.cluster import Cluster
from dblicence_api.models.domain.compliance import ConsumptionRecord
from dblicence_api.models.domain.host import Host

logger = logging.getLogger(__name__)


def host_consumption(host: Host) -> dict[str, float]:
    """Get the units a host consumes per part.

    A host consumes the largest count any of its databases reports for a
    part; counts of several databases on one host are never added up.

    Args:
        host: Host with recalculated and propagated licences

    Returns:
        Dict of part identifier to consumed units
    """
    consumption: dict[str, float] = {}
    for database in host.databases:
        for entry in database.licenses:
            if entry.in_use:
                consumption[entry.license_type_id] = max(
                    consumption.get(entry.license_type_id, 0.0), entry.count
                )
    return consumption


class ClusterAggregationService:
    """Groups host consumption by cluster and applies cluster capacity."""

    def __init__(self, capacity_divisor: float | None = None) -> None:
        """Initialize service.

        Args:
            capacity_divisor: Divisor applied to the cluster CPU figure
                (defaults to settings)
        """
        if capacity_divisor is None:
            capacity_divisor = get_settings().cluster_capacity_divisor
        self.capacity_divisor = capacity_divisor

    @staticmethod
    def membership_index(clusters: Iterable[Cluster]) -> dict[str, Cluster]:
        """Map each member hostname to its cluster (smallest cluster name wins)."""
        index: dict[str, Cluster] = {}
        for cluster in sorted(clusters, key=lambda c: c.name):
            for hostname in cluster.hostnames:
                index.setdefault(hostname, cluster)
        return index

    def aggregate(self, hosts: Iterable[Host], clusters: Iterable[Cluster]) -> list[ConsumptionRecord]:
        """Build one consumption record per (part, cluster key).

        Args:
            hosts: Hosts with recalculated and propagated licences
            clusters: Known clusters with their members

        Returns:
            Records sorted by part identifier and key
        """
        clusters = list(clusters)
        by_name = {cluster.name: cluster for cluster in clusters}
        members = self.membership_index(clusters)

        groups: dict[tuple[str, str], tuple[Cluster | None, float, set[str]]] = {}
        for host in hosts:
            cluster = self._cluster_of(host, by_name, members)
            key = cluster.key if cluster else f"host_{host.hostname}"
            for part_id, consumed in host_consumption(host).items():
                _, current, hostnames = groups.get((part_id, key), (cluster, 0.0, set()))
                hostnames.add(host.hostname)
                groups[(part_id, key)] = (cluster, max(current, consumed), hostnames)

        records = []
        for (part_id, key), (cluster, consumed, hostnames) in sorted(groups.items()):
            capacity_based = cluster is not None and cluster.exposes_capacity
            if capacity_based:
                consumed = cluster.cpu / self.capacity_divisor
            records.append(
                ConsumptionRecord(
                    license_type_id=part_id,
                    key=key,
                    cluster_name=cluster.name if cluster else None,
                    hostnames=sorted(hostnames),
                    consumed=consumed,
                    capacity_based=capacity_based,
                )
            )
        return records

    @staticmethod
    def _cluster_of(
        host: Host,
        by_name: dict[str, Cluster],
        members: dict[str, Cluster],
    ) -> Cluster | None:
        if host.cluster_name:
            # Hosts may name a cluster the topology does not expose
            return by_name.get(host.cluster_name) or Cluster(name=host.cluster_name)
        return members.get(host.hostname)
