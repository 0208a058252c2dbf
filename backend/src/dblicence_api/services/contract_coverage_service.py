"""Allocation of contract units to consumption records."""

import logging
from collections import defaultdict
from collections.abc import Iterable

from dblicence_api.models.domain.compliance import ConsumptionRecord, PartCoverage, RecordCoverage
from dblicence_api.models.domain.contract import Contract

logger = logging.getLogger(__name__)


class ContractCoverageService:
    """Resolves which contract units cover which host or cluster records.

    Per part, coverage is resolved in phases over all contracts:

    1. every non-basket contract covers the records of its associated hosts,
       restricted contracts first, then those listing fewer hosts;
    2. restricted contracts keep their leftover units unused;
    3. unrestricted contracts spend their leftover on any remaining record;
    4. basket contracts pool their units over any remaining record;
    5. an unlimited contract covers every record of the part.

    Contract identifiers only break ties between contracts of the same shape.
    """

    def resolve(
        self,
        records: Iterable[ConsumptionRecord],
        contracts: Iterable[Contract],
    ) -> dict[str, PartCoverage]:
        """Compute coverage for every part with consumption or contracts.

        Args:
            records: Consumption records of the computation
            contracts: Contracts of the technology

        Returns:
            Dict of part identifier to coverage
        """
        records_by_part: dict[str, list[ConsumptionRecord]] = defaultdict(list)
        for record in records:
            records_by_part[record.license_type_id].append(record)

        contracts_by_part: dict[str, list[Contract]] = defaultdict(list)
        for contract in contracts:
            contracts_by_part[contract.license_type_id].append(contract)

        return {
            part_id: self.resolve_part(
                part_id,
                records_by_part.get(part_id, []),
                contracts_by_part.get(part_id, []),
            )
            for part_id in sorted(records_by_part.keys() | contracts_by_part.keys())
        }

    def resolve_part(
        self,
        part_id: str,
        records: list[ConsumptionRecord],
        contracts: list[Contract],
    ) -> PartCoverage:
        """Compute coverage of one part.

        Args:
            part_id: Part identifier
            records: Consumption records of the part
            contracts: Contracts of the part

        Returns:
            Part coverage with one usage per record
        """
        usages = [RecordCoverage(record=record) for record in sorted(records, key=lambda r: r.key)]
        contracts = sorted(contracts, key=lambda c: (c.basket, str(c.id)))
        unlimited = any(contract.unlimited for contract in contracts)

        # Restricted and narrower contracts claim their hosts before broader ones
        host_contracts = sorted(
            (c for c in contracts if not c.basket),
            key=lambda c: (not c.restricted, len(set(c.hosts)), str(c.id)),
        )
        remaining: dict[str, float] = {}
        for contract in host_contracts:
            hosts = set(contract.hosts)
            left = contract.licenses_count
            for usage in usages:
                if hosts.intersection(usage.record.hostnames):
                    left = self._draw(usage, left, str(contract.id))
            remaining[str(contract.id)] = left

        covered_total = 0.0
        for contract in host_contracts:
            contract_id = str(contract.id)
            if contract.restricted:
                covered_total += contract.licenses_count - remaining[contract_id]
                continue
            for usage in usages:
                remaining[contract_id] = self._draw(usage, remaining[contract_id], contract_id)
            covered_total += contract.licenses_count

        pool = [[str(c.id), c.licenses_count] for c in contracts if c.basket]
        covered_total += sum(c.licenses_count for c in contracts if c.basket)
        for usage in usages:
            for share in pool:
                share[1] = self._draw(usage, share[1], share[0])

        if unlimited:
            unlimited_ids = [str(c.id) for c in contracts if c.unlimited]
            for usage in usages:
                usage.covered = usage.record.consumed
                usage.contract_ids.extend(i for i in unlimited_ids if i not in usage.contract_ids)

        consumed = sum(usage.record.consumed for usage in usages)
        logger.debug(f"Part {part_id}: consumed {consumed}, covered {covered_total}")
        return PartCoverage(
            license_type_id=part_id,
            consumed=consumed,
            covered=covered_total,
            unlimited=unlimited,
            usages=usages,
        )

    @staticmethod
    def _draw(usage: RecordCoverage, available: float, contract_id: str) -> float:
        """Cover as much of a record as possible, returning the units left."""
        drawn = min(available, usage.uncovered)
        if drawn <= 0:
            return available
        usage.covered += drawn
        if contract_id not in usage.contract_ids:
            usage.contract_ids.append(contract_id)
        return available - drawn
