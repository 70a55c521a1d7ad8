"""
Reconciliation Engine
=====================

Three-way diff between the curated registry, the chain's code
enumeration and the governance upload index.

PASSES (each order-preserving relative to its driving collection):
1. missing_from_registry      - driven by chain order
2. hash_mismatches            - driven by chain order
3. missing_from_chain         - driven by registry order
4. orphaned_proposal_uploads  - driven by proposal index order
5. genesis_with_proposal      - driven by registry order

The engine never mutates its inputs and always computes every pass.
"""

from __future__ import annotations
from typing import List, Optional, Sequence, Set, Tuple

from .contracts import (
    ChainCodeEntry, DiscrepancyReport, GenesisWithProposal, HashMismatch,
    MissingFromChain, MissingFromRegistry, OrphanedUpload
)
from .proposals import ProposalIndex
from .registry import RegistryIndex


class ReconciliationEngine:
    """Produces a DiscrepancyReport from the three datasets."""

    def reconcile(
        self,
        registry: RegistryIndex,
        chain_entries: Sequence[ChainCodeEntry],
        proposals: Optional[ProposalIndex] = None
    ) -> DiscrepancyReport:
        proposals = proposals if proposals is not None else ProposalIndex()

        missing_from_registry, hash_mismatches = self._chain_pass(registry, chain_entries, proposals)

        return DiscrepancyReport(
            missing_from_registry=missing_from_registry,
            missing_from_chain=self._missing_from_chain(registry, chain_entries, proposals),
            hash_mismatches=hash_mismatches,
            orphaned_proposal_uploads=self._orphaned_uploads(registry, chain_entries, proposals),
            genesis_with_proposal=self._genesis_with_proposal(registry, proposals),
            counters=proposals.counters,
            registry_count=registry.total_count,
            genesis_count=registry.genesis_count,
            chain_count=len(chain_entries)
        )

    def _chain_pass(
        self,
        registry: RegistryIndex,
        chain_entries: Sequence[ChainCodeEntry],
        proposals: ProposalIndex
    ) -> Tuple[Tuple[MissingFromRegistry, ...], Tuple[HashMismatch, ...]]:
        missing: List[MissingFromRegistry] = []
        mismatches: List[HashMismatch] = []

        for entry in chain_entries:
            chain_hash = entry.data_hash.upper()
            local = registry.get(entry.code_id)

            if local is None:
                missing.append(MissingFromRegistry(
                    code_id=entry.code_id,
                    chain_hash=chain_hash,
                    provenance=proposals.lookup(chain_hash)
                ))
            elif local.hash.upper() != chain_hash:
                mismatches.append(HashMismatch(
                    code_id=entry.code_id,
                    name=local.name,
                    registry_hash=local.hash,
                    chain_hash=chain_hash,
                    provenance=proposals.lookup(chain_hash)
                ))

        return tuple(missing), tuple(mismatches)

    def _missing_from_chain(
        self,
        registry: RegistryIndex,
        chain_entries: Sequence[ChainCodeEntry],
        proposals: ProposalIndex
    ) -> Tuple[MissingFromChain, ...]:
        on_chain = {entry.code_id for entry in chain_entries}
        return tuple(
            MissingFromChain(
                code_id=local.code_id,
                name=local.name,
                registry_hash=local.hash,
                provenance=proposals.lookup(local.hash)
            )
            for local in registry.entries()
            if local.code_id not in on_chain
        )

    def _orphaned_uploads(
        self,
        registry: RegistryIndex,
        chain_entries: Sequence[ChainCodeEntry],
        proposals: ProposalIndex
    ) -> Tuple[OrphanedUpload, ...]:
        chain_hashes: Set[str] = {entry.data_hash.upper() for entry in chain_entries}
        return tuple(
            OrphanedUpload(hash=content_hash, provenance=provenance)
            for content_hash, provenance in proposals.items()
            if content_hash not in chain_hashes and not registry.has_hash(content_hash)
        )

    def _genesis_with_proposal(
        self,
        registry: RegistryIndex,
        proposals: ProposalIndex
    ) -> Tuple[GenesisWithProposal, ...]:
        found = []
        for local in registry.entries():
            if not local.is_genesis:
                continue
            provenance = proposals.lookup(local.hash)
            if provenance is not None:
                found.append(GenesisWithProposal(
                    code_id=local.code_id,
                    name=local.name,
                    governance=local.governance,
                    hash=local.hash,
                    provenance=provenance
                ))
        return tuple(found)


def compare_code_ids(
    registry: RegistryIndex,
    chain_entries: Sequence[ChainCodeEntry]
) -> DiscrepancyReport:
    """Chain vs registry only: no proposal data, no provenance."""
    return ReconciliationEngine().reconcile(registry, chain_entries, ProposalIndex())
