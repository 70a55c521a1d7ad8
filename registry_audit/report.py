"""
Report rendering.

Turns a DiscrepancyReport into the human-readable text the CLI prints.
Section order is fixed: missing from registry, missing from chain, hash
mismatches, orphaned proposal uploads, genesis with proposal, total.
"""

from __future__ import annotations
from typing import List, Optional

from .contracts import DiscrepancyReport, ProvenanceEntry


def _provenance_lines(provenance: Optional[ProvenanceEntry], missing_note: Optional[str] = None) -> List[str]:
    if provenance is None:
        return [f"   {missing_note}"] if missing_note else []
    return [
        f"   Found in Proposal {provenance.proposal_id}: {provenance.title}",
        f"   Status: {provenance.status}",
        f"   Message {provenance.message_index} of {provenance.total_messages}",
    ]


def render_summary(report: DiscrepancyReport, include_proposals: bool = True) -> List[str]:
    lines = [
        "Analysis Summary:",
        f"   Total contracts in registry: {report.registry_count}",
        f"   Genesis contracts: {report.genesis_count}",
        f"   Total code IDs on chain: {report.chain_count}",
    ]
    if include_proposals:
        lines += [
            f"   Total proposals analyzed: {report.counters.proposals_seen}",
            f"   Proposals with store code: {report.counters.proposals_with_upload}",
            f"   Total store code messages: {report.counters.upload_messages_seen}",
        ]
    return lines


def render_report(report: DiscrepancyReport, include_proposals: bool = True) -> str:
    lines = render_summary(report, include_proposals)
    lines.append("")

    if report.is_clean:
        lines.append("[PASS] All verifications passed.")
        return "\n".join(lines)

    lines.append("[FAIL] Found the following discrepancies:")
    lines.append("")

    if report.missing_from_registry:
        lines.append("Codes that exist on chain but not in the registry:")
        for item in report.missing_from_registry:
            lines.append(f"   Code ID {item.code_id}:")
            lines.append(f"   Hash: {item.chain_hash}")
            lines += _provenance_lines(
                item.provenance, "No matching proposal found" if include_proposals else None
            )
            lines.append("")

    if report.missing_from_chain:
        lines.append("Codes that exist in the registry but not on chain:")
        for item in report.missing_from_chain:
            lines.append(f"   Code ID {item.code_id} ({item.name})")
            lines.append(f"   Hash: {item.registry_hash}")
            lines += _provenance_lines(item.provenance)
            lines.append("")

    if report.hash_mismatches:
        lines.append("Hash mismatches between chain and registry:")
        for item in report.hash_mismatches:
            lines.append(f"   Code ID {item.code_id} ({item.name}):")
            lines.append(f"   registry: {item.registry_hash}")
            lines.append(f"   chain:    {item.chain_hash}")
            lines += _provenance_lines(item.provenance)
            lines.append("")

    if report.orphaned_proposal_uploads:
        lines.append("Store code messages found in proposals but missing from both chain and registry:")
        for item in report.orphaned_proposal_uploads:
            lines.append(f"   Hash: {item.hash}")
            lines += _provenance_lines(item.provenance)
            lines.append("")

    if report.genesis_with_proposal:
        lines.append('Contracts marked as "Genesis" but uploaded via governance proposal:')
        for item in report.genesis_with_proposal:
            lines.append(f"   Code ID {item.code_id} ({item.name}):")
            lines.append(f"   Governance: {item.governance}")
            lines.append(f"   Hash: {item.hash}")
            lines += _provenance_lines(item.provenance)
            lines.append("")

    lines.append(f"Total discrepancies: {report.total}")
    return "\n".join(lines)
