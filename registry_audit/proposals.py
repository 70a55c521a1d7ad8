"""
Proposal Indexer
================

Scans a governance proposal history for store-code messages and builds a
content-hash -> provenance index.

GUARANTEES:
- A malformed payload skips that one message, never the scan
- Duplicate hashes: the last processed message wins (input order is
  whatever order the proposal listing returned)
- Counters only count successfully hashed messages
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple
import logging

from .contracts import (
    ProposalMessage, ProposalStatus, ProvenanceEntry, ScanCounters, STORE_CODE_TYPE
)
from .hashing import compute_content_hash

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProposalIndex:
    """Read-only hash -> provenance map plus the scan counters."""
    _entries: Dict[str, ProvenanceEntry] = field(default_factory=dict)
    counters: ScanCounters = field(default_factory=ScanCounters)

    def lookup(self, content_hash: str) -> Optional[ProvenanceEntry]:
        return self._entries.get(content_hash.upper())

    def items(self) -> Iterator[Tuple[str, ProvenanceEntry]]:
        yield from self._entries.items()

    def __contains__(self, content_hash: str) -> bool:
        return content_hash.upper() in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def extract_store_code_messages(proposal: dict) -> List[ProposalMessage]:
    """Pull the store-code messages out of one raw proposal record."""
    messages = proposal.get('messages')
    if not isinstance(messages, list):
        messages = []
    total = len(messages)
    extracted = []
    for idx, msg in enumerate(messages):
        if not isinstance(msg, dict) or msg.get('@type') != STORE_CODE_TYPE:
            continue
        extracted.append(ProposalMessage(
            proposal_id=str(proposal.get('id', '')),
            title=proposal.get('title') or '',
            status=ProposalStatus.describe(proposal.get('status')),
            message_index=idx + 1,
            total_messages=total,
            wasm_payload=msg.get('wasm_byte_code')
        ))
    return extracted


class ProposalIndexer:
    """
    Builds a ProposalIndex from the raw proposal listing.

    One indexer per run; `index` does not keep state between calls.
    """

    def index(self, proposals: Iterable[dict]) -> ProposalIndex:
        entries: Dict[str, ProvenanceEntry] = {}
        proposals_seen = 0
        proposals_with_upload = 0
        upload_messages_seen = 0

        for proposal in proposals:
            proposals_seen += 1
            if not isinstance(proposal, dict):
                logger.warning("Skipping proposal record %d: not an object", proposals_seen)
                continue

            hashed_here = 0

            for message in extract_store_code_messages(proposal):
                content_hash = compute_content_hash(message.wasm_payload)
                if content_hash is None:
                    logger.warning(
                        "Skipping proposal %s message %d: payload could not be hashed",
                        message.proposal_id, message.message_index
                    )
                    continue

                previous = entries.get(content_hash)
                if previous is not None:
                    logger.debug(
                        "Hash %s re-uploaded: proposal %s replaces proposal %s",
                        content_hash, message.proposal_id, previous.proposal_id
                    )

                entries[content_hash] = ProvenanceEntry(
                    content_hash=content_hash,
                    proposal_id=message.proposal_id,
                    title=message.title,
                    status=message.status,
                    message_index=message.message_index,
                    total_messages=message.total_messages
                )
                hashed_here += 1

            upload_messages_seen += hashed_here
            if hashed_here:
                proposals_with_upload += 1

        return ProposalIndex(
            _entries=entries,
            counters=ScanCounters(
                proposals_seen=proposals_seen,
                proposals_with_upload=proposals_with_upload,
                upload_messages_seen=upload_messages_seen
            )
        )
