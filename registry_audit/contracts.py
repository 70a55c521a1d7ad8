"""
Registry Audit Contracts

Immutable data structures for the registry reconciliation pipeline.

BOUNDARY: every record that crosses a module boundary is one of these.
Registry records are loaded once per run and never mutated; chain and
proposal records are transient; the DiscrepancyReport is the terminal
artifact of a run.
"""

from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Optional, Tuple
from enum import Enum


GENESIS = "Genesis"
STORE_CODE_TYPE = "/cosmwasm.wasm.v1.MsgStoreCode"


# =============================================================================
# ENUMS
# =============================================================================

class ProposalStatus(Enum):
    """Governance proposal states as reported by the gov module."""
    UNSPECIFIED = "PROPOSAL_STATUS_UNSPECIFIED"
    DEPOSIT_PERIOD = "PROPOSAL_STATUS_DEPOSIT_PERIOD"
    VOTING_PERIOD = "PROPOSAL_STATUS_VOTING_PERIOD"
    PASSED = "PROPOSAL_STATUS_PASSED"
    REJECTED = "PROPOSAL_STATUS_REJECTED"
    FAILED = "PROPOSAL_STATUS_FAILED"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]

    @classmethod
    def describe(cls, raw: Optional[str]) -> str:
        """Human readable label; unknown values pass through unchanged."""
        try:
            return cls(raw).label
        except ValueError:
            return raw if raw is not None else ""


_STATUS_LABELS = {
    ProposalStatus.UNSPECIFIED: "Unspecified",
    ProposalStatus.DEPOSIT_PERIOD: "Deposit Period",
    ProposalStatus.VOTING_PERIOD: "Voting Period",
    ProposalStatus.PASSED: "Passed",
    ProposalStatus.REJECTED: "Rejected",
    ProposalStatus.FAILED: "Failed",
}


class HashBranch(Enum):
    """Which bytes a content hash was computed over."""
    DECOMPRESSED = "decompressed"
    RAW = "raw"


# =============================================================================
# REGISTRY RECORDS (persisted, read-only here)
# =============================================================================

@dataclass(frozen=True)
class Release:
    url: str
    version: str


@dataclass(frozen=True)
class Author:
    name: str
    url: str


@dataclass(frozen=True)
class TestnetInfo:
    """Where a contract was mirrored on a test network."""
    code_id: str
    tx_hash: str
    network: str
    deployed_by: str
    deployed_at: str


@dataclass(frozen=True)
class ContractRecord:
    """
    One entry of the curated registry.

    `hash` is kept in canonical upper case; `governance` is either
    "Genesis" or a numeric proposal id.
    """
    name: str
    description: str
    code_id: str
    hash: str
    release: Release
    author: Author
    governance: str
    deprecated: bool
    testnet: Optional[TestnetInfo] = None

    @property
    def is_genesis(self) -> bool:
        return self.governance == GENESIS

    @classmethod
    def from_dict(cls, data: dict) -> 'ContractRecord':
        """Build from a registry entry that already passed validation."""
        testnet = data.get('testnet')
        return cls(
            name=data['name'],
            description=data['description'],
            code_id=data['code_id'],
            hash=data['hash'].upper(),
            release=Release(**data['release']),
            author=Author(**data['author']),
            governance=data['governance'],
            deprecated=data['deprecated'],
            testnet=TestnetInfo(
                code_id=testnet['code_id'],
                tx_hash=testnet['hash'],
                network=testnet['network'],
                deployed_by=testnet['deployed_by'],
                deployed_at=testnet['deployed_at'],
            ) if testnet else None
        )


# =============================================================================
# EXTERNAL RECORDS (transient, fetched each run)
# =============================================================================

@dataclass(frozen=True)
class ChainCodeEntry:
    """One stored code object as enumerated by the chain."""
    code_id: str
    data_hash: str

    @classmethod
    def from_api(cls, info: dict) -> 'ChainCodeEntry':
        return cls(
            code_id=str(info['code_id']),
            data_hash=str(info['data_hash']).upper()
        )


@dataclass(frozen=True)
class ProposalMessage:
    """A store-code message pulled out of a proposal's message list."""
    proposal_id: str
    title: str
    status: str
    message_index: int  # 1-based
    total_messages: int
    wasm_payload: Optional[str]


# =============================================================================
# DERIVED RECORDS
# =============================================================================

@dataclass(frozen=True)
class ProvenanceEntry:
    """The proposal message that uploaded a given content hash."""
    content_hash: str
    proposal_id: str
    title: str
    status: str
    message_index: int
    total_messages: int


@dataclass(frozen=True)
class ScanCounters:
    proposals_seen: int = 0
    proposals_with_upload: int = 0
    upload_messages_seen: int = 0


@dataclass(frozen=True)
class RegistryEntry:
    """Lookup row kept by RegistryIndex."""
    code_id: str
    name: str
    hash: str
    governance: str
    is_genesis: bool


# =============================================================================
# DISCREPANCY CONTRACTS
# =============================================================================

@dataclass(frozen=True)
class MissingFromRegistry:
    code_id: str
    chain_hash: str
    provenance: Optional[ProvenanceEntry] = None


@dataclass(frozen=True)
class HashMismatch:
    code_id: str
    name: str
    registry_hash: str
    chain_hash: str
    provenance: Optional[ProvenanceEntry] = None


@dataclass(frozen=True)
class MissingFromChain:
    code_id: str
    name: str
    registry_hash: str
    provenance: Optional[ProvenanceEntry] = None


@dataclass(frozen=True)
class OrphanedUpload:
    hash: str
    provenance: ProvenanceEntry


@dataclass(frozen=True)
class GenesisWithProposal:
    code_id: str
    name: str
    governance: str
    hash: str
    provenance: ProvenanceEntry


@dataclass(frozen=True)
class DiscrepancyReport:
    """
    Categorized outcome of one reconciliation run.

    An empty report across all five lists is a clean run. Whether that
    maps to a process exit status is decided by the caller.
    """
    missing_from_registry: Tuple[MissingFromRegistry, ...] = ()
    missing_from_chain: Tuple[MissingFromChain, ...] = ()
    hash_mismatches: Tuple[HashMismatch, ...] = ()
    orphaned_proposal_uploads: Tuple[OrphanedUpload, ...] = ()
    genesis_with_proposal: Tuple[GenesisWithProposal, ...] = ()
    counters: ScanCounters = field(default_factory=ScanCounters)
    registry_count: int = 0
    genesis_count: int = 0
    chain_count: int = 0

    @property
    def total(self) -> int:
        return (
            len(self.missing_from_registry)
            + len(self.missing_from_chain)
            + len(self.hash_mismatches)
            + len(self.orphaned_proposal_uploads)
            + len(self.genesis_with_proposal)
        )

    @property
    def is_clean(self) -> bool:
        return self.total == 0

    def to_dict(self) -> dict:
        data = asdict(self)
        data['total'] = self.total
        return data
