"""
Contract Registry Audit

Validates a curated registry of contract deployments and reconciles it
against the chain's stored code and the governance proposals that
uploaded it.

PIPELINE:
=========
registry file -> SchemaValidator -> RegistryIndex --+
chain listing ------------------------------------+-> ReconciliationEngine -> DiscrepancyReport
proposal listing -> ProposalIndexer --------------+
"""

from .contracts import (
    ContractRecord,
    ChainCodeEntry,
    ProvenanceEntry,
    ScanCounters,
    DiscrepancyReport,
)
from .errors import (
    RegistryAuditError,
    DatasetShapeError,
    TransportError,
    HashComputeError,
    RegistryLoadError,
)
from .hashing import compute_content_hash, decide_hash_branch
from .proposals import ProposalIndex, ProposalIndexer
from .registry import RegistryIndex
from .reconcile import ReconciliationEngine, compare_code_ids
from .schema import SchemaValidator, REGISTRY_SCHEMA

__all__ = [
    'ContractRecord',
    'ChainCodeEntry',
    'ProvenanceEntry',
    'ScanCounters',
    'DiscrepancyReport',
    'RegistryAuditError',
    'DatasetShapeError',
    'TransportError',
    'HashComputeError',
    'RegistryLoadError',
    'compute_content_hash',
    'decide_hash_branch',
    'ProposalIndex',
    'ProposalIndexer',
    'RegistryIndex',
    'ReconciliationEngine',
    'compare_code_ids',
    'SchemaValidator',
    'REGISTRY_SCHEMA',
]
