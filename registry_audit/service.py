"""
Audit Service

Orchestrates a run: load the registry, validate it, fetch chain and
proposal data, index, reconcile.
"""

from __future__ import annotations
from pathlib import Path
from typing import List, Optional, Tuple
import asyncio
import logging

from .config import AuditConfig
from .contracts import ChainCodeEntry, ContractRecord, DiscrepancyReport
from .fetcher import ChainClient
from .proposals import ProposalIndexer
from .readme import update_testnet_column
from .reconcile import ReconciliationEngine, compare_code_ids
from .registry import RegistryIndex, load_registry, parse_records
from .schema import SchemaValidator

logger = logging.getLogger(__name__)


class AuditService:
    """
    Coordinates registry loading, fetching and reconciliation.

    DESIGN:
    =======
    1. The registry is validated before any index is built
    2. Chain and proposal listings are fetched concurrently
    3. Every error surfaces as a RegistryAuditError subclass
    """

    def __init__(
        self,
        config: Optional[AuditConfig] = None,
        client: Optional[ChainClient] = None
    ):
        self._config = config or AuditConfig()
        self._client = client or ChainClient(self._config)
        self._validator = SchemaValidator()
        self._indexer = ProposalIndexer()
        self._engine = ReconciliationEngine()

    def load_records(self) -> Tuple[ContractRecord, ...]:
        """Load and validate the registry file."""
        dataset = load_registry(self._config.registry_path)
        self._validator.validate(dataset)
        return parse_records(dataset)

    def validate(self) -> int:
        """Validate only; returns the number of entries."""
        return len(self.load_records())

    def verify(self) -> DiscrepancyReport:
        """Full three-way reconciliation."""
        registry = RegistryIndex.build(self.load_records())
        chain_entries, proposals = asyncio.run(self._client.afetch_all())
        proposal_index = self._indexer.index(proposals)
        return self._engine.reconcile(registry, chain_entries, proposal_index)

    def verify_code_ids(self) -> DiscrepancyReport:
        """Chain vs registry only."""
        registry = RegistryIndex.build(self.load_records())
        chain_entries: List[ChainCodeEntry] = self._client.fetch_code_infos()
        return compare_code_ids(registry, chain_entries)

    def update_readme(self, readme_path: Optional[Path] = None) -> bool:
        """Rewrite the README testnet column. Returns True if the file changed."""
        path = Path(readme_path or self._config.readme_path)
        records = self.load_records()
        original = path.read_text(encoding='utf-8')
        updated = update_testnet_column(original, records)
        if updated == original:
            logger.info("README unchanged: %s", path)
            return False
        path.write_text(updated, encoding='utf-8')
        logger.info("README testnet column updated: %s", path)
        return True
