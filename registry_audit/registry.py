"""
Contract Registry

Loads the curated registry (contracts.json) and builds the lookup
structures the reconciliation engine reads.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional, Tuple
from pathlib import Path
import json
import logging

from .contracts import ContractRecord, RegistryEntry
from .errors import DatasetShapeError, RegistryLoadError

logger = logging.getLogger(__name__)


def load_registry(path: Path) -> object:
    """Read the raw registry JSON. Shape is checked by SchemaValidator."""
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise RegistryLoadError(f"Registry file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise RegistryLoadError(f"Registry file is not valid JSON: {path}: {e}") from e


def parse_records(dataset: Iterable[dict]) -> Tuple[ContractRecord, ...]:
    return tuple(ContractRecord.from_dict(item) for item in dataset)


@dataclass(frozen=True)
class RegistryIndex:
    """
    Lookups over the registry by code id and by content hash.

    Built once per run, read-only afterwards. Iteration follows registry
    order.
    """

    _by_code_id: Dict[str, RegistryEntry]
    _by_hash: Dict[str, RegistryEntry]

    @classmethod
    def build(cls, records: Iterable[ContractRecord]) -> 'RegistryIndex':
        by_code_id: Dict[str, RegistryEntry] = {}
        by_hash: Dict[str, RegistryEntry] = {}

        for index, record in enumerate(records):
            if record.code_id in by_code_id:
                raise DatasetShapeError(f"[{index}].code_id", f"duplicates code_id {record.code_id}")

            entry = RegistryEntry(
                code_id=record.code_id,
                name=record.name,
                hash=record.hash.upper(),
                governance=record.governance,
                is_genesis=record.is_genesis
            )
            by_code_id[entry.code_id] = entry
            # Same bytecode registered under two code ids: first entry keeps the hash slot
            by_hash.setdefault(entry.hash, entry)

        logger.info("Indexed %d registry entries", len(by_code_id))
        return cls(_by_code_id=by_code_id, _by_hash=by_hash)

    def get(self, code_id: str) -> Optional[RegistryEntry]:
        return self._by_code_id.get(code_id)

    def get_by_hash(self, content_hash: str) -> Optional[RegistryEntry]:
        return self._by_hash.get(content_hash.upper())

    def has_code_id(self, code_id: str) -> bool:
        return code_id in self._by_code_id

    def has_hash(self, content_hash: str) -> bool:
        return content_hash.upper() in self._by_hash

    def entries(self) -> Iterator[RegistryEntry]:
        yield from self._by_code_id.values()

    @property
    def total_count(self) -> int:
        return len(self._by_code_id)

    @property
    def genesis_count(self) -> int:
        return sum(1 for e in self._by_code_id.values() if e.is_genesis)
