"""
README contracts table.

Keeps the "Code ID (Testnet)" column of the README's contracts table in
step with the registry's testnet records.
"""

from __future__ import annotations
from typing import Dict, Iterable, List, Optional
import re

from .contracts import ContractRecord

TESTNET_HEADER = "Code ID (Testnet)"

_TABLE_HEADER = re.compile(r'^\s*\|.*Name.*\|.*Code ID.*\|')
_SEPARATOR = re.compile(r'^\s*\|?[\s:|-]+\|?\s*$')


def _testnet_cell(code_id: Optional[str]) -> str:
    return f" `{code_id}` " if code_id else " - "


def _table_bounds(lines: List[str]) -> Optional[tuple]:
    """(header index, end index exclusive) of the first contracts table."""
    for start, line in enumerate(lines):
        if _TABLE_HEADER.match(line):
            end = start + 1
            while end < len(lines) and lines[end].strip().startswith('|'):
                end += 1
            return start, end
    return None


def update_testnet_column(readme_text: str, records: Iterable[ContractRecord]) -> str:
    """Return `readme_text` with the testnet column added or refreshed."""
    lines = readme_text.split('\n')
    bounds = _table_bounds(lines)
    if bounds is None:
        return readme_text
    start, end = bounds

    # First record wins when a name repeats; the table shows one row per name.
    testnet_ids: Dict[str, Optional[str]] = {}
    for record in records:
        testnet_ids.setdefault(record.name, record.testnet.code_id if record.testnet else None)

    header = lines[start].split('|')
    stripped = [cell.strip() for cell in header]

    if TESTNET_HEADER in stripped:
        column = stripped.index(TESTNET_HEADER)
        insert = False
    else:
        code_id_column = next(
            (i for i, cell in enumerate(stripped) if 'Code ID' in cell), None
        )
        if code_id_column is None:
            return readme_text
        column = code_id_column + 1
        insert = True
        header.insert(column, f" {TESTNET_HEADER} ")
        lines[start] = '|'.join(header)

    for index in range(start + 1, end):
        cells = lines[index].split('|')
        if _SEPARATOR.match(lines[index]):
            if insert:
                cells.insert(column, '---')
                lines[index] = '|'.join(cells)
            continue

        name = cells[1].strip() if len(cells) > 1 else ''
        value = _testnet_cell(testnet_ids.get(name))
        if insert:
            cells.insert(column, value)
        elif column < len(cells):
            cells[column] = value
        lines[index] = '|'.join(cells)

    return '\n'.join(lines)
