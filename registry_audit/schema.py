"""
Registry Schema Validation
==========================

A small tagged-variant schema (string / boolean / object / array nodes)
interpreted by one recursive validator.

GUARANTEES:
- Fails fast: the first violation raises DatasetShapeError
- Every error carries the path of the offending value, e.g. `[3].release.url`
- Array-level registry rules (unique code ids, active-before-deprecated,
  code id order per partition) run before per-entry checks
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union
import re

from .errors import DatasetShapeError


# =============================================================================
# SCHEMA NODES
# =============================================================================

@dataclass(frozen=True)
class StringNode:
    min_length: int = 0
    pattern: Optional[str] = None
    message: Optional[str] = None


@dataclass(frozen=True)
class BooleanNode:
    pass


@dataclass(frozen=True)
class ObjectNode:
    properties: Tuple[Tuple[str, 'SchemaNode'], ...]
    required: Tuple[str, ...] = ()

    def child(self, key: str) -> Optional['SchemaNode']:
        return dict(self.properties).get(key)


@dataclass(frozen=True)
class ArrayNode:
    """
    A list of `items`.

    `unique_key` names a numeric-string key that must be unique across
    entries and non-decreasing within each partition. `partition_flag`
    names a boolean key: entries where it is true form a contiguous suffix.
    """
    items: 'SchemaNode'
    unique_key: Optional[str] = None
    partition_flag: Optional[str] = None


SchemaNode = Union[StringNode, BooleanNode, ObjectNode, ArrayNode]


HTTPS_URL = StringNode(pattern=r'^https://')
DIGITS = StringNode(pattern=r'^[0-9]+\Z')

TESTNET_SCHEMA = ObjectNode(
    required=('code_id', 'hash', 'network', 'deployed_by', 'deployed_at'),
    properties=(
        ('code_id', DIGITS),
        ('hash', StringNode(
            pattern=r'^[A-Fa-f0-9]{64}\Z',
            message='must be a 64 character hex transaction hash'
        )),
        ('network', StringNode(min_length=1)),
        ('deployed_by', StringNode(
            pattern=r'^[a-z]+1[02-9ac-hj-np-z]{38,58}\Z',
            message='must be a bech32 account address'
        )),
        ('deployed_at', StringNode(
            pattern=r'^[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}\.[0-9]{3}Z\Z',
            message='must be an ISO-8601 UTC timestamp with milliseconds'
        )),
    )
)

CONTRACT_SCHEMA = ObjectNode(
    required=('name', 'description', 'code_id', 'hash', 'release', 'author', 'governance', 'deprecated'),
    properties=(
        ('name', StringNode(min_length=1)),
        ('description', StringNode()),
        ('code_id', DIGITS),
        ('hash', StringNode(
            pattern=r'^[A-F0-9]{64}\Z',
            message='Hash must be 64 characters long and contain only uppercase hex characters'
        )),
        ('release', ObjectNode(
            required=('url', 'version'),
            properties=(
                ('url', HTTPS_URL),
                ('version', StringNode(min_length=1)),
            )
        )),
        ('author', ObjectNode(
            required=('name', 'url'),
            properties=(
                ('name', StringNode(min_length=1)),
                ('url', HTTPS_URL),
            )
        )),
        ('governance', StringNode(pattern=r'^(Genesis|[0-9]+)\Z')),
        ('deprecated', BooleanNode()),
        ('testnet', TESTNET_SCHEMA),
    )
)

REGISTRY_SCHEMA = ArrayNode(items=CONTRACT_SCHEMA, unique_key='code_id', partition_flag='deprecated')


# =============================================================================
# VALIDATOR
# =============================================================================

class SchemaValidator:
    """Validates a dataset against a schema node tree."""

    def __init__(self, schema: SchemaNode = REGISTRY_SCHEMA):
        self._schema = schema

    def validate(self, dataset: object) -> None:
        """Raise DatasetShapeError on the first violation."""
        validate_node(dataset, self._schema, '')


def validate_node(data: object, node: SchemaNode, path: str) -> None:
    if isinstance(node, ArrayNode):
        _validate_array(data, node, path)
    elif isinstance(node, ObjectNode):
        _validate_object(data, node, path)
    elif isinstance(node, StringNode):
        _validate_string(data, node, path)
    elif isinstance(node, BooleanNode):
        if not isinstance(data, bool):
            raise DatasetShapeError(path, "must be a boolean")
    else:
        raise TypeError(f"Unknown schema node: {node!r}")


def _validate_array(data: object, node: ArrayNode, path: str) -> None:
    if not isinstance(data, list):
        raise DatasetShapeError(path, "must be an array")

    if node.unique_key:
        _check_unique(data, node.unique_key, path)
        if node.partition_flag:
            active, deprecated = _check_partition(data, node.partition_flag, path)
            _check_order(active, node.unique_key, "Active", path)
            _check_order(deprecated, node.unique_key, "Deprecated", path)
        else:
            _check_order(list(enumerate(data)), node.unique_key, "All", path)

    for index, item in enumerate(data):
        validate_node(item, node.items, f"{path}[{index}]")


def _validate_object(data: object, node: ObjectNode, path: str) -> None:
    if not isinstance(data, dict):
        raise DatasetShapeError(path, "must be an object")

    for key in node.required:
        if key not in data:
            raise DatasetShapeError(path, f"missing required property: {key}")

    for key, value in data.items():
        child = node.child(key)
        if child is None:
            raise DatasetShapeError(path, f"has unknown property: {key}")
        validate_node(value, child, f"{path}.{key}")


def _validate_string(data: object, node: StringNode, path: str) -> None:
    if not isinstance(data, str):
        raise DatasetShapeError(path, "must be a string")
    if node.min_length and len(data) < node.min_length:
        raise DatasetShapeError(path, f"must be at least {node.min_length} characters")
    if node.pattern and not re.search(node.pattern, data):
        raise DatasetShapeError(path, node.message or f"must match pattern: {node.pattern}")


# =============================================================================
# REGISTRY-LEVEL RULES
# =============================================================================

_DIGITS_RE = re.compile(r'^[0-9]+\Z')


def _key_value(item: object, key: str) -> Optional[str]:
    if isinstance(item, dict):
        value = item.get(key)
        if isinstance(value, str) and _DIGITS_RE.match(value):
            return value
    return None


def _check_unique(data: List[object], key: str, path: str) -> None:
    seen: Dict[str, int] = {}
    for index, item in enumerate(data):
        value = _key_value(item, key)
        if value is None:
            continue
        if value in seen:
            raise DatasetShapeError(
                f"{path}[{index}].{key}",
                f"Duplicate {key} {value} found (first at [{seen[value]}])"
            )
        seen[value] = index


def _check_partition(
    data: List[object], flag: str, path: str
) -> Tuple[List[Tuple[int, dict]], List[Tuple[int, dict]]]:
    """Unflagged entries must form a prefix, flagged ones the suffix."""
    head: List[Tuple[int, dict]] = []
    tail: List[Tuple[int, dict]] = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            continue
        if item.get(flag) is True:
            tail.append((index, item))
        elif tail:
            raise DatasetShapeError(f"{path}[{index}]", "Active contracts should come before deprecated contracts")
        else:
            head.append((index, item))
    return head, tail


def _check_order(items: List[Tuple[int, dict]], key: str, label: str, path: str) -> None:
    ordered = [(index, item) for index, item in items if _key_value(item, key) is not None]
    for (_, prev), (index, current) in zip(ordered, ordered[1:]):
        if int(current[key]) < int(prev[key]):
            raise DatasetShapeError(
                f"{path}[{index}]",
                f"{label} contracts not in {key} order: "
                f"{prev.get('name')} ({prev[key]}) comes before "
                f"{current.get('name')} ({current[key]})"
            )
