"""
Test Fixtures

Explicit builders for registry entries, proposals and chain listings.
No random generation here; property tests draw their own data.
"""

import base64
import gzip
import hashlib
from typing import List, Optional

from registry_audit.contracts import ChainCodeEntry, STORE_CODE_TYPE


# =============================================================================
# BYTECODE FIXTURES
# =============================================================================

WASM_A = b"\x00asm\x01\x00\x00\x00contract-a"
WASM_B = b"\x00asm\x01\x00\x00\x00contract-b"
WASM_C = b"\x00asm\x01\x00\x00\x00contract-c"


def sha(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest().upper()


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode('ascii')


def gz_b64(data: bytes) -> str:
    return b64(gzip.compress(data))


HASH_A = sha(WASM_A)
HASH_B = sha(WASM_B)
HASH_C = sha(WASM_C)


# =============================================================================
# REGISTRY FIXTURES
# =============================================================================

def make_entry(
    code_id: str,
    hash: str,
    name: Optional[str] = None,
    governance: str = "Genesis",
    deprecated: bool = False,
    testnet: Optional[dict] = None
) -> dict:
    entry = {
        "name": name if name is not None else f"Contract {code_id}",
        "description": f"Test contract {code_id}",
        "code_id": code_id,
        "hash": hash,
        "release": {"url": "https://github.com/example/contracts/releases/tag/v1.0.0", "version": "v1.0.0"},
        "author": {"name": "Example", "url": "https://example.com"},
        "governance": governance,
        "deprecated": deprecated,
    }
    if testnet is not None:
        entry["testnet"] = testnet
    return entry


def make_testnet(code_id: str = "42") -> dict:
    return {
        "code_id": code_id,
        "hash": "9F" * 32,
        "network": "xion-testnet-2",
        "deployed_by": "xion1qypqxpq9qcrsszg2pvxq6rs0zqg3yyc5lzv7xu",
        "deployed_at": "2025-01-15T10:30:00.000Z",
    }


def standard_registry() -> List[dict]:
    """Two active entries and one deprecated entry."""
    return [
        make_entry("1", HASH_A, name="Alpha"),
        make_entry("5", HASH_B, name="Beta", governance="12"),
        make_entry("3", HASH_C, name="Gamma", deprecated=True),
    ]


# =============================================================================
# CHAIN / PROPOSAL FIXTURES
# =============================================================================

def chain(*pairs) -> List[ChainCodeEntry]:
    return [ChainCodeEntry(code_id=code_id, data_hash=data_hash.upper()) for code_id, data_hash in pairs]


def store_code(payload: Optional[str]) -> dict:
    msg = {"@type": STORE_CODE_TYPE, "sender": "xion10d07y265gmmuvt4z0w9aw880jnsr700jdufnyd"}
    if payload is not None:
        msg["wasm_byte_code"] = payload
    return msg


def other_message() -> dict:
    return {"@type": "/cosmos.bank.v1beta1.MsgSend", "amount": []}


def make_proposal(proposal_id: str, messages: list, title: Optional[str] = None,
                  status: str = "PROPOSAL_STATUS_PASSED") -> dict:
    return {
        "id": proposal_id,
        "title": title or f"Proposal {proposal_id}",
        "status": status,
        "messages": messages,
    }
