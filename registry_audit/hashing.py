"""
Content Hashing

Canonical SHA-256 over contract bytecode. Upload payloads may or may not
be gzip-wrapped; chain and registry hashes are always over the
uncompressed bytes, so the gzip layer is peeled off when present.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import base64
import binascii
import hashlib
import zlib

from .contracts import HashBranch
from .errors import HashComputeError

GZIP_MAGIC = b"\x1f\x8b"


@dataclass(frozen=True)
class HashDecision:
    """Bytes selected for hashing and the branch that selected them."""
    branch: HashBranch
    content: bytes


def _gunzip(raw: bytes) -> bytes:
    """
    Decompress concatenated gzip members, ignoring trailing non-gzip bytes.

    Raises zlib.error on a bad header or a truncated member.
    """
    chunks = []
    data = raw
    while True:
        decompressor = zlib.decompressobj(16 + zlib.MAX_WBITS)
        chunks.append(decompressor.decompress(data))
        if not decompressor.eof:
            raise zlib.error("truncated gzip stream")
        data = decompressor.unused_data
        if not data.startswith(GZIP_MAGIC):
            return b"".join(chunks)


def decide_hash_branch(raw: bytes) -> HashDecision:
    """Return the decompressed bytes if `raw` is a gzip stream, else `raw`."""
    if not raw:
        return HashDecision(HashBranch.RAW, raw)
    try:
        return HashDecision(HashBranch.DECOMPRESSED, _gunzip(raw))
    except zlib.error:
        return HashDecision(HashBranch.RAW, raw)


def hash_bytes(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest().upper()


def normalize_hash(value: str) -> str:
    return value.strip().upper()


def compute_content_hash_strict(payload: str) -> str:
    """
    Hash a base64 upload payload.

    Raises:
        HashComputeError: payload is missing or not valid base64.
    """
    if not isinstance(payload, str):
        raise HashComputeError(f"payload must be a base64 string, got {type(payload).__name__}")
    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise HashComputeError(f"invalid base64 payload: {e}") from e
    return hash_bytes(decide_hash_branch(raw).content)


def compute_content_hash(payload: str) -> Optional[str]:
    """Lenient form: None instead of an exception."""
    try:
        return compute_content_hash_strict(payload)
    except HashComputeError:
        return None
