"""Hash primitives shared by the chained and simple proofset formats."""

from __future__ import annotations

import hashlib
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

from proofset.chain.errors import InvalidHashLength


class HashAlgorithm(str, Enum):
    """Digest algorithm used for every value in one proofset."""

    SHA256 = "SHA-256"
    SHA512 = "SHA-512"

    @property
    def hashlib_name(self) -> str:
        return "sha256" if self is HashAlgorithm.SHA256 else "sha512"

    @property
    def hex_length(self) -> int:
        return 64 if self is HashAlgorithm.SHA256 else 128

    @classmethod
    def from_name(cls, name: str) -> HashAlgorithm:
        """Accept ``sha256``, ``SHA-256``, ``sha-512`` and friends."""
        key = name.strip().lower().replace("-", "").replace("_", "")
        if key == "sha256":
            return cls.SHA256
        if key == "sha512":
            return cls.SHA512
        raise ValueError(f"Unsupported hash algorithm {name!r}: use sha256 or sha512")


def hash_bytes(data: bytes, algorithm: HashAlgorithm) -> str:
    """Digest raw bytes, returning lowercase hex."""
    return hashlib.new(algorithm.hashlib_name, data).hexdigest()


def hash_string(text: str, algorithm: HashAlgorithm) -> str:
    """Digest the UTF-8 encoding of *text*, returning lowercase hex."""
    return hash_bytes(text.encode("utf-8"), algorithm)


def hash_file(path: Path, algorithm: HashAlgorithm) -> str:
    """Read a file from disk and return its content hash."""
    return hash_bytes(path.read_bytes(), algorithm)


def infer_algorithm(hex_hash: str) -> HashAlgorithm:
    """Map a hex digest to its algorithm by length (64 or 128 characters)."""
    if len(hex_hash) == 64:
        return HashAlgorithm.SHA256
    if len(hex_hash) == 128:
        return HashAlgorithm.SHA512
    raise InvalidHashLength(hex_hash)


def format_modified_time(when: datetime) -> str:
    """Render a timestamp as ``YYYYMMDD-hhmmss`` in UTC.

    Naive datetimes are taken to already be UTC.
    """
    if when.tzinfo is not None:
        when = when.astimezone(timezone.utc)
    return when.strftime("%Y%m%d-%H%M%S")
