"""Simple proofsets: a secretless, unchained listing of content hashes.

Each line is ``<content hash> <YYYYMMDD-hhmmss> <filename>`` terminated by
``\\r\\n``; the root hash is the digest of the whole listing. There is no
selective disclosure here, only a commitment to the listing as a whole.
"""

from __future__ import annotations

import logging
import re
from collections.abc import AsyncIterable, Iterable
from typing import Literal

from proofset.chain.digest import (
    HashAlgorithm,
    format_modified_time,
    hash_bytes,
    infer_algorithm,
)
from proofset.chain.errors import ProofsetError, UnsupportedFormat
from proofset.chain.models import SimpleProofsetEntry, SimpleProofsetResult, SourceFileEntry
from proofset.chain.verifier import is_chained_detail_line

logger = logging.getLogger(__name__)


def _simple_entry(source: SourceFileEntry, algorithm: HashAlgorithm) -> SimpleProofsetEntry:
    return SimpleProofsetEntry(
        content_hash=hash_bytes(source.content, algorithm),
        modified_time_utc=format_modified_time(source.modified_time),
        filename=source.relative_path,
    )


def _finish(entries: list[SimpleProofsetEntry], algorithm: HashAlgorithm) -> SimpleProofsetResult:
    content = "".join(e.line + "\r\n" for e in entries)
    logger.info("assembled simple proofset: %d entries", len(entries))
    return SimpleProofsetResult(
        hash=hash_bytes(content.encode("utf-8"), algorithm),
        content=content,
        entries=tuple(entries),
        algorithm=algorithm,
    )


def create_simple_proofset(
    files: Iterable[SourceFileEntry],
    algorithm: HashAlgorithm = HashAlgorithm.SHA256,
) -> SimpleProofsetResult:
    return _finish([_simple_entry(f, algorithm) for f in files], algorithm)


async def create_simple_proofset_async(
    files: AsyncIterable[SourceFileEntry],
    algorithm: HashAlgorithm = HashAlgorithm.SHA256,
) -> SimpleProofsetResult:
    return _finish([_simple_entry(f, algorithm) async for f in files], algorithm)


# ── Format detection and parsing ─────────────────────────────────────


def is_simple_proofset_line(line: str) -> bool:
    """``<hash> <timestamp> <name>`` and not a chained ``<hash>: ...`` line."""
    if is_chained_detail_line(line):
        return False
    return re.fullmatch(r"[0-9a-fA-F]{64,128} \d{8}-\d{6} .+", line) is not None


def extract_simple_proofset_lines(content: str) -> list[str]:
    return [line for line in re.split(r"\r?\n", content) if line]


def is_simple_proofset_format(content: str) -> bool:
    lines = extract_simple_proofset_lines(content)
    return bool(lines) and is_simple_proofset_line(lines[0])


def detect_format(content: str) -> Literal["simple", "chained"]:
    """Classify a proofset blob by its first non-empty line.

    Detail files from the v1 tool may open with a header line, so any
    chained detail line in the content marks it as chained.
    Raises UnsupportedFormat when neither layout is recognized.
    """
    lines = extract_simple_proofset_lines(content)
    if not lines:
        raise UnsupportedFormat(content)
    if is_simple_proofset_line(lines[0]):
        return "simple"
    if any(is_chained_detail_line(line) for line in lines):
        return "chained"
    raise UnsupportedFormat(lines[0])


def parse_simple_proofset_line(line: str) -> SimpleProofsetEntry:
    """Split a simple line into its three fields; the name may contain spaces."""
    if not is_simple_proofset_line(line):
        raise ProofsetError(f"Invalid simple proofset line: {line!r}", line)
    content_hash, modified, filename = line.split(" ", 2)
    infer_algorithm(content_hash)
    return SimpleProofsetEntry(
        content_hash=content_hash,
        modified_time_utc=modified,
        filename=filename,
    )


def verify_simple_proofset_hash(content: str, expected_hash: str) -> bool:
    """Recompute the digest of the full listing and compare case-insensitively."""
    computed = hash_bytes(content.encode("utf-8"), infer_algorithm(expected_hash))
    return computed == expected_hash.lower()
