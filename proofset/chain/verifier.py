"""Verification of disclosed detail lines, hash lists and hashset hashes.

Every check recomputes from the disclosed text and compares
case-insensitively, so uppercase artifacts from the v1 tool verify the
same as current lowercase output. The algorithm is never assumed; it is
inferred from the length of the hash being checked.

Failures come back as values (``LineVerification.valid``, booleans, a
``ProofsetVerification`` report) so a batch can be checked without
stopping at the first bad line. Input that cannot be parsed at all raises
one of the ``proofset.chain.errors`` exceptions.
"""

from __future__ import annotations

import logging
import re

from pydantic import BaseModel, Field

from proofset.chain.digest import hash_bytes, hash_string, infer_algorithm
from proofset.chain.errors import (
    EmptyPath,
    InvalidHashListFormat,
    MalformedDetailItem,
    MalformedLine,
)
from proofset.chain.models import LineVerification, ParsedDetailLine

logger = logging.getLogger(__name__)

LINE_SEPARATOR = ": "


def is_chained_detail_line(line: str) -> bool:
    """True for ``<64..128 hex>: ...``; header and footer lines fail this."""
    return re.match(r"^[0-9a-fA-F]{64,128}: ", line) is not None


def is_bare_hash(line: str) -> bool:
    return re.fullmatch(r"[0-9a-fA-F]{64}|[0-9a-fA-F]{128}", line) is not None


def split_detail_line(line: str) -> tuple[str, str]:
    """Split on the first ``": "`` into ``(details_hash, detail_item)``."""
    idx = line.find(LINE_SEPARATOR)
    if idx == -1:
        raise MalformedLine(line)
    return line[:idx], line[idx + len(LINE_SEPARATOR):]


# ── Single-entry validity ────────────────────────────────────────────


def verify_detail_line(line: str) -> LineVerification:
    """Check ``H(detail_item) == details_hash`` for one disclosed line.

    The detail item is hashed exactly as given, so both the single- and
    double-space path separators verify.
    """
    details_hash, detail_item = split_detail_line(line)
    algorithm = infer_algorithm(details_hash)
    computed = hash_string(detail_item, algorithm)
    return LineVerification(
        valid=computed == details_hash.lower(),
        details_hash=details_hash,
        computed_hash=computed,
    )


# ── Hash list membership ─────────────────────────────────────────────


def hash_list_entries(hash_list: str) -> list[str]:
    """Split a hash list on ``\\r\\n`` and drop empty lines."""
    return [h for h in hash_list.split("\r\n") if h]


def verify_hash_in_list(details_hash: str, hash_list: str) -> bool:
    """Linear, case-insensitive search of *hash_list* for *details_hash*.

    No index is built; hash lists are expected to run to thousands of
    entries, not millions.
    """
    target = details_hash.lower()
    return any(h.lower() == target for h in hash_list_entries(hash_list))


# ── Root hash validity ───────────────────────────────────────────────


def compute_hashset_hash(hash_list: str, expected_length_from: str) -> str:
    """Digest the raw hash list bytes with the algorithm implied by a hash."""
    algorithm = infer_algorithm(expected_length_from)
    return hash_bytes(hash_list.encode("utf-8"), algorithm)


def verify_hashset_hash(hash_list: str, expected_hashset_hash: str) -> bool:
    """Recompute ``H(hash_list)`` and compare to the published root."""
    computed = compute_hashset_hash(hash_list, expected_hashset_hash)
    return computed == expected_hashset_hash.lower()


# ── Hash list parsing ────────────────────────────────────────────────


def is_valid_hash_list_format(hash_list: str) -> bool:
    """True if every non-empty line is a bare 64- or 128-char hex hash."""
    lines = [line for line in re.split(r"\r?\n", hash_list) if line]
    return bool(lines) and all(is_bare_hash(line) for line in lines)


def parse_hash_list(hash_list: str) -> list[str]:
    """Return the hashes in *hash_list*, rejecting anything else.

    Raises InvalidHashListFormat naming the first offending line.
    """
    hashes: list[str] = []
    for number, line in enumerate(re.split(r"\r?\n", hash_list), start=1):
        if not line:
            continue
        if not is_bare_hash(line):
            raise InvalidHashListFormat(line, number)
        hashes.append(line)
    return hashes


# ── Detail line extraction and parsing ───────────────────────────────


def extract_detail_lines(content: str) -> list[str]:
    """Return the detail lines of a details file, skipping v1 decoration."""
    return [line for line in re.split(r"\r?\n", content) if is_chained_detail_line(line)]


def build_hash_list_from_detail_lines(lines: list[str]) -> str:
    """Rebuild a hash list from disclosed lines, ``\\r\\n``-terminated."""
    return "".join(split_detail_line(line)[0] + "\r\n" for line in lines)


def parse_detail_item(detail_item: str) -> tuple[str, str, str, str]:
    """Split a detail item into ``(secret, time, content_hash, path)``.

    Fields are split on single spaces. The path is everything after the
    third field re-joined with single spaces and trimmed, so runs of spaces
    inside a path survive and the v1 double space before the path is
    absorbed.
    """
    tokens = detail_item.split(" ")
    if len(tokens) < 4:
        raise MalformedDetailItem(detail_item, len(tokens))
    secret, modified, content_hash = tokens[:3]
    file_path = " ".join(tokens[3:]).strip()
    if not file_path:
        raise EmptyPath(detail_item)
    return secret, modified, content_hash, file_path


def parse_detail_line(line: str) -> ParsedDetailLine:
    details_hash, detail_item = split_detail_line(line)
    secret, modified, content_hash, file_path = parse_detail_item(detail_item)
    return ParsedDetailLine(
        details_hash=details_hash,
        secret=secret,
        modified_time_utc=modified,
        content_hash=content_hash,
        file_path=file_path,
    )


# ── Batch verification ───────────────────────────────────────────────


class LineFailure(BaseModel):
    """One disclosed line that did not verify."""

    details_hash: str
    reason: str


class ProofsetVerification(BaseModel):
    """Result of checking a whole details file."""

    total_lines: int = 0
    valid_lines: int = 0
    failures: list[LineFailure] = Field(default_factory=list)
    computed_hashset_hash: str = ""
    hash_list_derived: bool = False
    hashset_hash_matches: bool | None = None

    @property
    def valid(self) -> bool:
        return not self.failures and self.hashset_hash_matches is not False


def verify_proofset(
    details_content: str,
    hash_list: str | None = None,
    expected_hashset_hash: str | None = None,
) -> ProofsetVerification:
    """Check every detail line in *details_content*.

    With a *hash_list*, each line's hash must also be a member of it and
    the hashset hash is computed over that list; without one, the list is
    derived from the disclosed lines. *expected_hashset_hash*, when given,
    is compared to the computed root.

    Raises ValueError if the content holds no detail lines at all.
    """
    lines = extract_detail_lines(details_content)
    if not lines:
        raise ValueError("No detail lines found in details content")

    report = ProofsetVerification(total_lines=len(lines))
    for line in lines:
        result = verify_detail_line(line)
        if not result.valid:
            report.failures.append(
                LineFailure(details_hash=result.details_hash, reason="hash mismatch")
            )
            continue
        if hash_list is not None and not verify_hash_in_list(result.details_hash, hash_list):
            report.failures.append(
                LineFailure(details_hash=result.details_hash, reason="not in hash list")
            )
            continue
        report.valid_lines += 1

    if hash_list is None:
        hash_list = build_hash_list_from_detail_lines(lines)
        report.hash_list_derived = True

    first_hash = split_detail_line(lines[0])[0]
    report.computed_hashset_hash = compute_hashset_hash(hash_list, first_hash)
    if expected_hashset_hash is not None:
        report.hashset_hash_matches = verify_hashset_hash(hash_list, expected_hashset_hash)

    logger.debug(
        "verified %d/%d detail lines (derived hash list: %s)",
        report.valid_lines,
        report.total_lines,
        report.hash_list_derived,
    )
    return report
