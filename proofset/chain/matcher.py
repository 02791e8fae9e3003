"""Reconcile disclosed detail lines against file content on disk.

The caller hashes the files (see ``proofset.chain.scanner``) and hands in
either a ``path -> content hash`` map or a ``content hash -> paths`` map.
Matching itself does no I/O.

Two strategies:

- by path: resolve the entry's recorded path to an observed file, then
  compare content hashes. Resolution tries, in order, an exact lookup,
  progressively shorter suffixes of the path (v1 files recorded absolute
  paths), and, for bare filenames, the first observed file with that name.
- by hash: look the entry's content hash up in the reverse index. Immune
  to moves and renames, but a collision would be reported as a match.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable, Iterable, Mapping, Sequence

from proofset.chain.digest import hash_bytes, infer_algorithm
from proofset.chain.models import ContentMatchResult, MatchStatus, ParsedDetailLine
from proofset.chain.verifier import parse_detail_line

logger = logging.getLogger(__name__)


def normalize_path(path: str) -> str:
    """Forward slashes only, so Windows-recorded paths compare equal."""
    return path.replace("\\", "/")


# ── Path lookup strategies ───────────────────────────────────────────

PathLookup = Callable[[str, Mapping[str, str]], "str | None"]


def _lookup_exact(path: str, observed: Mapping[str, str]) -> str | None:
    return path if path in observed else None


def _lookup_suffix(path: str, observed: Mapping[str, str]) -> str | None:
    """Drop leading segments one at a time until a suffix is observed."""
    segments = [s for s in path.split("/") if s]
    for start in range(1, len(segments)):
        candidate = "/".join(segments[start:])
        if candidate in observed:
            return candidate
    return None


def _lookup_filename(path: str, observed: Mapping[str, str]) -> str | None:
    """For a bare filename, take the first observed file with that name."""
    if "/" in path:
        return None
    for candidate in sorted(observed):
        if candidate.rsplit("/", 1)[-1] == path:
            return candidate
    return None


PATH_LOOKUPS: tuple[tuple[str, PathLookup], ...] = (
    ("exact", _lookup_exact),
    ("suffix", _lookup_suffix),
    ("filename", _lookup_filename),
)


def resolve_path(path: str, observed: Mapping[str, str]) -> tuple[str, str] | None:
    """Return ``(strategy name, observed path)`` for the first hit, else None."""
    normalized = normalize_path(path)
    for name, lookup in PATH_LOOKUPS:
        hit = lookup(normalized, observed)
        if hit is not None:
            return name, hit
    return None


def _parse_all(lines: Iterable[str | ParsedDetailLine]) -> list[ParsedDetailLine]:
    return [
        line if isinstance(line, ParsedDetailLine) else parse_detail_line(line)
        for line in lines
    ]


# ── Matching ─────────────────────────────────────────────────────────


def match_by_path(
    lines: Iterable[str | ParsedDetailLine],
    file_hashes: Mapping[str, str],
) -> list[ContentMatchResult]:
    """Match each entry to an observed file by its recorded path."""
    observed = {normalize_path(p): h.lower() for p, h in file_hashes.items()}
    results: list[ContentMatchResult] = []

    for parsed in _parse_all(lines):
        resolved = resolve_path(parsed.file_path, observed)
        if resolved is None:
            results.append(ContentMatchResult(parsed=parsed, status=MatchStatus.NOT_FOUND))
            continue

        strategy, found_path = resolved
        computed = observed[found_path]
        status = (
            MatchStatus.MATCH
            if computed == parsed.content_hash.lower()
            else MatchStatus.MISMATCH
        )
        if strategy != "exact":
            logger.debug("resolved %s -> %s via %s lookup", parsed.file_path, found_path, strategy)
        results.append(
            ContentMatchResult(
                parsed=parsed,
                status=status,
                computed_hash=computed,
                matched_files=(found_path,),
            )
        )
    return results


def build_hash_index(file_hashes: Mapping[str, str]) -> dict[str, list[str]]:
    """Reverse a ``path -> hash`` map into ``hash -> sorted paths``."""
    index: dict[str, list[str]] = defaultdict(list)
    for path in sorted(file_hashes):
        index[file_hashes[path].lower()].append(path)
    return dict(index)


def match_by_hash(
    lines: Iterable[str | ParsedDetailLine],
    hash_index: Mapping[str, Sequence[str]],
) -> list[ContentMatchResult]:
    """Match each entry by content hash alone, reporting every candidate path."""
    index = {h.lower(): tuple(paths) for h, paths in hash_index.items()}
    results: list[ContentMatchResult] = []
    for parsed in _parse_all(lines):
        key = parsed.content_hash.lower()
        candidates = index.get(key)
        if candidates:
            results.append(
                ContentMatchResult(
                    parsed=parsed,
                    status=MatchStatus.MATCH,
                    computed_hash=key,
                    matched_files=candidates,
                )
            )
        else:
            results.append(ContentMatchResult(parsed=parsed, status=MatchStatus.NOT_FOUND))
    return results


# ── Single file ──────────────────────────────────────────────────────


def verify_file_content_hash(data: bytes, expected_hash: str) -> tuple[bool, str]:
    """Hash *data* with the algorithm implied by *expected_hash* and compare."""
    computed = hash_bytes(data, infer_algorithm(expected_hash))
    return computed == expected_hash.lower(), computed


def match_single_file(
    lines: Iterable[str | ParsedDetailLine], data: bytes
) -> list[ContentMatchResult]:
    """Check one file's bytes against every disclosed entry."""
    results: list[ContentMatchResult] = []
    for parsed in _parse_all(lines):
        matched, computed = verify_file_content_hash(data, parsed.content_hash)
        results.append(
            ContentMatchResult(
                parsed=parsed,
                status=MatchStatus.MATCH if matched else MatchStatus.MISMATCH,
                computed_hash=computed,
            )
        )
    return results


def summarize(results: Iterable[ContentMatchResult]) -> dict[MatchStatus, int]:
    """Count results per status, every status present."""
    counts = {status: 0 for status in MatchStatus}
    for r in results:
        counts[r.status] += 1
    return counts
