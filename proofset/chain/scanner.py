"""Filesystem access: walking a source directory and hashing its files.

This is the only part of ``proofset.chain`` that touches the disk. It
produces ``SourceFileEntry`` records in canonical order for the assembler
and ``path -> content hash`` maps for the content matcher.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Iterator
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath

from proofset.chain.digest import HashAlgorithm, hash_file
from proofset.chain.matcher import build_hash_index
from proofset.chain.models import SourceFileEntry

logger = logging.getLogger(__name__)

# Directories always skipped while walking
DEFAULT_IGNORE = {
    ".git",
    "node_modules",
    "__pycache__",
    ".venv",
}


@dataclass
class ScanResult:
    """Content hashes of every file under a root."""

    root: str
    algorithm: HashAlgorithm
    files: dict[str, str] = field(default_factory=dict)  # relative path -> hash

    def by_hash(self) -> dict[str, list[str]]:
        return build_hash_index(self.files)


def _matches_any(path: PurePosixPath, patterns: set[str]) -> bool:
    """Check whether any component of *path* is ignored or hidden."""
    return any(part in patterns or part.startswith(".") for part in path.parts)


def collect_files(root: Path, ignore_patterns: list[str] | None = None) -> list[str]:
    """Relative POSIX paths of all regular files under *root*, sorted."""
    root = root.resolve()
    ignore = set(DEFAULT_IGNORE)
    if ignore_patterns:
        ignore.update(ignore_patterns)

    found: list[str] = []
    for p in root.rglob("*"):
        rel = PurePosixPath(p.relative_to(root).as_posix())
        if _matches_any(rel, ignore):
            continue
        if p.is_file():
            found.append(str(rel))
    found.sort()
    return found


def load_source_entry(
    root: Path,
    rel_path: str,
    include_full_path: bool = True,
    posix_relative: bool = False,
) -> SourceFileEntry:
    """Read one file into a SourceFileEntry.

    By default the committed paths are the bare filename and, optionally,
    the path relative to *root* written with backslashes, as the v1 tool
    did. With *posix_relative* the single committed path is the POSIX path
    relative to *root*, so same-named files in different directories stay
    distinct.
    """
    full = root / rel_path
    stat = full.stat()
    if posix_relative:
        name, full_name = rel_path, None
    else:
        name = PurePosixPath(rel_path).name
        full_name = rel_path.replace("/", "\\") if include_full_path else None
    return SourceFileEntry(
        relative_path=name,
        full_path=full_name,
        modified_time=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
        content=full.read_bytes(),
    )


def iter_source_files(
    root: Path,
    ignore_patterns: list[str] | None = None,
    include_full_path: bool = True,
    posix_relative: bool = False,
) -> Iterator[SourceFileEntry]:
    """Yield source entries in lexicographic relative-path order.

    Files are read one at a time as the consumer advances.
    """
    root = root.resolve()
    paths = collect_files(root, ignore_patterns)
    logger.info("found %d file(s) under %s", len(paths), root)
    for rel in paths:
        yield load_source_entry(root, rel, include_full_path, posix_relative)


async def aiter_source_files(
    root: Path,
    ignore_patterns: list[str] | None = None,
    include_full_path: bool = True,
    posix_relative: bool = False,
) -> AsyncIterator[SourceFileEntry]:
    """Async variant of ``iter_source_files``; reads run in a worker thread."""
    root = root.resolve()
    paths = await asyncio.to_thread(collect_files, root, ignore_patterns)
    logger.info("found %d file(s) under %s", len(paths), root)
    for rel in paths:
        yield await asyncio.to_thread(
            load_source_entry, root, rel, include_full_path, posix_relative
        )


async def hash_directory(
    root: Path,
    algorithm: HashAlgorithm,
    ignore_patterns: list[str] | None = None,
    max_workers: int = 8,
) -> ScanResult:
    """Hash every file under *root* concurrently.

    Hashing fans out over at most *max_workers* threads; the resulting
    map is rebuilt in sorted path order regardless of completion order.
    """
    root = root.resolve()
    paths = await asyncio.to_thread(collect_files, root, ignore_patterns)
    sem = asyncio.Semaphore(max_workers)

    async def _hash_one(rel: str) -> tuple[str, str]:
        async with sem:
            return rel, await asyncio.to_thread(hash_file, root / rel, algorithm)

    pairs = await asyncio.gather(*(_hash_one(rel) for rel in paths))
    files = dict(sorted(pairs))
    logger.info("hashed %d file(s) under %s with %s", len(files), root, algorithm.value)
    return ScanResult(root=str(root), algorithm=algorithm, files=files)


def scan_directory(
    root: Path,
    algorithm: HashAlgorithm,
    ignore_patterns: list[str] | None = None,
    max_workers: int = 8,
) -> ScanResult:
    """Blocking wrapper around ``hash_directory``."""
    return asyncio.run(hash_directory(root, algorithm, ignore_patterns, max_workers))
