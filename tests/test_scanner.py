"""Tests for directory walking, source entries and concurrent hashing."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path

from proofset.chain import (
    HashAlgorithm,
    ProofsetConfig,
    create_proofset,
    create_proofset_async,
    iter_source_files,
    scan_directory,
)
from proofset.chain.scanner import aiter_source_files, collect_files, hash_directory, load_source_entry

SHA = HashAlgorithm.SHA256
H1 = "17aa66d07b0254b8a86e61dd14b8fc0f2b6dd4fb93e545f343ba0604d4a9a5be"
H2 = "ebe2f17920521e0d6a11da34a26c322e7db871a54381fda89522c861a9602fbe"
H3 = "79c3002f6edeca649b1c1f30ade00cc184320d0a56463d53fd760f0e85ff1642"
STANDARD_ROOT = "ea361143c639c8f51b8a89ce1891c25d8809edd0e406aa1adf319bd169e43e84"


def _set_reference_mtimes(root: Path) -> None:
    for rel, when in [
        ("dir1/file2.txt", datetime(2026, 2, 17, 0, 37, 35, tzinfo=timezone.utc)),
        ("dir1/file3.txt", datetime(2026, 2, 17, 0, 37, 40, tzinfo=timezone.utc)),
        ("file1.txt", datetime(2026, 2, 16, 23, 14, 1, tzinfo=timezone.utc)),
    ]:
        ts = when.timestamp()
        os.utime(root / rel, (ts, ts))


# ── File collection ──────────────────────────────────────────────────


def test_collect_files_sorted(source_tree: Path):
    assert collect_files(source_tree) == ["dir1/file2.txt", "dir1/file3.txt", "file1.txt"]


def test_collect_files_skips_ignored_and_hidden(source_tree: Path):
    (source_tree / "node_modules").mkdir()
    (source_tree / "node_modules" / "pkg.js").write_text("x")
    (source_tree / ".hidden").write_text("x")
    (source_tree / "build").mkdir()
    (source_tree / "build" / "out.bin").write_bytes(b"\x00")
    assert collect_files(source_tree, ["build"]) == [
        "dir1/file2.txt", "dir1/file3.txt", "file1.txt",
    ]


def test_collect_files_empty_dir(tmp_path: Path):
    assert collect_files(tmp_path) == []


# ── Source entries ───────────────────────────────────────────────────


def test_load_source_entry(source_tree: Path):
    entry = load_source_entry(source_tree, "dir1/file2.txt")
    assert entry.relative_path == "file2.txt"
    assert entry.full_path == "dir1\\file2.txt"
    assert entry.content == b"this is file2.txt\r\n"
    assert entry.modified_time.tzinfo is timezone.utc


def test_load_source_entry_without_full_path(source_tree: Path):
    entry = load_source_entry(source_tree, "dir1/file2.txt", include_full_path=False)
    assert entry.full_path is None
    assert entry.paths == ("file2.txt",)



def test_load_source_entry_posix_relative(source_tree: Path):
    entry = load_source_entry(source_tree, "dir1/file2.txt", posix_relative=True)
    assert entry.relative_path == "dir1/file2.txt"
    assert entry.paths == ("dir1/file2.txt",)


def test_posix_relative_keeps_same_named_files_distinct(tmp_path: Path):
    for d in ("a", "b"):
        (tmp_path / d).mkdir()
        (tmp_path / d / "notes.txt").write_bytes(d.encode())
    names = [e.relative_path for e in iter_source_files(tmp_path, posix_relative=True)]
    assert names == ["a/notes.txt", "b/notes.txt"]

def test_directory_reproduces_reference_root(source_tree: Path):
    _set_reference_mtimes(source_tree)
    result = create_proofset(iter_source_files(source_tree), ProofsetConfig(seed_password="abc"))
    assert result.hashset_hash == STANDARD_ROOT


async def test_async_directory_reproduces_reference_root(source_tree: Path):
    _set_reference_mtimes(source_tree)
    result = await create_proofset_async(
        aiter_source_files(source_tree), ProofsetConfig(seed_password="abc")
    )
    assert result.hashset_hash == STANDARD_ROOT


# ── Hashing ──────────────────────────────────────────────────────────


def test_scan_directory(source_tree: Path):
    scan = scan_directory(source_tree, SHA)
    assert scan.files == {"dir1/file2.txt": H2, "dir1/file3.txt": H3, "file1.txt": H1}
    assert list(scan.files) == sorted(scan.files)
    assert scan.algorithm is SHA


async def test_hash_directory_single_worker(source_tree: Path):
    scan = await hash_directory(source_tree, SHA, max_workers=1)
    assert len(scan.files) == 3


def test_scan_by_hash_groups_duplicates(source_tree: Path):
    (source_tree / "copy.txt").write_bytes(b"this is file1.txt\r\n")
    index = scan_directory(source_tree, SHA).by_hash()
    assert index[H1] == ["copy.txt", "file1.txt"]
