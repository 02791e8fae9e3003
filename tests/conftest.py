"""Shared test fixtures for Proofset."""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from proofset.chain import HashAlgorithm, ProofsetConfig, SourceFileEntry
from proofset.config.models import ProofsetSettings

FIXTURES = Path(__file__).parent / "fixtures"

# Published root of fixtures/legacy-proofset-file-details-hash-list.txt
LEGACY_FIXTURE_ROOT = "A95231D3ECEEE7E8DD8D92F2F1C38B762ED0BE50117EC09F74F43F82C4ED86C1"


def _read_exact(path: Path) -> str:
    return path.read_bytes().decode("utf-8")


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture
def legacy_details() -> str:
    """v1 details file: header, uppercase hex, double-spaced absolute paths, footer."""
    return _read_exact(FIXTURES / "legacy-proofset-details.txt")


@pytest.fixture
def legacy_hash_list() -> str:
    return _read_exact(FIXTURES / "legacy-proofset-file-details-hash-list.txt")


@pytest.fixture
def reference_files():
    """The three reference files in canonical order, each with a full path."""
    return [
        SourceFileEntry(
            relative_path="file2.txt",
            full_path="dir1\\file2.txt",
            modified_time=datetime(2026, 2, 17, 0, 37, 35, tzinfo=timezone.utc),
            content=b"this is file2.txt\r\n",
        ),
        SourceFileEntry(
            relative_path="file3.txt",
            full_path="dir1\\file3.txt",
            modified_time=datetime(2026, 2, 17, 0, 37, 40, tzinfo=timezone.utc),
            content=b"this is file3.txt\r\n",
        ),
        SourceFileEntry(
            relative_path="file1.txt",
            full_path="file1.txt",
            modified_time=datetime(2026, 2, 16, 23, 14, 1, tzinfo=timezone.utc),
            content=b"this is file1.txt\r\n",
        ),
    ]


@pytest.fixture
def abc_config():
    return ProofsetConfig(seed_password="abc", algorithm=HashAlgorithm.SHA256)


@pytest.fixture
def sample_settings():
    return ProofsetSettings()


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """A copy of fixtures/source-files under tmp_path."""
    root = tmp_path / "source-files"
    (root / "dir1").mkdir(parents=True)
    (root / "file1.txt").write_bytes(b"this is file1.txt\r\n")
    (root / "dir1" / "file2.txt").write_bytes(b"this is file2.txt\r\n")
    (root / "dir1" / "file3.txt").write_bytes(b"this is file3.txt\r\n")
    return root


@pytest.fixture
def legacy_root() -> str:
    return LEGACY_FIXTURE_ROOT
