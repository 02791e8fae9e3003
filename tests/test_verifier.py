"""Tests for detail line, hash list and hashset hash verification."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from proofset.chain import (
    EmptyPath,
    HashAlgorithm,
    InvalidHashLength,
    InvalidHashListFormat,
    MalformedDetailItem,
    MalformedLine,
    MatchStatus,
    SourceFileEntry,
    build_hash_list_from_detail_lines,
    create_proofset,
    extract_detail_lines,
    hash_bytes,
    is_chained_detail_line,
    is_valid_hash_list_format,
    match_by_path,
    parse_detail_item,
    parse_detail_line,
    parse_hash_list,
    verify_detail_line,
    verify_hash_in_list,
    verify_hashset_hash,
    verify_proofset,
)
from proofset.chain.verifier import compute_hashset_hash, split_detail_line

H = "a" * 64


# ── Single detail lines ──────────────────────────────────────────────


def test_generated_lines_verify(reference_files, abc_config):
    result = create_proofset(reference_files, abc_config)
    for entry in result.entries:
        check = verify_detail_line(entry.line)
        assert check.valid
        assert check.computed_hash == entry.details_hash


def test_legacy_uppercase_lines_verify(legacy_details):
    lines = extract_detail_lines(legacy_details)
    assert len(lines) == 6
    for line in lines:
        assert verify_detail_line(line).valid


def test_tampered_path_fails(reference_files, abc_config):
    line = create_proofset(reference_files, abc_config).entries[0].line
    check = verify_detail_line(line.replace("file2.txt", "file9.txt"))
    assert not check.valid
    assert check.computed_hash != check.details_hash


def test_tampered_details_hash_fails(reference_files, abc_config):
    line = create_proofset(reference_files, abc_config).entries[0].line
    flipped = ("b" if line[0] != "b" else "c") + line[1:]
    assert not verify_detail_line(flipped).valid


def test_respacing_fails(legacy_details):
    """The detail item is hashed verbatim, so collapsing the double space breaks it."""
    line = extract_detail_lines(legacy_details)[1]
    assert not verify_detail_line(line.replace("  file2.txt", " file2.txt")).valid


def test_missing_separator_raises():
    with pytest.raises(MalformedLine):
        verify_detail_line(H + " no separator here")


def test_bad_hash_length_raises():
    with pytest.raises(InvalidHashLength):
        verify_detail_line("abcd: s t c p")


def test_split_on_first_separator_only():
    details_hash, item = split_detail_line(f"{H}: x y z dir: name.txt")
    assert details_hash == H
    assert item == "x y z dir: name.txt"


# ── Hash list membership ─────────────────────────────────────────────


def test_membership_case_insensitive(legacy_hash_list):
    first = parse_hash_list(legacy_hash_list)[0]
    assert verify_hash_in_list(first.lower(), legacy_hash_list)
    assert verify_hash_in_list(first, legacy_hash_list)


def test_membership_miss(legacy_hash_list):
    assert not verify_hash_in_list(H, legacy_hash_list)


def test_membership_empty_list():
    assert not verify_hash_in_list(H, "")


# ── Hashset hash ─────────────────────────────────────────────────────


def test_hashset_hash_legacy_fixture(legacy_hash_list, legacy_root):
    assert verify_hashset_hash(legacy_hash_list, legacy_root)
    assert verify_hashset_hash(legacy_hash_list, legacy_root.lower())


def test_hashset_hash_sensitive_to_line_endings(legacy_hash_list, legacy_root):
    assert not verify_hashset_hash(legacy_hash_list.replace("\r\n", "\n"), legacy_root)


def test_hashset_hash_sensitive_to_one_hex_char(legacy_hash_list, legacy_root):
    idx = legacy_hash_list.index("\r\n") + 2 + 10
    ch = legacy_hash_list[idx]
    flipped = legacy_hash_list[:idx] + ("0" if ch != "0" else "1") + legacy_hash_list[idx + 1:]
    assert parse_hash_list(flipped)
    assert not verify_hashset_hash(flipped, legacy_root)


def test_compute_hashset_hash_lowercase(legacy_hash_list, legacy_root):
    assert compute_hashset_hash(legacy_hash_list, legacy_root) == legacy_root.lower()


# ── Hash list parsing ────────────────────────────────────────────────


def test_parse_hash_list(legacy_hash_list):
    hashes = parse_hash_list(legacy_hash_list)
    assert len(hashes) == 6
    assert is_valid_hash_list_format(legacy_hash_list)


def test_parse_hash_list_lf_only():
    assert parse_hash_list(f"{H}\n{'b' * 128}\n") == [H, "b" * 128]


def test_details_file_is_not_a_hash_list(legacy_details):
    assert not is_valid_hash_list_format(legacy_details)
    with pytest.raises(InvalidHashListFormat) as exc_info:
        parse_hash_list(legacy_details)
    assert exc_info.value.line_number == 1


def test_empty_hash_list_is_not_valid_format():
    assert not is_valid_hash_list_format("")
    assert parse_hash_list("") == []


# ── Extraction and parsing ───────────────────────────────────────────


def test_extract_skips_header_and_footer(legacy_details):
    lines = extract_detail_lines(legacy_details)
    assert all(is_chained_detail_line(line) for line in lines)
    assert not any("Summary" in line for line in lines)


def test_rebuilt_hash_list_matches_fixture(legacy_details, legacy_hash_list):
    rebuilt = build_hash_list_from_detail_lines(extract_detail_lines(legacy_details))
    assert rebuilt == legacy_hash_list


def test_parse_legacy_line(legacy_details):
    parsed = parse_detail_line(extract_detail_lines(legacy_details)[0])
    assert parsed.modified_time_utc == "20260217-003735"
    assert parsed.content_hash == (
        "EBE2F17920521E0D6A11DA34A26C322E7DB871A54381FDA89522C861A9602FBE"
    )
    assert parsed.file_path == "C:\\Users\\alice\\proofs\\source-files\\dir1\\file2.txt"


def test_parse_path_with_spaces():
    secret, modified, content_hash, path = parse_detail_item(
        f"{H} 20260101-000000 {H} my docs/report final.txt"
    )
    assert path == "my docs/report final.txt"


def test_parse_too_few_fields():
    with pytest.raises(MalformedDetailItem) as exc_info:
        parse_detail_item(f"{H} 20260101-000000 {H}")
    assert exc_info.value.field_count == 3


def test_parse_blank_path():
    with pytest.raises(EmptyPath):
        parse_detail_item(f"{H} 20260101-000000 {H} ")


def test_parse_whitespace_only_path():
    with pytest.raises(EmptyPath):
        parse_detail_item(f"{H} 20260101-000000 {H}    ")


def test_parse_keeps_runs_of_spaces_in_path():
    *_, path = parse_detail_item(f"{H} 20260101-000000 {H} my  file   v2.txt")
    assert path == "my  file   v2.txt"


def test_parse_legacy_double_space_absorbed():
    *_, path = parse_detail_item(f"{H} 20260101-000000 {H}  my  file.txt")
    assert path == "my  file.txt"


def test_double_spaced_path_round_trip(abc_config):
    """A committed path with consecutive spaces parses back unchanged and matches on disk."""
    source = SourceFileEntry(
        relative_path="my  file.txt",
        modified_time=datetime(2026, 1, 1, tzinfo=timezone.utc),
        content=b"x",
    )
    line = create_proofset([source], abc_config).entries[0].line
    assert parse_detail_line(line).file_path == "my  file.txt"

    results = match_by_path([line], {"my  file.txt": hash_bytes(b"x", HashAlgorithm.SHA256)})
    assert results[0].status is MatchStatus.MATCH


# ── Whole-file verification ──────────────────────────────────────────


class TestVerifyProofset:
    def test_legacy_fixture_with_hash_list(self, legacy_details, legacy_hash_list, legacy_root):
        report = verify_proofset(legacy_details, legacy_hash_list, legacy_root)
        assert report.valid
        assert report.total_lines == report.valid_lines == 6
        assert report.hashset_hash_matches is True
        assert not report.hash_list_derived
        assert report.computed_hashset_hash == legacy_root.lower()

    def test_derives_hash_list(self, legacy_details, legacy_root):
        report = verify_proofset(legacy_details)
        assert report.hash_list_derived
        assert report.computed_hashset_hash == legacy_root.lower()
        assert report.hashset_hash_matches is None

    def test_line_not_in_list(self, legacy_details, legacy_hash_list):
        trimmed = "".join(legacy_hash_list.split("\r\n", 1)[1:])
        report = verify_proofset(legacy_details, trimmed)
        assert not report.valid
        assert [f.reason for f in report.failures] == ["not in hash list"]

    def test_tampered_line(self, legacy_details):
        tampered = legacy_details.replace("20260216-231401", "20260216-231402", 1)
        report = verify_proofset(tampered)
        assert not report.valid
        assert report.failures[0].reason == "hash mismatch"
        assert report.valid_lines == 5

    def test_wrong_root(self, legacy_details, legacy_hash_list):
        report = verify_proofset(legacy_details, legacy_hash_list, "b" * 64)
        assert report.hashset_hash_matches is False
        assert not report.valid

    def test_partial_disclosure(self, legacy_details, legacy_hash_list, legacy_root):
        """A single disclosed line still checks against the full list."""
        line = extract_detail_lines(legacy_details)[3]
        report = verify_proofset(line + "\r\n", legacy_hash_list, legacy_root)
        assert report.valid
        assert report.total_lines == 1

    def test_no_detail_lines(self):
        with pytest.raises(ValueError, match="No detail lines"):
            verify_proofset("just a header\r\n")
