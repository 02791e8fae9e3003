"""Hash-chained commitment over an ordered set of files."""

from proofset.chain.assembler import ProofsetAssembler, create_proofset, create_proofset_async
from proofset.chain.builder import ChainState, advance, build_detail_item, seed_chain
from proofset.chain.digest import (
    HashAlgorithm,
    format_modified_time,
    hash_bytes,
    hash_file,
    hash_string,
    infer_algorithm,
)
from proofset.chain.errors import (
    EmptyPath,
    InvalidHashLength,
    InvalidHashListFormat,
    MalformedDetailItem,
    MalformedLine,
    ProofsetError,
    UnsupportedFormat,
)
from proofset.chain.matcher import (
    build_hash_index,
    match_by_hash,
    match_by_path,
    match_single_file,
    verify_file_content_hash,
)
from proofset.chain.models import (
    ContentMatchResult,
    DetailItem,
    DetailSpacing,
    LineVerification,
    MatchStatus,
    ParsedDetailLine,
    ProofsetConfig,
    ProofsetEntry,
    ProofsetResult,
    SimpleProofsetEntry,
    SimpleProofsetResult,
    SourceFileEntry,
)
from proofset.chain.scanner import ScanResult, iter_source_files, scan_directory
from proofset.chain.simple import (
    create_simple_proofset,
    create_simple_proofset_async,
    detect_format,
    extract_simple_proofset_lines,
    is_simple_proofset_format,
    is_simple_proofset_line,
    parse_simple_proofset_line,
    verify_simple_proofset_hash,
)
from proofset.chain.verifier import (
    ProofsetVerification,
    build_hash_list_from_detail_lines,
    extract_detail_lines,
    is_chained_detail_line,
    is_valid_hash_list_format,
    parse_detail_item,
    parse_detail_line,
    parse_hash_list,
    verify_detail_line,
    verify_hash_in_list,
    verify_hashset_hash,
    verify_proofset,
)

__all__ = [
    "ChainState",
    "ContentMatchResult",
    "DetailItem",
    "DetailSpacing",
    "EmptyPath",
    "HashAlgorithm",
    "InvalidHashLength",
    "InvalidHashListFormat",
    "LineVerification",
    "MalformedDetailItem",
    "MalformedLine",
    "MatchStatus",
    "ParsedDetailLine",
    "ProofsetAssembler",
    "ProofsetConfig",
    "ProofsetEntry",
    "ProofsetError",
    "ProofsetResult",
    "ProofsetVerification",
    "ScanResult",
    "SimpleProofsetEntry",
    "SimpleProofsetResult",
    "SourceFileEntry",
    "UnsupportedFormat",
    "advance",
    "build_detail_item",
    "build_hash_index",
    "build_hash_list_from_detail_lines",
    "create_proofset",
    "create_proofset_async",
    "create_simple_proofset",
    "create_simple_proofset_async",
    "detect_format",
    "extract_detail_lines",
    "extract_simple_proofset_lines",
    "format_modified_time",
    "hash_bytes",
    "hash_file",
    "hash_string",
    "infer_algorithm",
    "iter_source_files",
    "is_chained_detail_line",
    "is_simple_proofset_format",
    "is_simple_proofset_line",
    "is_valid_hash_list_format",
    "match_by_hash",
    "match_by_path",
    "match_single_file",
    "parse_detail_item",
    "parse_detail_line",
    "parse_hash_list",
    "parse_simple_proofset_line",
    "scan_directory",
    "seed_chain",
    "verify_detail_line",
    "verify_file_content_hash",
    "verify_hash_in_list",
    "verify_hashset_hash",
    "verify_proofset",
    "verify_simple_proofset_hash",
]
