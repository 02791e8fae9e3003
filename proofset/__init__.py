"""Proofset - hashset commitments with selective disclosure."""

from proofset.chain import (
    HashAlgorithm,
    ProofsetConfig,
    SourceFileEntry,
    create_proofset,
    create_simple_proofset,
    verify_detail_line,
    verify_hash_in_list,
    verify_hashset_hash,
)
from proofset.config import ProofsetSettings, load_config

__version__ = "0.1.0"

__all__ = [
    "HashAlgorithm",
    "ProofsetConfig",
    "ProofsetSettings",
    "SourceFileEntry",
    "create_proofset",
    "create_simple_proofset",
    "load_config",
    "verify_detail_line",
    "verify_hash_in_list",
    "verify_hashset_hash",
]
