from typing import Literal

from pydantic import BaseModel, Field, field_validator

from proofset.chain.digest import HashAlgorithm
from proofset.chain.models import DetailSpacing


class ChainConfig(BaseModel):
    algorithm: Literal["sha256", "sha512"] = "sha256"
    spacing: DetailSpacing = DetailSpacing.STANDARD
    include_full_path: bool = True

    @field_validator("algorithm", mode="before")
    @classmethod
    def normalize_algorithm(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().lower().replace("-", "")
        return v

    @property
    def hash_algorithm(self) -> HashAlgorithm:
        return HashAlgorithm.from_name(self.algorithm)


class OutputConfig(BaseModel):
    base_dir: str = "."
    details_file: str = "proofset-details.txt"
    hash_list_file: str = "proofset-file-details-hash-list.txt"
    simple_file: str = "proofset-simple.txt"
    manifest_file: str = "proofset-manifest.yaml"
    write_manifest: bool = True


class ScanConfig(BaseModel):
    ignore_patterns: list[str] = Field(default_factory=lambda: [
        ".git", "node_modules", "__pycache__", ".venv"
    ])
    max_workers: int = Field(default=8, gt=0)


class MatchConfig(BaseModel):
    mode: Literal["path", "hash"] = "path"
    only_matches: bool = False


class ProofsetSettings(BaseModel):
    chain: ChainConfig = Field(default_factory=ChainConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
    match: MatchConfig = Field(default_factory=MatchConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "warn"
    log_format: Literal["text", "json"] = "text"
