"""Data models for the proofset chain subsystem."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from proofset.chain.digest import HashAlgorithm


class DetailSpacing(str, Enum):
    """Separator placed between the content hash and the path of a detail item.

    ``legacy`` reproduces v1 output, which used two spaces there. Stored
    detail lines are hashed verbatim, so existing files keep whichever
    convention they were created with.
    """

    STANDARD = "standard"
    LEGACY = "legacy"

    @property
    def path_separator(self) -> str:
        return "  " if self is DetailSpacing.LEGACY else " "


class MatchStatus(str, Enum):
    MATCH = "match"
    MISMATCH = "mismatch"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class SourceFileEntry:
    """One input file: its path(s), modification time and raw bytes.

    ``relative_path`` is always committed. When ``full_path`` is set it is
    committed first, as a separate chain entry.
    """

    relative_path: str
    modified_time: datetime
    content: bytes
    full_path: str | None = None

    @property
    def paths(self) -> tuple[str, ...]:
        """The one or two paths this file contributes, in chain order."""
        if self.full_path:
            return (self.full_path, self.relative_path)
        return (self.relative_path,)


@dataclass(frozen=True)
class DetailItem:
    """The four fields that make up one hashed detail string."""

    secret: str
    modified_time_utc: str
    content_hash: str
    file_path: str
    spacing: DetailSpacing = DetailSpacing.STANDARD

    @property
    def text(self) -> str:
        return (
            f"{self.secret} {self.modified_time_utc} {self.content_hash}"
            f"{self.spacing.path_separator}{self.file_path}"
        )


@dataclass(frozen=True)
class ProofsetEntry:
    """A detail item together with its hash and chain position."""

    details_hash: str
    item: DetailItem
    sequence_number: int

    @property
    def line(self) -> str:
        """The disclosed form: ``<details_hash>: <detail item>``."""
        return f"{self.details_hash}: {self.item.text}"


@dataclass(frozen=True)
class ProofsetResult:
    """Everything produced by one run of the assembler."""

    hashset_hash: str
    hash_list: str
    details_text: str
    entries: tuple[ProofsetEntry, ...]
    algorithm: HashAlgorithm

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class ParsedDetailLine:
    """A detail line split back into its fields."""

    details_hash: str
    secret: str
    modified_time_utc: str
    content_hash: str
    file_path: str


@dataclass(frozen=True)
class LineVerification:
    """Outcome of recomputing one detail line's hash."""

    valid: bool
    details_hash: str
    computed_hash: str


@dataclass(frozen=True)
class ContentMatchResult:
    """Outcome of checking one disclosed entry against on-disk content."""

    parsed: ParsedDetailLine
    status: MatchStatus
    computed_hash: str | None = None
    matched_files: tuple[str, ...] = ()


@dataclass(frozen=True)
class SimpleProofsetEntry:
    content_hash: str
    modified_time_utc: str
    filename: str

    @property
    def line(self) -> str:
        return f"{self.content_hash} {self.modified_time_utc} {self.filename}"


@dataclass(frozen=True)
class SimpleProofsetResult:
    hash: str
    content: str
    entries: tuple[SimpleProofsetEntry, ...] = field(default_factory=tuple)
    algorithm: HashAlgorithm = HashAlgorithm.SHA256


@dataclass(frozen=True)
class ProofsetConfig:
    """Runtime settings for building one chained proofset."""

    seed_password: str = field(repr=False)
    algorithm: HashAlgorithm = HashAlgorithm.SHA256
    spacing: DetailSpacing = DetailSpacing.STANDARD
