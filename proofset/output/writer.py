"""Writes proofset artifacts to disk."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

import yaml

from proofset.chain.models import DetailSpacing, ProofsetResult, SimpleProofsetResult
from proofset.config.models import OutputConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WrittenProofset:
    """Paths of the files produced for one chained proofset."""

    details: Path
    hash_list: Path
    manifest: Path | None = None


class ProofsetWriter:
    """Writes proofset results under ``config.base_dir``.

    Files are written as bytes so the ``\\r\\n`` terminators hashed into
    the commitment reach the disk unchanged on every platform.
    """

    def __init__(self, config: OutputConfig) -> None:
        self.config = config
        self.base_dir = Path(config.base_dir)

    def _write_bytes(self, dest: Path, text: str) -> None:
        dest.parent.mkdir(parents=True, exist_ok=True)
        data = text.encode("utf-8")
        dest.write_bytes(data)
        logger.info("wrote %s (%d bytes)", dest, len(data))

    def write(
        self,
        result: ProofsetResult,
        *,
        spacing: DetailSpacing = DetailSpacing.STANDARD,
        dry_run: bool = False,
    ) -> WrittenProofset:
        """Write the details file, the hash list and the manifest.

        Returns the paths written (or that would be written).
        """
        details = self.base_dir / self.config.details_file
        hash_list = self.base_dir / self.config.hash_list_file
        manifest = self.base_dir / self.config.manifest_file if self.config.write_manifest else None
        written = WrittenProofset(details=details, hash_list=hash_list, manifest=manifest)

        if dry_run:
            logger.debug("dry-run: would write %s and %s", details, hash_list)
            return written

        self._write_bytes(details, result.details_text)
        self._write_bytes(hash_list, result.hash_list)
        if manifest is not None:
            self._write_manifest(manifest, result, spacing)
        return written

    def write_simple(self, result: SimpleProofsetResult, *, dry_run: bool = False) -> Path:
        dest = self.base_dir / self.config.simple_file
        if dry_run:
            logger.debug("dry-run: would write %s", dest)
            return dest
        self._write_bytes(dest, result.content)
        return dest

    # -- manifest ------------------------------------------------------------

    def _write_manifest(
        self, path: Path, result: ProofsetResult, spacing: DetailSpacing
    ) -> None:
        """Record the public parameters of the proofset (never the seed)."""
        data = {
            "hashset_hash": result.hashset_hash,
            "algorithm": result.algorithm.value,
            "spacing": spacing.value,
            "entries": len(result.entries),
            "details_file": self.config.details_file,
            "hash_list_file": self.config.hash_list_file,
            "created": datetime.now(timezone.utc).isoformat(),
        }
        path.write_text(
            yaml.safe_dump(data, default_flow_style=False, sort_keys=False),
            encoding="utf-8",
        )
        logger.debug("wrote manifest %s", path)
