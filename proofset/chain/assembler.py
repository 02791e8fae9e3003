"""Assemble a chained proofset from an ordered sequence of source files."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterable, Iterable

from proofset.chain.builder import ChainState, advance, seed_chain
from proofset.chain.digest import format_modified_time, hash_bytes
from proofset.chain.models import (
    ProofsetConfig,
    ProofsetEntry,
    ProofsetResult,
    SourceFileEntry,
)

logger = logging.getLogger(__name__)

LINE_END = "\r\n"


class ProofsetAssembler:
    """Folds source files through the secret chain.

    One instance handles one file sequence. Feed files in their canonical
    order with ``add()``, then call ``finish()`` for the result. Nothing
    beyond the current ``ChainState`` and the accumulated output is kept.
    """

    def __init__(self, config: ProofsetConfig) -> None:
        self.config = config
        self._state: ChainState = seed_chain(config.seed_password, config.algorithm)
        self._entries: list[ProofsetEntry] = []
        self._hash_list: list[str] = []
        self._finished = False

    @property
    def state(self) -> ChainState:
        return self._state

    def add(self, source: SourceFileEntry) -> list[ProofsetEntry]:
        """Commit one file: one entry per path, full path first."""
        if self._finished:
            raise RuntimeError("Assembler already finished; start a new one")

        algorithm = self.config.algorithm
        content_hash = hash_bytes(source.content, algorithm)
        modified = format_modified_time(source.modified_time)

        added: list[ProofsetEntry] = []
        for file_path in source.paths:
            self._state, entry = advance(
                self._state,
                self.config.seed_password,
                algorithm,
                modified,
                content_hash,
                file_path,
                self.config.spacing,
            )
            self._entries.append(entry)
            self._hash_list.append(entry.details_hash + LINE_END)
            added.append(entry)
        return added

    def finish(self) -> ProofsetResult:
        """Compute the hashset hash over the raw hash list bytes."""
        self._finished = True
        hash_list = "".join(self._hash_list)
        hashset_hash = hash_bytes(hash_list.encode("ascii"), self.config.algorithm)
        details_text = "".join(e.line + LINE_END for e in self._entries)
        logger.info(
            "assembled proofset: %d entries, algorithm %s",
            len(self._entries),
            self.config.algorithm.value,
        )
        return ProofsetResult(
            hashset_hash=hashset_hash,
            hash_list=hash_list,
            details_text=details_text,
            entries=tuple(self._entries),
            algorithm=self.config.algorithm,
        )


def create_proofset(
    files: Iterable[SourceFileEntry], config: ProofsetConfig
) -> ProofsetResult:
    """Build a proofset from files already in canonical order."""
    assembler = ProofsetAssembler(config)
    for source in files:
        assembler.add(source)
    return assembler.finish()


async def create_proofset_async(
    files: AsyncIterable[SourceFileEntry], config: ProofsetConfig
) -> ProofsetResult:
    """Same as ``create_proofset`` for an async source of files.

    Files are still consumed strictly in order; each one is folded into
    the chain before the next is awaited.
    """
    assembler = ProofsetAssembler(config)
    async for source in files:
        assembler.add(source)
    return assembler.finish()
