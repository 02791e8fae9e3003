"""Secret chain generation and detail item construction.

Each committed entry gets a secret derived from the seed password and
from the previous entry::

    secret[0] = H(seed_password)
    secret[i] = H(seed_password || secret[i-1] || details_hash[i-1])

The detail item for the entry is ``secret, modified time, content hash,
path`` joined by spaces, and its hash is ``details_hash[i]``. Because
every secret depends on the previous entry's output, the chain can only
be built front to back, one entry at a time. Revealing one entry's
secret discloses nothing about the others without the seed password.

The running state is a ``ChainState`` value threaded through
``advance()``. It holds nothing beyond the previous secret/hash pair.
"""

from __future__ import annotations

from dataclasses import dataclass

from proofset.chain.digest import HashAlgorithm, hash_string
from proofset.chain.models import DetailItem, DetailSpacing, ProofsetEntry


@dataclass(frozen=True)
class ChainState:
    """Position in the secret chain.

    A freshly seeded state has no ``details_hash``; its ``secret`` is used
    as-is for the first entry. After that, ``secret``/``details_hash`` are
    those of the most recent entry.
    """

    secret: str
    details_hash: str | None = None
    sequence_number: int = 0

    @property
    def is_seeded(self) -> bool:
        return self.details_hash is None


def seed_chain(seed_password: str, algorithm: HashAlgorithm) -> ChainState:
    """Start a chain: ``secret[0] = H(seed_password)``."""
    return ChainState(secret=hash_string(seed_password, algorithm))


def next_secret(state: ChainState, seed_password: str, algorithm: HashAlgorithm) -> str:
    """Secret for the entry that follows *state*."""
    if state.is_seeded:
        return state.secret
    return hash_string(seed_password + state.secret + state.details_hash, algorithm)


def build_detail_item(
    secret: str,
    modified_time_utc: str,
    content_hash: str,
    file_path: str,
    spacing: DetailSpacing = DetailSpacing.STANDARD,
) -> DetailItem:
    return DetailItem(
        secret=secret,
        modified_time_utc=modified_time_utc,
        content_hash=content_hash,
        file_path=file_path,
        spacing=spacing,
    )


def advance(
    state: ChainState,
    seed_password: str,
    algorithm: HashAlgorithm,
    modified_time_utc: str,
    content_hash: str,
    file_path: str,
    spacing: DetailSpacing = DetailSpacing.STANDARD,
) -> tuple[ChainState, ProofsetEntry]:
    """Commit one path and return the new chain state with the entry."""
    secret = next_secret(state, seed_password, algorithm)
    item = build_detail_item(secret, modified_time_utc, content_hash, file_path, spacing)
    details_hash = hash_string(item.text, algorithm)
    entry = ProofsetEntry(
        details_hash=details_hash,
        item=item,
        sequence_number=state.sequence_number,
    )
    return (
        ChainState(
            secret=secret,
            details_hash=details_hash,
            sequence_number=state.sequence_number + 1,
        ),
        entry,
    )
