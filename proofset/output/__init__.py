"""Output subsystem: writes proofset details, hash lists and manifests."""

from proofset.output.writer import ProofsetWriter, WrittenProofset

__all__ = [
    "ProofsetWriter",
    "WrittenProofset",
]
