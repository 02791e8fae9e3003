"""Error taxonomy for proofset parsing and format detection.

Verification *failures* (a hash that does not match) are never raised;
they come back as result records. These exceptions cover input that cannot
be interpreted at all.
"""

from __future__ import annotations


class ProofsetError(ValueError):
    """Base class for malformed proofset input."""

    def __init__(self, message: str, value: str | None = None) -> None:
        self.value = value
        super().__init__(message)


class InvalidHashLength(ProofsetError):
    """A hex digest whose length maps to no supported algorithm."""

    def __init__(self, value: str) -> None:
        super().__init__(
            f"Cannot infer algorithm from hash length {len(value)} "
            f"(expected 64 or 128 hex characters)",
            value,
        )


class MalformedLine(ProofsetError):
    """A detail line without the ``": "`` separator."""

    def __init__(self, value: str) -> None:
        super().__init__('Invalid detail line format: missing ": " separator', value)


class MalformedDetailItem(ProofsetError):
    """A detail item with fewer than four space-delimited fields."""

    def __init__(self, value: str, field_count: int) -> None:
        self.field_count = field_count
        super().__init__(
            f"Invalid detail item: expected at least 4 fields, got {field_count}",
            value,
        )


class EmptyPath(ProofsetError):
    """A detail item whose path field is blank."""

    def __init__(self, value: str) -> None:
        super().__init__("Invalid detail item: file path is empty", value)


class InvalidHashListFormat(ProofsetError):
    """A hash list line that is not a bare hex digest."""

    def __init__(self, value: str, line_number: int) -> None:
        self.line_number = line_number
        super().__init__(
            f"Invalid file details hash list: line {line_number} is not a bare hash "
            f"(a details file may have been passed where a hash list was expected)",
            value,
        )


class UnsupportedFormat(ProofsetError):
    """Content matching neither the chained nor the simple proofset layout."""

    def __init__(self, value: str) -> None:
        super().__init__(
            "Unsupported proofset format: first line matches neither the chained "
            "detail-line layout nor the simple proofset layout",
            value,
        )
