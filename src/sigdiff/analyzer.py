# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Extractor interfaces and DTOs for signature extraction."""

from dataclasses import dataclass
from typing import Protocol

from sigdiff.model import SignatureSet

WILDCARD_EXTENSION = "*"


@dataclass(frozen=True)
class FileChange:
    """Represent one changed file with both revisions.

    Attributes:
        path: Repository-relative file path.
        old_content: Source text before the change; ``None`` for added files.
        new_content: Source text after the change; ``None`` for deleted files.
    """

    path: str
    old_content: str | None
    new_content: str | None


@dataclass(frozen=True)
class AnalyzerError:
    """Represent an extraction error for one file."""

    file_path: str
    message: str


class ExtractionError(ValueError):
    """Represent a failure to read one whole source revision."""


class Extractor(Protocol):
    """Language-specific signature extractor contract.

    Attributes:
        name: Unique registry name, e.g. ``"go"``.
        supported_extensions: Lowercase extensions including the dot, or ``"*"``.
        symbol_prefix: Visibility adjective used in finding titles, e.g.
            ``"Exported"``; empty when the language has none.
    """

    name: str
    supported_extensions: tuple[str, ...]
    symbol_prefix: str

    def extract(self, source: str, file_path: str = "") -> SignatureSet:
        """Extract the public signature set from one source revision."""
