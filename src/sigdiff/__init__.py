# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Breaking API change detection over two revisions of a source file."""

from sigdiff.analyzer import AnalyzerError, ExtractionError, Extractor, FileChange
from sigdiff.diff import ChangeRecord, diff_signatures
from sigdiff.findings import Finding, FindingSynthesizer
from sigdiff.registry import ExtractorRegistry
from sigdiff.scanner import BreakingChangeScanner, ScanResult

__all__ = [
    "AnalyzerError",
    "BreakingChangeScanner",
    "ChangeRecord",
    "ExtractionError",
    "Extractor",
    "ExtractorRegistry",
    "FileChange",
    "Finding",
    "FindingSynthesizer",
    "ScanResult",
    "diff_signatures",
]
