# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Per-file breaking change pipeline with isolation and optional parallelism."""

import concurrent.futures
import logging
from dataclasses import dataclass, field

from sigdiff.analyzer import AnalyzerError, ExtractionError, Extractor, FileChange
from sigdiff.config import ConfigError, ScanConfig
from sigdiff.diff import diff_signatures
from sigdiff.extractors import default_extractors
from sigdiff.findings import Finding, FindingSynthesizer
from sigdiff.ignore import IgnoreMatcher
from sigdiff.registry import ExtractorRegistry
from sigdiff.rename_hints import DEFAULT_RENAME_THRESHOLD, find_rename_hints

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanResult:
    """Represent the outcome of one scan.

    Attributes:
        findings: Findings in input file order.
        errors: Files skipped because a revision could not be read.
        files_analyzed: Files dispatched to at least one extractor.
        extractors_run: Sorted names of extractors that ran.
    """

    findings: list[Finding] = field(default_factory=list)
    errors: list[AnalyzerError] = field(default_factory=list)
    files_analyzed: int = 0
    extractors_run: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class FileOutcome:
    """Represent the analysis outcome of one file."""

    findings: list[Finding]
    errors: list[AnalyzerError]
    extractors: list[str]
    analyzed: bool


_SKIPPED = FileOutcome(findings=[], errors=[], extractors=[], analyzed=False)


class BreakingChangeScanner:
    """Run extraction, diffing and finding synthesis over changed files."""

    def __init__(
        self,
        registry: ExtractorRegistry | None = None,
        ignore_matcher: IgnoreMatcher | None = None,
        max_workers: int = 1,
        rename_threshold: float = DEFAULT_RENAME_THRESHOLD,
    ) -> None:
        """Initialize scanner.

        Args:
            registry: Extractor registry; all built-in extractors when omitted.
            ignore_matcher: Matcher for paths to skip before dispatch.
            max_workers: Worker threads used to analyze distinct files.
            rename_threshold: Minimum similarity for rename hints.

        Raises:
            ValueError: If ``max_workers`` is not greater than zero.
        """
        if max_workers <= 0:
            raise ValueError("max_workers must be > 0")
        self._registry = registry if registry is not None else ExtractorRegistry(default_extractors())
        self._ignore_matcher = ignore_matcher
        self._max_workers = max_workers
        self._rename_threshold = rename_threshold

    @classmethod
    def from_config(cls, config: ScanConfig) -> "BreakingChangeScanner":
        """Build a scanner from merged scan settings.

        Args:
            config: Validated configuration.

        Returns:
            Configured scanner.

        Raises:
            ConfigError: If an enabled extractor name is unknown.
        """
        extractors = default_extractors()
        if config.enabled_extractors is not None:
            known = {extractor.name for extractor in extractors}
            unknown = sorted(set(config.enabled_extractors) - known)
            if unknown:
                raise ConfigError(f"Unknown extractors: {', '.join(unknown)}")
            extractors = [e for e in extractors if e.name in config.enabled_extractors]
        matcher = IgnoreMatcher.from_patterns(config.ignored_paths) if config.ignored_paths else None
        return cls(
            registry=ExtractorRegistry(extractors),
            ignore_matcher=matcher,
            max_workers=config.max_workers,
            rename_threshold=config.rename_threshold,
        )

    def scan(self, changes: list[FileChange]) -> ScanResult:
        """Analyze every changed file and aggregate the results.

        Files are analyzed independently; a failing file adds an
        ``AnalyzerError`` and the remaining files still run. Output order
        follows input order regardless of ``max_workers``.

        Args:
            changes: Changed files with both revisions.

        Returns:
            Aggregated scan result.
        """
        if self._max_workers == 1 or len(changes) <= 1:
            outcomes = [self.analyze_file(change) for change in changes]
        else:
            outcomes = [_SKIPPED] * len(changes)
            with concurrent.futures.ThreadPoolExecutor(max_workers=self._max_workers) as executor:
                future_to_index = {
                    executor.submit(self.analyze_file, change): index
                    for index, change in enumerate(changes)
                }
                for future in concurrent.futures.as_completed(future_to_index):
                    outcomes[future_to_index[future]] = future.result()

        findings: list[Finding] = []
        errors: list[AnalyzerError] = []
        extractors_run: set[str] = set()
        files_analyzed = 0
        for outcome in outcomes:
            findings.extend(outcome.findings)
            errors.extend(outcome.errors)
            extractors_run.update(outcome.extractors)
            files_analyzed += int(outcome.analyzed)
        logger.info(
            f"Scan completed (files={len(changes)} analyzed={files_analyzed} "
            f"findings={len(findings)} errors={len(errors)})"
        )
        return ScanResult(
            findings=findings,
            errors=errors,
            files_analyzed=files_analyzed,
            extractors_run=sorted(extractors_run),
        )

    def should_analyze(self, path: str) -> bool:
        """Return whether a path is neither ignored nor unsupported."""
        if self._ignore_matcher is not None and self._ignore_matcher.matches(path):
            return False
        return bool(self._registry.for_extension(path))

    def analyze_file(self, change: FileChange) -> FileOutcome:
        """Analyze one changed file with every matching extractor.

        Args:
            change: Changed file with both revisions.

        Returns:
            Findings, errors and extractor names for the file.
        """
        if change.old_content is None or change.new_content is None:
            logger.debug(f"Skipping file without both revisions (file_path={change.path})")
            return _SKIPPED
        if self._ignore_matcher is not None and self._ignore_matcher.matches(change.path):
            logger.debug(f"Skipping ignored file (file_path={change.path})")
            return _SKIPPED
        extractors = self._registry.for_extension(change.path)
        if not extractors:
            return _SKIPPED

        findings: list[Finding] = []
        errors: list[AnalyzerError] = []
        for extractor in extractors:
            try:
                findings.extend(self._run_extractor(extractor, change))
            except ExtractionError as exc:
                logger.warning(
                    f"Skipping file due to extraction failure (file_path={change.path} "
                    f"extractor={extractor.name} error={exc})"
                )
                errors.append(AnalyzerError(file_path=change.path, message=str(exc)))
        return FileOutcome(
            findings=findings,
            errors=errors,
            extractors=[extractor.name for extractor in extractors],
            analyzed=True,
        )

    def _run_extractor(self, extractor: Extractor, change: FileChange) -> list[Finding]:
        old_set = extractor.extract(change.old_content or "", change.path)
        new_set = extractor.extract(change.new_content or "", change.path)
        records = diff_signatures(old_set, new_set)
        if not records:
            return []
        hints = find_rename_hints(records, old_set, new_set, threshold=self._rename_threshold)
        synthesizer = FindingSynthesizer(
            language=extractor.name, symbol_prefix=extractor.symbol_prefix
        )
        return synthesizer.synthesize(records, file_path=change.path, rename_hints=hints)
