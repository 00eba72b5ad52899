# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Gitignore-style path filtering for scans."""

import os
from collections.abc import Iterable

import pathspec


class IgnoreMatcher:
    """Match repository paths against gitignore patterns."""

    def __init__(self, spec: pathspec.GitIgnoreSpec) -> None:
        """Initialize matcher.

        Args:
            spec: Compiled gitignore matcher.
        """
        self._spec = spec

    @classmethod
    def from_patterns(cls, patterns: Iterable[str]) -> "IgnoreMatcher":
        """Build a matcher from gitignore pattern lines.

        Args:
            patterns: Pattern lines, e.g. ``["vendor/", "*.pb.go"]``.

        Returns:
            Configured ignore matcher.
        """
        return cls(spec=pathspec.GitIgnoreSpec.from_lines(list(patterns)))

    def matches(self, relative_path: str) -> bool:
        """Check whether a path should be skipped.

        Args:
            relative_path: Repository-relative path.

        Returns:
            True when the path matches an ignore pattern.
        """
        normalized = relative_path.replace(os.sep, "/").replace("\\", "/").strip("/")
        if not normalized:
            return False
        return bool(self._spec.match_file(normalized))
