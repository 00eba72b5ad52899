# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Extension-based dispatch registry for signature extractors."""

import logging
from pathlib import PurePosixPath

from sigdiff.analyzer import WILDCARD_EXTENSION, Extractor

logger = logging.getLogger(__name__)


class ExtractorRegistry:
    """Map file extensions to the extractors that claim them.

    Extractors are kept in registration order, so dispatch order is
    deterministic.
    """

    def __init__(self, extractors: list[Extractor] | None = None) -> None:
        self._extractors: dict[str, Extractor] = {}
        for extractor in extractors or ():
            self.register(extractor)

    def register(self, extractor: Extractor) -> None:
        """Register an extractor, overwriting one with the same name.

        Args:
            extractor: Extractor to register.
        """
        if extractor.name in self._extractors:
            logger.warning(f"Extractor already registered, overwriting (name={extractor.name})")
        self._extractors[extractor.name] = extractor
        logger.info(
            f"Registered extractor (name={extractor.name} "
            f"extensions={','.join(extractor.supported_extensions)})"
        )

    def unregister(self, name: str) -> bool:
        """Remove an extractor by name.

        Returns:
            True when an extractor was removed.
        """
        removed = self._extractors.pop(name, None) is not None
        if removed:
            logger.info(f"Unregistered extractor (name={name})")
        return removed

    def for_extension(self, file_path: str) -> list[Extractor]:
        """Return every extractor that claims the file's extension.

        Matching is case-insensitive on the final suffix. An extractor
        listing ``"*"`` matches every path.

        Args:
            file_path: Path or bare file name to dispatch.

        Returns:
            Matching extractors; empty for unsupported files.
        """
        extension = PurePosixPath(file_path.replace("\\", "/")).suffix.lower()
        matching = [
            extractor
            for extractor in self._extractors.values()
            if extension in extractor.supported_extensions
            or WILDCARD_EXTENSION in extractor.supported_extensions
        ]
        if not matching:
            logger.debug(f"No extractor for file (file_path={file_path} extension={extension})")
        return matching

    def get(self, name: str) -> Extractor | None:
        return self._extractors.get(name)

    def has(self, name: str) -> bool:
        return name in self._extractors

    def all(self) -> list[Extractor]:
        return list(self._extractors.values())

    def clear(self) -> None:
        self._extractors.clear()
        logger.info("Cleared all extractors")
