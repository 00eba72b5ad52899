# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Fuzzy rename suggestions for removed symbols."""

import logging

import Levenshtein

from sigdiff.diff import ChangeRecord
from sigdiff.model import SignatureSet

logger = logging.getLogger(__name__)

DEFAULT_RENAME_THRESHOLD = 0.8


def find_rename_hints(
    records: list[ChangeRecord],
    old_set: SignatureSet,
    new_set: SignatureSet,
    threshold: float = DEFAULT_RENAME_THRESHOLD,
) -> dict[str, str]:
    """Suggest new-revision keys that likely replace removed keys.

    A candidate is a key present only in ``new_set`` whose symbol has the
    same display kind as the removed symbol. The candidate with the highest
    ``Levenshtein.ratio`` at or above ``threshold`` wins; ties keep the
    first candidate in ``new_set`` order.

    Args:
        records: Change records of one file.
        old_set: Signatures of the old revision.
        new_set: Signatures of the new revision.
        threshold: Minimum similarity ratio in ``[0, 1]``.

    Returns:
        Mapping from removed key to suggested key.
    """
    added = [key for key in new_set if key not in old_set]
    if not added:
        return {}

    hints: dict[str, str] = {}
    for record in records:
        if record.kind != "removed":
            continue
        old_symbol = old_set.get(record.key)
        if old_symbol is None:
            continue
        best_key: str | None = None
        best_ratio = threshold
        for candidate in added:
            if new_set[candidate].symbol_kind != old_symbol.symbol_kind:
                continue
            ratio = float(Levenshtein.ratio(record.key, candidate))
            if ratio < threshold:
                continue
            if best_key is None or ratio > best_ratio:
                best_key = candidate
                best_ratio = ratio
        if best_key is not None:
            logger.debug(
                f"Rename hint found (removed={record.key} candidate={best_key} ratio={best_ratio:.2f})"
            )
            hints[record.key] = best_key
    return hints
