# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for rename hints."""

from sigdiff.diff import diff_signatures
from sigdiff.model import FunctionSignature, SignatureSet, VariableSignature
from sigdiff.rename_hints import find_rename_hints


def test_rename_001_similar_added_key_is_suggested() -> None:
    old_set: SignatureSet = {"fetchUser": FunctionSignature(name="fetchUser")}
    new_set: SignatureSet = {"fetchUsers": FunctionSignature(name="fetchUsers")}

    hints = find_rename_hints(diff_signatures(old_set, new_set), old_set, new_set)

    assert hints == {"fetchUser": "fetchUsers"}


def test_rename_002_different_symbol_kind_is_not_suggested() -> None:
    old_set: SignatureSet = {"fetchUser": FunctionSignature(name="fetchUser")}
    new_set: SignatureSet = {"fetchUsers": VariableSignature(name="fetchUsers", type="number")}

    assert find_rename_hints(diff_signatures(old_set, new_set), old_set, new_set) == {}


def test_rename_003_threshold_filters_dissimilar_names() -> None:
    old_set: SignatureSet = {"connect": FunctionSignature(name="connect")}
    new_set: SignatureSet = {"open": FunctionSignature(name="open")}
    records = diff_signatures(old_set, new_set)

    assert find_rename_hints(records, old_set, new_set) == {}
    assert find_rename_hints(records, old_set, new_set, threshold=0.0) == {"connect": "open"}


def test_rename_004_best_ratio_wins() -> None:
    old_set: SignatureSet = {"parseConfig": FunctionSignature(name="parseConfig")}
    new_set: SignatureSet = {
        "parseConfigs": FunctionSignature(name="parseConfigs"),
        "parseConfig2": FunctionSignature(name="parseConfig2"),
        "parseConf": FunctionSignature(name="parseConf"),
    }

    hints = find_rename_hints(diff_signatures(old_set, new_set), old_set, new_set)

    assert hints == {"parseConfig": "parseConfigs"}


def test_rename_005_keys_present_in_both_revisions_are_not_candidates() -> None:
    old_set: SignatureSet = {
        "load": FunctionSignature(name="load"),
        "loads": FunctionSignature(name="loads"),
    }
    new_set: SignatureSet = {"loads": FunctionSignature(name="loads")}

    assert find_rename_hints(diff_signatures(old_set, new_set), old_set, new_set) == {}
