# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for finding synthesis."""

from sigdiff.diff import ChangeRecord
from sigdiff.findings import Finding, FindingSynthesizer, describe_change


def test_findings_001_removed_symbol_uses_prefix_label() -> None:
    records = [ChangeRecord(key="greet", kind="removed", symbol_kind="function")]

    findings = FindingSynthesizer(language="typescript", symbol_prefix="Exported").synthesize(
        records, file_path="src/api.ts"
    )

    assert len(findings) == 1
    finding = findings[0]
    assert finding.title == "Exported function 'greet' was removed"
    assert finding.description == (
        "The exported function 'greet' has been removed. "
        "This is a breaking change that may affect consumers."
    )
    assert finding.remediation == "Ensure all consumers of 'greet' are updated before deploying."
    assert finding.type == "BREAKING_API"
    assert finding.severity == "HIGH"
    assert finding.metadata == {
        "language": "typescript",
        "symbol": "greet",
        "symbolKind": "function",
        "changes": ["removed"],
    }


def test_findings_002_removed_symbol_without_prefix() -> None:
    records = [ChangeRecord(key="Point", kind="removed", symbol_kind="struct")]

    finding = FindingSynthesizer(language="cpp").synthesize(records, file_path="point.h")[0]

    assert finding.title == "Struct 'Point' was removed"


def test_findings_003_rename_hint_extends_remediation() -> None:
    records = [ChangeRecord(key="getUser", kind="removed", symbol_kind="function")]

    finding = FindingSynthesizer(language="typescript", symbol_prefix="Exported").synthesize(
        records, file_path="users.ts", rename_hints={"getUser": "getUsers"}
    )[0]

    assert finding.remediation.endswith("It may have been renamed to 'getUsers'.")
    assert finding.metadata["possibleRename"] == "getUsers"


def test_findings_004_changed_symbol_lists_every_delta() -> None:
    records = [
        ChangeRecord(
            key="Add",
            kind="param_count_changed",
            symbol_kind="function",
            before="2",
            after="3",
        ),
        ChangeRecord(
            key="Add",
            kind="return_type_changed",
            symbol_kind="function",
            before="int",
            after="int64",
        ),
    ]

    findings = FindingSynthesizer(language="go", symbol_prefix="Exported").synthesize(
        records, file_path="calc.go"
    )

    assert len(findings) == 1
    assert findings[0].title == "Breaking change in exported function 'Add'"
    assert findings[0].description == (
        "The signature of 'Add' has changed:\n"
        "- Parameter count changed from 2 to 3\n"
        "- Return type changed from 'int' to 'int64'"
    )
    assert findings[0].metadata["changes"] == ["param_count_changed", "return_type_changed"]


def test_findings_005_one_finding_per_key_in_record_order() -> None:
    records = [
        ChangeRecord(key="b", kind="removed", symbol_kind="function"),
        ChangeRecord(key="a", kind="type_changed", symbol_kind="variable", before="x", after="y"),
    ]

    findings = FindingSynthesizer(language="python").synthesize(records, file_path="m.py")

    assert [f.metadata["symbol"] for f in findings] == ["b", "a"]


def test_findings_006_method_scoped_deltas_are_prefixed() -> None:
    record = ChangeRecord(
        key="Store",
        kind="param_type_changed",
        symbol_kind="class",
        before="string",
        after="number",
        member="get",
        member_kind="method",
        subject="key",
        position=1,
    )
    removed = ChangeRecord(
        key="Store",
        kind="member_removed",
        symbol_kind="class",
        member="put",
        member_kind="method",
    )

    assert describe_change(record) == "Method 'get': Parameter 'key' type changed from 'string' to 'number'"
    assert describe_change(removed) == "Method 'put' was removed"


def test_findings_007_delta_texts() -> None:
    cases = [
        (
            ChangeRecord(key="f", kind="param_type_changed", symbol_kind="function", before="A", after="B", position=2),
            "Parameter 2 type changed from 'A' to 'B'",
        ),
        (
            ChangeRecord(key="f", kind="modifier_changed", symbol_kind="function", subject="async", before="sync", after="async"),
            "Function became async",
        ),
        (
            ChangeRecord(key="E", kind="member_value_changed", symbol_kind="enum", member="A", before="1", after=None),
            "Enum member 'A' value changed from '1' to none",
        ),
        (
            ChangeRecord(key="I", kind="base_changed", symbol_kind="interface", before="none", after="Base"),
            "Extended types changed from 'none' to 'Base'",
        ),
        (
            ChangeRecord(key="I", kind="member_removed", symbol_kind="interface", member="id", member_kind="member"),
            "Property 'id' was removed",
        ),
        (
            ChangeRecord(key="E", kind="const_modifier_changed", symbol_kind="enum", before="const", after="non-const"),
            "Const modifier removed",
        ),
        (
            ChangeRecord(key="C", kind="visibility_narrowed", symbol_kind="method", before="public", after="private"),
            "Visibility narrowed from public to private",
        ),
    ]

    for record, expected in cases:
        assert describe_change(record) == expected


def test_findings_008_serializes_external_field_names() -> None:
    finding = Finding(
        title="t",
        description="d",
        file_path="src/a.ts",
        remediation="r",
        metadata={"symbol": "a"},
    )

    assert finding.to_dict() == {
        "type": "BREAKING_API",
        "severity": "HIGH",
        "title": "t",
        "description": "d",
        "filePath": "src/a.ts",
        "remediation": "r",
        "metadata": {"symbol": "a"},
    }


def test_findings_009_no_records_no_findings() -> None:
    assert FindingSynthesizer(language="go").synthesize([], file_path="x.go") == []
