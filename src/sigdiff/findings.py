# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Finding synthesis from structural change records."""

import logging
from dataclasses import dataclass, field

from sigdiff.diff import ChangeRecord

logger = logging.getLogger(__name__)

FINDING_TYPE = "BREAKING_API"
FINDING_SEVERITY = "HIGH"

_INTERFACE_KINDS = frozenset({"interface", "trait", "protocol"})


@dataclass(frozen=True)
class Finding:
    """Represent one reported breaking change for one symbol.

    Attributes:
        title: One-line summary.
        description: Summary sentence followed by one bullet per delta.
        file_path: Repository-relative path of the changed file.
        remediation: Suggested follow-up for consumers.
        metadata: ``language``, ``symbol``, ``symbolKind``, ``changes`` and,
            when a rename was suggested, ``possibleRename``.
        type: Finding category, always ``"BREAKING_API"``.
        severity: Finding severity, always ``"HIGH"``.
    """

    title: str
    description: str
    file_path: str
    remediation: str
    metadata: dict[str, object] = field(default_factory=dict)
    type: str = FINDING_TYPE
    severity: str = FINDING_SEVERITY

    def to_dict(self) -> dict[str, object]:
        """Serialize with the external field names."""
        return {
            "type": self.type,
            "severity": self.severity,
            "title": self.title,
            "description": self.description,
            "filePath": self.file_path,
            "remediation": self.remediation,
            "metadata": dict(self.metadata),
        }


class FindingSynthesizer:
    """Turn the change records of one file into findings."""

    def __init__(self, language: str, symbol_prefix: str = "") -> None:
        """Initialize synthesizer.

        Args:
            language: Extractor name recorded in finding metadata.
            symbol_prefix: Visibility adjective for titles, e.g. ``"Exported"``.
        """
        self._language = language
        self._prefix = symbol_prefix

    def synthesize(
        self,
        records: list[ChangeRecord],
        file_path: str,
        rename_hints: dict[str, str] | None = None,
    ) -> list[Finding]:
        """Build one finding per symbol key, in record order.

        Args:
            records: Change records of one file from ``diff_signatures``.
            file_path: Path reported on every finding.
            rename_hints: Optional removed-key to new-key suggestions.

        Returns:
            Findings; empty when ``records`` is empty.
        """
        hints = rename_hints or {}
        grouped: dict[str, list[ChangeRecord]] = {}
        for record in records:
            grouped.setdefault(record.key, []).append(record)

        findings: list[Finding] = []
        for key, key_records in grouped.items():
            if any(record.kind == "removed" for record in key_records):
                findings.append(
                    self._removed_finding(key, key_records[0], file_path, hints.get(key))
                )
            else:
                findings.append(self._changed_finding(key, key_records, file_path))
        logger.debug(
            f"Findings synthesized (file_path={file_path} records={len(records)} findings={len(findings)})"
        )
        return findings

    def _removed_finding(
        self, key: str, record: ChangeRecord, file_path: str, hint: str | None
    ) -> Finding:
        label = self._label(record.symbol_kind)
        remediation = f"Ensure all consumers of '{key}' are updated before deploying."
        metadata = self._metadata(key, record.symbol_kind, [record])
        if hint is not None:
            remediation = f"{remediation} It may have been renamed to '{hint}'."
            metadata["possibleRename"] = hint
        return Finding(
            title=f"{_capitalize(label)} '{key}' was removed",
            description=(
                f"The {label} '{key}' has been removed. "
                "This is a breaking change that may affect consumers."
            ),
            file_path=file_path,
            remediation=remediation,
            metadata=metadata,
        )

    def _changed_finding(
        self, key: str, records: list[ChangeRecord], file_path: str
    ) -> Finding:
        symbol_kind = records[0].symbol_kind
        lines = [f"- {describe_change(record)}" for record in records]
        return Finding(
            title=f"Breaking change in {self._label(symbol_kind)} '{key}'",
            description=f"The signature of '{key}' has changed:\n" + "\n".join(lines),
            file_path=file_path,
            remediation=f"Review all callers of '{key}' and update them to match the new signature.",
            metadata=self._metadata(key, symbol_kind, records),
        )

    def _label(self, symbol_kind: str) -> str:
        if self._prefix:
            return f"{self._prefix.lower()} {symbol_kind}"
        return symbol_kind

    def _metadata(
        self, key: str, symbol_kind: str, records: list[ChangeRecord]
    ) -> dict[str, object]:
        return {
            "language": self._language,
            "symbol": key,
            "symbolKind": symbol_kind,
            "changes": [record.kind for record in records],
        }


def describe_change(record: ChangeRecord) -> str:
    """Render one change record as a single human-readable delta.

    Args:
        record: Change record to describe.

    Returns:
        Delta text without the leading bullet.
    """
    text = _describe(record)
    if record.member_kind == "method" and record.kind not in ("member_removed", "new_method"):
        return f"Method '{record.member}': {text}"
    return text


def _describe(record: ChangeRecord) -> str:
    kind = record.kind
    if kind == "required_params_added":
        return f"New required parameters added ({record.before} -> {record.after})"
    if kind == "param_count_changed":
        return f"Parameter count changed from {record.before} to {record.after}"
    if kind == "param_type_changed":
        return (
            f"{_parameter_label(record)} type changed from "
            f"{_quote(record.before)} to {_quote(record.after)}"
        )
    if kind == "param_became_required":
        return f"{_parameter_label(record)} changed from optional to required"
    if kind == "param_renamed":
        return f"{_parameter_label(record)} was renamed to {_quote(record.after)}"
    if kind == "return_type_changed":
        return f"Return type changed from {_quote(record.before)} to {_quote(record.after)}"
    if kind == "modifier_changed":
        return _describe_modifier(record)
    if kind == "visibility_narrowed":
        return f"Visibility narrowed from {record.before} to {record.after}"
    if kind == "type_arity_changed":
        return f"Type parameter count changed from {record.before} to {record.after}"
    if kind == "member_removed":
        return f"{_member_label(record)} '{record.member}' was removed"
    if kind == "member_type_changed":
        return (
            f"{_member_label(record)} '{record.member}' type changed from "
            f"{_quote(record.before)} to {_quote(record.after)}"
        )
    if kind == "constructor_changed":
        return f"Constructor signature changed: {record.before} -> {record.after}"
    if kind == "base_changed":
        noun = "Extended types" if record.symbol_kind in _INTERFACE_KINDS else "Base class"
        return f"{noun} changed from {_quote(record.before)} to {_quote(record.after)}"
    if kind == "new_required_member":
        return f"New required property '{record.member}' added"
    if kind == "new_method":
        return f"New method '{record.member}' added"
    if kind == "member_value_changed":
        return (
            f"Enum member '{record.member}' value changed from "
            f"{_quote(record.before)} to {_quote(record.after)}"
        )
    if kind == "const_modifier_changed":
        return "Const modifier added" if record.after == "const" else "Const modifier removed"
    if kind == "type_changed":
        return f"Type changed from {_quote(record.before)} to {_quote(record.after)}"
    if kind == "definition_changed":
        return f"Type definition changed from {_quote(record.before)} to {_quote(record.after)}"
    return _capitalize(kind.replace("_", " "))


def _describe_modifier(record: ChangeRecord) -> str:
    if record.subject == "async":
        return "Function became async" if record.after == "async" else "Function is no longer async"
    if record.subject == "static":
        return "Method became static" if record.after == "static" else "Method is no longer static"
    return f"Modifier '{record.subject}' changed from {record.before} to {record.after}"


def _parameter_label(record: ChangeRecord) -> str:
    if record.subject:
        return f"Parameter '{record.subject}'"
    return f"Parameter {record.position}"


def _member_label(record: ChangeRecord) -> str:
    if record.member_kind == "method":
        return "Method"
    if record.symbol_kind == "enum":
        return "Enum member"
    if record.symbol_kind in _INTERFACE_KINDS:
        return "Property"
    return "Member"


def _quote(value: str | None) -> str:
    return "none" if value is None else f"'{value}'"


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]
