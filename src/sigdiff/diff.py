# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Structural diff engine over two signature sets."""

import logging
from dataclasses import dataclass
from typing import Literal

from sigdiff.model import (
    VISIBILITY_RANK,
    EnumSignature,
    FunctionSignature,
    InterfaceSignature,
    Parameter,
    Property,
    SignatureSet,
    Symbol,
    TypeAliasSignature,
    TypeSignature,
    VariableSignature,
)

logger = logging.getLogger(__name__)

ChangeKind = Literal[
    "removed",
    "required_params_added",
    "param_count_changed",
    "param_type_changed",
    "param_became_required",
    "param_renamed",
    "return_type_changed",
    "modifier_changed",
    "visibility_narrowed",
    "type_arity_changed",
    "member_removed",
    "member_type_changed",
    "constructor_changed",
    "base_changed",
    "new_required_member",
    "new_method",
    "member_value_changed",
    "const_modifier_changed",
    "type_changed",
    "definition_changed",
]


@dataclass(frozen=True)
class ChangeRecord:
    """Represent one classified structural difference for a symbol key.

    Attributes:
        key: Symbol key in the signature sets.
        kind: Change classification.
        symbol_kind: Display kind of the old symbol, e.g. ``"class"``.
        before: Human-readable old value, when the change has one.
        after: Human-readable new value, when the change has one.
        member: Member or method name inside the symbol, if scoped.
        member_kind: ``"member"``, ``"method"`` or ``"constructor"``.
        subject: Parameter, modifier or enum member name the change is about.
        position: 1-based parameter position for parameter changes.
    """

    key: str
    kind: ChangeKind
    symbol_kind: str
    before: str | None = None
    after: str | None = None
    member: str | None = None
    member_kind: str | None = None
    subject: str | None = None
    position: int | None = None


@dataclass(frozen=True)
class _Scope:
    """Carry the record fields shared by every change of one comparison."""

    key: str
    symbol_kind: str
    member: str | None = None
    member_kind: str | None = None

    def record(self, kind: ChangeKind, **fields: object) -> ChangeRecord:
        return ChangeRecord(
            key=self.key,
            kind=kind,
            symbol_kind=self.symbol_kind,
            member=self.member,
            member_kind=self.member_kind,
            **fields,  # type: ignore[arg-type]
        )


def diff_signatures(old_set: SignatureSet, new_set: SignatureSet) -> list[ChangeRecord]:
    """Compare two signature sets of one file.

    Keys are visited in ``old_set`` order. A key missing from ``new_set`` or
    whose symbol changed class is reported once as ``removed`` and not
    compared further.

    Args:
        old_set: Signatures of the old revision.
        new_set: Signatures of the new revision.

    Returns:
        Ordered change records; empty when nothing breaking changed.
    """
    records: list[ChangeRecord] = []
    for key, old_symbol in old_set.items():
        new_symbol = new_set.get(key)
        if new_symbol is None or type(new_symbol) is not type(old_symbol):
            records.append(
                ChangeRecord(key=key, kind="removed", symbol_kind=old_symbol.symbol_kind)
            )
            continue
        records.extend(_compare_symbol(key, old_symbol, new_symbol))
    logger.debug(
        f"Signature diff completed (old_keys={len(old_set)} new_keys={len(new_set)} changes={len(records)})"
    )
    return records


def _compare_symbol(key: str, old: Symbol, new: Symbol) -> list[ChangeRecord]:
    scope = _Scope(key=key, symbol_kind=old.symbol_kind)
    if isinstance(old, FunctionSignature) and isinstance(new, FunctionSignature):
        return _compare_functions(old, new, scope)
    if isinstance(old, TypeSignature) and isinstance(new, TypeSignature):
        return _compare_types(old, new, scope)
    if isinstance(old, InterfaceSignature) and isinstance(new, InterfaceSignature):
        return _compare_interfaces(old, new, scope)
    if isinstance(old, EnumSignature) and isinstance(new, EnumSignature):
        return _compare_enums(old, new, scope)
    if isinstance(old, VariableSignature) and isinstance(new, VariableSignature):
        return _compare_variables(old, new, scope)
    if isinstance(old, TypeAliasSignature) and isinstance(new, TypeAliasSignature):
        return _compare_type_aliases(old, new, scope)
    return []


def _compare_functions(
    old: FunctionSignature, new: FunctionSignature, scope: _Scope
) -> list[ChangeRecord]:
    """Compare two function signatures field by field.

    Receiver parameters are excluded from every parameter comparison.

    Args:
        old: Old signature.
        new: New signature.
        scope: Key and member context for emitted records.

    Returns:
        Change records in a fixed field order.
    """
    changes = _compare_parameters(old.parameters, new.parameters, scope)
    if old.return_type != new.return_type:
        changes.append(
            scope.record("return_type_changed", before=old.return_type, after=new.return_type)
        )
    if old.is_async != new.is_async:
        changes.append(
            scope.record(
                "modifier_changed",
                subject="async",
                before="async" if old.is_async else "sync",
                after="async" if new.is_async else "sync",
            )
        )
    if old.is_static != new.is_static:
        changes.append(
            scope.record(
                "modifier_changed",
                subject="static",
                before="static" if old.is_static else "instance",
                after="static" if new.is_static else "instance",
            )
        )
    if VISIBILITY_RANK[new.visibility] > VISIBILITY_RANK[old.visibility]:
        changes.append(
            scope.record("visibility_narrowed", before=old.visibility, after=new.visibility)
        )
    if old.type_parameter_count != new.type_parameter_count:
        changes.append(
            scope.record(
                "type_arity_changed",
                before=str(old.type_parameter_count),
                after=str(new.type_parameter_count),
            )
        )
    return changes


def _compare_parameters(
    old_parameters: tuple[Parameter, ...],
    new_parameters: tuple[Parameter, ...],
    scope: _Scope,
) -> list[ChangeRecord]:
    old_params = [p for p in old_parameters if not p.is_receiver]
    new_params = [p for p in new_parameters if not p.is_receiver]
    changes: list[ChangeRecord] = []

    old_required = sum(1 for p in old_params if not p.optional)
    new_required = sum(1 for p in new_params if not p.optional)
    if new_required > old_required:
        changes.append(
            scope.record(
                "required_params_added", before=str(old_required), after=str(new_required)
            )
        )
    if len(old_params) != len(new_params):
        changes.append(
            scope.record(
                "param_count_changed", before=str(len(old_params)), after=str(len(new_params))
            )
        )

    for index, (old_param, new_param) in enumerate(zip(old_params, new_params), start=1):
        if old_param.type != new_param.type:
            changes.append(
                scope.record(
                    "param_type_changed",
                    subject=old_param.name,
                    position=index,
                    before=old_param.type,
                    after=new_param.type,
                )
            )
        if old_param.optional and not new_param.optional:
            changes.append(
                scope.record(
                    "param_became_required",
                    subject=old_param.name,
                    position=index,
                    before="optional",
                    after="required",
                )
            )
        if old_param.keyword and new_param.keyword and old_param.name != new_param.name:
            changes.append(
                scope.record(
                    "param_renamed",
                    subject=old_param.name,
                    position=index,
                    before=old_param.name,
                    after=new_param.name,
                )
            )
    return changes


def _compare_types(old: TypeSignature, new: TypeSignature, scope: _Scope) -> list[ChangeRecord]:
    changes = _compare_members(old.members, new.members, scope)
    changes.extend(_compare_methods(old.methods, new.methods, scope))

    if old.constructor is not None:
        new_constructor = new.constructor or ()
        constructor_scope = _Scope(
            key=scope.key,
            symbol_kind=scope.symbol_kind,
            member="constructor",
            member_kind="constructor",
        )
        if _compare_parameters(old.constructor, new_constructor, constructor_scope):
            changes.append(
                constructor_scope.record(
                    "constructor_changed",
                    before=render_parameters(old.constructor),
                    after=render_parameters(new_constructor),
                )
            )

    if old.bases != new.bases:
        changes.append(
            scope.record(
                "base_changed",
                before=", ".join(old.bases) or "none",
                after=", ".join(new.bases) or "none",
            )
        )
    return changes


def _compare_interfaces(
    old: InterfaceSignature, new: InterfaceSignature, scope: _Scope
) -> list[ChangeRecord]:
    changes = _compare_members(old.properties, new.properties, scope)
    for name, new_property in new.properties.items():
        if name not in old.properties and not new_property.optional:
            changes.append(
                _Scope(scope.key, scope.symbol_kind, name, "member").record(
                    "new_required_member", after=new_property.type
                )
            )

    changes.extend(_compare_methods(old.methods, new.methods, scope))
    for name, new_method in new.methods.items():
        if name not in old.methods and new_method.required:
            changes.append(
                _Scope(scope.key, scope.symbol_kind, name, "method").record(
                    "new_method", after=render_function(new_method)
                )
            )

    if old.extends != new.extends:
        changes.append(
            scope.record(
                "base_changed",
                before=", ".join(old.extends) or "none",
                after=", ".join(new.extends) or "none",
            )
        )
    return changes


def _compare_members(
    old_members: dict[str, Property], new_members: dict[str, Property], scope: _Scope
) -> list[ChangeRecord]:
    changes: list[ChangeRecord] = []
    for name, old_member in old_members.items():
        member_scope = _Scope(scope.key, scope.symbol_kind, name, "member")
        new_member = new_members.get(name)
        if new_member is None:
            changes.append(member_scope.record("member_removed", before=old_member.type))
        elif old_member.type != new_member.type:
            changes.append(
                member_scope.record(
                    "member_type_changed", before=old_member.type, after=new_member.type
                )
            )
    return changes


def _compare_methods(
    old_methods: dict[str, FunctionSignature],
    new_methods: dict[str, FunctionSignature],
    scope: _Scope,
) -> list[ChangeRecord]:
    changes: list[ChangeRecord] = []
    for name, old_method in old_methods.items():
        method_scope = _Scope(scope.key, scope.symbol_kind, name, "method")
        new_method = new_methods.get(name)
        if new_method is None:
            changes.append(
                method_scope.record("member_removed", before=render_function(old_method))
            )
            continue
        changes.extend(_compare_functions(old_method, new_method, method_scope))
    return changes


def _compare_enums(old: EnumSignature, new: EnumSignature, scope: _Scope) -> list[ChangeRecord]:
    changes: list[ChangeRecord] = []
    for name, old_member in old.members.items():
        new_member = new.members.get(name)
        member_scope = _Scope(scope.key, scope.symbol_kind, name, "member")
        if new_member is None:
            changes.append(member_scope.record("member_removed", before=old_member.value))
        elif old_member.value != new_member.value:
            changes.append(
                member_scope.record(
                    "member_value_changed",
                    subject=name,
                    before=old_member.value,
                    after=new_member.value,
                )
            )
    if old.is_const != new.is_const:
        changes.append(
            scope.record(
                "const_modifier_changed",
                before="const" if old.is_const else "non-const",
                after="const" if new.is_const else "non-const",
            )
        )
    return changes


def _compare_variables(
    old: VariableSignature, new: VariableSignature, scope: _Scope
) -> list[ChangeRecord]:
    if old.function is not None and new.function is not None:
        return _compare_functions(old.function, new.function, scope)
    old_text = render_function(old.function) if old.function else old.type
    new_text = render_function(new.function) if new.function else new.type
    if old_text != new_text:
        return [scope.record("type_changed", before=old_text, after=new_text)]
    return []


def _compare_type_aliases(
    old: TypeAliasSignature, new: TypeAliasSignature, scope: _Scope
) -> list[ChangeRecord]:
    changes: list[ChangeRecord] = []
    if old.definition != new.definition:
        changes.append(
            scope.record("definition_changed", before=old.definition, after=new.definition)
        )
    if old.type_parameter_count != new.type_parameter_count:
        changes.append(
            scope.record(
                "type_arity_changed",
                before=str(old.type_parameter_count),
                after=str(new.type_parameter_count),
            )
        )
    return changes


def render_parameters(parameters: tuple[Parameter, ...]) -> str:
    """Render parameters as a compact ``(name: type, ...)`` list.

    Args:
        parameters: Parameters to render; receivers are omitted.

    Returns:
        Parenthesized parameter text.
    """
    parts: list[str] = []
    for parameter in parameters:
        if parameter.is_receiver:
            continue
        marker = "?" if parameter.optional else ""
        if parameter.name and parameter.type:
            parts.append(f"{parameter.name}{marker}: {parameter.type}")
        else:
            parts.append(f"{parameter.name or parameter.type}{marker}")
    return f"({', '.join(parts)})"


def render_function(signature: FunctionSignature) -> str:
    """Render a function signature as ``name(params) -> return``."""
    rendered = f"{signature.name}{render_parameters(signature.parameters)}"
    if signature.return_type:
        rendered = f"{rendered} -> {signature.return_type}"
    return rendered
