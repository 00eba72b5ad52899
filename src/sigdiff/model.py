# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Canonical signature model shared by every extractor."""

from dataclasses import dataclass, field
from typing import Literal, Union

Visibility = Literal["public", "protected", "private"]
TypeKind = Literal["class", "struct", "record"]
InterfaceKind = Literal["interface", "trait", "protocol"]

VISIBILITY_RANK: dict[str, int] = {"public": 0, "protected": 1, "private": 2}


@dataclass(frozen=True)
class Parameter:
    """Represent one declared parameter.

    Attributes:
        name: Declared parameter name; informational for comparison.
        type: Raw type text after light normalization.
        optional: Whether callers may omit the argument.
        is_receiver: Whether this is a ``self``/``this``-like receiver.
        is_mutable: Whether the binding is declared mutable (Rust ``mut``).
        label: External argument label (Swift); ``None`` elsewhere.
        keyword: Whether callers may pass the argument by name (Python).
    """

    name: str
    type: str
    optional: bool = False
    is_receiver: bool = False
    is_mutable: bool = False
    label: str | None = None
    keyword: bool = False


@dataclass(frozen=True)
class FunctionSignature:
    """Represent a function, method, or interface method requirement.

    Attributes:
        name: Declared name.
        parameters: Ordered parameters including any receiver.
        return_type: Raw return type, or the language unit sentinel.
        is_async: Whether the function is declared async.
        is_static: Whether the method is static or class-level.
        type_parameter_count: Number of generic type parameters.
        visibility: Declared member visibility.
        required: Whether implementers must provide it (interface members).
        owner: Receiver or enclosing type name, when known.
    """

    name: str
    parameters: tuple[Parameter, ...] = ()
    return_type: str = ""
    is_async: bool = False
    is_static: bool = False
    type_parameter_count: int = 0
    visibility: Visibility = "public"
    required: bool = True
    owner: str | None = None

    @property
    def symbol_kind(self) -> str:
        return "method" if self.owner else "function"


@dataclass(frozen=True)
class Property:
    """Represent a data member, field, or property requirement."""

    name: str
    type: str
    optional: bool = False
    readonly: bool = False


@dataclass(frozen=True)
class TypeSignature:
    """Represent a struct or class with its public surface.

    Attributes:
        name: Declared type name.
        kind: ``"class"``, ``"struct"`` or ``"record"``.
        members: Public data members by name.
        methods: Public methods by name.
        constructor: Constructor parameters; ``None`` when none is declared.
        bases: Base types in declaration order.
        implements: Implemented interfaces, informational.
        type_parameter_count: Number of generic type parameters.
    """

    name: str
    kind: TypeKind = "class"
    members: dict[str, Property] = field(default_factory=dict)
    methods: dict[str, FunctionSignature] = field(default_factory=dict)
    constructor: tuple[Parameter, ...] | None = None
    bases: tuple[str, ...] = ()
    implements: tuple[str, ...] = ()
    type_parameter_count: int = 0

    @property
    def symbol_kind(self) -> str:
        return self.kind


@dataclass(frozen=True)
class InterfaceSignature:
    """Represent an interface, trait, or protocol."""

    name: str
    kind: InterfaceKind = "interface"
    properties: dict[str, Property] = field(default_factory=dict)
    methods: dict[str, FunctionSignature] = field(default_factory=dict)
    extends: tuple[str, ...] = ()
    type_parameter_count: int = 0

    @property
    def symbol_kind(self) -> str:
        return self.kind


@dataclass(frozen=True)
class EnumMember:
    """Represent one enum member and its literal value or payload text."""

    name: str
    value: str | None = None


@dataclass(frozen=True)
class EnumSignature:
    """Represent an enum declaration."""

    name: str
    members: dict[str, EnumMember] = field(default_factory=dict)
    is_const: bool = False

    @property
    def symbol_kind(self) -> str:
        return "enum"


@dataclass(frozen=True)
class VariableSignature:
    """Represent an exported variable or constant.

    Attributes:
        name: Declared name.
        type: Raw declared type text.
        function: Signature of a function-literal initializer, if any.
    """

    name: str
    type: str
    function: FunctionSignature | None = None

    @property
    def symbol_kind(self) -> str:
        return "variable"


@dataclass(frozen=True)
class TypeAliasSignature:
    """Represent a type alias or named type definition."""

    name: str
    definition: str
    type_parameter_count: int = 0

    @property
    def symbol_kind(self) -> str:
        return "type alias"


Symbol = Union[
    FunctionSignature,
    TypeSignature,
    InterfaceSignature,
    EnumSignature,
    VariableSignature,
    TypeAliasSignature,
]

SignatureSet = dict[str, Symbol]
