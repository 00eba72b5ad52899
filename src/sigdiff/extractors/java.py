# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Java signature extractor."""

import logging
import re
from dataclasses import dataclass, replace

from sigdiff.model import (
    EnumMember,
    EnumSignature,
    FunctionSignature,
    InterfaceSignature,
    Parameter,
    Property,
    SignatureSet,
    TypeSignature,
)
from sigdiff.normalizer import (
    blank_nested_blocks,
    collapse_whitespace,
    count_type_parameters,
    read_group,
    skip_whitespace,
    split_parameters,
    strip_c_comments,
)

logger = logging.getLogger(__name__)

_MODIFIERS = frozenset(
    {
        "public",
        "protected",
        "private",
        "static",
        "final",
        "abstract",
        "synchronized",
        "native",
        "default",
        "strictfp",
        "transient",
        "volatile",
        "sealed",
        "non-sealed",
    }
)
_STATEMENT_KEYWORDS = frozenset({"return", "new", "throw", "if", "for", "while", "switch", "else"})
_TYPE_KEYWORDS = frozenset({"class", "interface", "enum", "record"})

_TYPE_PATTERN = re.compile(
    r"(?P<modifiers>(?:\b(?:public|protected|private|abstract|final|static|sealed|non-sealed|strictfp)\s+)*)"
    r"\b(?P<kind>class|interface|enum|record)\s+(?P<name>[A-Za-z_]\w*)"
)
_ANNOTATION_PATTERN = re.compile(r"@(?!interface\b)[\w.]+(?:\s*\([^()]*\))?")
_CALLABLE_PATTERN = re.compile(r"\b(?P<name>[A-Za-z_]\w*)\s*\(")
_EXTENDS_PATTERN = re.compile(r"\bextends\s+(?P<types>.+?)(?=\bimplements\b|\bpermits\b|$)", re.DOTALL)
_IMPLEMENTS_PATTERN = re.compile(r"\bimplements\s+(?P<types>.+?)(?=\bpermits\b|$)", re.DOTALL)
_ENUM_CONSTANT_PATTERN = re.compile(r"^(?P<name>[A-Za-z_]\w*)\s*(?P<rest>.*)$", re.DOTALL)


@dataclass
class _TypeHeader:
    kind: str
    name: str
    modifiers: frozenset[str]
    type_parameters: str | None = None
    components: str | None = None
    extends: tuple[str, ...] = ()
    implements: tuple[str, ...] = ()
    body: str = ""


@dataclass(frozen=True)
class _Declaration:
    name: str
    modifiers: frozenset[str]
    type_parameters: str | None
    return_type: str
    parameters: str


def parse_parameters(text: str) -> tuple[Parameter, ...]:
    """Parse a Java formal parameter list.

    Annotations and ``final`` are dropped and varargs ``T...`` becomes
    ``T[]``.

    Args:
        text: Parameter list without parentheses.

    Returns:
        Parameters in declaration order.
    """
    parameters: list[Parameter] = []
    for segment in split_parameters(_strip_annotations(text)):
        cleaned = re.sub(r"\bfinal\s+", "", segment).strip()
        parts = collapse_whitespace(cleaned).rsplit(" ", 1)
        if len(parts) == 2:
            param_type, name = parts
        else:
            param_type, name = parts[0], ""
        parameters.append(Parameter(name=name, type=param_type.replace("...", "[]").strip()))
    return tuple(parameters)


class JavaExtractor:
    """Extract public Java methods and type declarations."""

    name = "java"
    supported_extensions = (".java",)
    symbol_prefix = "Public"

    def extract(self, source: str, file_path: str = "") -> SignatureSet:
        """Extract public methods keyed by name and public types.

        Args:
            source: Java source text.
            file_path: Path used in log messages only.

        Returns:
            Signature set of methods and types.
        """
        text = strip_c_comments(source)
        signatures: SignatureSet = {}
        for header in self._type_headers(text, file_path):
            if header.kind == "interface":
                if "public" in header.modifiers:
                    signatures[header.name] = self._build_interface(header)
                continue
            if "public" not in header.modifiers:
                continue
            constructor, methods = self._scan_members(header)
            for method_name, method in methods.items():
                signatures[method_name] = method
            signatures[header.name] = self._build_type(header, constructor)
        return signatures

    def _type_headers(self, text: str, file_path: str) -> list[_TypeHeader]:
        headers: list[_TypeHeader] = []
        for match in _TYPE_PATTERN.finditer(text):
            body_start = _find_body_start(text, match.end())
            if body_start == -1:
                logger.debug(
                    f"Skipping Java type without body (file_path={file_path} name={match.group('name')})"
                )
                continue
            group = read_group(text, body_start)
            if group is None:
                continue
            header = _TypeHeader(
                kind=match.group("kind"),
                name=match.group("name"),
                modifiers=frozenset(match.group("modifiers").split()),
                body=group[0],
            )
            _parse_type_header(header, text[match.end() : body_start])
            headers.append(header)
        return headers

    def _scan_members(
        self, header: _TypeHeader
    ) -> tuple[tuple[Parameter, ...] | None, dict[str, FunctionSignature]]:
        body = blank_nested_blocks(header.body)
        if header.kind == "enum":
            separator = _top_level_semicolon(body)
            body = body[separator + 1 :] if separator != -1 else ""
        constructor: tuple[Parameter, ...] | None = None
        methods: dict[str, FunctionSignature] = {}
        for declaration in _declarations(body):
            if "public" not in declaration.modifiers:
                continue
            if not declaration.return_type:
                if declaration.name == header.name:
                    constructor = parse_parameters(declaration.parameters)
                continue
            methods[declaration.name] = _build_method(declaration, header.name)
        if header.kind == "record" and constructor is None and header.components is not None:
            constructor = parse_parameters(header.components)
        return constructor, methods

    def _build_type(
        self, header: _TypeHeader, constructor: tuple[Parameter, ...] | None
    ) -> TypeSignature | EnumSignature:
        if header.kind == "enum":
            return EnumSignature(name=header.name, members=_enum_constants(header.body))
        members = _public_fields(blank_nested_blocks(header.body))
        if header.kind == "record" and header.components is not None:
            for parameter in parse_parameters(header.components):
                members[parameter.name] = Property(name=parameter.name, type=parameter.type)
        return TypeSignature(
            name=header.name,
            kind="record" if header.kind == "record" else "class",
            members=members,
            constructor=constructor,
            bases=header.extends,
            implements=header.implements,
            type_parameter_count=count_type_parameters(header.type_parameters),
        )

    def _build_interface(self, header: _TypeHeader) -> InterfaceSignature:
        methods: dict[str, FunctionSignature] = {}
        for declaration in _declarations(blank_nested_blocks(header.body)):
            if "private" in declaration.modifiers or not declaration.return_type:
                continue
            method = _build_method(declaration, header.name)
            if declaration.modifiers & {"default", "static"}:
                method = replace(method, required=False)
            methods[declaration.name] = method
        return InterfaceSignature(
            name=header.name,
            methods=methods,
            extends=header.extends,
            type_parameter_count=count_type_parameters(header.type_parameters),
        )


def _strip_annotations(text: str) -> str:
    return _ANNOTATION_PATTERN.sub(" ", text)


def _find_body_start(text: str, index: int) -> int:
    depth = 0
    for position in range(index, len(text)):
        char = text[position]
        if char in "(<":
            depth += 1
        elif char in ")>":
            depth -= 1
        elif char == "{" and depth <= 0:
            return position
        elif char == ";" and depth <= 0:
            return -1
    return -1


def _parse_type_header(header: _TypeHeader, text: str) -> None:
    index = skip_whitespace(text, 0)
    if text.startswith("<", index):
        group = read_group(text, index)
        if group is not None:
            header.type_parameters, index = group
            index = skip_whitespace(text, index)
    if text.startswith("(", index):
        group = read_group(text, index)
        if group is not None:
            header.components, index = group
    rest = text[index:]
    extends = _EXTENDS_PATTERN.search(rest)
    if extends:
        header.extends = tuple(collapse_whitespace(t) for t in split_parameters(extends.group("types")))
    implements = _IMPLEMENTS_PATTERN.search(rest)
    if implements:
        header.implements = tuple(
            collapse_whitespace(t) for t in split_parameters(implements.group("types"))
        )


def _top_level_semicolon(body: str) -> int:
    depth = 0
    for index, char in enumerate(body):
        if char in "({":
            depth += 1
        elif char in ")}":
            depth -= 1
        elif char == ";" and depth == 0:
            return index
    return -1


def _declarations(body: str) -> list[_Declaration]:
    """Find method and constructor declarations in a blanked type body."""
    declarations: list[_Declaration] = []
    cleaned = _strip_annotations(body)
    for match in _CALLABLE_PATTERN.finditer(cleaned):
        boundary = max(cleaned.rfind(char, 0, match.start()) for char in ";{}")
        prefix = collapse_whitespace(cleaned[boundary + 1 : match.start()])
        if "=" in prefix or prefix.endswith((".", "@")):
            continue
        group = read_group(cleaned, match.end() - 1)
        if group is None:
            continue
        parameters, after = group
        follow = cleaned[skip_whitespace(cleaned, after) :]
        if not follow.startswith(("{", ";", "throws", "default")):
            continue
        declaration = _parse_prefix(match.group("name"), prefix, parameters)
        if declaration is not None:
            declarations.append(declaration)
    return declarations


def _parse_prefix(name: str, prefix: str, parameters: str) -> _Declaration | None:
    modifiers: set[str] = set()
    words = prefix.split(" ") if prefix else []
    while words and words[0] in _MODIFIERS:
        modifiers.add(words.pop(0))
    remainder = " ".join(words)
    type_parameters: str | None = None
    if remainder.startswith("<"):
        group = read_group(remainder, 0)
        if group is None:
            return None
        type_parameters, end = group
        remainder = remainder[end:].strip()
    if remainder.split(" ")[0] in _STATEMENT_KEYWORDS or name in _STATEMENT_KEYWORDS:
        return None
    return _Declaration(
        name=name,
        modifiers=frozenset(modifiers),
        type_parameters=type_parameters,
        return_type=remainder,
        parameters=parameters,
    )


def _build_method(declaration: _Declaration, owner: str) -> FunctionSignature:
    return FunctionSignature(
        name=declaration.name,
        parameters=parse_parameters(declaration.parameters),
        return_type=declaration.return_type,
        is_static="static" in declaration.modifiers,
        type_parameter_count=count_type_parameters(declaration.type_parameters),
        owner=owner,
    )


def _public_fields(body: str) -> dict[str, Property]:
    fields: dict[str, Property] = {}
    for statement in re.split(r"[;{}]", _strip_annotations(body)):
        declaration = statement.split("=", 1)[0]
        if "(" in declaration:
            continue
        words = collapse_whitespace(declaration).split(" ")
        modifiers: set[str] = set()
        while words and words[0] in _MODIFIERS:
            modifiers.add(words.pop(0))
        if "public" not in modifiers or len(words) < 2 or words[0] in _TYPE_KEYWORDS:
            continue
        declarators = split_parameters(" ".join(words))
        field_type, _, first_name = declarators[0].rpartition(" ")
        names = [first_name] + [d.split("=", 1)[0].strip() for d in declarators[1:]]
        for field_name in names:
            if field_name:
                fields[field_name] = Property(
                    name=field_name,
                    type=field_type.strip(),
                    readonly="final" in modifiers,
                )
    return fields


def _enum_constants(body: str) -> dict[str, EnumMember]:
    flattened = blank_nested_blocks(body)
    separator = _top_level_semicolon(flattened)
    section = flattened[:separator] if separator != -1 else flattened
    members: dict[str, EnumMember] = {}
    for segment in split_parameters(_strip_annotations(section)):
        match = _ENUM_CONSTANT_PATTERN.match(segment)
        if match is None:
            continue
        rest = match.group("rest").strip()
        value: str | None = None
        if rest.startswith("("):
            group = read_group(rest, 0)
            if group is not None:
                value = collapse_whitespace(group[0])
        members[match.group("name")] = EnumMember(name=match.group("name"), value=value)
    return members
