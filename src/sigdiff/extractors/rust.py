# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Rust signature extractor."""

import logging
import re
from dataclasses import dataclass

from sigdiff.model import (
    EnumMember,
    EnumSignature,
    FunctionSignature,
    InterfaceSignature,
    Parameter,
    Property,
    SignatureSet,
    TypeAliasSignature,
    TypeSignature,
    VariableSignature,
)
from sigdiff.normalizer import (
    blank_nested_blocks,
    collapse_whitespace,
    count_type_parameters,
    is_receiver_text,
    read_group,
    skip_whitespace,
    split_parameters,
    strip_c_comments,
)

logger = logging.getLogger(__name__)

UNIT_TYPE = "()"

_QUALIFIERS = r"(?P<qualifiers>(?:(?:const|async|unsafe|default)\s+|extern\s+(?:\"[^\"]*\"\s+)?)*)"
_PUB_FN_PATTERN = re.compile(r"\bpub\s+" + _QUALIFIERS + r"fn\s+(?P<name>[A-Za-z_]\w*)")
_TRAIT_FN_PATTERN = re.compile(r"(?<![\w.])" + _QUALIFIERS + r"fn\s+(?P<name>[A-Za-z_]\w*)")
_STRUCT_PATTERN = re.compile(r"\bpub\s+struct\s+(?P<name>[A-Za-z_]\w*)")
_ENUM_PATTERN = re.compile(r"\bpub\s+enum\s+(?P<name>[A-Za-z_]\w*)")
_TRAIT_PATTERN = re.compile(r"\bpub\s+(?:unsafe\s+)?(?:auto\s+)?trait\s+(?P<name>[A-Za-z_]\w*)")
_TYPE_ALIAS_PATTERN = re.compile(r"\bpub\s+type\s+(?P<name>[A-Za-z_]\w*)")
_CONSTANT_PATTERN = re.compile(
    r"\bpub\s+(?:const|static(?:\s+mut)?)\s+(?P<name>[A-Za-z_]\w*)\s*:\s*(?P<type>[^=;]+)"
)
_ASSOCIATED_TYPE_PATTERN = re.compile(
    r"(?<![\w.])type\s+(?P<name>[A-Za-z_]\w*)\s*(?::\s*(?P<bounds>[^=;]+))?(?P<default>=[^;]*)?;"
)
_ATTRIBUTE_PATTERN = re.compile(r"#!?\[")
_LIFETIME_PATTERN = re.compile(r"'\w+\s*")
_PUB_PATTERN = re.compile(r"^pub\s+")
_WHERE_PATTERN = re.compile(r"(?<=\s)where\b")


@dataclass(frozen=True)
class _Header:
    generics: str | None
    parameters: str
    return_type: str
    end: int


def parse_parameters(text: str) -> tuple[Parameter, ...]:
    """Parse a Rust parameter list, marking ``self`` receivers.

    Args:
        text: Parameter list without parentheses.

    Returns:
        Parameters in declaration order.
    """
    parameters: list[Parameter] = []
    for segment in split_parameters(text):
        raw = collapse_whitespace(segment)
        if is_receiver_text(_LIFETIME_PATTERN.sub("", raw)):
            parameters.append(
                Parameter(
                    name="self",
                    type=raw,
                    is_receiver=True,
                    is_mutable="mut self" in raw,
                )
            )
            continue
        separator = _pattern_separator(raw)
        if separator == -1:
            parameters.append(Parameter(name="", type=raw))
            continue
        pattern = raw[:separator].strip()
        is_mutable = pattern.startswith("mut ")
        if is_mutable:
            pattern = pattern[4:].strip()
        parameters.append(
            Parameter(
                name=pattern,
                type=raw[separator + 1 :].strip(),
                is_mutable=is_mutable,
            )
        )
    return tuple(parameters)


def _pattern_separator(text: str) -> int:
    depth = 0
    for index, char in enumerate(text):
        if char in "([<":
            depth += 1
        elif char in ")]>":
            depth -= 1
        elif char == ":" and depth == 0:
            if text[index + 1 : index + 2] == ":" or text[index - 1 : index] == ":":
                continue
            return index
    return -1


def strip_attributes(text: str) -> str:
    """Blank ``#[...]`` and ``#![...]`` attributes, keeping offsets."""
    chars = list(text)
    for match in _ATTRIBUTE_PATTERN.finditer(text):
        group = read_group(text, match.end() - 1)
        if group is None:
            continue
        for index in range(match.start(), group[1]):
            if chars[index] != "\n":
                chars[index] = " "
    return "".join(chars)


class RustExtractor:
    """Extract ``pub`` Rust items."""

    name = "rust"
    supported_extensions = (".rs",)
    symbol_prefix = "Public"

    def extract(self, source: str, file_path: str = "") -> SignatureSet:
        """Extract the public signature set of one Rust source revision.

        Args:
            source: Rust source text.
            file_path: Path used in log messages only.

        Returns:
            Signature set keyed by declared name.
        """
        text = strip_attributes(strip_c_comments(source))
        signatures: SignatureSet = {}

        for match in _PUB_FN_PATTERN.finditer(text):
            header = _read_header(text, match.end())
            if header is None:
                logger.debug(
                    f"Skipping unreadable Rust function (file_path={file_path} name={match.group('name')})"
                )
                continue
            signatures[match.group("name")] = _build_function(
                match.group("name"), match.group("qualifiers"), header, owner=None
            )

        for match in _STRUCT_PATTERN.finditer(text):
            symbol = _parse_struct(text, match.group("name"), match.end())
            if symbol is not None:
                signatures[symbol.name] = symbol

        for match in _ENUM_PATTERN.finditer(text):
            _, index = _read_generics(text, match.end())
            body_start = text.find("{", index)
            group = read_group(text, body_start) if body_start != -1 else None
            if group is None:
                continue
            signatures[match.group("name")] = EnumSignature(
                name=match.group("name"), members=_parse_variants(group[0])
            )

        for match in _TRAIT_PATTERN.finditer(text):
            symbol = _parse_trait(text, match.group("name"), match.end())
            if symbol is not None:
                signatures[symbol.name] = symbol

        for match in _TYPE_ALIAS_PATTERN.finditer(text):
            generics, index = _read_generics(text, match.end())
            index = skip_whitespace(text, index)
            if not text.startswith("=", index):
                continue
            end = text.find(";", index)
            if end == -1:
                continue
            signatures[match.group("name")] = TypeAliasSignature(
                name=match.group("name"),
                definition=collapse_whitespace(text[index + 1 : end]),
                type_parameter_count=count_type_parameters(generics),
            )

        for match in _CONSTANT_PATTERN.finditer(text):
            signatures[match.group("name")] = VariableSignature(
                name=match.group("name"), type=collapse_whitespace(match.group("type"))
            )
        return signatures


def _read_generics(text: str, index: int) -> tuple[str | None, int]:
    index = skip_whitespace(text, index)
    if text.startswith("<", index):
        group = read_group(text, index)
        if group is not None:
            return group[0], group[1]
    return None, index


def _read_header(text: str, index: int) -> _Header | None:
    generics, index = _read_generics(text, index)
    index = skip_whitespace(text, index)
    if not text.startswith("(", index):
        return None
    group = read_group(text, index)
    if group is None:
        return None
    parameters, index = group
    return_type = ""
    index = skip_whitespace(text, index)
    if text.startswith("->", index):
        start = index + 2
        index = start
        depth = 0
        while index < len(text):
            char = text[index]
            if char in "<([":
                depth += 1
            elif char in ")]" or (char == ">" and text[index - 1] != "-"):
                depth -= 1
            elif depth == 0 and (char in "{;" or _WHERE_PATTERN.match(text, index)):
                break
            index += 1
        return_type = collapse_whitespace(text[start:index])
    return _Header(generics=generics, parameters=parameters, return_type=return_type, end=index)


def _build_function(
    name: str, qualifiers: str, header: _Header, owner: str | None, required: bool = True
) -> FunctionSignature:
    return FunctionSignature(
        name=name,
        parameters=parse_parameters(header.parameters),
        return_type=header.return_type or UNIT_TYPE,
        is_async="async" in qualifiers.split(),
        type_parameter_count=count_type_parameters(header.generics),
        required=required,
        owner=owner,
    )


def _parse_struct(text: str, name: str, index: int) -> TypeSignature | None:
    generics, index = _read_generics(text, index)
    arity = count_type_parameters(generics)
    positions = [position for position in (text.find(c, index) for c in "{;(") if position != -1]
    if not positions:
        return None
    start = min(positions)
    members: dict[str, Property] = {}
    if text[start] == "(":
        group = read_group(text, start)
        if group is None:
            return None
        for position, field in enumerate(split_parameters(group[0])):
            field_text = collapse_whitespace(field)
            if _PUB_PATTERN.match(field_text):
                members[str(position)] = Property(
                    name=str(position), type=_PUB_PATTERN.sub("", field_text)
                )
    elif text[start] == "{":
        group = read_group(text, start)
        if group is None:
            return None
        for field in split_parameters(group[0]):
            field_text = collapse_whitespace(field)
            if not _PUB_PATTERN.match(field_text):
                continue
            field_name, _, field_type = _PUB_PATTERN.sub("", field_text).partition(":")
            if field_type:
                members[field_name.strip()] = Property(
                    name=field_name.strip(), type=field_type.strip()
                )
    return TypeSignature(name=name, kind="struct", members=members, type_parameter_count=arity)


def _parse_variants(body: str) -> dict[str, EnumMember]:
    members: dict[str, EnumMember] = {}
    for segment in split_parameters(body):
        variant = collapse_whitespace(segment)
        match = re.match(r"(?P<name>[A-Za-z_]\w*)\s*(?P<rest>.*)$", variant)
        if match is None:
            continue
        rest = match.group("rest").strip()
        if rest.startswith("="):
            rest = rest[1:].strip()
        members[match.group("name")] = EnumMember(name=match.group("name"), value=rest or None)
    return members


def _parse_trait(text: str, name: str, index: int) -> InterfaceSignature | None:
    generics, index = _read_generics(text, index)
    body_start = text.find("{", index)
    if body_start == -1:
        return None
    group = read_group(text, body_start)
    if group is None:
        return None
    declaration = text[index:body_start]
    declaration = declaration.split("where", 1)[0]
    extends: tuple[str, ...] = ()
    if ":" in declaration:
        bounds = declaration.split(":", 1)[1]
        extends = tuple(collapse_whitespace(b) for b in bounds.split("+") if b.strip())

    body = blank_nested_blocks(group[0])
    methods: dict[str, FunctionSignature] = {}
    for match in _TRAIT_FN_PATTERN.finditer(body):
        header = _read_header(body, match.end())
        if header is None:
            continue
        required = not body[skip_whitespace(body, header.end) :].startswith("{")
        methods[match.group("name")] = _build_function(
            match.group("name"), match.group("qualifiers"), header, owner=name, required=required
        )
    properties: dict[str, Property] = {}
    for match in _ASSOCIATED_TYPE_PATTERN.finditer(body):
        properties[match.group("name")] = Property(
            name=match.group("name"),
            type=collapse_whitespace(match.group("bounds") or "type"),
            optional=match.group("default") is not None,
        )
    return InterfaceSignature(
        name=name,
        kind="trait",
        properties=properties,
        methods=methods,
        extends=extends,
        type_parameter_count=count_type_parameters(generics),
    )
