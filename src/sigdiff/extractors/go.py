# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Go signature extractor."""

import logging
import re
from dataclasses import dataclass
from typing import Iterator

from sigdiff.model import (
    FunctionSignature,
    InterfaceSignature,
    Parameter,
    Property,
    SignatureSet,
    TypeAliasSignature,
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

UNIT_TYPE = "void"

_BUILTIN_TYPES = frozenset(
    {
        "any",
        "bool",
        "byte",
        "complex64",
        "complex128",
        "error",
        "float32",
        "float64",
        "int",
        "int8",
        "int16",
        "int32",
        "int64",
        "rune",
        "string",
        "uint",
        "uint8",
        "uint16",
        "uint32",
        "uint64",
        "uintptr",
    }
)
_TYPE_PREFIXES = ("*", "[]", "map[", "func(", "interface{", "chan ", "chan<-", "struct{", "...", "<-chan")
_TYPE_KEYWORDS = frozenset({"chan", "func", "map", "struct", "interface"})

_FUNC_PATTERN = re.compile(
    r"^func\s*(?:\((?P<receiver>[^()]*)\)\s*)?(?P<name>[A-Za-z_]\w*)\s*(?=[\[(])",
    re.MULTILINE,
)
_TYPE_PATTERN = re.compile(r"^type\s+(?P<name>[A-Za-z_]\w*)", re.MULTILINE)
_TYPE_GROUP_PATTERN = re.compile(r"^type\s*\(", re.MULTILINE)
_GROUP_ENTRY_PATTERN = re.compile(r"^\s*(?P<name>[A-Za-z_]\w*)", re.MULTILINE)
_TYPE_PARAMS_PATTERN = re.compile(r"^\s*[A-Za-z_]\w*\s*(,|\s+\S)")
_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_]\w*$")
_NAMED_FIELD_PATTERN = re.compile(
    r"^(?P<names>[A-Za-z_]\w*(?:\s*,\s*[A-Za-z_]\w*)*)\s+(?P<type>[^`\"]+?)\s*(?:[`\"].*)?$"
)
_EMBEDDED_FIELD_PATTERN = re.compile(
    r"^(?P<type>\*?(?:\w+\.)?(?P<name>[A-Za-z_]\w*)(?:\[.*\])?)\s*(?:[`\"].*)?$"
)
_INTERFACE_METHOD_PATTERN = re.compile(r"^(?P<name>[A-Za-z_]\w*)\s*(?=[\[(])")


@dataclass(frozen=True)
class _Header:
    type_parameters: str | None
    parameters: str
    return_type: str
    end: int


def looks_like_type(token: str) -> bool:
    """Check whether a bare parameter token reads as a Go type.

    Args:
        token: One whitespace-free parameter token.

    Returns:
        True for builtins, composite type prefixes, package-qualified names
        and identifiers starting with an uppercase letter.
    """
    if token in _BUILTIN_TYPES:
        return True
    if token.startswith(_TYPE_PREFIXES):
        return True
    if "." in token:
        return True
    return token[:1].isupper()


def parse_parameters(text: str) -> tuple[Parameter, ...]:
    """Parse a Go parameter list, propagating grouped types right to left.

    ``a, b int`` declares two ``int`` parameters. Segments are visited from
    the end and bare identifiers are back-filled with the last explicit type.

    Args:
        text: Parameter list text without parentheses.

    Returns:
        Parameters in declaration order.
    """
    segments = split_parameters(text)
    entries: list[tuple[str, str | None]] = []
    for segment in segments:
        head, _, tail = collapse_whitespace(segment).partition(" ")
        tail = tail.strip()
        if tail and _IDENTIFIER_PATTERN.match(head) and head not in _TYPE_KEYWORDS:
            entries.append((head, collapse_whitespace(tail)))
        else:
            entries.append((collapse_whitespace(segment), None))

    named = any(explicit is not None for _, explicit in entries)
    parameters: list[Parameter] = []
    last_type = ""
    for token, explicit in reversed(entries):
        if explicit is not None:
            last_type = explicit
            parameters.append(Parameter(name=token, type=explicit))
        elif not named and looks_like_type(token):
            last_type = token
            parameters.append(Parameter(name="", type=token))
        elif named:
            parameters.append(Parameter(name=token, type=last_type or token))
        else:
            parameters.append(Parameter(name="", type=last_type or token))
    parameters.reverse()
    return tuple(parameters)


class GoExtractor:
    """Extract exported Go functions, methods and type declarations."""

    name = "go"
    supported_extensions = (".go",)
    symbol_prefix = "Exported"

    def extract(self, source: str, file_path: str = "") -> SignatureSet:
        """Extract the exported signature set of one Go source revision.

        Args:
            source: Go source text.
            file_path: Path used in log messages only.

        Returns:
            Signature set keyed by name, with methods keyed ``Receiver.Method``.
        """
        text = strip_c_comments(source)
        signatures: SignatureSet = {}
        self._extract_functions(text, signatures)
        for name, index in self._type_declarations(text):
            if not name[:1].isupper():
                continue
            symbol = self._parse_type(text, name, index)
            if symbol is None:
                logger.debug(
                    f"Skipping unreadable Go type declaration (file_path={file_path} name={name})"
                )
                continue
            signatures[name] = symbol
        return signatures

    def _extract_functions(self, text: str, signatures: SignatureSet) -> None:
        for match in _FUNC_PATTERN.finditer(text):
            name = match.group("name")
            if not name[:1].isupper():
                continue
            header = _read_header(text, match.end())
            if header is None:
                continue
            receiver = match.group("receiver")
            owner = _receiver_type(receiver) if receiver is not None else None
            signature = FunctionSignature(
                name=name,
                parameters=parse_parameters(header.parameters),
                return_type=header.return_type or UNIT_TYPE,
                type_parameter_count=count_type_parameters(header.type_parameters),
                owner=owner,
            )
            key = f"{owner}.{name}" if owner else name
            signatures[key] = signature

    def _type_declarations(self, text: str) -> Iterator[tuple[str, int]]:
        for match in _TYPE_PATTERN.finditer(text):
            yield match.group("name"), match.end()
        for match in _TYPE_GROUP_PATTERN.finditer(text):
            group = read_group(text, match.end() - 1)
            if group is None:
                continue
            inner, _ = group
            offset = match.end()
            flattened = blank_nested_blocks(inner)
            for entry in _GROUP_ENTRY_PATTERN.finditer(flattened):
                yield entry.group("name"), offset + entry.end()

    def _parse_type(
        self, text: str, name: str, index: int
    ) -> TypeSignature | InterfaceSignature | TypeAliasSignature | None:
        type_parameters: str | None = None
        index = skip_whitespace(text, index)
        if text.startswith("[", index):
            group = read_group(text, index)
            if group is not None and _TYPE_PARAMS_PATTERN.match(group[0]):
                type_parameters, index = group
                index = skip_whitespace(text, index)
        arity = count_type_parameters(type_parameters)

        if text.startswith("=", index):
            definition = _rest_of_line(text, index + 1)
            return TypeAliasSignature(name=name, definition=definition, type_parameter_count=arity)
        if re.match(r"struct\s*\{", text[index:]):
            group = read_group(text, text.index("{", index))
            if group is None:
                return None
            return TypeSignature(
                name=name,
                kind="struct",
                members=_parse_struct_fields(group[0]),
                type_parameter_count=arity,
            )
        if re.match(r"interface\s*\{", text[index:]):
            group = read_group(text, text.index("{", index))
            if group is None:
                return None
            methods, extends = _parse_interface_body(group[0], name)
            return InterfaceSignature(
                name=name, methods=methods, extends=extends, type_parameter_count=arity
            )
        definition = _rest_of_line(text, index)
        if not definition:
            return None
        return TypeAliasSignature(name=name, definition=definition, type_parameter_count=arity)


def _read_header(text: str, index: int) -> _Header | None:
    type_parameters: str | None = None
    if text.startswith("[", index):
        group = read_group(text, index)
        if group is None:
            return None
        type_parameters, index = group
        index = skip_whitespace(text, index)
    if not text.startswith("(", index):
        return None
    group = read_group(text, index)
    if group is None:
        return None
    parameters, index = group
    return_type, end = _read_return_type(text, index)
    return _Header(
        type_parameters=type_parameters,
        parameters=parameters,
        return_type=return_type,
        end=end,
    )


def _read_return_type(text: str, index: int) -> tuple[str, int]:
    while index < len(text) and text[index] in " \t":
        index += 1
    if text.startswith("(", index):
        group = read_group(text, index)
        if group is not None:
            return f"({collapse_whitespace(group[0])})", group[1]
    start = index
    depth = 0
    while index < len(text):
        char = text[index]
        if char in "([":
            depth += 1
        elif char in ")]":
            depth -= 1
        elif char == "{" and depth == 0:
            preceding = text[start:index].rstrip()
            if not preceding.endswith(("struct", "interface")):
                break
            closing = read_group(text, index)
            if closing is None:
                break
            index = closing[1]
            continue
        elif char == "\n" and depth <= 0:
            break
        index += 1
    return collapse_whitespace(text[start:index]), index


def _receiver_type(receiver: str) -> str:
    receiver_type = receiver.strip().split()[-1] if receiver.strip() else ""
    receiver_type = receiver_type.lstrip("*")
    return receiver_type.split("[", 1)[0]


def _rest_of_line(text: str, index: int) -> str:
    end = text.find("\n", index)
    if end == -1:
        end = len(text)
    return collapse_whitespace(text[index:end])


def _parse_struct_fields(body: str) -> dict[str, Property]:
    fields: dict[str, Property] = {}
    for line in blank_nested_blocks(body).splitlines():
        stripped = line.strip().rstrip(";")
        if not stripped:
            continue
        named = _NAMED_FIELD_PATTERN.match(stripped)
        if named and named.group("names").split(",")[0].strip() not in _TYPE_KEYWORDS:
            field_type = collapse_whitespace(named.group("type"))
            for field_name in named.group("names").split(","):
                field_name = field_name.strip()
                if field_name[:1].isupper():
                    fields[field_name] = Property(name=field_name, type=field_type)
            continue
        embedded = _EMBEDDED_FIELD_PATTERN.match(stripped)
        if embedded and embedded.group("name")[:1].isupper():
            field_name = embedded.group("name")
            fields[field_name] = Property(name=field_name, type=embedded.group("type"))
    return fields


def _parse_interface_body(
    body: str, owner: str
) -> tuple[dict[str, FunctionSignature], tuple[str, ...]]:
    methods: dict[str, FunctionSignature] = {}
    extends: list[str] = []
    index = 0
    while index < len(body):
        line_end = body.find("\n", index)
        if line_end == -1:
            line_end = len(body)
        line = body[index:line_end].strip().rstrip(";")
        line_start = skip_whitespace(body, index)
        method = _INTERFACE_METHOD_PATTERN.match(line)
        if method:
            header = _read_header(body, line_start + method.end())
            if header is not None:
                name = method.group("name")
                if name[:1].isupper():
                    methods[name] = FunctionSignature(
                        name=name,
                        parameters=parse_parameters(header.parameters),
                        return_type=header.return_type or UNIT_TYPE,
                        type_parameter_count=count_type_parameters(header.type_parameters),
                        owner=owner,
                    )
                index = max(header.end, line_end)
                continue
        elif line and "|" not in line and not line.startswith("~"):
            extends.append(collapse_whitespace(line))
        index = line_end + 1
    return methods, tuple(extends)
