# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Swift signature extractor."""

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

UNIT_TYPE = "Void"

_DECLARATION_MODIFIERS = (
    r"(?:(?:static|class|final|override|mutating|nonmutating|convenience|required|dynamic"
    r"|nonisolated|indirect|lazy|weak|unowned|optional|@\w+)\s+)*"
)
_ACCESS = r"\b(?:public|open)\s+"
_FUNC_PATTERN = re.compile(
    r"(?P<before>" + _DECLARATION_MODIFIERS + r")" + _ACCESS
    + r"(?P<after>" + _DECLARATION_MODIFIERS + r")func\s+(?P<name>[A-Za-z_]\w*)"
)
_REQUIREMENT_FUNC_PATTERN = re.compile(
    r"(?P<modifiers>" + _DECLARATION_MODIFIERS + r")func\s+(?P<name>[A-Za-z_]\w*)"
)
_TYPE_PATTERN = re.compile(
    _ACCESS + r"(?:(?:final|indirect)\s+)?(?P<kind>class|struct|protocol|enum|actor)\s+"
    r"(?P<name>[A-Za-z_]\w*)"
)
_PROPERTY_PATTERN = re.compile(
    _ACCESS + _DECLARATION_MODIFIERS + r"(?:(?:private|fileprivate|internal)\(set\)\s+)?"
    r"(?P<kind>let|var)\s+(?P<name>[A-Za-z_]\w*)\s*:\s*(?P<type>[^={\n]+)"
)
_REQUIREMENT_PROPERTY_PATTERN = re.compile(
    r"(?P<modifiers>" + _DECLARATION_MODIFIERS + r")var\s+(?P<name>[A-Za-z_]\w*)\s*:\s*"
    r"(?P<type>[^{\n]+?)\s*\{(?P<accessors>[^}]*)\}"
)
_INIT_PATTERN = re.compile(_ACCESS + _DECLARATION_MODIFIERS + r"init[?!]?\s*(?=[<(])")
_TYPEALIAS_PATTERN = re.compile(_ACCESS + r"typealias\s+(?P<name>[A-Za-z_]\w*)")
_CASE_PATTERN = re.compile(r"^\s*(?:indirect\s+)?case\s+(?P<body>[^\n]+)", re.MULTILINE)
_ARROW_STOP_PATTERN = re.compile(r"\s(?:where)\b")


@dataclass(frozen=True)
class _Header:
    generics: str | None
    parameters: str
    effects: str
    return_type: str
    end: int


def parse_parameters(text: str) -> tuple[Parameter, ...]:
    """Parse a Swift parameter list with external labels.

    ``label name: Type`` keeps both, ``name: Type`` uses the name as its
    label and ``_ name: Type`` is unlabeled. A default value makes the
    parameter optional.

    Args:
        text: Parameter list without parentheses.

    Returns:
        Parameters in declaration order.
    """
    parameters: list[Parameter] = []
    for segment in split_parameters(text):
        declaration, has_default = _split_default(segment)
        name_part, colon, param_type = declaration.partition(":")
        if not colon:
            continue
        names = name_part.split()
        if not names:
            continue
        label = names[0]
        name = names[1] if len(names) > 1 else names[0]
        parameters.append(
            Parameter(
                name=name,
                type=collapse_whitespace(param_type),
                optional=has_default,
                label=label,
            )
        )
    return tuple(parameters)


def symbol_key(name: str, parameters: tuple[Parameter, ...]) -> str:
    """Build the ``name(label1:label2:)`` key used to tell overloads apart.

    Args:
        name: Function name.
        parameters: Parsed parameters.

    Returns:
        The bare name for zero parameters, otherwise the labelled key.
    """
    if not parameters:
        return name
    labels = ":".join(parameter.label or "_" for parameter in parameters)
    return f"{name}({labels}:)"


def _split_default(segment: str) -> tuple[str, bool]:
    depth = 0
    for index, char in enumerate(segment):
        if char in "([<{":
            depth += 1
        elif char in ")]}" or (char == ">" and segment[index - 1 : index] != "-"):
            depth -= 1
        elif char == "=" and depth == 0:
            return segment[:index].strip(), True
    return segment.strip(), False


class SwiftExtractor:
    """Extract public and open Swift declarations."""

    name = "swift"
    supported_extensions = (".swift",)
    symbol_prefix = "Public"

    def extract(self, source: str, file_path: str = "") -> SignatureSet:
        """Extract the public signature set of one Swift source revision.

        Args:
            source: Swift source text.
            file_path: Path used in log messages only.

        Returns:
            Signature set with functions keyed by label sequence and types
            keyed by name.
        """
        text = strip_c_comments(source)
        signatures: SignatureSet = {}

        for match in _FUNC_PATTERN.finditer(text):
            header = _read_header(text, match.end())
            if header is None:
                logger.debug(
                    f"Skipping unreadable Swift function (file_path={file_path} name={match.group('name')})"
                )
                continue
            modifiers = f"{match.group('before')} {match.group('after')}".split()
            function = _build_function(match.group("name"), header, modifiers, owner=None)
            signatures[symbol_key(function.name, function.parameters)] = function

        for match in _TYPE_PATTERN.finditer(text):
            symbol = self._parse_type(text, match.group("kind"), match.group("name"), match.end())
            if symbol is not None:
                signatures[symbol.name] = symbol

        for match in _TYPEALIAS_PATTERN.finditer(text):
            generics, index = _read_generics(text, match.end())
            index = skip_whitespace(text, index)
            if not text.startswith("=", index):
                continue
            end = text.find("\n", index)
            signatures[match.group("name")] = TypeAliasSignature(
                name=match.group("name"),
                definition=collapse_whitespace(text[index + 1 : end if end != -1 else len(text)]),
                type_parameter_count=count_type_parameters(generics),
            )
        return signatures

    def _parse_type(
        self, text: str, kind: str, name: str, index: int
    ) -> TypeSignature | InterfaceSignature | EnumSignature | None:
        generics, index = _read_generics(text, index)
        body_start = text.find("{", index)
        if body_start == -1:
            return None
        group = read_group(text, body_start)
        if group is None:
            return None
        inheritance = _inheritance(text[index:body_start])
        body = blank_nested_blocks(group[0])
        arity = count_type_parameters(generics)

        if kind == "protocol":
            return _parse_protocol(name, group[0], inheritance, arity)
        if kind == "enum":
            return EnumSignature(name=name, members=_parse_cases(body))

        members: dict[str, Property] = {}
        for match in _PROPERTY_PATTERN.finditer(body):
            members[match.group("name")] = Property(
                name=match.group("name"),
                type=collapse_whitespace(match.group("type")),
                readonly=match.group("kind") == "let",
            )
        constructor: tuple[Parameter, ...] | None = None
        init = _INIT_PATTERN.search(body)
        if init:
            header = _read_header(body, init.end())
            if header is not None:
                constructor = parse_parameters(header.parameters)
        is_class = kind in ("class", "actor")
        return TypeSignature(
            name=name,
            kind="class" if is_class else "struct",
            members=members,
            constructor=constructor,
            bases=inheritance[:1] if is_class else (),
            implements=inheritance[1:] if is_class else inheritance,
            type_parameter_count=arity,
        )


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
    line_end = text.find("\n", index)
    if line_end == -1:
        line_end = len(text)
    brace = text.find("{", index, line_end)
    tail = text[index : brace if brace != -1 else line_end]
    stop = _ARROW_STOP_PATTERN.search(tail)
    if stop:
        tail = tail[: stop.start()]
    effects, arrow, return_type = tail.partition("->")
    return _Header(
        generics=generics,
        parameters=parameters,
        effects=effects,
        return_type=collapse_whitespace(return_type) if arrow else "",
        end=index + len(tail),
    )


def _build_function(
    name: str, header: _Header, modifiers: list[str], owner: str | None, required: bool = True
) -> FunctionSignature:
    return FunctionSignature(
        name=name,
        parameters=parse_parameters(header.parameters),
        return_type=header.return_type or UNIT_TYPE,
        is_async="async" in header.effects.split(),
        is_static="static" in modifiers or "class" in modifiers,
        type_parameter_count=count_type_parameters(header.generics),
        required=required,
        owner=owner,
    )


def _inheritance(declaration: str) -> tuple[str, ...]:
    declaration = declaration.split(" where ", 1)[0]
    if ":" not in declaration:
        return ()
    clause = declaration.split(":", 1)[1]
    return tuple(collapse_whitespace(entry) for entry in split_parameters(clause))


def _parse_protocol(
    name: str, body: str, extends: tuple[str, ...], arity: int
) -> InterfaceSignature:
    methods: dict[str, FunctionSignature] = {}
    for match in _REQUIREMENT_FUNC_PATTERN.finditer(body):
        header = _read_header(body, match.end())
        if header is None:
            continue
        modifiers = match.group("modifiers").split()
        function = _build_function(
            match.group("name"),
            header,
            modifiers,
            owner=name,
            required="optional" not in modifiers,
        )
        methods[symbol_key(function.name, function.parameters)] = function
    properties: dict[str, Property] = {}
    for match in _REQUIREMENT_PROPERTY_PATTERN.finditer(body):
        properties[match.group("name")] = Property(
            name=match.group("name"),
            type=collapse_whitespace(match.group("type")),
            optional="optional" in match.group("modifiers").split(),
            readonly="set" not in match.group("accessors"),
        )
    return InterfaceSignature(
        name=name,
        kind="protocol",
        properties=properties,
        methods=methods,
        extends=extends,
        type_parameter_count=arity,
    )


def _parse_cases(body: str) -> dict[str, EnumMember]:
    members: dict[str, EnumMember] = {}
    for match in _CASE_PATTERN.finditer(body):
        for entry in split_parameters(match.group("body")):
            case = re.match(r"(?P<name>[A-Za-z_]\w*)\s*(?P<rest>.*)$", collapse_whitespace(entry))
            if case is None:
                continue
            rest = case.group("rest").strip()
            if rest.startswith("="):
                rest = rest[1:].strip()
            members[case.group("name")] = EnumMember(name=case.group("name"), value=rest or None)
    return members
