# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""C and C++ signature extractor."""

import logging
import re

from sigdiff.model import (
    EnumMember,
    EnumSignature,
    FunctionSignature,
    Parameter,
    Property,
    SignatureSet,
    TypeSignature,
)
from sigdiff.normalizer import (
    blank_nested_blocks,
    collapse_whitespace,
    count_type_parameters,
    normalize_c_type,
    read_group,
    skip_whitespace,
    split_parameters,
    strip_c_comments,
)

logger = logging.getLogger(__name__)

_RESERVED_NAMES = frozenset(
    {
        "if", "else", "for", "while", "do", "switch", "case", "default",
        "break", "continue", "return", "goto", "sizeof", "typedef", "using",
        "struct", "class", "union", "enum", "namespace", "template",
        "public", "private", "protected", "virtual", "override", "final",
        "const", "static", "extern", "inline", "volatile", "register",
        "auto", "void", "int", "char", "short", "long", "float", "double",
        "signed", "unsigned", "bool", "true", "false", "nullptr", "NULL",
        "new", "delete", "this", "throw", "try", "catch", "operator",
        "decltype", "alignof", "alignas", "static_assert", "noexcept",
    }
)
_NON_TYPE_WORDS = frozenset(
    {
        "return", "else", "case", "default", "goto", "typedef", "using",
        "new", "delete", "throw", "sizeof", "namespace", "template", "class",
        "union", "enum", "public", "private", "protected", "operator",
        "static_assert", "do", "if", "while", "for", "switch",
    }
)
_STORAGE_SPECIFIERS = frozenset(
    {"extern", "static", "inline", "virtual", "explicit", "constexpr", "consteval", "friend", "mutable"}
)
_SKIPPED_MEMBER_WORDS = frozenset(
    {"using", "typedef", "friend", "static_assert", "enum", "class", "struct", "union", "template"}
)
_TYPE_ONLY_WORDS = frozenset({"", "const", "unsigned", "signed", "long", "short", "struct", "volatile"})
_TRAILERS = ("{", ";", "const", "noexcept", "override", "final", "=", "->", "throw", "&", "[[")

_PREPROCESSOR_PATTERN = re.compile(r"^[ \t]*#(?:[^\n]*\\\n)*[^\n]*", re.MULTILINE)
_NAMESPACE_PATTERN = re.compile(r'(?:\bnamespace(?:\s+[\w:]+)?|\bextern\s+"C(?:\+\+)?")\s*$')
_ATTRIBUTE_PATTERN = re.compile(r"\[\[.*?\]\]")
_CALLABLE_PATTERN = re.compile(r"(?P<name>~?[A-Za-z_]\w*)\s*\(")
_TYPE_PATTERN = re.compile(
    r"\b(?P<kind>class|struct)\s+(?:alignas\s*\([^)]*\)\s*)?(?P<name>[A-Za-z_]\w*)"
    r"(?:\s+final)?\s*(?::(?P<bases>[^{;]*))?\{"
)
_ENUM_PATTERN = re.compile(
    r"\benum\s+(?:class\s+|struct\s+)?(?P<name>[A-Za-z_]\w*)\s*(?::\s*[\w:\s]+)?\{"
)
_TEMPLATE_PATTERN = re.compile(r"template\s*<(?P<params>[^{};]*)>\s*$")
_TRAILING_RETURN_PATTERN = re.compile(r"[\s\w&]*->\s*(?P<type>[^{;=]+)")
_ACCESS_PATTERN = re.compile(r"\b(public|private|protected)\s*:(?!:)")
_DECLARATOR_PATTERN = re.compile(
    r"^(?P<type>.*?[\s*&>])(?P<name>[A-Za-z_]\w*)(?P<array>(?:\s*\[[^\]]*\])*)$"
)
_BRACE_INITIALIZER_PATTERN = re.compile(r"\{[^{}]*\}\s*$")


def parse_parameters(text: str) -> tuple[Parameter, ...]:
    """Parse a C/C++ parameter list.

    A lone ``void`` is an empty list. Default values make a parameter
    optional and are dropped from the type.

    Args:
        text: Parameter list without parentheses.

    Returns:
        Parameters in declaration order with normalized types.
    """
    if collapse_whitespace(text) in ("", "void"):
        return ()
    parameters: list[Parameter] = []
    for segment in split_parameters(text):
        declaration, has_default, _ = segment.partition("=")
        name, param_type = split_declarator(collapse_whitespace(declaration))
        parameters.append(Parameter(name=name, type=param_type, optional=bool(has_default)))
    return tuple(parameters)


def split_declarator(declaration: str) -> tuple[str, str]:
    """Split ``const char* name[4]`` into its name and normalized type.

    Args:
        declaration: One declarator without initializer.

    Returns:
        Tuple of name (empty when unnamed) and normalized type.
    """
    match = _DECLARATOR_PATTERN.match(declaration)
    if match and match.group("type").strip() not in _TYPE_ONLY_WORDS:
        param_type = match.group("type").rstrip() + match.group("array").replace(" ", "")
        return match.group("name"), normalize_c_type(param_type)
    return "", normalize_c_type(declaration)


def top_level_view(text: str) -> str:
    """Blank the contents of every brace block except namespace blocks.

    Args:
        text: Comment-stripped source.

    Returns:
        Text of identical length in which only namespace-level declarations
        remain readable.
    """
    chars = list(text)
    readable: list[bool] = []
    statement_start = 0
    for index, char in enumerate(text):
        if char == "{":
            parent_readable = not readable or readable[-1]
            is_namespace = bool(_NAMESPACE_PATTERN.search(text[statement_start:index]))
            readable.append(parent_readable and is_namespace)
            statement_start = index + 1
            continue
        if char == "}":
            if readable:
                readable.pop()
            statement_start = index + 1
            continue
        if char == ";":
            statement_start = index + 1
        if readable and not readable[-1] and char != "\n":
            chars[index] = " "
    return "".join(chars)


class CppExtractor:
    """Extract public C and C++ functions, methods, types and enums."""

    name = "cpp"
    supported_extensions = (".c", ".cc", ".cpp", ".cxx", ".h", ".hh", ".hpp", ".hxx")
    symbol_prefix = ""

    def extract(self, source: str, file_path: str = "") -> SignatureSet:
        """Extract the public signature set of one C/C++ source revision.

        Args:
            source: C or C++ source text.
            file_path: Path used in log messages only.

        Returns:
            Signature set with free functions by name, methods as
            ``Class::method`` and types and enums by name.
        """
        text = strip_c_comments(source)
        text = _PREPROCESSOR_PATTERN.sub(lambda match: "\n" * match.group(0).count("\n"), text)
        view = top_level_view(text)
        signatures: SignatureSet = {}

        for function in _functions(view, owner=None):
            signatures[function.name] = function

        for match in _TYPE_PATTERN.finditer(view):
            if view[: match.start()].rstrip().endswith("enum"):
                continue
            group = read_group(text, match.end() - 1)
            if group is None:
                logger.debug(
                    f"Skipping unbalanced C++ type body (file_path={file_path} name={match.group('name')})"
                )
                continue
            kind = match.group("kind")
            name = match.group("name")
            template = _TEMPLATE_PATTERN.search(view[max(0, match.start() - 400) : match.start()])
            members: dict[str, Property] = {}
            for section in _public_sections(blank_nested_blocks(group[0]), kind):
                for method in _functions(section, owner=name):
                    signatures[f"{name}::{method.name}"] = method
                members.update(_members(section))
            signatures[name] = TypeSignature(
                name=name,
                kind="struct" if kind == "struct" else "class",
                members=members,
                bases=_bases(match.group("bases")),
                type_parameter_count=count_type_parameters(
                    template.group("params") if template else None
                ),
            )

        for match in _ENUM_PATTERN.finditer(view):
            group = read_group(text, match.end() - 1)
            if group is None:
                continue
            signatures[match.group("name")] = EnumSignature(
                name=match.group("name"), members=_enum_members(group[0])
            )
        return signatures


def _statement_start(text: str, end: int) -> int:
    index = end - 1
    while index >= 0:
        char = text[index]
        if char in ";{}":
            return index
        if char == ":" and text[index - 1 : index] != ":" and text[index + 1 : index + 2] != ":":
            return index
        index -= 1
    return -1


def _functions(text: str, owner: str | None) -> list[FunctionSignature]:
    functions: list[FunctionSignature] = []
    for match in _CALLABLE_PATTERN.finditer(text):
        name = match.group("name")
        if name.startswith("~") or name in _RESERVED_NAMES or name == owner:
            continue
        boundary = _statement_start(text, match.start())
        prefix = collapse_whitespace(_ATTRIBUTE_PATTERN.sub(" ", text[boundary + 1 : match.start()]))
        if not prefix or prefix.endswith(("::", ".", "->")):
            continue
        group = read_group(text, match.end() - 1)
        if group is None:
            continue
        parameters, after = group
        follow = text[skip_whitespace(text, after) :]
        if not follow.startswith(_TRAILERS):
            continue

        type_parameters: str | None = None
        template = re.match(r"template\s*<", prefix)
        if template:
            template_group = read_group(prefix, template.end() - 1)
            if template_group is None:
                continue
            type_parameters = template_group[0]
            prefix = prefix[template_group[1] :].strip()
        if any(char in prefix for char in "=()") or len(split_parameters(prefix)) != 1:
            continue

        words = prefix.split(" ")
        if "friend" in words:
            continue
        is_static = "static" in words
        while words and words[0] in _STORAGE_SPECIFIERS:
            words.pop(0)
        if not words or words[0] in _NON_TYPE_WORDS:
            continue
        return_type = normalize_c_type(" ".join(words))
        trailing = _TRAILING_RETURN_PATTERN.match(follow)
        if return_type == "auto" and trailing:
            return_type = normalize_c_type(trailing.group("type").replace("override", ""))
        functions.append(
            FunctionSignature(
                name=name,
                parameters=parse_parameters(parameters),
                return_type=return_type,
                is_static=is_static,
                type_parameter_count=count_type_parameters(type_parameters),
                owner=owner,
            )
        )
    return functions


def _public_sections(body: str, kind: str) -> list[str]:
    sections: list[str] = []
    public = kind == "struct"
    position = 0
    for match in _ACCESS_PATTERN.finditer(body):
        if public:
            sections.append(body[position : match.start()])
        public = match.group(1) == "public"
        position = match.end()
    if public:
        sections.append(body[position:])
    return sections


def _members(section: str) -> dict[str, Property]:
    members: dict[str, Property] = {}
    for statement in section.split(";"):
        statement = collapse_whitespace(statement.rsplit("}", 1)[-1])
        if not statement:
            continue
        declaration = _BRACE_INITIALIZER_PATTERN.sub("", statement.split("=", 1)[0]).strip()
        if not declaration or _declares_function(declaration):
            continue
        words = declaration.split(" ")
        if words[0] in _SKIPPED_MEMBER_WORDS or "operator" in words:
            continue
        readonly = "const" in words or "constexpr" in words
        while words and words[0] in _STORAGE_SPECIFIERS:
            words.pop(0)
        declarators = split_parameters(" ".join(words))
        if not declarators:
            continue
        name, member_type = split_declarator(declarators[0])
        if not name:
            continue
        members[name] = Property(name=name, type=member_type, readonly=readonly)
        base_type = member_type.rstrip("*&")
        for extra in declarators[1:]:
            extra_name = re.sub(r"\W", "", extra.split("=", 1)[0])
            if extra_name:
                members[extra_name] = Property(name=extra_name, type=base_type, readonly=readonly)
    return members


def _declares_function(declaration: str) -> bool:
    """Return whether a declarator has a parameter list outside template arguments."""
    depth = 0
    for char in declaration:
        if char == "<":
            depth += 1
        elif char == ">":
            depth = max(0, depth - 1)
        elif char == "(" and depth == 0:
            return True
    return False


def _bases(text: str | None) -> tuple[str, ...]:
    if not text:
        return ()
    bases: list[str] = []
    for segment in split_parameters(text):
        words = collapse_whitespace(segment).split(" ")
        if "private" in words:
            continue
        words = [word for word in words if word not in ("public", "protected", "virtual")]
        if words:
            bases.append(" ".join(words))
    return tuple(bases)


def _enum_members(body: str) -> dict[str, EnumMember]:
    members: dict[str, EnumMember] = {}
    for segment in split_parameters(body):
        name, has_value, value = segment.partition("=")
        name = name.strip()
        if re.fullmatch(r"[A-Za-z_]\w*", name):
            members[name] = EnumMember(
                name=name, value=collapse_whitespace(value) if has_value else None
            )
    return members
