# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""ECMAScript and TypeScript signature extractor backed by tree-sitter."""

import logging
from pathlib import PurePosixPath

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

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
    Visibility,
)
from sigdiff.normalizer import collapse_whitespace

logger = logging.getLogger(__name__)

UNIT_TYPE = "any"

_FUNCTION_NODES = frozenset({"function_declaration", "function_signature", "generator_function_declaration"})
_CLASS_NODES = frozenset({"class_declaration", "abstract_class_declaration"})
_METHOD_NODES = frozenset({"method_definition", "method_signature", "abstract_method_signature"})
_FUNCTION_VALUE_NODES = frozenset({"arrow_function", "function_expression", "function"})
_PARAMETER_NODES = frozenset({"required_parameter", "optional_parameter"})


def _language_for(file_path: str) -> Language:
    if PurePosixPath(file_path).suffix.lower() in (".ts", ".mts", ".cts"):
        return Language(tree_sitter_typescript.language_typescript())
    return Language(tree_sitter_typescript.language_tsx())


class _SourceReader:
    """Read node text and annotations from one parsed revision."""

    def __init__(self, source: bytes) -> None:
        self._source = source

    def text(self, node: Node | None) -> str:
        if node is None:
            return ""
        return self._source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    def annotation(self, node: Node | None) -> str:
        """Return annotation text without its leading colon, or ``any``."""
        if node is None:
            return UNIT_TYPE
        return collapse_whitespace(self.text(node).lstrip().removeprefix(":")) or UNIT_TYPE


def _has_token(node: Node, token: str) -> bool:
    return any(child.type == token for child in node.children)


def _visibility(node: Node, reader: _SourceReader) -> Visibility:
    for child in node.children:
        if child.type == "accessibility_modifier":
            text = reader.text(child)
            if text == "private":
                return "private"
            if text == "protected":
                return "protected"
    name = node.child_by_field_name("name")
    if name is not None and name.type == "private_property_identifier":
        return "private"
    return "public"


def _type_parameter_count(node: Node) -> int:
    type_parameters = node.child_by_field_name("type_parameters")
    if type_parameters is None:
        return 0
    return sum(1 for child in type_parameters.named_children if child.type == "type_parameter")


class TypeScriptExtractor:
    """Extract exported declarations from ECMAScript-family sources."""

    name = "typescript"
    supported_extensions = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs", ".mts", ".cts")
    symbol_prefix = "Exported"

    def extract(self, source: str, file_path: str = "") -> SignatureSet:
        """Extract the exported signature set of one source revision.

        The tree-sitter grammar is error tolerant, so a revision with syntax
        errors still yields every declaration that parsed.

        Args:
            source: Source text.
            file_path: Path used to pick the grammar; ``.ts``, ``.mts`` and
                ``.cts`` use the TypeScript grammar, the rest use TSX.

        Returns:
            Signature set keyed by exported name.
        """
        parser = Parser()
        parser.language = _language_for(file_path)
        encoded = source.encode("utf-8")
        tree = parser.parse(encoded)
        if tree.root_node.has_error:
            logger.debug(f"Partial parse of ECMAScript source (file_path={file_path})")

        reader = _SourceReader(encoded)
        signatures: SignatureSet = {}
        for statement in tree.root_node.named_children:
            if statement.type != "export_statement":
                continue
            declaration = statement.child_by_field_name("declaration")
            if declaration is None:
                continue
            if declaration.type == "ambient_declaration" and declaration.named_children:
                declaration = declaration.named_children[0]
            self._collect(declaration, reader, signatures)
        return signatures

    def _collect(self, node: Node, reader: _SourceReader, signatures: SignatureSet) -> None:
        name_node = node.child_by_field_name("name")
        name = reader.text(name_node)
        if node.type in _FUNCTION_NODES and name:
            signatures[name] = self._function(node, reader, name=name, owner=None)
        elif node.type in _CLASS_NODES and name:
            signatures[name] = self._class(node, reader, name)
        elif node.type == "interface_declaration" and name:
            signatures[name] = self._interface(node, reader, name)
        elif node.type == "type_alias_declaration" and name:
            signatures[name] = TypeAliasSignature(
                name=name,
                definition=collapse_whitespace(reader.text(node.child_by_field_name("value"))),
                type_parameter_count=_type_parameter_count(node),
            )
        elif node.type == "enum_declaration" and name:
            signatures[name] = self._enum(node, reader, name)
        elif node.type in ("lexical_declaration", "variable_declaration"):
            for declarator in node.named_children:
                if declarator.type == "variable_declarator":
                    variable = self._variable(declarator, reader)
                    if variable is not None:
                        signatures[variable.name] = variable
        else:
            logger.debug(f"Skipping unsupported export (node_type={node.type})")

    def _function(
        self, node: Node, reader: _SourceReader, name: str, owner: str | None
    ) -> FunctionSignature:
        return FunctionSignature(
            name=name,
            parameters=self._parameters(node, reader),
            return_type=reader.annotation(node.child_by_field_name("return_type")),
            is_async=_has_token(node, "async"),
            is_static=_has_token(node, "static"),
            type_parameter_count=_type_parameter_count(node),
            visibility=_visibility(node, reader),
            required=not _has_token(node, "?"),
            owner=owner,
        )

    def _parameters(self, node: Node, reader: _SourceReader) -> tuple[Parameter, ...]:
        single = node.child_by_field_name("parameter")
        if single is not None:
            return (Parameter(name=reader.text(single), type=UNIT_TYPE),)
        parameters_node = node.child_by_field_name("parameters")
        if parameters_node is None:
            return ()
        parameters: list[Parameter] = []
        for child in parameters_node.named_children:
            if child.type not in _PARAMETER_NODES:
                continue
            pattern = child.child_by_field_name("pattern")
            is_receiver = pattern is not None and pattern.type == "this"
            is_rest = pattern is not None and pattern.type == "rest_pattern"
            parameters.append(
                Parameter(
                    name=reader.text(pattern),
                    type=reader.annotation(child.child_by_field_name("type")),
                    optional=child.type == "optional_parameter"
                    or child.child_by_field_name("value") is not None
                    or is_rest,
                    is_receiver=is_receiver,
                )
            )
        return tuple(parameters)

    def _class(self, node: Node, reader: _SourceReader, name: str) -> TypeSignature:
        members: dict[str, Property] = {}
        methods: dict[str, FunctionSignature] = {}
        constructor: tuple[Parameter, ...] = ()
        body = node.child_by_field_name("body")
        for member in body.named_children if body is not None else ():
            member_name = reader.text(member.child_by_field_name("name"))
            if not member_name or _visibility(member, reader) == "private":
                continue
            if member.type in _METHOD_NODES:
                if member_name == "constructor":
                    constructor = self._parameters(member, reader)
                elif _has_token(member, "get") or _has_token(member, "set"):
                    members.setdefault(
                        member_name,
                        Property(
                            name=member_name,
                            type=reader.annotation(member.child_by_field_name("return_type")),
                            readonly=not _has_token(member, "set"),
                        ),
                    )
                else:
                    methods[member_name] = self._function(member, reader, member_name, owner=name)
            elif member.type == "public_field_definition":
                members[member_name] = Property(
                    name=member_name,
                    type=reader.annotation(member.child_by_field_name("type")),
                    optional=_has_token(member, "?"),
                    readonly=_has_token(member, "readonly"),
                )

        bases: tuple[str, ...] = ()
        implements: list[str] = []
        for heritage in node.named_children:
            if heritage.type != "class_heritage":
                continue
            for clause in heritage.named_children:
                clause_types = [reader.text(child) for child in clause.named_children]
                if clause.type == "extends_clause" and clause_types:
                    bases = (collapse_whitespace(reader.text(clause).removeprefix("extends")),)
                elif clause.type == "implements_clause":
                    implements.extend(collapse_whitespace(text) for text in clause_types)
        return TypeSignature(
            name=name,
            kind="class",
            members=members,
            methods=methods,
            constructor=constructor,
            bases=bases,
            implements=tuple(implements),
            type_parameter_count=_type_parameter_count(node),
        )

    def _interface(self, node: Node, reader: _SourceReader, name: str) -> InterfaceSignature:
        properties: dict[str, Property] = {}
        methods: dict[str, FunctionSignature] = {}
        body = node.child_by_field_name("body")
        for member in body.named_children if body is not None else ():
            member_name = reader.text(member.child_by_field_name("name"))
            if not member_name:
                continue
            if member.type == "property_signature":
                properties[member_name] = Property(
                    name=member_name,
                    type=reader.annotation(member.child_by_field_name("type")),
                    optional=_has_token(member, "?"),
                    readonly=_has_token(member, "readonly"),
                )
            elif member.type == "method_signature":
                methods[member_name] = self._function(member, reader, member_name, owner=name)

        extends: list[str] = []
        for clause in node.named_children:
            if clause.type == "extends_type_clause":
                extends.extend(collapse_whitespace(reader.text(child)) for child in clause.named_children)
        return InterfaceSignature(
            name=name,
            kind="interface",
            properties=properties,
            methods=methods,
            extends=tuple(extends),
            type_parameter_count=_type_parameter_count(node),
        )

    def _enum(self, node: Node, reader: _SourceReader, name: str) -> EnumSignature:
        members: dict[str, EnumMember] = {}
        body = node.child_by_field_name("body")
        for member in body.named_children if body is not None else ():
            if member.type == "enum_assignment":
                member_name = reader.text(member.child_by_field_name("name"))
                value_node = member.child_by_field_name("value")
                value = reader.text(value_node)
                if value_node is not None and value_node.type == "string":
                    value = value[1:-1]
                members[member_name] = EnumMember(name=member_name, value=value)
            elif member.type in ("property_identifier", "string"):
                member_name = reader.text(member).strip("'\"")
                members[member_name] = EnumMember(name=member_name)
        return EnumSignature(name=name, members=members, is_const=_has_token(node, "const"))

    def _variable(self, declarator: Node, reader: _SourceReader) -> VariableSignature | None:
        name_node = declarator.child_by_field_name("name")
        if name_node is None or name_node.type != "identifier":
            return None
        name = reader.text(name_node)
        value = declarator.child_by_field_name("value")
        function: FunctionSignature | None = None
        if value is not None and value.type in _FUNCTION_VALUE_NODES:
            function = self._function(value, reader, name=name, owner=None)
        return VariableSignature(
            name=name,
            type=reader.annotation(declarator.child_by_field_name("type")),
            function=function,
        )
