# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Python signature extractor implementation."""

import ast
import logging
from dataclasses import dataclass

from sigdiff.analyzer import ExtractionError
from sigdiff.model import (
    EnumMember,
    EnumSignature,
    FunctionSignature,
    InterfaceSignature,
    Parameter,
    Property,
    SignatureSet,
    TypeSignature,
    VariableSignature,
)

logger = logging.getLogger(__name__)

UNIT_TYPE = "Any"

_RECEIVER_NAMES = frozenset({"self", "cls"})
_ENUM_BASES = frozenset({"Enum", "IntEnum", "StrEnum", "Flag", "IntFlag"})
_PROTOCOL_BASES = frozenset({"Protocol"})
_STATIC_DECORATORS = frozenset({"staticmethod", "classmethod"})
_PROPERTY_DECORATORS = frozenset({"property", "cached_property"})


@dataclass(frozen=True)
class _ClassContext:
    name: str
    is_protocol: bool


class PythonExtractor:
    """Extract module-level Python functions, classes and constants."""

    name = "python"
    supported_extensions = (".py", ".pyi")
    symbol_prefix = ""

    def extract(self, source: str, file_path: str = "") -> SignatureSet:
        """Extract the signature set of one Python source revision.

        Args:
            source: Python source text.
            file_path: Path used for the parser filename and log messages.

        Returns:
            Signature set keyed by module-level name. Methods live in the
            ``methods`` map of their class.

        Raises:
            ExtractionError: If the revision is not valid Python.
        """
        try:
            tree = ast.parse(source, filename=file_path or "<unknown>")
        except (SyntaxError, ValueError) as exc:
            raise ExtractionError(f"Invalid Python source: {exc}") from exc

        signatures: SignatureSet = {}
        for node in tree.body:
            if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
                signatures[node.name] = self._build_function(node, context=None)
            elif isinstance(node, ast.ClassDef):
                signatures[node.name] = self._build_class(node)
            elif isinstance(node, ast.AnnAssign) and isinstance(node.target, ast.Name):
                signatures[node.target.id] = VariableSignature(
                    name=node.target.id, type=ast.unparse(node.annotation)
                )
            elif isinstance(node, ast.Assign):
                for target in node.targets:
                    if isinstance(target, ast.Name) and _is_constant_name(target.id):
                        signatures[target.id] = VariableSignature(
                            name=target.id, type=_literal_type(node.value)
                        )
        return signatures

    def _build_class(
        self, node: ast.ClassDef
    ) -> TypeSignature | InterfaceSignature | EnumSignature:
        base_names = tuple(ast.unparse(base) for base in node.bases)
        simple_bases = {name.rsplit(".", 1)[-1].split("[", 1)[0] for name in base_names}
        if simple_bases & _ENUM_BASES:
            return EnumSignature(name=node.name, members=self._enum_members(node))

        context = _ClassContext(name=node.name, is_protocol=bool(simple_bases & _PROTOCOL_BASES))
        members: dict[str, Property] = {}
        methods: dict[str, FunctionSignature] = {}
        constructor: tuple[Parameter, ...] | None = None
        for statement in node.body:
            if isinstance(statement, ast.AnnAssign) and isinstance(statement.target, ast.Name):
                members[statement.target.id] = Property(
                    name=statement.target.id,
                    type=ast.unparse(statement.annotation),
                    optional=statement.value is not None,
                )
            elif isinstance(statement, (ast.FunctionDef, ast.AsyncFunctionDef)):
                decorators = _decorator_names(statement)
                if decorators & _PROPERTY_DECORATORS:
                    members[statement.name] = Property(
                        name=statement.name,
                        type=_annotation(statement.returns),
                        readonly=True,
                    )
                    continue
                if any(name.endswith((".setter", ".deleter")) for name in decorators):
                    continue
                function = self._build_function(statement, context=context)
                if statement.name == "__init__" and not context.is_protocol:
                    constructor = function.parameters
                    continue
                methods[statement.name] = function

        if context.is_protocol:
            return InterfaceSignature(
                name=node.name,
                kind="protocol",
                properties=members,
                methods=methods,
                extends=tuple(name for name in base_names if not name.startswith("Protocol")),
                type_parameter_count=_type_parameter_count(node),
            )
        return TypeSignature(
            name=node.name,
            kind="class",
            members=members,
            methods=methods,
            constructor=constructor,
            bases=base_names,
            type_parameter_count=_type_parameter_count(node),
        )

    def _enum_members(self, node: ast.ClassDef) -> dict[str, EnumMember]:
        members: dict[str, EnumMember] = {}
        for statement in node.body:
            if not isinstance(statement, ast.Assign):
                continue
            for target in statement.targets:
                if isinstance(target, ast.Name) and not target.id.startswith("_"):
                    members[target.id] = EnumMember(
                        name=target.id, value=ast.unparse(statement.value)
                    )
        return members

    def _build_function(
        self,
        node: ast.FunctionDef | ast.AsyncFunctionDef,
        context: _ClassContext | None,
    ) -> FunctionSignature:
        decorators = _decorator_names(node)
        is_static = bool(decorators & _STATIC_DECORATORS)
        is_method = context is not None and "staticmethod" not in decorators
        return FunctionSignature(
            name=node.name,
            parameters=_parameters(node.args, is_method=is_method),
            return_type=_annotation(node.returns),
            is_async=isinstance(node, ast.AsyncFunctionDef),
            is_static=is_static,
            type_parameter_count=_type_parameter_count(node),
            required=not (context is not None and context.is_protocol and _has_body(node)),
            owner=context.name if context is not None else None,
        )


def _parameters(arguments: ast.arguments, is_method: bool) -> tuple[Parameter, ...]:
    parameters: list[Parameter] = []
    positional = [*arguments.posonlyargs, *arguments.args]
    defaults_start = len(positional) - len(arguments.defaults)
    for index, argument in enumerate(positional):
        parameters.append(
            Parameter(
                name=argument.arg,
                type=_annotation(argument.annotation),
                optional=index >= defaults_start,
                is_receiver=is_method and index == 0 and argument.arg in _RECEIVER_NAMES,
                keyword=index >= len(arguments.posonlyargs),
            )
        )
    if arguments.vararg is not None:
        parameters.append(
            Parameter(
                name=f"*{arguments.vararg.arg}",
                type=_annotation(arguments.vararg.annotation),
                optional=True,
            )
        )
    for argument, default in zip(arguments.kwonlyargs, arguments.kw_defaults):
        parameters.append(
            Parameter(
                name=argument.arg,
                type=_annotation(argument.annotation),
                optional=default is not None,
                keyword=True,
            )
        )
    if arguments.kwarg is not None:
        parameters.append(
            Parameter(
                name=f"**{arguments.kwarg.arg}",
                type=_annotation(arguments.kwarg.annotation),
                optional=True,
            )
        )
    return tuple(parameters)


def _annotation(node: ast.expr | None) -> str:
    if node is None:
        return UNIT_TYPE
    return ast.unparse(node)


def _decorator_names(node: ast.FunctionDef | ast.AsyncFunctionDef) -> set[str]:
    names: set[str] = set()
    for decorator in node.decorator_list:
        target = decorator.func if isinstance(decorator, ast.Call) else decorator
        names.add(ast.unparse(target).removeprefix("functools.").removeprefix("abc."))
    return names


def _type_parameter_count(node: ast.AST) -> int:
    return len(getattr(node, "type_params", None) or ())


def _has_body(node: ast.FunctionDef | ast.AsyncFunctionDef) -> bool:
    body = node.body
    if body and isinstance(body[0], ast.Expr) and isinstance(body[0].value, ast.Constant):
        body = body[1:]
    if not body:
        return False
    if len(body) == 1:
        statement = body[0]
        if isinstance(statement, ast.Pass):
            return False
        if isinstance(statement, ast.Expr) and isinstance(statement.value, ast.Constant):
            return statement.value.value is not Ellipsis
        if isinstance(statement, ast.Raise):
            return False
    return True


def _is_constant_name(name: str) -> bool:
    return name.isupper() and not name.startswith("_")


def _literal_type(node: ast.expr) -> str:
    if isinstance(node, ast.Constant):
        return type(node.value).__name__
    if isinstance(node, (ast.List, ast.ListComp)):
        return "list"
    if isinstance(node, (ast.Dict, ast.DictComp)):
        return "dict"
    if isinstance(node, (ast.Set, ast.SetComp)):
        return "set"
    if isinstance(node, ast.Tuple):
        return "tuple"
    return UNIT_TYPE
