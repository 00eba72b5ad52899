# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for the ECMAScript and TypeScript extractor."""

from sigdiff.extractors.typescript import TypeScriptExtractor
from sigdiff.model import (
    EnumSignature,
    FunctionSignature,
    InterfaceSignature,
    TypeAliasSignature,
    TypeSignature,
    VariableSignature,
)


def _extract(source: str, file_path: str = "api.ts"):
    return TypeScriptExtractor().extract(source, file_path)


def test_ts_001_extracts_exported_function_with_types() -> None:
    signatures = _extract(
        "export async function greet<T>(name: string, count?: number, ...rest: T[]): Promise<string> {\n"
        "  return name;\n"
        "}\n"
        "function hidden(a: string): void {}\n"
    )

    assert set(signatures) == {"greet"}
    greet = signatures["greet"]
    assert isinstance(greet, FunctionSignature)
    assert [(p.name, p.type, p.optional) for p in greet.parameters] == [
        ("name", "string", False),
        ("count", "number", True),
        ("...rest", "T[]", True),
    ]
    assert greet.return_type == "Promise<string>"
    assert greet.is_async
    assert greet.type_parameter_count == 1


def test_ts_002_missing_annotations_read_any() -> None:
    signatures = _extract("export function legacy(a, b = 2) { return a; }\n", "legacy.js")

    legacy = signatures["legacy"]
    assert isinstance(legacy, FunctionSignature)
    assert [(p.type, p.optional) for p in legacy.parameters] == [("any", False), ("any", True)]
    assert legacy.return_type == "any"


def test_ts_003_extracts_class_surface() -> None:
    signatures = _extract(
        "export class Service extends Base<Config> implements Disposable, Runnable {\n"
        "  public readonly id: string;\n"
        "  label?: string;\n"
        "  private secret: string;\n"
        "  constructor(id: string, label?: string) { super(); this.id = id; }\n"
        "  static create(id: string): Service { return new Service(id); }\n"
        "  protected refresh(force: boolean): void {}\n"
        "  private hiddenWork(): void {}\n"
        "}\n"
    )

    service = signatures["Service"]
    assert isinstance(service, TypeSignature)
    assert set(service.members) == {"id", "label"}
    assert service.members["id"].readonly
    assert service.members["label"].optional
    assert set(service.methods) == {"create", "refresh"}
    assert service.methods["create"].is_static
    assert service.methods["refresh"].visibility == "protected"
    assert [(p.name, p.optional) for p in service.constructor or ()] == [
        ("id", False),
        ("label", True),
    ]
    assert service.bases == ("Base<Config>",)
    assert service.implements == ("Disposable", "Runnable")


def test_ts_004_class_without_constructor_has_empty_constructor() -> None:
    signatures = _extract("export class Empty {}\n")

    empty = signatures["Empty"]
    assert isinstance(empty, TypeSignature)
    assert empty.constructor == ()
    assert empty.bases == ()


def test_ts_005_extracts_interface_members_and_extends() -> None:
    signatures = _extract(
        "export interface Repo<T> extends Reader<T>, Writer {\n"
        "  name: string;\n"
        "  tag?: string;\n"
        "  find(id: string): T;\n"
        "  close?(): void;\n"
        "  reset();\n"
        "}\n"
    )

    repo = signatures["Repo"]
    assert isinstance(repo, InterfaceSignature)
    assert repo.properties["name"].type == "string"
    assert not repo.properties["name"].optional
    assert repo.properties["tag"].optional
    assert repo.methods["find"].return_type == "T"
    assert repo.methods["find"].required
    assert not repo.methods["close"].required
    assert repo.methods["reset"].return_type == "any"
    assert repo.extends == ("Reader<T>", "Writer")
    assert repo.type_parameter_count == 1


def test_ts_006_extracts_type_alias_enum_and_variables() -> None:
    signatures = _extract(
        "export type Id<T> = string | T;\n"
        "export const enum Color { Red = 'red', Green = 2, Blue }\n"
        "export const LIMIT: number = 10;\n"
        "export let untyped = 'x';\n"
        "export const add = (a: number, b: number): number => a + b;\n"
    )

    alias = signatures["Id"]
    assert isinstance(alias, TypeAliasSignature)
    assert alias.definition == "string | T"
    assert alias.type_parameter_count == 1

    color = signatures["Color"]
    assert isinstance(color, EnumSignature)
    assert color.is_const
    assert {name: member.value for name, member in color.members.items()} == {
        "Red": "red",
        "Green": "2",
        "Blue": None,
    }

    limit = signatures["LIMIT"]
    assert isinstance(limit, VariableSignature)
    assert limit.type == "number"
    assert limit.function is None
    assert signatures["untyped"].type == "any"

    add = signatures["add"]
    assert isinstance(add, VariableSignature)
    assert add.function is not None
    assert [p.type for p in add.function.parameters] == ["number", "number"]
    assert add.function.return_type == "number"


def test_ts_007_this_parameter_is_a_receiver() -> None:
    signatures = _extract("export function bind(this: Window, event: string): void {}\n")

    bind = signatures["bind"]
    assert isinstance(bind, FunctionSignature)
    assert [(p.name, p.is_receiver) for p in bind.parameters] == [
        ("this", True),
        ("event", False),
    ]


def test_ts_008_tsx_sources_parse_with_tsx_grammar() -> None:
    signatures = _extract(
        "export function View(props: { title: string }): JSX.Element {\n"
        "  return <div>{props.title}</div>;\n"
        "}\n",
        "view.tsx",
    )

    view = signatures["View"]
    assert isinstance(view, FunctionSignature)
    assert view.return_type == "JSX.Element"


def test_ts_009_partial_source_still_yields_parsed_exports() -> None:
    signatures = _extract(
        "export function ok(a: string): void {}\n"
        "export function broken(a: string {\n"
    )

    assert "ok" in signatures
