# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for the Go extractor."""

from sigdiff.diff import diff_signatures
from sigdiff.extractors.go import GoExtractor, looks_like_type, parse_parameters
from sigdiff.model import FunctionSignature, InterfaceSignature, TypeAliasSignature, TypeSignature


def test_go_001_grouped_parameters_propagate_type_right_to_left() -> None:
    parameters = parse_parameters("a, b int")

    assert [(p.name, p.type) for p in parameters] == [("a", "int"), ("b", "int")]


def test_go_002_mixed_groups_back_fill_each_run() -> None:
    parameters = parse_parameters("x, y float64, name string, opts ...Option")

    assert [(p.name, p.type) for p in parameters] == [
        ("x", "float64"),
        ("y", "float64"),
        ("name", "string"),
        ("opts", "...Option"),
    ]


def test_go_003_unnamed_parameters_are_types() -> None:
    parameters = parse_parameters("int, *http.Request, []string")

    assert [(p.name, p.type) for p in parameters] == [
        ("", "int"),
        ("", "*http.Request"),
        ("", "[]string"),
    ]


def test_go_004_looks_like_type_heuristics() -> None:
    for token in ("int", "error", "*T", "[]byte", "map[string]int", "func()", "chan int", "pkg.Type", "Config"):
        assert looks_like_type(token), token
    assert not looks_like_type("value")


def test_go_005_extracts_exported_functions_only() -> None:
    source = (
        "package calc\n"
        "\n"
        "// Add adds.\n"
        "func Add(a, b int) int {\n"
        "\treturn a + b\n"
        "}\n"
        "\n"
        "func helper(x int) int { return x }\n"
        "\n"
        "func Divide(a, b float64) (float64, error) {\n"
        "\treturn a / b, nil\n"
        "}\n"
        "\n"
        "func Reset() {\n"
        "}\n"
    )

    signatures = GoExtractor().extract(source, "calc.go")

    assert set(signatures) == {"Add", "Divide", "Reset"}
    add = signatures["Add"]
    assert isinstance(add, FunctionSignature)
    assert [p.type for p in add.parameters] == ["int", "int"]
    assert add.return_type == "int"
    assert signatures["Divide"].return_type == "(float64, error)"
    assert signatures["Reset"].return_type == "void"


def test_go_006_methods_are_keyed_by_receiver_type() -> None:
    source = (
        "package store\n"
        "func (s *Store) Get(key string) (string, bool) {\n"
        "\treturn \"\", false\n"
        "}\n"
        "func (s Store) len() int { return 0 }\n"
    )

    signatures = GoExtractor().extract(source, "store.go")

    assert set(signatures) == {"Store.Get"}
    get = signatures["Store.Get"]
    assert isinstance(get, FunctionSignature)
    assert get.owner == "Store"
    assert get.symbol_kind == "method"


def test_go_007_generic_function_counts_type_parameters() -> None:
    signatures = GoExtractor().extract(
        "package fn\nfunc Map[K comparable, V any](items map[K]V, f func(V) V) map[K]V {\n\treturn items\n}\n",
        "fn.go",
    )

    mapped = signatures["Map"]
    assert isinstance(mapped, FunctionSignature)
    assert mapped.type_parameter_count == 2
    assert [p.type for p in mapped.parameters] == ["map[K]V", "func(V) V"]
    assert mapped.return_type == "map[K]V"


def test_go_008_structs_keep_exported_fields() -> None:
    source = (
        "package model\n"
        "type User struct {\n"
        "\tID, Age int\n"
        "\tName string `json:\"name\"`\n"
        "\tsecret string\n"
        "\t*Base\n"
        "}\n"
    )

    signatures = GoExtractor().extract(source, "model.go")

    user = signatures["User"]
    assert isinstance(user, TypeSignature)
    assert user.kind == "struct"
    assert {name: member.type for name, member in user.members.items()} == {
        "ID": "int",
        "Age": "int",
        "Name": "string",
        "Base": "*Base",
    }


def test_go_009_interfaces_and_type_definitions() -> None:
    source = (
        "package io\n"
        "type Reader interface {\n"
        "\tio.Closer\n"
        "\tRead(p []byte) (n int, err error)\n"
        "\treset()\n"
        "}\n"
        "\n"
        "type (\n"
        "\tID string\n"
        "\tAlias = int64\n"
        "\tinternal int\n"
        ")\n"
    )

    signatures = GoExtractor().extract(source, "io.go")

    reader = signatures["Reader"]
    assert isinstance(reader, InterfaceSignature)
    assert set(reader.methods) == {"Read"}
    assert reader.methods["Read"].return_type == "(n int, err error)"
    assert reader.extends == ("io.Closer",)

    identifier = signatures["ID"]
    assert isinstance(identifier, TypeAliasSignature)
    assert identifier.definition == "string"
    assert signatures["Alias"].definition == "int64"
    assert "internal" not in signatures


def test_go_010_directional_channels_keep_parameters_apart() -> None:
    assert [(p.name, p.type) for p in parse_parameters("c <-chan int, d int")] == [
        ("c", "<-chan int"),
        ("d", "int"),
    ]
    assert [(p.name, p.type) for p in parse_parameters("out chan<- int, done chan struct{}")] == [
        ("out", "chan<- int"),
        ("done", "chan struct{}"),
    ]
    assert [p.type for p in parse_parameters("<-chan int, chan<- int")] == ["<-chan int", "chan<- int"]


def test_go_011_change_after_channel_parameter_is_attributed_to_it() -> None:
    extractor = GoExtractor()
    base = extractor.extract("package p\n\nfunc F(c <-chan int) {}\n")
    old_set = extractor.extract("package p\n\nfunc F(c <-chan int, d int) {}\n")
    new_set = extractor.extract("package p\n\nfunc F(c <-chan int, d string) {}\n")

    records = diff_signatures(old_set, new_set)

    assert [(r.kind, r.subject, r.position, r.before, r.after) for r in records] == [
        ("param_type_changed", "d", 2, "int", "string")
    ]
    assert [r.kind for r in diff_signatures(base, old_set)] == [
        "required_params_added",
        "param_count_changed",
    ]
