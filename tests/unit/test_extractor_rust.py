# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for the Rust extractor."""

from sigdiff.diff import diff_signatures
from sigdiff.extractors.rust import RustExtractor, parse_parameters
from sigdiff.model import (
    EnumSignature,
    FunctionSignature,
    InterfaceSignature,
    TypeAliasSignature,
    TypeSignature,
    VariableSignature,
)

CRATE_SOURCE = """
use std::collections::HashMap;

/// Adds two numbers.
pub fn add(a: i32, b: i32) -> i32 {
    a + b
}

pub(crate) fn internal(x: u8) {}

fn private() {}

#[inline]
pub async fn fetch<T: Clone>(url: &str, mut retries: u32) -> Result<T, Error> where T: Send {
    todo!()
}

pub struct Config {
    pub name: String,
    pub values: HashMap<String, i32>,
    secret: String,
}

pub struct Meters(pub f64, u8);

impl Config {
    pub fn new(name: String) -> Self {
        Self { name, values: HashMap::new(), secret: String::new() }
    }

    pub fn name(&self) -> &str {
        &self.name
    }
}

pub enum Shape {
    Circle { radius: f64 },
    Square(f64),
    Empty,
}

pub enum Code { Ok = 0, NotFound = 404 }

pub trait Store: Send + Sync {
    type Item;
    fn get(&self, key: &str) -> Option<Self::Item>;
    fn put(&mut self, key: &str, value: Self::Item);
    fn describe(&self) -> String {
        String::new()
    }
}

pub type Callback<T> = Box<dyn Fn(T)>;
pub const MAX: usize = 10;
pub static mut COUNTER: u64 = 0;
"""


def test_rust_001_receiver_forms() -> None:
    parameters = parse_parameters("&'a mut self, mut count: usize, items: &[u8]")

    assert [(p.name, p.type, p.is_receiver, p.is_mutable) for p in parameters] == [
        ("self", "&'a mut self", True, True),
        ("count", "usize", False, True),
        ("items", "&[u8]", False, False),
    ]


def test_rust_002_only_unrestricted_pub_items() -> None:
    signatures = RustExtractor().extract(CRATE_SOURCE, "lib.rs")

    assert set(signatures) == {
        "add",
        "fetch",
        "new",
        "name",
        "Config",
        "Meters",
        "Shape",
        "Code",
        "Store",
        "Callback",
        "MAX",
        "COUNTER",
    }


def test_rust_003_function_qualifiers_and_generics() -> None:
    signatures = RustExtractor().extract(CRATE_SOURCE, "lib.rs")

    fetch = signatures["fetch"]
    assert isinstance(fetch, FunctionSignature)
    assert fetch.is_async
    assert fetch.type_parameter_count == 1
    assert fetch.return_type == "Result<T, Error>"
    assert [(p.name, p.type) for p in fetch.parameters] == [("url", "&str"), ("retries", "u32")]
    name = signatures["name"]
    assert isinstance(name, FunctionSignature)
    assert name.parameters[0].is_receiver
    assert name.return_type == "&str"


def test_rust_004_struct_fields_named_and_tuple() -> None:
    signatures = RustExtractor().extract(CRATE_SOURCE, "lib.rs")

    config = signatures["Config"]
    meters = signatures["Meters"]
    assert isinstance(config, TypeSignature) and isinstance(meters, TypeSignature)
    assert {name: p.type for name, p in config.members.items()} == {
        "name": "String",
        "values": "HashMap<String, i32>",
    }
    assert {name: p.type for name, p in meters.members.items()} == {"0": "f64"}


def test_rust_005_enum_variants() -> None:
    signatures = RustExtractor().extract(CRATE_SOURCE, "lib.rs")

    shape = signatures["Shape"]
    code = signatures["Code"]
    assert isinstance(shape, EnumSignature) and isinstance(code, EnumSignature)
    assert {name: m.value for name, m in shape.members.items()} == {
        "Circle": "{ radius: f64 }",
        "Square": "(f64)",
        "Empty": None,
    }
    assert {name: m.value for name, m in code.members.items()} == {"Ok": "0", "NotFound": "404"}


def test_rust_006_trait_methods_and_supertraits() -> None:
    store = RustExtractor().extract(CRATE_SOURCE, "lib.rs")["Store"]

    assert isinstance(store, InterfaceSignature)
    assert store.kind == "trait"
    assert store.extends == ("Send", "Sync")
    assert set(store.methods) == {"get", "put", "describe"}
    assert store.methods["get"].required
    assert store.methods["get"].return_type == "Option<Self::Item>"
    assert store.methods["put"].return_type == "()"
    assert not store.methods["describe"].required
    assert set(store.properties) == {"Item"}


def test_rust_007_type_aliases_and_constants() -> None:
    signatures = RustExtractor().extract(CRATE_SOURCE, "lib.rs")

    assert signatures["Callback"] == TypeAliasSignature(
        name="Callback", definition="Box<dyn Fn(T)>", type_parameter_count=1
    )
    assert signatures["MAX"] == VariableSignature(name="MAX", type="usize")
    assert signatures["COUNTER"] == VariableSignature(name="COUNTER", type="u64")


def test_rust_008_receiver_form_change_is_not_breaking() -> None:
    extractor = RustExtractor()
    old_set = extractor.extract("impl S {\n    pub fn len(&self) -> usize { 0 }\n}\n")
    new_set = extractor.extract("impl S {\n    pub fn len(self: &Self) -> usize { 0 }\n}\n")

    assert diff_signatures(old_set, new_set) == []


def test_rust_009_restricting_visibility_removes_function() -> None:
    extractor = RustExtractor()
    old_set = extractor.extract("pub fn open(path: &str) {}\n")
    new_set = extractor.extract("pub(crate) fn open(path: &str) {}\n")

    records = diff_signatures(old_set, new_set)

    assert [(r.key, r.kind, r.symbol_kind) for r in records] == [("open", "removed", "function")]
