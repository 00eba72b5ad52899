# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Per-language signature extractors."""

from sigdiff.analyzer import Extractor
from sigdiff.extractors.cpp import CppExtractor
from sigdiff.extractors.go import GoExtractor
from sigdiff.extractors.java import JavaExtractor
from sigdiff.extractors.python import PythonExtractor
from sigdiff.extractors.rust import RustExtractor
from sigdiff.extractors.swift import SwiftExtractor
from sigdiff.extractors.typescript import TypeScriptExtractor


def default_extractors() -> list[Extractor]:
    """Return one instance of every built-in extractor."""
    return [
        TypeScriptExtractor(),
        GoExtractor(),
        JavaExtractor(),
        CppExtractor(),
        PythonExtractor(),
        SwiftExtractor(),
        RustExtractor(),
    ]


__all__ = [
    "CppExtractor",
    "GoExtractor",
    "JavaExtractor",
    "PythonExtractor",
    "RustExtractor",
    "SwiftExtractor",
    "TypeScriptExtractor",
    "default_extractors",
]
