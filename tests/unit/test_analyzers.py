"""
Unit tests for the heuristic per-file analyzers.

Each language analyzer is exercised on a small, realistic source file;
line numbers are 1-based and block extents include the signature line.

License: MIT
"""

import pytest

from repograph_core.analysis import (
    CFamilyAnalyzer,
    FileAnalyzer,
    GoAnalyzer,
    JavaAnalyzer,
    JavaScriptAnalyzer,
    PythonAnalyzer,
    RustAnalyzer,
    analyze_file,
)
from repograph_core.analysis.base import BaseFileAnalyzer, strip_literals
from repograph_core.models import ArchiveEntry, FileAnalysis


def locations(analysis):
    return {name: (loc.line_start, loc.line_count) for name, loc in analysis.functions.items()}


# ============================================================
# JAVASCRIPT / TYPESCRIPT
# ============================================================

JS_SOURCE = """import React from 'react';
import './styles.css';
import {
  a,
  b,
} from './multi';
export * from './types';
const util = require('./lib/util.js');
const lazy = () => import('./lazy');

function* gen() {
  yield 1;
}

const add = (a, b) => {
  return a + b;
};

class Widget {
  render() {
    if (this.ok) {
      return "}";
    }
  }
}
"""


@pytest.mark.unit
def test_javascript_imports():
    analysis = JavaScriptAnalyzer().analyze(JS_SOURCE)

    assert analysis.imports == [
        "react",
        "./styles.css",
        "./multi",
        "./types",
        "./lib/util.js",
        "./lazy",
    ]


@pytest.mark.unit
def test_javascript_functions():
    analysis = JavaScriptAnalyzer().analyze(JS_SOURCE)

    assert locations(analysis) == {
        "lazy": (9, 1),
        "gen": (11, 3),
        "add": (15, 3),
        "render": (20, 5),
    }


@pytest.mark.unit
def test_javascript_control_flow_not_functions():
    source = "while (running) {\n  tick();\n}\nfor (const x of xs) {\n}\n"

    analysis = JavaScriptAnalyzer().analyze(source)

    assert analysis.functions == {}


@pytest.mark.unit
def test_javascript_typescript_return_annotation():
    source = "export async function load(id: string): Promise<User> {\n  return get(id);\n}\n"

    analysis = JavaScriptAnalyzer().analyze(source)

    assert locations(analysis) == {"load": (1, 3)}


@pytest.mark.unit
def test_opening_brace_lookahead():
    source = "function long(\n  a,\n  b\n) {\n  return a;\n}\n"

    assert locations(JavaScriptAnalyzer().analyze(source)) == {"long": (1, 6)}
    assert locations(JavaScriptAnalyzer(lookahead_lines=3).analyze(source)) == {"long": (1, 1)}


@pytest.mark.unit
def test_unclosed_block_falls_back_to_one_line():
    source = "function broken() {\n  if (x) {\n    return 1;\n"

    assert locations(JavaScriptAnalyzer().analyze(source)) == {"broken": (1, 1)}


@pytest.mark.unit
def test_scan_limit_falls_back_to_one_line():
    source = "function big() {\n" + "  step();\n" * 10 + "}\n"

    assert locations(JavaScriptAnalyzer().analyze(source)) == {"big": (1, 12)}
    assert locations(JavaScriptAnalyzer(max_scan_lines=5).analyze(source)) == {"big": (1, 1)}


@pytest.mark.unit
def test_first_signature_wins():
    source = "function dup() {\n}\n\nfunction dup() {\n  return 2;\n}\n"

    assert locations(JavaScriptAnalyzer().analyze(source)) == {"dup": (1, 2)}


# ============================================================
# PYTHON
# ============================================================

PY_SOURCE = """import os
from .utils import helper

def outer():
    x = 1

    def inner():
        return x
    return inner()

class A:
    def method(self):
        pass
"""


@pytest.mark.unit
def test_python_functions_follow_indentation():
    analysis = PythonAnalyzer().analyze(PY_SOURCE)

    assert locations(analysis) == {
        "outer": (4, 7),
        "inner": (7, 2),
        "method": (12, 3),
    }


@pytest.mark.unit
def test_python_imports():
    analysis = PythonAnalyzer().analyze(PY_SOURCE)

    assert analysis.imports == ["os", "utils"]


@pytest.mark.unit
@pytest.mark.parametrize(
    "line,expected",
    [
        ("from . import a, b", ["a", "b"]),
        ("from .. import (models as m, views)", ["models", "views"]),
        ("from pkg.sub import x as y", ["pkg/sub"]),
        ("import a.b as c, d", ["a/b", "d"]),
        ("from . import *", []),
    ],
)
def test_python_import_forms(line, expected):
    assert PythonAnalyzer().analyze(line + "\n").imports == expected


@pytest.mark.unit
def test_python_async_def():
    source = "async def fetch(url):\n    return await get(url)\n"

    assert locations(PythonAnalyzer().analyze(source)) == {"fetch": (1, 3)}


# ============================================================
# JAVA
# ============================================================

JAVA_SOURCE = """package com.example;

import java.util.List;
import static org.junit.Assert.assertEquals;

public class Service {
    @Override
    public String toString() {
        return "Service";
    }

    public abstract void run();

    private static <T> List<T> wrap(T value) {
        if (value == null) {
            return null;
        }
        return List.of(value);
    }
}
"""


@pytest.mark.unit
def test_java_methods():
    analysis = JavaAnalyzer().analyze(JAVA_SOURCE)

    assert locations(analysis) == {
        "toString": (8, 3),
        "run": (12, 1),
        "wrap": (14, 6),
    }


@pytest.mark.unit
def test_java_generic_return_types_with_spaces():
    source = (
        "public class Stats {\n"
        "    public Map<String, Integer> counts(List<String> words) {\n"
        "        return new HashMap<>();\n"
        "    }\n"
        "\n"
        "    Map<String, List<Integer>> index() {\n"
        "        return null;\n"
        "    }\n"
        "\n"
        "    public int[] totals() {\n"
        "        return new int[0];\n"
        "    }\n"
        "}\n"
    )

    assert locations(JavaAnalyzer().analyze(source)) == {
        "counts": (2, 3),
        "index": (6, 3),
        "totals": (10, 3),
    }


@pytest.mark.unit
def test_java_imports():
    analysis = JavaAnalyzer().analyze(JAVA_SOURCE)

    assert analysis.imports == ["java/util/List", "org/junit/Assert/assertEquals"]


# ============================================================
# C / C++
# ============================================================

C_SOURCE = """#include <stdio.h>
#include "util.h"

static int helper(int x);

int main(int argc, char **argv)
{
    printf("{ not a brace");
    return helper(argc);
}

static int helper(int x) {
    return x * 2;
}
"""


@pytest.mark.unit
def test_c_functions_and_prototypes():
    analysis = CFamilyAnalyzer().analyze(C_SOURCE)

    assert locations(analysis) == {"helper": (4, 1), "main": (6, 5)}


@pytest.mark.unit
def test_c_includes():
    assert CFamilyAnalyzer().analyze(C_SOURCE).imports == ["stdio.h", "util.h"]


@pytest.mark.unit
def test_cpp_scoped_method():
    source = "void Widget::draw(Canvas &canvas) {\n  canvas.clear();\n}\n"

    assert locations(CFamilyAnalyzer().analyze(source)) == {"Widget::draw": (1, 3)}


# ============================================================
# GO
# ============================================================

GO_SOURCE = """package main

import (
\t"fmt"
\tstr "strings"
)

import "os"

func main() {
\tfmt.Println(str.ToUpper("hi"))
}

func (s *Server) Start(port int) error {
\treturn nil
}
"""


@pytest.mark.unit
def test_go_functions_and_methods():
    analysis = GoAnalyzer().analyze(GO_SOURCE)

    assert locations(analysis) == {"main": (10, 3), "Start": (14, 3)}


@pytest.mark.unit
def test_go_imports():
    assert GoAnalyzer().analyze(GO_SOURCE).imports == ["fmt", "strings", "os"]


# ============================================================
# RUST
# ============================================================

RUST_SOURCE = """use std::collections::HashMap;
use crate::utils::{helper, other};
mod config;

pub fn run() -> i32 {
    helper()
}

pub(crate) async fn fetch(url: &str) {
}
"""


@pytest.mark.unit
def test_rust_functions():
    analysis = RustAnalyzer().analyze(RUST_SOURCE)

    assert locations(analysis) == {"run": (5, 3), "fetch": (9, 2)}


@pytest.mark.unit
def test_rust_imports():
    analysis = RustAnalyzer().analyze(RUST_SOURCE)

    assert analysis.imports == ["std/collections/HashMap", "crate/utils", "config"]


# ============================================================
# SHARED HELPERS
# ============================================================


@pytest.mark.unit
def test_strip_literals():
    assert strip_literals('x = "{"; // }') == 'x = ""; '
    assert strip_literals("s = '}' + `{`") == 's = "" + ""'


@pytest.mark.unit
def test_analyzer_rejects_bad_limits():
    with pytest.raises(ValueError):
        PythonAnalyzer(max_scan_lines=0)
    with pytest.raises(ValueError):
        JavaScriptAnalyzer(lookahead_lines=0)


# ============================================================
# DISPATCH AND FAILURE BOUNDARY
# ============================================================


class ExplodingAnalyzer(BaseFileAnalyzer):
    @property
    def languages(self):
        return ("python",)

    def analyze(self, content):
        raise RuntimeError("regex blew up")


@pytest.mark.unit
def test_dispatch_by_extension():
    analyzer = FileAnalyzer(max_workers=1)

    assert "main" in analyzer.analyze("def main():\n    pass\n", "app/main.py").functions
    assert "main" in analyzer.analyze("func main() {\n}\n", "cmd/main.go").functions


@pytest.mark.unit
def test_unsupported_language_yields_empty_result():
    analyzer = FileAnalyzer(max_workers=1)

    result = analyzer.analyze('{"name": "pkg"}', "package.json")

    assert result.functions == {}
    assert result.imports == []


@pytest.mark.unit
def test_analyzer_failure_is_contained():
    analyzer = FileAnalyzer(max_workers=1)
    analyzer.register(ExplodingAnalyzer())

    result = analyzer.analyze("def main():\n    pass\n", "main.py")

    assert result == FileAnalysis.empty()
    assert analyzer.get_analyzer("javascript") is not None


@pytest.mark.unit
def test_supported_languages():
    assert FileAnalyzer().supported_languages == [
        "c",
        "cpp",
        "go",
        "java",
        "javascript",
        "python",
        "rust",
        "typescript",
    ]


@pytest.mark.unit
@pytest.mark.parametrize("workers", [1, 4])
def test_analyze_files_preserves_order(workers):
    entries = [
        ArchiveEntry(path=f"mod_{i}.py", content=f"def f{i}():\n    return {i}\n")
        for i in range(10)
    ]

    results = FileAnalyzer(max_workers=workers).analyze_files(entries)

    assert [list(result.functions) for result in results] == [[f"f{i}"] for i in range(10)]


@pytest.mark.unit
def test_analyze_files_one_failure_does_not_abort_batch():
    analyzer = FileAnalyzer(max_workers=2)
    analyzer.register(ExplodingAnalyzer())
    entries = [
        ArchiveEntry(path="a.py", content="def a():\n    pass\n"),
        ArchiveEntry(path="b.ts", content="function b() {\n}\n"),
    ]

    results = analyzer.analyze_files(entries)

    assert results[0].functions == {}
    assert list(results[1].functions) == ["b"]


@pytest.mark.unit
def test_module_level_analyze_file():
    result = analyze_file("export function foo() {\n  return 1;\n}\n", "src/a.ts")

    assert locations(result) == {"foo": (1, 3)}
