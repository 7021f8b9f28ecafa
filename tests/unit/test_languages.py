"""
Unit tests for extension-based language classification.

License: MIT
"""

import pytest

from repograph_core.analysis.languages import (
    CODE_EXTENSIONS,
    LANGUAGES,
    OTHER,
    get_extension,
    get_language_from_extension,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "filename,expected",
    [
        ("src/App.TSX", "tsx"),
        ("a.test.ts", "ts"),
        ("Makefile", ""),
        ("dir.with.dots/README", ""),
        ("lib/module.Py", "py"),
    ],
)
def test_get_extension(filename, expected):
    assert get_extension(filename) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "filename,language",
    [
        ("index.js", "javascript"),
        ("index.jsx", "javascript"),
        ("server.mjs", "javascript"),
        ("config.cjs", "javascript"),
        ("app.ts", "typescript"),
        ("App.tsx", "typescript"),
        ("main.py", "python"),
        ("Main.java", "java"),
        ("util.c", "c"),
        ("util.h", "c"),
        ("widget.cpp", "cpp"),
        ("widget.hpp", "cpp"),
        ("widget.cc", "cpp"),
        ("package.json", "json"),
        ("README.md", "markdown"),
        ("style.css", "css"),
        ("index.html", "html"),
        ("ci.yml", "yaml"),
        ("ci.yaml", "yaml"),
        ("notes.txt", "text"),
        ("main.go", "go"),
        ("lib.rs", "rust"),
        ("index.php", "php"),
        ("app.rb", "ruby"),
    ],
)
def test_language_mapping(filename, language):
    assert get_language_from_extension(filename) == language


@pytest.mark.unit
def test_language_mapping_case_insensitive():
    assert get_language_from_extension("MAIN.PY") == "python"


@pytest.mark.unit
@pytest.mark.parametrize("filename", ["archive.tar", "image.png", "Makefile", ""])
def test_unknown_extension_is_other(filename):
    assert get_language_from_extension(filename) == OTHER


@pytest.mark.unit
def test_bare_extension_accepted():
    assert get_language_from_extension("rs") == "rust"


@pytest.mark.unit
def test_every_mapped_language_is_a_known_tag():
    for filename in ["a.js", "a.go", "a.md", "a.unknown"]:
        assert get_language_from_extension(filename) in LANGUAGES


@pytest.mark.unit
def test_code_extensions_exclude_docs_and_data():
    assert "md" not in CODE_EXTENSIONS
    assert "txt" not in CODE_EXTENSIONS
    assert "yaml" not in CODE_EXTENSIONS
