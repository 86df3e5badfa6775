"""Tests for extension to grammar mapping."""

from __future__ import annotations

import pytest

from codesearch_bot.utils.languages import classify_language


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("Foo.RS", "rust"),
        ("noext", "plaintext"),
        ("a.b.py", "python"),
        ("web/index.HTM", "xml"),
        ("web/index.html", "xml"),
        ("lib/main.cc", "cpp"),
        ("lib/main.cxx", "cpp"),
        ("include/util.c", "c"),
        ("scripts/run.bash", "bash"),
        ("README.markdown", "markdown"),
        ("app.js", "javascript"),
        ("Main.java", "java"),
        ("style.css", "css"),
    ],
)
def test_classify_language(path, expected):
    assert classify_language(path) == expected


@pytest.mark.parametrize("path", ["file.", "archive.tar.gz", "", "dir.v2/Makefile"])
def test_unknown_extensions_fall_back_to_plaintext(path):
    assert classify_language(path) == "plaintext"
