"""Shared fixtures: a small index in the shape Sphinx writes it."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import pytest

# Bare keys, a quoted reserved word, \u escapes and single-integer postings,
# as emitted by older Sphinx releases.
SAMPLE_INDEX_JS = (
    r'Search.setIndex({docnames:["church","intro","lambda"],'
    r'envversion:{"sphinx.domains.c":2,sphinx:56},'
    r'filenames:["church.rst","intro.rst","lambda.rst"],'
    r"objects:{},objnames:{},objtypes:{},"
    r'terms:{"0":[0,2],"\u03b2":[0,2],"abstract":[0,2],church:0,lambda:[0,2],'
    r"numer:0,racket:[1,2],stack:1,welcom:1},"
    r'titles:["Lambda - via \u03b2-abstraction","Welcome note","Lambda - the everything"],'
    r'titleterms:{"β":0,church:0,lambda:[0,2],note:1,welcom:1}})'
)


def sample_raw() -> Dict[str, Any]:
    return {
        "docnames": ["church", "intro", "lambda"],
        "envversion": {"sphinx.domains.c": 2, "sphinx": 56},
        "filenames": ["church.rst", "intro.rst", "lambda.rst"],
        "objects": {},
        "objnames": {},
        "objtypes": {},
        "terms": {
            "0": [0, 2],
            "β": [0, 2],
            "abstract": [0, 2],
            "church": 0,
            "lambda": [0, 2],
            "numer": 0,
            "racket": [1, 2],
            "stack": 1,
            "welcom": 1,
        },
        "titles": [
            "Lambda - via β-abstraction",
            "Welcome note",
            "Lambda - the everything",
        ],
        "titleterms": {"β": 0, "church": 0, "lambda": [0, 2], "note": 1, "welcom": 1},
    }


@pytest.fixture
def raw_index() -> Dict[str, Any]:
    return sample_raw()


@pytest.fixture
def index_file(tmp_path: Path) -> Path:
    path = tmp_path / "html" / "searchindex.js"
    path.parent.mkdir()
    path.write_text(SAMPLE_INDEX_JS, encoding="utf-8")
    return path


@pytest.fixture
def json_index_file(tmp_path: Path) -> Path:
    path = tmp_path / "searchindex.json"
    path.write_text(json.dumps(sample_raw()), encoding="utf-8")
    return path
