"""Shared builders for cargo / rustfmt JSON records."""

import json

import pytest


def _span(file_name="src/a.rs", line_start=10, line_end=None, column_start=5,
          is_primary=True, text="let b = a.clone();", **extra) -> dict:
    span = {
        "file_name": file_name,
        "byte_start": 100,
        "byte_end": 110,
        "line_start": line_start,
        "line_end": line_end if line_end is not None else line_start,
        "column_start": column_start,
        "column_end": column_start + 9,
        "is_primary": is_primary,
        "text": [{"text": text, "highlight_start": column_start, "highlight_end": column_start + 9}],
        "label": None,
        "suggested_replacement": None,
        "suggestion_applicability": None,
        "expansion": None,
    }
    span.update(extra)
    return span


def _compiler_message(message="using `clone` on a value that is already owned",
                      code="clippy::needless_clone", level="warning", spans=None,
                      children=None) -> dict:
    return {
        "reason": "compiler-message",
        "package_id": "demo 0.1.0 (path+file:///work)",
        "manifest_path": "/work/Cargo.toml",
        "target": {"kind": ["bin"], "name": "demo", "src_path": "/work/src/main.rs"},
        "message": {
            "$message_type": "diagnostic",
            "message": message,
            "code": {"code": code, "explanation": None} if code else None,
            "level": level,
            "spans": [_span()] if spans is None else spans,
            "children": children or [],
            "rendered": f"{level}: {message}\n",
        },
    }


def _lines(*records) -> str:
    return "".join(json.dumps(r) + "\n" for r in records)


ARTIFACT = {
    "reason": "compiler-artifact",
    "package_id": "demo 0.1.0 (path+file:///work)",
    "target": {"kind": ["bin"], "name": "demo"},
    "filenames": ["/work/target/debug/demo"],
    "fresh": False,
}
BUILD_FINISHED = {"reason": "build-finished", "success": True}


@pytest.fixture
def span():
    return _span


@pytest.fixture
def compiler_message():
    return _compiler_message


@pytest.fixture
def lines():
    return _lines


@pytest.fixture
def noise() -> list[dict]:
    return [ARTIFACT, BUILD_FINISHED]
