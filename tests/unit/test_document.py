"""Tests for document.py: front matter splitting and post parsing."""

from __future__ import annotations

from pathlib import Path

import pytest

from fileblog.document import (
    Document,
    parse_document,
    parse_metadata,
    slug_for,
    split_front_matter,
)
from fileblog.errors import ParseError, ReadError


def _write(tmp_path: Path, name: str, content: str) -> Path:
    p = tmp_path / name
    p.write_text(content, encoding="utf-8")
    return p


# ------------------------------------------------------------------
# split_front_matter
# ------------------------------------------------------------------


def test_split_front_matter_basic() -> None:
    block, body = split_front_matter("---\ntitle: Hi\n---\nHello\n")
    assert block == "\ntitle: Hi\n"
    assert body == "\nHello\n"


def test_split_front_matter_body_keeps_later_delimiters() -> None:
    _, body = split_front_matter("---\na: 1\n---\nintro\n---\nmore\n")
    assert body == "\nintro\n---\nmore\n"


def test_split_front_matter_text_before_first_delimiter_ignored() -> None:
    block, _ = split_front_matter("preamble\n---\na: 1\n---\n")
    assert block == "\na: 1\n"


def test_split_front_matter_no_delimiter() -> None:
    with pytest.raises(ParseError, match="delimiter"):
        split_front_matter("just text\n")


def test_split_front_matter_single_delimiter() -> None:
    with pytest.raises(ParseError, match="not closed"):
        split_front_matter("---\ntitle: x\n")


# ------------------------------------------------------------------
# parse_metadata
# ------------------------------------------------------------------


def test_parse_metadata_types() -> None:
    meta = parse_metadata(
        "title: Hi\ncount: 3\nratio: 0.5\ndraft: false\n"
        "tags: [a, b]\nauthor: {name: Ann}\n"
    )
    assert meta == {
        "title": "Hi",
        "count": 3,
        "ratio": 0.5,
        "draft": False,
        "tags": ["a", "b"],
        "author": {"name": "Ann"},
    }


def test_parse_metadata_dates_stay_strings() -> None:
    meta = parse_metadata("date: 2024-05-01\nupdated: 2024-05-01 10:00:00\n")
    assert meta["date"] == "2024-05-01"
    assert meta["updated"] == "2024-05-01 10:00:00"


def test_parse_metadata_nested_keys_become_strings() -> None:
    meta = parse_metadata("scores: {1: one, 2: [{3: three}]}\n")
    assert meta == {"scores": {"1": "one", "2": [{"3": "three"}]}}


def test_parse_metadata_empty_block() -> None:
    with pytest.raises(ParseError, match="empty"):
        parse_metadata("\n   \n")


def test_parse_metadata_not_a_mapping() -> None:
    with pytest.raises(ParseError, match="mapping"):
        parse_metadata("- a\n- b\n")


def test_parse_metadata_invalid_yaml() -> None:
    with pytest.raises(ParseError, match="Invalid YAML"):
        parse_metadata("title: [unclosed\n")


def test_parse_metadata_rejects_python_tags() -> None:
    with pytest.raises(ParseError):
        parse_metadata("x: !!python/object/apply:os.system ['true']\n")


# ------------------------------------------------------------------
# slug_for
# ------------------------------------------------------------------


def test_slug_for_strips_trailing_extension_only() -> None:
    assert slug_for("notes.md.md", ".md") == "notes.md"
    assert slug_for("a.mdx", ".md") == "a.mdx"


# ------------------------------------------------------------------
# parse_document
# ------------------------------------------------------------------


def test_parse_document_sets_body_and_url(tmp_path: Path) -> None:
    p = _write(tmp_path, "hello-world.md", "---\ntitle: Hello\n---\nThe body.\n")
    doc = parse_document(p, ".md")
    assert doc is not None
    assert doc.url == "hello-world"
    assert doc.body == "\nThe body.\n"
    assert doc["title"] == "Hello"


def test_parse_document_unpublished_returns_none(tmp_path: Path) -> None:
    p = _write(tmp_path, "draft.md", "---\npublished: false\n---\nx\n")
    assert parse_document(p, ".md") is None


def test_parse_document_published_truthy_kept(tmp_path: Path) -> None:
    p = _write(tmp_path, "live.md", "---\npublished: yes\n---\nx\n")
    assert parse_document(p, ".md") is not None


def test_parse_document_null_published_is_excluded(tmp_path: Path) -> None:
    p = _write(tmp_path, "nulled.md", "---\npublished: ~\n---\nx\n")
    assert parse_document(p, ".md") is None


def test_parse_document_custom_published_key(tmp_path: Path) -> None:
    p = _write(tmp_path, "hidden.md", "---\nis_public: 0\npublished: true\n---\nx\n")
    assert parse_document(p, ".md", published_key="is_public") is None
    assert parse_document(p, ".md") is not None


def test_parse_document_derived_fields_override_metadata(tmp_path: Path) -> None:
    p = _write(tmp_path, "real.md", "---\nurl: fake\nbody: fake\n---\nreal body")
    doc = parse_document(p, ".md")
    assert doc is not None
    assert doc.url == "real"
    assert doc["body"] == "\nreal body"
    assert "url" not in doc.meta


def test_parse_document_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ReadError):
        parse_document(tmp_path / "missing.md", ".md")


def test_parse_document_parse_error_names_file(tmp_path: Path) -> None:
    p = _write(tmp_path, "broken.md", "no front matter here\n")
    with pytest.raises(ParseError, match="broken.md"):
        parse_document(p, ".md")


# ------------------------------------------------------------------
# Document mapping interface
# ------------------------------------------------------------------


def test_document_mapping_access() -> None:
    doc = Document(url="a", body="text", meta={"title": "A"})
    assert doc["url"] == "a"
    assert doc["body"] == "text"
    assert doc.get("missing") is None
    assert doc.get("missing", 5) == 5
    assert "title" in doc
    assert "body" in doc
    assert "nope" not in doc
    assert list(doc) == ["title", "body", "url"]
    with pytest.raises(KeyError):
        doc["nope"]


def test_document_dict_conversion() -> None:
    doc = Document(url="a", body="text", meta={"title": "A", "tags": ["x"]})
    data = doc.to_dict()
    assert data == {"title": "A", "tags": ["x"], "body": "text", "url": "a"}
    assert Document.from_dict(data) == doc
