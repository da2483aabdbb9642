"""Tests for markdown pages and tooltip descriptions."""

from constellation.config import Config
from constellation.content import (
    NO_DESCRIPTION,
    ContentIndex,
    describe,
    first_paragraph,
    load_content,
    parse_page,
    truncate,
)
from constellation.models import ContentRecord

PAGE = """---
slug: intro/overview
title: ESP32 Overview
---

The ESP32 is a **dual-core** chip.

| Pin | Use |
| --- | --- |
| 2   | LED |
"""


class TestParsePage:
    def test_front_matter_and_body(self):
        record = parse_page(PAGE, "fallback")
        assert record.slug == "intro/overview"
        assert record.title == "ESP32 Overview"
        assert record.excerpt is None
        assert "<strong>dual-core</strong>" in record.html
        assert "<table>" in record.html

    def test_without_front_matter(self):
        record = parse_page("Just text.", "motors/index")
        assert record.slug == "motors/index"
        assert record.title == "motors/index"
        assert record.html == "<p>Just text.</p>"


class TestDescribe:
    def test_excerpt_wins(self):
        record = ContentRecord(slug="a", title="A", excerpt="Short.", html="<p>Long body.</p>")
        assert describe(record) == "Short."

    def test_first_paragraph(self):
        record = ContentRecord(slug="a", title="A", html="<h2>Head</h2><p>First <em>one</em>.</p><p>Second.</p>")
        assert describe(record) == "First one ."

    def test_placeholder(self):
        assert describe(None) == NO_DESCRIPTION
        assert describe(ContentRecord(slug="a", title="A", html="<ul><li>x</li></ul>")) == NO_DESCRIPTION

    def test_first_paragraph_missing(self):
        assert first_paragraph("<div>no paragraphs</div>") is None


class TestTruncate:
    def test_at_limit_untouched(self):
        text = "x" * 150
        assert truncate(text) == text

    def test_over_limit(self):
        out = truncate("x" * 151)
        assert len(out) == 150
        assert out == "x" * 147 + "..."


class TestLoadContent:
    def test_loads_tree(self, tmp_path):
        (tmp_path / "intro").mkdir()
        (tmp_path / "intro" / "overview.md").write_text(PAGE)
        (tmp_path / "intro" / "features.md").write_text("No front matter here.")
        index = ContentIndex(load_content(tmp_path))
        assert len(index) == 2
        assert index.page("intro", "overview").title == "ESP32 Overview"
        assert index.page("intro", "features").slug == "intro/features"

    def test_bad_front_matter_skipped(self, tmp_path):
        (tmp_path / "bad.md").write_text("---\ntitle: [unclosed\n---\nbody\n")
        (tmp_path / "good.md").write_text("fine")
        records = load_content(tmp_path)
        assert [r.slug for r in records] == ["good"]

    def test_non_string_excerpt_is_kept_as_text(self, tmp_path):
        (tmp_path / "year.md").write_text("---\ntitle: Release\nexcerpt: 2024\n---\nbody\n")
        records = load_content(tmp_path)
        assert len(records) == 1
        assert records[0].excerpt == "2024"
        assert describe(records[0]) == "2024"

    def test_list_front_matter_skipped(self, tmp_path):
        (tmp_path / "list.md").write_text("---\n- one\n- two\n---\nbody\n")
        (tmp_path / "good.md").write_text("fine")
        assert [r.slug for r in load_content(tmp_path)] == ["good"]

    def test_missing_dir(self, tmp_path):
        assert load_content(tmp_path / "nope") == []

    def test_shipped_pages(self):
        index = ContentIndex(load_content(Config().resolved_content_dir))
        assert index.for_node("setup").excerpt.startswith("Install the toolchain")
        assert index.page("intro", "overview") is not None


class TestContentIndex:
    def test_overview_falls_back_to_section_slug(self):
        index = ContentIndex([ContentRecord(slug="intro", title="Intro")])
        assert index.page("intro", "index").title == "Intro"
        assert index.page("intro", "features") is None
        assert index.for_node("intro").title == "Intro"

    def test_for_node_uses_index_page(self, content):
        assert content.for_node("intro").slug == "intro/index"
        assert content.for_node("ghost") is None
