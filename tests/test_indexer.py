"""Tests for the metadata index builder."""

from __future__ import annotations

from pathlib import Path

import pytest

from contentpress.content.collections import ContentCollection
from contentpress.index.indexer import MIN_DATE, IndexStats, build_combined_index, build_index, find_meta, parse_date
from contentpress.models import EPOCH_DATE


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


class TestParseDate:
    """Test parse_date helper."""

    def test_iso_date(self) -> None:
        """Should parse plain dates."""
        assert parse_date("2024-01-01").year == 2024

    def test_zulu_suffix(self) -> None:
        """Should accept a trailing Z."""
        assert parse_date("2024-01-01T10:00:00Z").hour == 10

    def test_slashes(self) -> None:
        """Should accept slash-separated dates."""
        assert parse_date("2024/02/03").month == 2

    @pytest.mark.parametrize("value", [None, "", "yesterday", 42])
    def test_unparsable(self, value: object) -> None:
        """Should treat anything else as the minimum date."""
        assert parse_date(value) == MIN_DATE


class TestBuildIndex:
    """Test build_index function."""

    def test_end_to_end(self, tmp_path: Path) -> None:
        """Should list nested documents newest first with defaults filled in."""
        _write(tmp_path / "a" / "b.mdx", '---\ntitle: "Foo"\ndate: "2024-01-01"\n---\nbody\n')
        _write(tmp_path / "c.mdx", "no frontmatter\n")

        records = build_index(tmp_path)

        assert [(r.slug, r.title, r.date) for r in records] == [
            ("a/b", "Foo", "2024-01-01"),
            ("c", "c", EPOCH_DATE),
        ]

    def test_sorted_descending(self, tmp_path: Path) -> None:
        """Should order by date, newest first."""
        for name, date in [("old", "2020-01-01"), ("new", "2024-06-01"), ("mid", "2022-03-01")]:
            _write(tmp_path / f"{name}.mdx", f"---\ndate: {date}\n---\n")

        records = build_index(tmp_path)

        assert [r.slug for r in records] == ["new", "mid", "old"]

    def test_unparsable_date_last(self, tmp_path: Path) -> None:
        """Should sort bad dates after even the epoch default."""
        _write(tmp_path / "bad.mdx", "---\ndate: someday\n---\n")
        _write(tmp_path / "none.mdx", "plain\n")
        _write(tmp_path / "real.mdx", "---\ndate: 2024-01-01\n---\n")

        assert [r.slug for r in build_index(tmp_path)] == ["real", "none", "bad"]

    def test_stable_across_builds(self, tmp_path: Path) -> None:
        """Should return the same order for unchanged input."""
        for n in range(10):
            _write(tmp_path / f"doc{n}.mdx", "---\ndate: 2024-01-01\n---\n")

        first = [r.slug for r in build_index(tmp_path)]
        second = [r.slug for r in build_index(tmp_path)]

        assert first == second

    def test_missing_root(self, tmp_path: Path) -> None:
        """Should return an empty index."""
        assert build_index(tmp_path / "missing") == []

    def test_unreadable_file_counted(self, tmp_path: Path) -> None:
        """Should skip files that are not valid UTF-8."""
        (tmp_path / "bin.mdx").write_bytes(b"\xff\xfe\x00bad")
        _write(tmp_path / "ok.mdx", "---\ntitle: ok\n---\n")
        stats = IndexStats()

        records = build_index(tmp_path, stats=stats)

        assert [r.slug for r in records] == ["ok"]
        assert stats.indexed == 1
        assert stats.failed == 1

    def test_collection_name_recorded(self, tmp_path: Path) -> None:
        """Should tag records with the collection."""
        _write(tmp_path / "x.mdx", "x\n")

        assert build_index(tmp_path, collection="topics")[0].collection == "topics"


class TestCombinedIndex:
    """Test build_combined_index and find_meta."""

    def test_merges_collections(self, content_root: Path) -> None:
        """Should merge and sort several collections."""
        articles = ContentCollection("articles", content_root / "articles")
        topics = ContentCollection("topics", content_root / "topics")

        records = build_combined_index([articles, topics])

        assert records[0].slug == "apps/compare"
        assert {r.collection for r in records} == {"articles", "topics"}
        assert find_meta(records, "a/b").title == "Foo"
        assert find_meta(records, "nope") is None
