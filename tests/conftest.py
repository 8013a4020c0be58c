"""Shared fixtures."""

from __future__ import annotations

import json
from pathlib import Path

import pytest


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def content_root(tmp_path: Path) -> Path:
    """A site content tree with articles, topics and guides."""
    root = tmp_path / "content"
    write(
        root / "articles" / "a" / "b.mdx",
        '---\ntitle: "Foo"\ndate: "2024-01-01"\ntags: [x]\n---\n# Foo\n\n<InlineToc />\n\n## Part\n',
    )
    write(root / "articles" / "c.mdx", "No frontmatter here.\n")
    write(
        root / "topics" / "apps" / "compare.mdx",
        "---\ntitle: 比較\ndate: 2024-03-01\ncategory: アプリ\n---\n"
        '<AppCompareTable items={[{"rank": 1, "name": "A", "features": ["f"]}]} />\n\n'
        '<RelatedArticles slug="apps/guide" />\n',
    )
    write(
        root / "topics" / "apps" / "guide.mdx",
        "---\ntitle: 使い方\ndate: 2023-12-01\nthumbnail: /img/g.jpg\n---\n本文\n",
    )
    write(root / "topics" / "broken.mdx", "<NotAllowed />\n")
    write(root / "GuideArticles" / "first.mdx", "---\ntitle: First\ncover: /img/c.jpg\n---\n| a |\n|---|\n| 1 |\n")
    return root


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Static listing datasets."""
    root = tmp_path / "public"
    interviews = [
        {
            "slug": f"int-{n:02d}",
            "title": f"Interview {n}",
            "date": f"2024-01-{n:02d}",
            "category": "体験談" if n % 2 else "対談",
            "tags": ["video"],
            "video": f"/v/{n}.mp4",
            "ctas": [{"label": "公式", "href": "https://example.com", "start": 10, "end": 20}],
        }
        for n in range(1, 26)
    ]
    write(root / "interviews.json", json.dumps(interviews, ensure_ascii=False))
    write(root / "guides.json", "{not json")
    write(root / "topics.json", json.dumps({"items": []}))
    return root
