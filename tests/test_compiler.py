"""Tests for MDX compilation and rendering."""

from __future__ import annotations

from typing import Any, Dict

import pytest

from contentpress.content.compiler import COMPONENT_TOKEN, compile_document
from contentpress.content.components import ARTICLE_COMPONENTS, GUIDE_COMPONENTS
from contentpress.content.render import RenderContext, render_html
from contentpress.errors import ComponentSyntaxError, UnregisteredComponentError
from contentpress.models import PostMeta


def badge(props: Dict[str, Any], children: str, context: RenderContext) -> str:
    return f'<span class="badge">{props.get("label", "")}{children}</span>'


class TestHeadings:
    """Heading anchor generation."""

    def test_ids_assigned(self) -> None:
        """Should attach an id to every heading."""
        compiled = compile_document("# Title\n\n## はじめに\n", {})

        assert [(h.level, h.text, h.id) for h in compiled.headings] == [
            (1, "Title", "title"),
            (2, "はじめに", "はじめに"),
        ]
        assert '<h2 id="はじめに">' in render_html(compiled)

    def test_collisions_get_suffix(self) -> None:
        """Should append -1, -2 to repeated headings."""
        compiled = compile_document("## Intro\n\n## Intro\n\n## Intro\n", {})

        assert [h.id for h in compiled.headings] == ["intro", "intro-1", "intro-2"]

    def test_inline_markup_ignored_in_id(self) -> None:
        """Should build the id from the heading's text only."""
        compiled = compile_document("## Use **bold** and `code`\n", {})

        assert compiled.headings[0].id == "use-bold-and-code"

    def test_nested_headings_share_ids(self) -> None:
        """Should keep ids unique across component children."""
        compiled = compile_document("## Intro\n\n<CalloutList>\n## Intro\n</CalloutList>\n", ARTICLE_COMPONENTS)
        html = render_html(compiled)

        assert [h.id for h in compiled.headings] == ["intro", "intro-1"]
        assert html.count('id="intro"') == 1
        assert '<h2 id="intro-1">Intro</h2>' in html

    def test_nested_headings_in_document_order(self) -> None:
        """Should list headings from component children where they appear."""
        body = "<InlineToc />\n\n## A\n\n<CalloutList>\n## B\n</CalloutList>\n\n## C\n"
        compiled = compile_document(body, ARTICLE_COMPONENTS)

        assert [h.text for h in compiled.headings] == ["A", "B", "C"]
        assert 'href="#b"' in render_html(compiled)


class TestMarkdown:
    """Markdown features."""

    def test_tables(self) -> None:
        """Should render GFM tables."""
        compiled = compile_document("| a | b |\n|---|---|\n| 1 | 2 |\n", GUIDE_COMPONENTS)

        html = render_html(compiled)

        assert "<table>" in html
        assert "<td>1</td>" in html

    def test_plain_html_allowed(self) -> None:
        """Should pass lowercase HTML through without a registry entry."""
        html = render_html(compile_document("<div>hi</div>\n", {}))

        assert "<div>hi</div>" in html

    def test_tree_is_available(self) -> None:
        """Should expose a syntax tree."""
        compiled = compile_document("# A\n\ntext\n", {})

        assert [child.type for child in compiled.tree.children] == ["heading", "paragraph"]

    def test_mdx_comments_removed(self) -> None:
        """Should drop {/* */} comments."""
        html = render_html(compile_document("{/* hidden */}Visible\n", {}))

        assert "hidden" not in html
        assert "Visible" in html


class TestComponents:
    """Embedded component handling."""

    def test_unregistered_component_raises(self) -> None:
        """Should refuse components missing from the registry."""
        with pytest.raises(UnregisteredComponentError) as info:
            compile_document("Hello\n\n<Badge label=\"x\" />\n", {})

        assert info.value.name == "Badge"

    def test_registered_component_compiles(self) -> None:
        """Should accept the same body once the component is registered."""
        compiled = compile_document("Hello\n\n<Badge label=\"x\" />\n", {"Badge": badge})

        assert [call.name for call in compiled.components] == ["Badge"]
        assert compiled.components[0].block is True
        assert '<span class="badge">x</span>' in render_html(compiled)

    def test_component_token_in_tree(self) -> None:
        """Should leave a component token where the tag was."""
        compiled = compile_document("<Badge />\n", {"Badge": badge})

        assert any(token.type == COMPONENT_TOKEN for token in compiled.tokens)

    def test_props_decoding(self) -> None:
        """Should decode string, expression and boolean attributes."""
        body = "<Badge label='a' count={3} items={[\"x\", \"y\"]} raw={foo.bar} open />\n"

        props = compile_document(body, {"Badge": badge}).components[0].props

        assert props == {"label": "a", "count": 3, "items": ["x", "y"], "raw": "foo.bar", "open": True}

    def test_multiline_tag(self) -> None:
        """Should parse tags spread over several lines."""
        body = "<Badge\n  label=\"multi\"\n  extra={{\"a\": 1}}\n/>\n\nafter\n"

        compiled = compile_document(body, {"Badge": badge})

        assert compiled.components[0].props == {"label": "multi", "extra": {"a": 1}}
        assert "<p>after</p>" in render_html(compiled)

    def test_inline_component(self) -> None:
        """Should render components inside a paragraph without wrapping children."""
        compiled = compile_document("See <Badge>new</Badge> here\n", {"Badge": badge})

        assert compiled.components[0].block is False
        assert '<p>See <span class="badge">new</span> here</p>' in render_html(compiled)

    def test_children_are_compiled(self) -> None:
        """Should compile markdown children of a block component."""
        body = "<Badge>\n- one\n- two\n</Badge>\n"

        html = render_html(compile_document(body, {"Badge": badge}))

        assert "<li>one</li>" in html

    def test_nested_unregistered_component_raises(self) -> None:
        """Should validate components inside children too."""
        with pytest.raises(UnregisteredComponentError):
            compile_document("<Badge>\n<Other />\n</Badge>\n", {"Badge": badge})

    def test_nested_same_name(self) -> None:
        """Should match the right closing tag for nested same-name tags."""
        body = "<Badge label=\"outer\">\n<Badge label=\"inner\" />\n</Badge>\n"

        compiled = compile_document(body, {"Badge": badge})

        assert len(compiled.components) == 1
        assert compiled.components[0].compiled_children is not None
        assert compiled.components[0].compiled_children.components[0].props == {"label": "inner"}

    def test_authored_placeholder_comment_is_plain_html(self) -> None:
        """Should not treat a hand-written comment as a component."""
        body = "<!--contentpress:component:0-->\n\n<Badge label=\"x\" />\n"
        compiled = compile_document(body, {"Badge": badge})
        html = render_html(compiled)

        assert [call.name for call in compiled.components] == ["Badge"]
        assert html.count('class="badge"') == 1
        assert "<!--contentpress:component:0-->" in html

    def test_authored_placeholder_without_components(self) -> None:
        """Should render a lone hand-written comment verbatim."""
        html = render_html(compile_document("<!--contentpress:component:0-->\n", ARTICLE_COMPONENTS))

        assert "<!--contentpress:component:0-->" in html

    def test_code_is_not_scanned(self) -> None:
        """Should ignore tags in fenced and inline code."""
        body = "```jsx\n<Unknown />\n```\n\nUse `<Unknown />` inline.\n"

        html = render_html(compile_document(body, {}))

        assert "&lt;Unknown /&gt;" in html

    def test_unterminated_tag(self) -> None:
        """Should report malformed tags."""
        with pytest.raises(ComponentSyntaxError):
            compile_document("<Badge label=\"x\"\n", {"Badge": badge})

    def test_missing_closing_tag(self) -> None:
        """Should report unclosed paired tags."""
        with pytest.raises(ComponentSyntaxError):
            compile_document("<Badge>\ncontent\n", {"Badge": badge})


class TestRegistries:
    """Built-in component renderers."""

    def test_callout_list(self) -> None:
        """Should render a callout with list items."""
        body = '<CalloutList title="注意" color="blue" items={["a", "b"]} />\n'

        html = render_html(compile_document(body, ARTICLE_COMPONENTS))

        assert '<aside class="callout callout-blue">' in html
        assert "<li>a</li><li>b</li>" in html

    def test_inline_toc(self) -> None:
        """Should list h2 and h3 headings of the document."""
        body = "<InlineToc />\n\n## First\n\n### Second\n"

        html = render_html(compile_document(body, ARTICLE_COMPONENTS))

        assert 'href="#first"' in html
        assert 'href="#second"' in html

    def test_related_articles_lookup(self) -> None:
        """Should render a card for a known slug and nothing otherwise."""
        meta = PostMeta(slug="apps/a", title="Apps", tags=["x"])
        context = RenderContext(
            route_prefix="topics",
            lookup=lambda slug: meta if slug == meta.slug else None,
        )

        found = render_html(compile_document('<RelatedArticles slug="apps/a" />\n', ARTICLE_COMPONENTS), context)
        missing = render_html(compile_document('<RelatedArticles slug="nope" />\n', ARTICLE_COMPONENTS), context)

        assert 'href="/topics/apps/a"' in found
        assert "#x" in found
        assert "related" not in missing

    def test_guides_allow_no_components(self) -> None:
        """Should reject any component in guides."""
        with pytest.raises(UnregisteredComponentError):
            compile_document("<CalloutList />\n", GUIDE_COMPONENTS)

    def test_props_are_escaped(self) -> None:
        """Should escape prop values in rendered HTML."""
        html = render_html(compile_document('<Image src="/a.jpg" alt="<b>" />\n', ARTICLE_COMPONENTS))

        assert 'alt="&lt;b&gt;"' in html
