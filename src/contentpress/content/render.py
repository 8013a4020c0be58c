"""Render compiled documents to HTML."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from contentpress.content.compiler import COMPONENT_TOKEN, CompiledDocument, Heading, create_markdown
from contentpress.models import PostMeta


@dataclass(slots=True)
class RenderContext:
    """What component renderers may know about the page being rendered."""

    collection: Optional[str] = None
    route_prefix: str = ""
    headings: List[Heading] = field(default_factory=list)
    lookup: Optional[Callable[[str], Optional[PostMeta]]] = None


def render_html(compiled: CompiledDocument, context: RenderContext | None = None) -> str:
    """Render ``compiled`` to HTML, expanding embedded components."""
    if context is None:
        context = RenderContext()
    if not context.headings:
        context.headings = list(compiled.headings)

    md = create_markdown()
    md.add_render_rule(COMPONENT_TOKEN, _render_component)
    env = {"compiled": compiled, "context": context}
    return md.renderer.render(compiled.tokens, md.options, env)


def _render_component(self: Any, tokens: list, idx: int, options: Any, env: dict) -> str:
    token = tokens[idx]
    compiled: CompiledDocument = env["compiled"]
    context: RenderContext = env["context"]

    call = compiled.components[token.meta["index"]]
    renderer = compiled.registry[call.name]
    children = ""
    if call.compiled_children is not None:
        nested = RenderContext(
            collection=context.collection,
            route_prefix=context.route_prefix,
            headings=context.headings,
            lookup=context.lookup,
        )
        children = render_html(call.compiled_children, nested)
        if not token.meta.get("block"):
            children = _unwrap_paragraph(children)

    output = renderer(call.props, children, context)
    return output + "\n" if token.meta.get("block") else output


def _unwrap_paragraph(html: str) -> str:
    stripped = html.strip()
    if stripped.startswith("<p>") and stripped.endswith("</p>") and stripped.count("<p>") == 1:
        return stripped[3:-4]
    return html
