"""HTML renderers for the components that MDX documents may embed.

Each renderer takes ``(props, children, context)`` and returns an HTML string.
Collections expose only the subset listed in their registry.
"""

from __future__ import annotations

from html import escape
from typing import Any, Dict, Iterable, Mapping

from contentpress.content.compiler import ComponentRenderer
from contentpress.content.render import RenderContext

CALLOUT_COLORS = ("orange", "blue", "green", "emerald", "rose")
PR_DISCLOSURE = "※本記事にはPR（アフィリエイトリンク）が含まれています。"


def _attr(value: Any) -> str:
    return escape(str(value), quote=True)


def _list(items: Iterable[Any], css: str) -> str:
    rows = "".join(f"<li>{escape(str(item))}</li>" for item in items)
    return f'<ul class="{css}">{rows}</ul>' if rows else ""


def _link(cta: Any, css: str) -> str:
    if not isinstance(cta, Mapping) or not cta.get("href"):
        return ""
    return (
        f'<a class="{css}" href="{_attr(cta["href"])}" rel="sponsored noopener" target="_blank">'
        f"{escape(str(cta.get('label', cta['href'])))}</a>"
    )


def callout_list(props: Dict[str, Any], children: str, context: RenderContext) -> str:
    color = props.get("color", "orange")
    if color not in CALLOUT_COLORS:
        color = "orange"
    title = props.get("title")
    heading = f'<p class="callout-title">{escape(str(title))}</p>' if title else ""
    items = props.get("items")
    body = _list(items, "callout-items") if isinstance(items, list) else children
    return f'<aside class="callout callout-{color}">{heading}{body}</aside>'


def inline_toc(props: Dict[str, Any], children: str, context: RenderContext) -> str:
    title = escape(str(props.get("title", "Contents")))
    entries = [
        f'<li class="toc-h{heading.level}"><a href="#{_attr(heading.id)}">{escape(heading.text)}</a></li>'
        for heading in context.headings
        if heading.level in (2, 3)
    ]
    if not entries:
        return ""
    return f'<nav class="inline-toc"><p class="toc-title">{title}</p><ol>{"".join(entries)}</ol></nav>'


def related_articles(props: Dict[str, Any], children: str, context: RenderContext) -> str:
    slug = props.get("slug")
    if not slug or context.lookup is None:
        return ""
    meta = context.lookup(str(slug))
    if meta is None:
        return ""

    base = props.get("basePath") or context.route_prefix.strip("/") or "topics"
    heading = escape(str(props.get("title", "関連記事")))
    image = (
        f'<img src="{_attr(meta.thumbnail)}" alt="{_attr(meta.title)}" loading="lazy">'
        if meta.thumbnail
        else ""
    )
    excerpt = f"<p>{escape(meta.excerpt)}</p>" if meta.excerpt else ""
    tags = "".join(f'<span class="tag">#{escape(tag)}</span>' for tag in meta.tags[:3])
    return (
        f'<section class="related"><h2>{heading}</h2>'
        f'<a href="/{_attr(base)}/{_attr(meta.slug)}">{image}'
        f"<h3>{escape(meta.title)}</h3>{excerpt}{tags}</a></section>"
    )


def image(props: Dict[str, Any], children: str, context: RenderContext) -> str:
    src = props.get("src")
    if not src:
        return ""
    size = "".join(
        f' {key}="{_attr(props[key])}"' for key in ("width", "height") if key in props
    )
    return f'<img src="{_attr(src)}" alt="{_attr(props.get("alt", ""))}"{size} loading="lazy">'


def link(props: Dict[str, Any], children: str, context: RenderContext) -> str:
    href = props.get("href", "#")
    return f'<a href="{_attr(href)}">{children.strip() or escape(str(href))}</a>'


def app_compare_table(props: Dict[str, Any], children: str, context: RenderContext) -> str:
    rows = []
    for item in props.get("items") or []:
        if not isinstance(item, Mapping):
            continue
        rating = item.get("scoreText") or item.get("rating", "")
        rows.append(
            "<tr>"
            f"<td>{escape(str(item.get('rank', '')))}</td>"
            f"<td>{escape(str(item.get('name', '')))}</td>"
            f"<td>{escape(str(rating))}</td>"
            f"<td>{_list(item.get('features') or [], 'features')}</td>"
            f"<td>{_link({'href': item.get('siteUrl'), 'label': item.get('ctaText', '公式サイト')}, 'cta')}</td>"
            "</tr>"
        )
    if not rows:
        return ""
    header = "<tr><th>順位</th><th>アプリ</th><th>評価</th><th>特徴</th><th></th></tr>"
    return f'<table class="app-compare"><thead>{header}</thead><tbody>{"".join(rows)}</tbody></table>'


def affiliate_card(props: Dict[str, Any], children: str, context: RenderContext) -> str:
    banner = props.get("bannerUrl")
    parts = [f'<img class="banner" src="{_attr(banner)}" alt="">' if banner else ""]
    parts.append(f"<h3>{escape(str(props.get('title', '')))}</h3>")
    if props.get("subtitle"):
        parts.append(f'<p class="subtitle">{escape(str(props["subtitle"]))}</p>')
    if props.get("description"):
        parts.append(f"<p>{escape(str(props['description']))}</p>")
    parts.append(_list(props.get("benefits") or [], "benefits"))
    parts.append(_list(props.get("cautions") or [], "cautions"))
    if props.get("priceText"):
        parts.append(f'<p class="price">{escape(str(props["priceText"]))}</p>')
    parts.append(_link(props.get("primaryCta"), "cta-primary"))
    parts.append(_link(props.get("secondaryCta"), "cta-secondary"))
    parts.append(f'<p class="disclosure">{escape(str(props.get("disclosure", PR_DISCLOSURE)))}</p>')
    return f'<div class="affiliate-card">{"".join(parts)}</div>'


def service_card(props: Dict[str, Any], children: str, context: RenderContext) -> str:
    rank = props.get("rank", "")
    label = f"{rank}位" if isinstance(rank, int) else str(rank)
    pricing = props.get("pricing") if isinstance(props.get("pricing"), Mapping) else {}
    rows = [
        ("女性料金", pricing.get("female")),
        ("男性料金", pricing.get("male")),
        ("会員数", props.get("memberCount")),
        ("収入証明", props.get("incomeProof")),
        ("運営会社", props.get("company")),
    ]
    table = "".join(
        f"<tr><th>{escape(key)}</th><td>{escape(str(value))}</td></tr>" for key, value in rows if value
    )
    return (
        f'<div class="service-card"><span class="rank">{escape(label)}</span>'
        f"<h3>{escape(str(props.get('name', '')))}</h3>"
        f"<table>{table}</table>{_list(props.get('features') or [], 'features')}"
        f"{_link({'href': props.get('officialUrl'), 'label': '公式サイト'}, 'cta')}</div>"
    )


ARTICLE_COMPONENTS: Dict[str, ComponentRenderer] = {
    "CalloutList": callout_list,
    "InlineToc": inline_toc,
    "RelatedArticles": related_articles,
    "Image": image,
    "Link": link,
}

TOPIC_COMPONENTS: Dict[str, ComponentRenderer] = {
    "CalloutList": callout_list,
    "AppCompareTable": app_compare_table,
    "InlineToc": inline_toc,
    "CleanOjiAffiliateCard": affiliate_card,
    "ServiceCard": service_card,
    "Image": image,
    "Link": link,
    "RelatedArticles": related_articles,
}

GUIDE_COMPONENTS: Dict[str, ComponentRenderer] = {}
