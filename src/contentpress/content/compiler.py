"""Compile MDX bodies into a renderable markdown-it token tree.

The body is first scanned for JSX-style component tags (names starting with an
uppercase letter). Each tag is checked against the collection's registry and
swapped for a placeholder comment, then the remaining markdown is parsed with
tables enabled and every heading receives a unique anchor id.
"""

from __future__ import annotations

import json
import logging
import re
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

from markdown_it import MarkdownIt
from markdown_it.token import Token
from markdown_it.tree import SyntaxTreeNode

from contentpress.errors import ComponentSyntaxError, UnregisteredComponentError
from contentpress.utils.text import UniqueIds, slugify_heading

LOGGER = logging.getLogger(__name__)

ComponentRenderer = Callable[..., str]
ComponentRegistry = Mapping[str, ComponentRenderer]

COMPONENT_TOKEN = "component"

# The marker is random per compile so authored comments never match.
_PLACEHOLDER = "<!--contentpress:{marker}:{index}-->"
_PLACEHOLDER_RE = r"<!--contentpress:{marker}:(\d+)-->"
_FENCE_RE = re.compile(r"( {0,3})(`{3,}|~{3,})")
_NAME_RE = re.compile(r"[A-Z][A-Za-z0-9_.]*")
_ATTR_RE = re.compile(r"[A-Za-z_:][\w:.\-]*")
_CLOSE_RE = re.compile(r"\s*>")


@dataclass(slots=True)
class Heading:
    level: int
    text: str
    id: str


@dataclass(slots=True)
class ComponentCall:
    """One embedded component invocation."""

    name: str
    props: Dict[str, Any] = field(default_factory=dict)
    children: str = ""
    block: bool = False
    compiled_children: Optional["CompiledDocument"] = None


@dataclass(slots=True)
class CompiledDocument:
    tokens: List[Token]
    headings: List[Heading]
    components: List[ComponentCall]
    registry: ComponentRegistry

    @property
    def tree(self) -> SyntaxTreeNode:
        return SyntaxTreeNode(self.tokens)


def create_markdown() -> MarkdownIt:
    """Markdown parser shared by the compiler and the renderer."""
    return MarkdownIt("commonmark", {"html": True}).enable(["table", "strikethrough"])


def compile_document(body: str, components: ComponentRegistry) -> CompiledDocument:
    """Compile an MDX body against the allowed ``components``.

    Raises:
        UnregisteredComponentError: If the body embeds a component that is not
            in ``components``.
        ComponentSyntaxError: If a component tag is malformed.
    """
    return _compile(body, components, UniqueIds())


def _compile(body: str, components: ComponentRegistry, ids: UniqueIds) -> CompiledDocument:
    marker = uuid.uuid4().hex
    source, calls = _extract_components(body, components, marker)

    tokens = create_markdown().parse(source)
    _mark_components(tokens, marker, len(calls))
    headings = _assign_heading_ids(tokens, calls, components, ids)

    LOGGER.debug("Compiled document: %d headings, %d components", len(headings), len(calls))
    return CompiledDocument(tokens=tokens, headings=headings, components=calls, registry=components)


def _assign_heading_ids(
    tokens: List[Token], calls: List[ComponentCall], components: ComponentRegistry, ids: UniqueIds
) -> List[Heading]:
    """Give headings ids in document order, descending into component children."""
    headings: List[Heading] = []

    def visit(token: Token) -> None:
        call = calls[token.meta["index"]]
        if call.children.strip():
            call.compiled_children = _compile(call.children, components, ids)
            headings.extend(call.compiled_children.headings)

    for index, token in enumerate(tokens):
        if token.type == COMPONENT_TOKEN:
            visit(token)
        elif token.type == "heading_open":
            inline = tokens[index + 1]
            text = "".join(
                child.content
                for child in inline.children or []
                if child.type in ("text", "code_inline")
            ).strip()
            anchor = ids(slugify_heading(text))
            token.attrSet("id", anchor)
            headings.append(Heading(level=int(token.tag[1]), text=text, id=anchor))
        elif token.type == "inline":
            for child in token.children or []:
                if child.type == COMPONENT_TOKEN:
                    visit(child)
    return headings


def _mark_components(tokens: List[Token], marker: str, count: int) -> None:
    """Turn this compile's placeholder comments back into component tokens."""
    pattern = re.compile(_PLACEHOLDER_RE.format(marker=marker))

    def index_of(content: str) -> Optional[int]:
        match = pattern.fullmatch(content)
        if match is None or int(match.group(1)) >= count:
            return None
        return int(match.group(1))

    for token in tokens:
        if token.type == "html_block":
            index = index_of(token.content.strip())
            if index is not None:
                token.type = COMPONENT_TOKEN
                token.meta = {"index": index, "block": True}
        elif token.type == "inline" and token.children:
            for child in token.children:
                if child.type != "html_inline":
                    continue
                index = index_of(child.content)
                if index is not None:
                    child.type = COMPONENT_TOKEN
                    child.meta = {"index": index, "block": False}


class _Scanner:
    """Single pass over the source, skipping code fences and code spans."""

    def __init__(self, text: str, registry: ComponentRegistry, marker: str) -> None:
        self.text = text
        self.registry = registry
        self.marker = marker
        self.calls: List[ComponentCall] = []

    def run(self) -> str:
        text = self.text
        out: list[str] = []
        pos = 0
        fence: Optional[str] = None

        while pos < len(text):
            at_line_start = pos == 0 or text[pos - 1] == "\n"
            if at_line_start:
                line_end = text.find("\n", pos)
                line_end = len(text) if line_end == -1 else line_end + 1
                line = text[pos:line_end]
                match = _FENCE_RE.match(line)
                if fence is not None:
                    if match and match.group(2)[0] == fence[0] and len(match.group(2)) >= len(fence) \
                            and not line[match.end():].strip():
                        fence = None
                    out.append(line)
                    pos = line_end
                    continue
                if match:
                    fence = match.group(2)
                    out.append(line)
                    pos = line_end
                    continue

            char = text[pos]
            if char == "`":
                run = len(text[pos:]) - len(text[pos:].lstrip("`"))
                closing = text.find("`" * run, pos + run)
                end = pos + run if closing == -1 else closing + run
                out.append(text[pos:end])
                pos = end
            elif text.startswith("{/*", pos):
                closing = text.find("*/}", pos + 3)
                pos = len(text) if closing == -1 else closing + 3
            elif char == "<" and _NAME_RE.match(text, pos + 1):
                pos = self._component(pos, out, at_line_start)
            else:
                out.append(char)
                pos += 1
        return "".join(out)

    def _component(self, start: int, out: list[str], at_line_start: bool) -> int:
        text = self.text
        name = _NAME_RE.match(text, start + 1).group(0)
        if name not in self.registry:
            raise UnregisteredComponentError(name, self.registry.keys())

        props, pos, self_closing = _parse_attributes(text, start + 1 + len(name), name)
        children = ""
        if not self_closing:
            close_start, close_end = _find_closing(text, pos, name)
            children = text[pos:close_start]
            pos = close_end

        line_end = text.find("\n", pos)
        rest = text[pos:] if line_end == -1 else text[pos:line_end]
        block = at_line_start and not rest.strip()

        index = len(self.calls)
        self.calls.append(ComponentCall(name=name, props=props, children=children.strip("\n"), block=block))
        placeholder = _PLACEHOLDER.format(marker=self.marker, index=index)
        if block:
            out.append("\n" + placeholder + "\n")
        else:
            out.append(placeholder)
        return pos


def _extract_components(
    body: str, registry: ComponentRegistry, marker: str
) -> tuple[str, List[ComponentCall]]:
    scanner = _Scanner(body, registry, marker)
    source = scanner.run()
    return source, scanner.calls


def _parse_attributes(text: str, pos: int, name: str) -> tuple[Dict[str, Any], int, bool]:
    props: Dict[str, Any] = {}
    length = len(text)
    while True:
        while pos < length and text[pos].isspace():
            pos += 1
        if pos >= length:
            raise ComponentSyntaxError(name, "unterminated tag")
        if text.startswith("/>", pos):
            return props, pos + 2, True
        if text[pos] == ">":
            return props, pos + 1, False
        if text[pos] == "{":
            # Spread attributes carry no static value.
            _, pos = _read_expression(text, pos, name)
            continue

        match = _ATTR_RE.match(text, pos)
        if not match:
            raise ComponentSyntaxError(name, f"unexpected character {text[pos]!r}")
        key = match.group(0)
        pos = match.end()
        while pos < length and text[pos].isspace():
            pos += 1
        if pos >= length or text[pos] != "=":
            props[key] = True
            continue
        pos += 1
        while pos < length and text[pos].isspace():
            pos += 1
        if pos >= length:
            raise ComponentSyntaxError(name, "unterminated tag")
        if text[pos] in "\"'":
            closing = text.find(text[pos], pos + 1)
            if closing == -1:
                raise ComponentSyntaxError(name, f"unterminated value for {key}")
            props[key] = text[pos + 1 : closing]
            pos = closing + 1
        elif text[pos] == "{":
            expression, pos = _read_expression(text, pos, name)
            props[key] = _decode_expression(expression)
        else:
            raise ComponentSyntaxError(name, f"missing value for {key}")


def _read_expression(text: str, pos: int, name: str) -> tuple[str, int]:
    """Read a balanced ``{...}`` expression starting at ``pos``."""
    depth = 0
    quote: Optional[str] = None
    start = pos
    while pos < len(text):
        char = text[pos]
        if quote:
            if char == "\\":
                pos += 1
            elif char == quote:
                quote = None
        elif char in "\"'`":
            quote = char
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start + 1 : pos].strip(), pos + 1
        pos += 1
    raise ComponentSyntaxError(name, "unbalanced braces")


def _decode_expression(expression: str) -> Any:
    try:
        return json.loads(expression)
    except ValueError:
        return expression


def _find_closing(text: str, pos: int, name: str) -> tuple[int, int]:
    """Return ``(start, end)`` of the matching ``</name>`` tag."""
    pattern = re.compile(r"<(/?)" + re.escape(name) + r"(?![A-Za-z0-9_.])")
    depth = 1
    for match in pattern.finditer(text, pos):
        if match.group(1):
            end = _CLOSE_RE.match(text, match.end())
            if not end:
                continue
            depth -= 1
            if depth == 0:
                return match.start(), end.end()
        else:
            # Nested tags of the same name only add depth when they are not self-closing.
            _, _, self_closing = _parse_attributes(text, match.end(), name)
            if not self_closing:
                depth += 1
    raise ComponentSyntaxError(name, "missing closing tag")
