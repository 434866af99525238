"""
Flatten a cleaned content tree into Markdown.

Two modes are supported:

- full: regular Markdown (paragraphs, emphasis, links, code, tables, lists)
- structure-only: an outline made of headings and lists, nothing else
"""

import re
from typing import List, Optional

from bs4 import NavigableString, Tag
from bs4.element import PreformattedString
from markdownify import ATX, MarkdownConverter

from plugins.llms_txt.accessibility import prune
from plugins.llms_txt.extract import normalize_text

HEADINGS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4, "h5": 5, "h6": 6}
LISTS = ["ul", "ol"]

BLANK_LINES_RE = re.compile(r"\n[ \t]*\n(?:[ \t]*\n)+")
LANGUAGE_CLASS_RE = re.compile(r"^(?:language|lang|highlight)-([\w+#.-]+)$")


def code_language(el: Tag) -> Optional[str]:
    """Guess a fence language from ``language-xxx`` classes on a <pre> or its wrapper.

    MkDocs (pymdownx.highlight) puts the class on the wrapping div,
    plain HTML usually on the inner <code>.
    """
    candidates = [el, el.find("code"), el.parent]
    for node in candidates:
        if not isinstance(node, Tag):
            continue
        for cls in node.get("class") or []:
            m = LANGUAGE_CLASS_RE.match(cls)
            if m:
                return m.group(1)
    return None


def collapse_blank_lines(text: str) -> str:
    return BLANK_LINES_RE.sub("\n\n", text).strip()


def to_markdown(tree: Tag) -> str:
    converter = MarkdownConverter(
        heading_style=ATX,
        bullets="-",
        code_language_callback=code_language,
    )
    return collapse_blank_lines(converter.convert_soup(tree))


# ----- Structure-only outline -----


def _own_text(item: Tag) -> str:
    """Text of a list item, leaving out any nested lists."""
    parts: List[str] = []
    for node in item.descendants:
        if not isinstance(node, NavigableString) or isinstance(node, PreformattedString):
            continue
        if any(parent.name in LISTS for parent in _parents_within(node, item)):
            continue
        parts.append(str(node))
    return normalize_text("".join(parts))


def _parents_within(node, stop: Tag):
    parent = node.parent
    while parent is not None and parent is not stop:
        yield parent
        parent = parent.parent


def _nested_lists(item: Tag) -> List[Tag]:
    """Lists directly owned by ``item``, wherever they sit inside it."""
    found: List[Tag] = []
    for lst in item.find_all(LISTS):
        if not any(p.name in LISTS for p in _parents_within(lst, item)):
            found.append(lst)
    return found


def _render_list(lst: Tag, indent: str, lines: List[str]) -> None:
    ordered = lst.name == "ol"
    number = 1
    if ordered:
        try:
            number = int(lst.get("start", 1))
        except (TypeError, ValueError):
            number = 1

    for item in lst.find_all("li", recursive=False):
        marker = f"{number}." if ordered else "-"
        text = _own_text(item)
        lines.append(f"{indent}{marker} {text}".rstrip())
        child_indent = indent + " " * (len(marker) + 1)
        for nested in _nested_lists(item):
            _render_list(nested, child_indent, lines)
        number += 1


def _collect_outline(node: Tag, blocks: List[str]) -> None:
    if node.name in HEADINGS:
        text = normalize_text(node.get_text())
        if text:
            blocks.append(f"{'#' * HEADINGS[node.name]} {text}")
    elif node.name in LISTS:
        lines: List[str] = []
        _render_list(node, "", lines)
        if lines:
            blocks.append("\n".join(lines))
    else:
        for child in node.children:
            if isinstance(child, Tag):
                _collect_outline(child, blocks)


def to_outline(tree: Tag) -> str:
    """Keep only headings and lists, in document order and nesting depth."""
    blocks: List[str] = []
    _collect_outline(tree, blocks)
    return "\n\n".join(blocks)


def flatten(tree: Tag, structure_only: bool = False) -> str:
    """Prune ``tree`` for accessibility, then render it in the requested mode."""
    prune(tree)
    if structure_only:
        return to_outline(tree)
    return to_markdown(tree)
