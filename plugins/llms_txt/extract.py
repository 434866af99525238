from dataclasses import dataclass
from typing import Optional, Sequence

from bs4 import BeautifulSoup, Tag

DEFAULT_MAIN_SELECTOR = "main"
DEFAULT_TITLE = "Untitled"

# Removed from every content root, after the title has been taken.
ALWAYS_IGNORED = ("h1", "header", "footer")


class MissingMainContentError(ValueError):
    """The rendered page has no element matching the main-content selector."""

    def __init__(self, selector: str):
        super().__init__(f"Missing main selector <{selector}>")
        self.selector = selector


@dataclass
class ExtractedPage:
    title: str
    description: Optional[str]
    content: Tag


def normalize_text(text: str) -> str:
    return " ".join(text.split())


def remove_matching(root: Tag, selectors: Sequence[str]) -> None:
    """Decompose every descendant of ``root`` matching any selector."""
    for selector in selectors:
        for node in root.select(selector):
            if not node.decomposed:
                node.decompose()


def meta_description(soup: BeautifulSoup) -> Optional[str]:
    meta = soup.select_one('meta[name="description"]')
    if meta is None:
        return None
    content = meta.get("content")
    if not isinstance(content, str):
        return None
    return content.strip() or None


def extract_page(
    html: str,
    main_selector: str = DEFAULT_MAIN_SELECTOR,
    ignore_selectors: Sequence[str] = (),
) -> ExtractedPage:
    """Locate the main content of a rendered page and strip page chrome.

    The first ``<h1>`` of the content root becomes the title and is removed
    from the body, together with anything matching ``ignore_selectors`` and
    every other ``h1``, ``header`` and ``footer``. The title is read before
    the ignored elements go, but matches inside the heading itself (e.g.
    permalink anchors) are dropped from its text.

    Raises ``MissingMainContentError`` when ``main_selector`` matches nothing.
    """
    soup = BeautifulSoup(html, "html.parser")
    root = soup.select_one(main_selector or DEFAULT_MAIN_SELECTOR)
    if root is None:
        raise MissingMainContentError(main_selector)

    title = DEFAULT_TITLE
    h1 = root.find("h1")
    if h1 is not None:
        remove_matching(h1, ignore_selectors)
        title = normalize_text(h1.get_text()) or DEFAULT_TITLE
        h1.decompose()

    remove_matching(root, ignore_selectors)
    remove_matching(root, ALWAYS_IGNORED)

    return ExtractedPage(
        title=title,
        description=meta_description(soup),
        content=root,
    )
