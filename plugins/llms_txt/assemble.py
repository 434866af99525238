"""
Assemble one document set: select, order, extract and flatten its pages and
join them into a single artifact.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple
from urllib.parse import urljoin

from plugins.llms_txt.config import DEFAULT_PAGE_SEPARATOR, DocSetConfig
from plugins.llms_txt.extract import MissingMainContentError, extract_page
from plugins.llms_txt.flatten import flatten
from plugins.llms_txt.selection import order_pages, select_pages

logger = logging.getLogger(f"mkdocs.plugins.{__name__}")


class NotFoundError(LookupError):
    """The rendered HTML for a route could not be retrieved."""

    def __init__(self, route: str, path: Optional[str] = None):
        detail = f" ({path})" if path else ""
        super().__init__(f"File not found for page '{route}'{detail}")
        self.route = route
        self.path = path


PageLookup = Callable[[str], str]


@dataclass(frozen=True)
class DocSetSummary:
    title: str
    url: str
    description: str

    def index_line(self) -> str:
        return f"- [{self.title}]({self.url}): {self.description}"


@dataclass(frozen=True)
class DocSetArtifact:
    body: str
    summary: DocSetSummary
    page_count: int = 0
    skipped: Tuple[str, ...] = field(default_factory=tuple)


def resolve_url(site_url: Optional[str], url: str) -> str:
    """Absolute link for an output path; unchanged when no site_url is set.

    The path is relative to site_dir, so it keeps any subpath of site_url.
    """
    if not site_url:
        return url
    return urljoin(site_url.rstrip("/") + "/", url.lstrip("/"))


def system_line(description: str) -> str:
    return f"<SYSTEM>{description}</SYSTEM>"


def render_entry(title: str, description: Optional[str], body: str) -> str:
    parts = [f"# {title}"]
    if description:
        parts.append(f"> {description}")
    parts.append(body.strip())
    return "\n\n".join(parts)


def build_entry(html: str, doc_set: DocSetConfig) -> str:
    """Render the llms entry for one page of ``doc_set``."""
    page = extract_page(html, doc_set.main_selector, doc_set.ignore_selectors)
    body = flatten(page.content, structure_only=doc_set.only_structure)
    return render_entry(page.title, page.description, body)


def _process_page(route: str, doc_set: DocSetConfig, lookup: PageLookup) -> Optional[str]:
    """Entry for ``route``, or None when the page has to be skipped."""
    try:
        html = lookup(route)
        return build_entry(html, doc_set)
    except NotFoundError as exc:
        logger.warning(f"[llms_txt] {exc}; skipping in '{doc_set.title}'")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning(
            f"[llms_txt] unable to read page '{route}': {exc}; skipping in '{doc_set.title}'"
        )
    except MissingMainContentError as exc:
        logger.warning(
            f"[llms_txt] {exc} in page '{route}'; skipping in '{doc_set.title}'"
        )
    return None


def _process_pages(
    routes: Sequence[str],
    doc_set: DocSetConfig,
    lookup: PageLookup,
    max_workers: int,
) -> List[Optional[str]]:
    if max_workers <= 1 or len(routes) <= 1:
        return [_process_page(route, doc_set, lookup) for route in routes]

    results: List[Optional[str]] = [None] * len(routes)
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_map = {
            executor.submit(_process_page, route, doc_set, lookup): idx
            for idx, route in enumerate(routes)
        }
        for future in as_completed(future_map):
            # Back to the sorted position; processing order does not matter.
            results[future_map[future]] = future.result()
    return results


def assemble_doc_set(
    doc_set: DocSetConfig,
    pages: Sequence[str],
    lookup: PageLookup,
    *,
    collator,
    site_url: Optional[str] = None,
    page_separator: str = DEFAULT_PAGE_SEPARATOR,
    max_workers: int = 1,
) -> DocSetArtifact:
    """Build the artifact body and index summary for ``doc_set``.

    ``lookup`` returns a page's rendered HTML or raises ``NotFoundError``.
    Pages that cannot be found, cannot be read or have no main content are
    logged and left out; they never fail the set.
    """
    selected = select_pages(pages, doc_set.include, doc_set.exclude)
    ordered = order_pages(
        selected, doc_set.promote, doc_set.demote, collator=collator
    )
    logger.debug(
        f"[llms_txt] '{doc_set.title}': {len(selected)} of {len(pages)} pages selected"
    )

    results = _process_pages(ordered, doc_set, lookup, max_workers)
    entries = [entry for entry in results if entry is not None]
    skipped = tuple(
        route for route, entry in zip(ordered, results) if entry is None
    )

    body = f"{system_line(doc_set.description)}\n\n" + page_separator.join(entries)
    summary = DocSetSummary(
        title=doc_set.title,
        url=resolve_url(site_url, doc_set.url),
        description=doc_set.description,
    )
    return DocSetArtifact(
        body=body, summary=summary, page_count=len(entries), skipped=skipped
    )
