"""
Page selection and ordering for llms.txt document sets.

Routes are matched with glob patterns: ``*`` stays inside one path segment,
``**`` spans any number of segments, and braces/extglobs/negation work the
way they do in shell globbing.
"""

import re
from typing import Iterable, List, Sequence

from wcmatch import glob

# Sentinel prepended to a route to bias its sort position. It must collate
# before any character that appears in a route.
SENTINEL = "_"

GLOB_FLAGS = (
    glob.GLOBSTAR
    | glob.BRACE
    | glob.EXTGLOB
    | glob.NEGATE
    | glob.NEGATEALL
    | glob.FORCEUNIX
)


def validate_pattern(pattern: str) -> None:
    """Raise ``ValueError`` if ``pattern`` is not a usable glob."""
    if not isinstance(pattern, str) or not pattern:
        raise ValueError(f"glob pattern must be a non-empty string, got {pattern!r}")
    try:
        includes, excludes = glob.translate(pattern, flags=GLOB_FLAGS)
        for regex in (*includes, *excludes):
            re.compile(regex)
    except (re.error, ValueError, TypeError) as exc:
        raise ValueError(f"invalid glob pattern {pattern!r}: {exc}") from exc


def matches(path: str, pattern: str) -> bool:
    return glob.globmatch(path, pattern, flags=GLOB_FLAGS)


def first_match(path: str, patterns: Sequence[str]) -> int:
    """Index of the first pattern matching ``path``, or -1."""
    for idx, pattern in enumerate(patterns):
        if matches(path, pattern):
            return idx
    return -1


def select_pages(
    pages: Iterable[str], include: Sequence[str], exclude: Sequence[str] = ()
) -> List[str]:
    """Keep pages matching at least one include and no exclude pattern."""
    if not include:
        return []
    return [
        page
        for page in pages
        if any(matches(page, pat) for pat in include)
        and not any(matches(page, pat) for pat in exclude)
    ]


def priority_bias(
    route: str, promote: Sequence[str] = (), demote: Sequence[str] = ()
) -> int:
    """Number of sentinels to prefix ``route`` with.

    Demotion wins over promotion. With ``D = len(demote)``: a neutral route
    gets ``D``, a route demoted by pattern ``d`` gets ``D - d - 1`` and a
    route promoted by pattern ``p`` gets ``len(promote) - p + D``.
    """
    demoted = first_match(route, demote)
    promoted = -1 if demoted > -1 else first_match(route, promote)
    promotion = len(promote) - promoted if promoted > -1 else 0
    return promotion + len(demote) - demoted - 1


def priority_key(
    route: str, promote: Sequence[str] = (), demote: Sequence[str] = ()
) -> str:
    return SENTINEL * priority_bias(route, promote, demote) + route


def order_pages(
    routes: Iterable[str],
    promote: Sequence[str] = (),
    demote: Sequence[str] = (),
    *,
    collator,
) -> List[str]:
    """Return a new list of routes sorted by their priority key.

    ``collator`` provides ``sort_key(text)``; more sentinels sort earlier.
    Ties fall back to the raw key and then the route so the order is
    deterministic.
    """
    keyed = [(priority_key(route, promote, demote), route) for route in routes]
    keyed.sort(key=lambda item: (collator.sort_key(item[0]), item[0], item[1]))
    return [route for _, route in keyed]
