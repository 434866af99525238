"""
Prune an HTML tree the way assistive technology would announce it.

1. ``aria-hidden="true"`` removes the element and its subtree.
2. ``<img alt="">`` is decorative and removed.
3. A non-empty ``aria-label`` replaces the element's content.
"""

from bs4 import NavigableString, Tag


def is_aria_hidden(tag: Tag) -> bool:
    value = tag.get("aria-hidden")
    if value is True:
        return True
    return isinstance(value, str) and value.strip().lower() == "true"


def is_decorative_image(tag: Tag) -> bool:
    return tag.name == "img" and tag.has_attr("alt") and tag["alt"] == ""


def _aria_label(tag: Tag) -> str:
    value = tag.get("aria-label")
    return value if isinstance(value, str) else ""


def prune(tree: Tag) -> Tag:
    """Apply the accessibility rules to ``tree`` in place and return it.

    The root itself is never removed, only its descendants. Running this
    twice gives the same tree as running it once.
    """
    for tag in tree.find_all(is_aria_hidden):
        # Already gone if an ancestor was decomposed earlier in the loop.
        if not tag.decomposed:
            tag.decompose()

    for tag in tree.find_all(is_decorative_image):
        tag.decompose()

    labelled = [tree] if _aria_label(tree) else []
    labelled += tree.find_all(attrs={"aria-label": True})
    for tag in labelled:
        label = _aria_label(tag)
        if not label or tag.decomposed:
            continue
        tag.clear(decompose=True)
        tag.append(NavigableString(label))

    return tree
