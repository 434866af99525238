"""
Locale-aware string comparison used to order document-set pages.
"""

import logging
from functools import lru_cache
from typing import Tuple

from pyuca import Collator

logger = logging.getLogger(f"mkdocs.plugins.{__name__}")

# Locales whose tailoring is identical to the root collation order.
ROOT_LOCALES = {"", "en", "root", "und"}


class LocaleCollator:
    """Unicode Collation Algorithm comparator keyed by a locale identifier.

    Punctuation is non-ignorable, so ``_`` collates before digits, letters
    and ``/``.
    """

    def __init__(self, locale: str = "en"):
        self.locale = locale
        self._collator = Collator()

    def sort_key(self, text: str) -> Tuple[int, ...]:
        return self._collator.sort_key(text)

    def compare(self, a: str, b: str) -> int:
        ka, kb = self.sort_key(a), self.sort_key(b)
        return (ka > kb) - (ka < kb)


def normalize_locale(locale) -> str:
    """Return the language part of a locale id, e.g. ``en_US`` -> ``en``."""
    if not locale:
        return "en"
    return str(locale).replace("_", "-").split("-", 1)[0].lower() or "en"


@lru_cache(maxsize=None)
def get_collator(locale: str = "en") -> LocaleCollator:
    lang = normalize_locale(locale)
    if lang not in ROOT_LOCALES:
        logger.debug(
            "[llms_txt] no collation tailoring for locale %r; using root order", locale
        )
    return LocaleCollator(lang)
