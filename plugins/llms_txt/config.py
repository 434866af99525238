"""
Configuration model for the llms_txt plugin.

Options come from the plugin block in mkdocs.yml and, optionally, from a
YAML file named by ``config_file``. Inline options win over file values.
Everything is validated once, when MkDocs loads the configuration, so a
bad pattern or selector stops the build before any page is rendered.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import soupsieve
import yaml
from mkdocs.exceptions import PluginError

from plugins.llms_txt.extract import DEFAULT_MAIN_SELECTOR
from plugins.llms_txt.selection import validate_pattern

DEFAULT_PAGE_SEPARATOR = "\n\n---\n\n"
DEFAULT_OUTPUT = "llms.txt"

# camelCase spellings accepted for compatibility with existing llms configs
KEY_ALIASES = {
    "docSet": "doc_sets",
    "docSets": "doc_sets",
    "optionalLinks": "optional_links",
    "pageSeparator": "page_separator",
    "maxWorkers": "max_workers",
    "onlyStructure": "only_structure",
    "mainSelector": "main_selector",
    "ignoreSelectors": "ignore_selectors",
}


@dataclass(frozen=True)
class OptionalLink:
    label: str
    url: str
    description: Optional[str] = None


@dataclass(frozen=True)
class DocSetConfig:
    title: str
    description: str
    url: str
    include: Tuple[str, ...]
    exclude: Tuple[str, ...] = ()
    promote: Tuple[str, ...] = ()
    demote: Tuple[str, ...] = ()
    only_structure: bool = False
    main_selector: str = DEFAULT_MAIN_SELECTOR
    ignore_selectors: Tuple[str, ...] = ()

    @property
    def output_path(self) -> str:
        """Output path relative to site_dir."""
        return self.url.lstrip("/")


@dataclass(frozen=True)
class LlmsConfig:
    title: str
    description: Optional[str] = None
    details: Optional[str] = None
    notes: Optional[str] = None
    optional_links: Tuple[OptionalLink, ...] = ()
    doc_sets: Tuple[DocSetConfig, ...] = ()
    page_separator: str = DEFAULT_PAGE_SEPARATOR
    locale: Optional[str] = None
    max_workers: int = 1
    output: str = DEFAULT_OUTPUT


def normalize_keys(raw: Dict[str, Any]) -> Dict[str, Any]:
    return {KEY_ALIASES.get(key, key): value for key, value in raw.items()}


def load_config_file(path: Path) -> Dict[str, Any]:
    """Load the llms YAML config file; raise PluginError if unusable."""
    if not path.exists():
        raise PluginError(f"[llms_txt] config_file not found at {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise PluginError(f"[llms_txt] unable to parse {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise PluginError(f"[llms_txt] {path} must contain a mapping")
    return normalize_keys(data)


def _string_list(value, name: str, where: str) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)) or not all(
        isinstance(item, str) for item in value
    ):
        raise PluginError(f"[llms_txt] {where}: '{name}' must be a list of strings")
    return tuple(value)


def _patterns(value, name: str, where: str) -> Tuple[str, ...]:
    patterns = _string_list(value, name, where)
    for pattern in patterns:
        try:
            validate_pattern(pattern)
        except ValueError as exc:
            raise PluginError(f"[llms_txt] {where}: {exc}") from exc
    return patterns


def _selector(selector: str, where: str) -> str:
    try:
        soupsieve.compile(selector)
    except (soupsieve.SelectorSyntaxError, TypeError) as exc:
        raise PluginError(
            f"[llms_txt] {where}: invalid CSS selector {selector!r}: {exc}"
        ) from exc
    return selector


def _required_str(raw: Dict[str, Any], key: str, where: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str) or not value.strip():
        raise PluginError(f"[llms_txt] {where}: '{key}' is required")
    return value


def parse_doc_set(raw: Dict[str, Any], position: int) -> DocSetConfig:
    if not isinstance(raw, dict):
        raise PluginError(f"[llms_txt] doc_sets[{position}] must be a mapping")
    raw = normalize_keys(raw)
    where = f"doc_sets[{position}]"
    title = _required_str(raw, "title", where)
    where = f"doc set '{title}'"

    include = _patterns(raw.get("include"), "include", where)
    if not include:
        raise PluginError(f"[llms_txt] {where}: 'include' needs at least one pattern")

    main_selector = raw.get("main_selector") or DEFAULT_MAIN_SELECTOR
    ignore = _string_list(raw.get("ignore_selectors"), "ignore_selectors", where)

    return DocSetConfig(
        title=title,
        description=_required_str(raw, "description", where),
        url=_required_str(raw, "url", where),
        include=include,
        exclude=_patterns(raw.get("exclude"), "exclude", where),
        promote=_patterns(raw.get("promote"), "promote", where),
        demote=_patterns(raw.get("demote"), "demote", where),
        only_structure=bool(raw.get("only_structure", False)),
        main_selector=_selector(main_selector, where),
        ignore_selectors=tuple(_selector(s, where) for s in ignore),
    )


def parse_optional_link(raw: Dict[str, Any], position: int) -> OptionalLink:
    where = f"optional_links[{position}]"
    if not isinstance(raw, dict):
        raise PluginError(f"[llms_txt] {where} must be a mapping")
    return OptionalLink(
        label=_required_str(raw, "label", where),
        url=_required_str(raw, "url", where),
        description=raw.get("description") or None,
    )


def parse_llms_config(raw: Dict[str, Any]) -> LlmsConfig:
    """Build a validated LlmsConfig from merged plugin options."""
    raw = normalize_keys(raw)
    title = _required_str(raw, "title", "plugin config")

    doc_sets = raw.get("doc_sets") or []
    links = raw.get("optional_links") or []
    if not isinstance(doc_sets, list):
        raise PluginError("[llms_txt] 'doc_sets' must be a list")
    if not isinstance(links, list):
        raise PluginError("[llms_txt] 'optional_links' must be a list")

    try:
        max_workers = max(1, int(raw.get("max_workers") or 1))
    except (TypeError, ValueError) as exc:
        raise PluginError("[llms_txt] 'max_workers' must be an integer") from exc

    separator = raw.get("page_separator")
    if separator is None:
        separator = DEFAULT_PAGE_SEPARATOR

    return LlmsConfig(
        title=title,
        description=raw.get("description") or None,
        details=raw.get("details") or None,
        notes=raw.get("notes") or None,
        optional_links=tuple(
            parse_optional_link(link, i) for i, link in enumerate(links)
        ),
        doc_sets=tuple(parse_doc_set(ds, i) for i, ds in enumerate(doc_sets)),
        page_separator=str(separator),
        locale=raw.get("locale") or None,
        max_workers=max_workers,
        output=raw.get("output") or DEFAULT_OUTPUT,
    )


def merge_options(file_options: Dict[str, Any], inline: Dict[str, Any]) -> Dict[str, Any]:
    """Inline options override file options; unset (None) options are skipped."""
    merged = dict(file_options)
    for key, value in normalize_keys(inline).items():
        if value is None:
            continue
        merged[key] = value
    return merged

