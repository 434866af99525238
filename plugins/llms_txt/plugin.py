"""
An MkDocs plugin that turns the rendered site into llms.txt artifacts: one
file per configured document set plus a top-level llms.txt index.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

from mkdocs.config import config_options as c
from mkdocs.config.defaults import MkDocsConfig
from mkdocs.plugins import BasePlugin
from mkdocs.structure.pages import Page

from plugins.llms_txt.assemble import (
    DocSetArtifact,
    DocSetSummary,
    NotFoundError,
    assemble_doc_set,
)
from plugins.llms_txt.collation import get_collator
from plugins.llms_txt.config import (
    LlmsConfig,
    load_config_file,
    merge_options,
    parse_llms_config,
)
from plugins.llms_txt.index import build_llms_index

# Use MkDocs' recommended plugin logger namespace so debug logs appear only with `--verbose`.
logger = logging.getLogger(f"mkdocs.plugins.{__name__}")


def page_route(url: str) -> str:
    """Site route of a page: its URL without the trailing slash."""
    return (url or "").rstrip("/")


class SitePageLookup:
    """Read rendered pages from ``site_dir``.

    Routes recorded during the build map to their output file; any other
    route falls back to ``<route>/index.html``.
    """

    def __init__(self, site_dir: Path, dest_paths: Optional[Dict[str, str]] = None):
        self.site_dir = Path(site_dir).resolve()
        self.dest_paths = dict(dest_paths or {})

    def path_for(self, route: str) -> Path:
        dest = self.dest_paths.get(route)
        if dest is None:
            dest = f"{route}/index.html" if route else "index.html"
        return (self.site_dir / dest).resolve()

    def __call__(self, route: str) -> str:
        path = self.path_for(route)
        try:
            path.relative_to(self.site_dir)
        except ValueError:
            raise NotFoundError(route, str(path)) from None
        try:
            return path.read_text(encoding="utf-8")
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
            raise NotFoundError(route, str(path)) from None


class LlmsTxtPlugin(BasePlugin):
    """MkDocs plugin generating llms.txt and document-set files after build.

    Configuration options (all optional in mkdocs.yml when `config_file` holds them):
    - config_file (str): YAML file, relative to mkdocs.yml, with the options below.
    - title (str): Heading of llms.txt. Required here or in `config_file`.
    - description, details, notes (str): Optional llms.txt sections.
    - optional_links (list): `{label, url, description}` entries for the "Optional" section.
    - doc_sets (list): Document sets, see `config.parse_doc_set`.
    - page_separator (str): Text placed between pages of a document set.
    - locale (str): Collation locale for page ordering; defaults to the theme language.
    - max_workers (int): Pages processed in parallel per document set.
    - output (str): File name of the index, relative to site_dir.
    - debug (bool): Extra debug logging (visible with `--verbose`).
    """

    config_scheme = (
        ("config_file", c.Type(str)),
        ("title", c.Type(str)),
        ("description", c.Type(str)),
        ("details", c.Type(str)),
        ("notes", c.Type(str)),
        ("optional_links", c.Type(list)),
        ("doc_sets", c.Type(list)),
        ("page_separator", c.Type(str)),
        ("locale", c.Type(str)),
        ("max_workers", c.Type(int)),
        ("output", c.Type(str)),
        ("debug", c.Type(bool, default=False)),
    )

    def __init__(self):
        super().__init__()
        self.llms_config: Optional[LlmsConfig] = None
        self.site_url: Optional[str] = None
        self.locale = "en"
        # route -> dest_path (relative to site_dir), filled during the build
        self.pages: Dict[str, str] = {}

    # -------------------------------
    # Helpers
    # -------------------------------

    def _dbg(self, msg: str, *args) -> None:
        if not self.config.get("debug", False):
            return
        logger.debug("[llms_txt] " + msg, *args)

    @staticmethod
    def theme_locale(config) -> Optional[str]:
        theme = config.get("theme")
        if theme is None:
            return None
        for key in ("language", "locale"):
            try:
                value = theme[key]
            except (KeyError, TypeError):
                continue
            if value:
                return str(value)
        return None

    @staticmethod
    def resolve_output_path(site_dir: Path, rel_path: str) -> Optional[Path]:
        """Absolute output path, or None if it would escape site_dir."""
        site_root = Path(site_dir).resolve()
        target = (site_root / rel_path.lstrip("/")).resolve()
        try:
            target.relative_to(site_root)
        except ValueError:
            logger.error(
                f"[llms_txt] output path '{rel_path}' resolves outside the site directory"
            )
            return None
        if target == site_root:
            logger.error(f"[llms_txt] output path '{rel_path}' is not a file path")
            return None
        return target

    def write_artifact(self, site_dir: Path, rel_path: str, text: str) -> Optional[Path]:
        out_path = self.resolve_output_path(site_dir, rel_path)
        if out_path is None:
            return None
        try:
            out_path.parent.mkdir(parents=True, exist_ok=True)
            out_path.write_text(text, encoding="utf-8")
        except OSError as e:
            logger.error(f"[llms_txt] failed to write {out_path}: {e}")
            return None
        return out_path

    def build_doc_sets(self, site_dir: Path) -> List[DocSetSummary]:
        """Write every document set and return the summaries of those written."""
        collator = get_collator(self.locale)
        lookup = SitePageLookup(site_dir, self.pages)
        routes = list(self.pages)
        summaries: List[DocSetSummary] = []

        for doc_set in self.llms_config.doc_sets:
            artifact: DocSetArtifact = assemble_doc_set(
                doc_set,
                routes,
                lookup,
                collator=collator,
                site_url=self.site_url,
                page_separator=self.llms_config.page_separator,
                max_workers=self.llms_config.max_workers,
            )
            out_path = self.write_artifact(site_dir, doc_set.output_path, artifact.body)
            if out_path is None:
                continue
            if artifact.skipped:
                self._dbg("skipped in %s: %s", doc_set.title, ", ".join(artifact.skipped))
            logger.info(
                f"[llms_txt] doc set '{doc_set.title}' generated at {out_path} "
                f"({artifact.page_count} pages)"
            )
            summaries.append(artifact.summary)

        return summaries

    # -------------------------------
    # MkDocs hooks
    # -------------------------------

    def on_config(self, config: MkDocsConfig):
        """Load and validate llms options once; they stay fixed for the build."""
        inline = {key: value for key, value in self.config.items() if key != "debug"}
        file_options = {}
        config_file = inline.pop("config_file", None)
        if config_file:
            project_root = Path(config.get("config_file_path") or "mkdocs.yml").resolve().parent
            file_options = load_config_file((project_root / config_file).resolve())

        self.llms_config = parse_llms_config(merge_options(file_options, inline))
        self.site_url = config.get("site_url") or None
        self.locale = self.llms_config.locale or self.theme_locale(config) or "en"
        if not self.site_url:
            logger.warning("[llms_txt] site_url is not set; doc set links stay relative")
        self._dbg(
            "configured %d doc sets, locale=%s",
            len(self.llms_config.doc_sets),
            self.locale,
        )
        return config

    def on_pre_build(self, *, config: MkDocsConfig) -> None:
        self.pages = {}

    def on_post_page(self, output: str, *, page: Page, config: MkDocsConfig) -> str:
        """Record the route and output file of every rendered page."""
        route = page_route(page.url)
        self.pages[route] = page.file.dest_path.replace("\\", "/")
        return output

    def on_post_build(self, *, config: MkDocsConfig) -> None:
        if self.llms_config is None:
            return
        site_dir = Path(config["site_dir"])
        self._dbg("building llms artifacts for %d pages", len(self.pages))

        summaries = self.build_doc_sets(site_dir)
        llms_txt = build_llms_index(self.llms_config, summaries)
        out_path = self.write_artifact(site_dir, self.llms_config.output, llms_txt)
        if out_path is not None:
            logger.info(f"[llms_txt] {self.llms_config.output} written to {out_path}")
