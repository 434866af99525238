"""
Tests for locating the main content, title and description of a rendered page.
"""

import pytest

from plugins.llms_txt.extract import (
    DEFAULT_TITLE,
    MissingMainContentError,
    extract_page,
)


def page(body: str, head: str = "") -> str:
    return f"<html><head>{head}</head><body>{body}</body></html>"


class TestContentExtractor:
    """Title, description and content-root extraction."""

    def test_title_taken_from_first_h1(self):
        """Test: the first H1 in main becomes the title and leaves the body."""
        result = extract_page(page("<main><h1> Getting   started </h1><p>Body</p></main>"))
        assert result.title == "Getting started"
        assert result.content.find("h1") is None
        assert "Body" in result.content.get_text()

    def test_h1_outside_main_ignored(self):
        """Test: only headings inside the main root count."""
        html = page("<h1>Site</h1><main><p>Body</p></main>")
        assert extract_page(html).title == DEFAULT_TITLE

    def test_untitled_without_h1(self):
        """Test: a page without H1 is titled "Untitled"."""
        assert extract_page(page("<main><h2>Sub</h2></main>")).title == "Untitled"

    def test_meta_description(self):
        """Test: meta description is read and stripped; absent or empty gives None."""
        head = '<meta name="description" content="  Short summary ">'
        assert extract_page(page("<main></main>", head)).description == "Short summary"
        assert extract_page(page("<main></main>")).description is None
        empty = '<meta name="description" content=" ">'
        assert extract_page(page("<main></main>", empty)).description is None

    def test_missing_main_raises(self):
        """Test: a page without the main selector raises MissingMainContentError."""
        with pytest.raises(MissingMainContentError) as excinfo:
            extract_page(page("<div>No main here</div>"))
        assert excinfo.value.selector == "main"

    def test_custom_main_selector(self):
        """Test: a custom selector picks the content root."""
        html = page('<main><nav>menu</nav><article class="doc"><h1>T</h1><p>x</p></article></main>')
        result = extract_page(html, main_selector="article.doc")
        assert result.title == "T"
        assert "menu" not in result.content.get_text()

    def test_always_ignored_elements(self):
        """Test: header, footer and further h1 elements are removed."""
        html = page(
            "<main><header>Top</header><h1>Title</h1><p>Text</p>"
            "<h1>Second</h1><footer>Bottom</footer></main>"
        )
        result = extract_page(html)
        text = result.content.get_text()
        assert result.title == "Title"
        assert "Top" not in text
        assert "Bottom" not in text
        assert "Second" not in text
        assert "Text" in text

    def test_ignore_selectors(self):
        """Test: caller selectors are removed, also from inside the title."""
        html = page(
            '<main><h1>Title<a class="headerlink" href="#t">¶</a></h1>'
            '<nav class="toc">toc</nav><p>Text</p></main>'
        )
        result = extract_page(html, ignore_selectors=[".headerlink", "nav.toc"])
        assert result.title == "Title"
        assert "toc" not in result.content.get_text()

    def test_title_inside_ignored_container(self):
        """Test: the first H1 is the title even when an ignored element holds it."""
        html = page(
            '<main><div class="hero"><h1>Real</h1><p>Banner</p></div>'
            "<h1>Second</h1><p>Text</p></main>"
        )
        result = extract_page(html, ignore_selectors=[".hero"])
        text = result.content.get_text()
        assert result.title == "Real"
        assert "Banner" not in text
        assert "Second" not in text
        assert "Text" in text
