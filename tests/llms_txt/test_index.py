from plugins.llms_txt.assemble import DocSetSummary
from plugins.llms_txt.config import LlmsConfig, OptionalLink
from plugins.llms_txt.index import build_llms_index


class TestIndexBuilder:
    """llms.txt templating."""

    def test_minimal(self):
        """Test: only the title is emitted when nothing else is configured."""
        assert build_llms_index(LlmsConfig(title="Project"), []) == "# Project"

    def test_all_sections(self):
        """Test: every section appears in order, separated by blank lines."""
        config = LlmsConfig(
            title="Project",
            description="A short summary",
            details="Longer guidance.",
            notes="Mind the gap.",
            optional_links=(
                OptionalLink("Changelog", "https://example.com/changelog", "Releases"),
                OptionalLink("Blog", "https://example.com/blog"),
            ),
        )
        summaries = [
            DocSetSummary("Full", "https://example.com/llms-full.txt", "Everything"),
            DocSetSummary("Small", "https://example.com/llms-small.txt", "Outline"),
        ]
        assert build_llms_index(config, summaries) == (
            "# Project\n\n"
            "> A short summary\n\n"
            "Longer guidance.\n\n"
            "## Documentation Sets\n\n"
            "- [Full](https://example.com/llms-full.txt): Everything\n"
            "- [Small](https://example.com/llms-small.txt): Outline\n\n"
            "## Notes\n\n"
            "Mind the gap.\n\n"
            "## Optional\n\n"
            "- [Changelog](https://example.com/changelog): Releases\n"
            "- [Blog](https://example.com/blog)"
        )

    def test_doc_sets_section_omitted_when_empty(self):
        """Test: no "Documentation Sets" heading without summaries."""
        result = build_llms_index(LlmsConfig(title="P", notes="n"), [])
        assert "Documentation Sets" not in result
        assert result == "# P\n\n## Notes\n\nn"
