from typing import Sequence

from plugins.llms_txt.assemble import DocSetSummary
from plugins.llms_txt.config import LlmsConfig, OptionalLink


def format_optional_link(link: OptionalLink) -> str:
    line = f"- [{link.label}]({link.url})"
    if link.description:
        line += f": {link.description}"
    return line


def build_llms_index(config: LlmsConfig, summaries: Sequence[DocSetSummary]) -> str:
    """Compose llms.txt: heading, summary, details, doc sets, notes, optional links.

    Sections without content are left out; the rest are separated by a
    blank line.
    """
    sections = [
        f"# {config.title}",
        f"> {config.description}" if config.description else "",
        config.details or "",
    ]

    if summaries:
        sections.append(
            "## Documentation Sets\n\n"
            + "\n".join(summary.index_line() for summary in summaries)
        )

    if config.notes:
        sections.append("## Notes\n\n" + config.notes)

    if config.optional_links:
        sections.append(
            "## Optional\n\n"
            + "\n".join(format_optional_link(link) for link in config.optional_links)
        )

    return "\n\n".join(section for section in sections if section)
