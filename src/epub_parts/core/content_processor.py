"""Render chapter XHTML as markdown, plain text or cleaned html."""

from typing import Literal

from bs4 import BeautifulSoup
from markdownify import markdownify as md

OutputFormat = Literal["markdown", "text", "html"]


class ContentProcessor:
    """Convert chapter documents into readable formats."""

    def process(self, html_content: str | bytes, output_format: OutputFormat = "markdown") -> str:
        """Convert XHTML to the requested format."""
        soup = BeautifulSoup(html_content, "lxml")

        # Navigation and styling carry no chapter text
        for tag in soup(["script", "style", "nav", "head"]):
            tag.decompose()

        if output_format == "html":
            return str(soup.body or soup)
        elif output_format == "text":
            return self._to_plain_text(soup)
        else:
            return self._to_markdown(soup)

    def _to_markdown(self, soup: BeautifulSoup) -> str:
        markdown = md(
            str(soup.body or soup),
            heading_style="ATX",
            bullets="-",
            strip=["a", "img"],
        )
        # Collapse runs of blank lines
        cleaned: list[str] = []
        prev_blank = False
        for line in (line.rstrip() for line in markdown.split("\n")):
            is_blank = not line.strip()
            if not (is_blank and prev_blank):
                cleaned.append(line)
            prev_blank = is_blank
        return "\n".join(cleaned).strip()

    def _to_plain_text(self, soup: BeautifulSoup) -> str:
        blocks = soup.find_all(["p", "h1", "h2", "h3", "h4", "h5", "h6", "li", "blockquote"])
        texts = (block.get_text(" ", strip=True) for block in blocks)
        return "\n\n".join(text for text in texts if text)

    def get_stats(self, content: str) -> dict[str, int]:
        """Word, character and paragraph counts of rendered content."""
        paragraphs = [p for p in content.split("\n\n") if p.strip()]
        return {
            "word_count": len(content.split()),
            "character_count": len(content),
            "paragraph_count": len(paragraphs),
        }
