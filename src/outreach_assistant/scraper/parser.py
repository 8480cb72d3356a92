"""HTML to plain text extraction."""

import re

from bs4 import BeautifulSoup


class PageTextExtractor:
    """Reduce an HTML page to whitespace-collapsed visible text."""

    # Tags whose contents are never useful to a summary
    REMOVE_TAGS = [
        "script",
        "style",
        "noscript",
        "iframe",
        "svg",
        "template",
    ]

    def extract(self, html: str, max_chars: int) -> str:
        """
        Strip markup and truncate.

        Args:
            html: Raw page content (HTML or plain text).
            max_chars: Maximum length of the returned text.
        """
        soup = BeautifulSoup(html, "lxml")

        # Remove unwanted elements
        for tag_name in self.REMOVE_TAGS:
            for tag in soup.find_all(tag_name):
                tag.decompose()

        text = self._clean_text(soup.get_text(separator=" "))
        return text[:max_chars]

    def title(self, html: str) -> str:
        """Extract the page title, if any."""
        soup = BeautifulSoup(html, "lxml")

        og_title = soup.find("meta", property="og:title")
        if og_title and og_title.get("content"):
            return og_title["content"].strip()

        title = soup.find("title")
        if title:
            return title.get_text(strip=True)

        return ""

    def _clean_text(self, text: str) -> str:
        """Collapse all whitespace runs to single spaces."""
        return re.sub(r"\s+", " ", text).strip()
