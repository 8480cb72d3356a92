"""Website fetching and text extraction."""

from outreach_assistant.scraper.fetcher import Fetcher
from outreach_assistant.scraper.parser import PageTextExtractor

__all__ = ["Fetcher", "PageTextExtractor"]
