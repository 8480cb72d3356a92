"""Website enrichment: turn a URL into a short business summary."""

import json
import logging
from typing import Optional, Protocol

from outreach_assistant.config import Settings, get_settings
from outreach_assistant.errors import BackendError, EnrichmentError
from outreach_assistant.generator.client import GenerationClient
from outreach_assistant.generator.prompts.variants import (
    ANALYSIS_SYSTEM_PROMPT,
    CONTACT_BUSINESS_FOCUS,
    ENRICHMENT_SYSTEM_PROMPT,
    SELLER_OFFERINGS_FOCUS,
    WEBSITE_ANALYSIS_TEMPLATE,
)
from outreach_assistant.generator.response_parser import strip_code_fences
from outreach_assistant.models.contact import ContactProfile, SellerProfile
from outreach_assistant.models.context import (
    EnrichmentResult,
    EnrichmentStatus,
    FocusKind,
    WebsiteAnalysis,
)
from outreach_assistant.scraper.fetcher import Fetcher
from outreach_assistant.scraper.parser import PageTextExtractor

logger = logging.getLogger(__name__)

FOCUS_QUESTIONS = {
    FocusKind.CONTACT_BUSINESS: CONTACT_BUSINESS_FOCUS,
    FocusKind.SELLER_OFFERINGS: SELLER_OFFERINGS_FOCUS,
}


class EnrichmentCache(Protocol):
    async def get_enrichment(self, url: str, kind: FocusKind) -> Optional[EnrichmentResult]: ...

    async def set_enrichment(self, kind: FocusKind, result: EnrichmentResult) -> None: ...


class ContextEnricher:
    """Summarize contact and seller websites for prompt inclusion.

    Nothing here raises for a missing or broken website: every failure
    comes back as an unavailable EnrichmentResult.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        client: GenerationClient,
        cache: Optional[EnrichmentCache] = None,
        settings: Optional[Settings] = None,
    ):
        self.fetcher = fetcher
        self.client = client
        self.cache = cache
        self.settings = settings or get_settings()
        self.extractor = PageTextExtractor()

    async def summarize_contact_business(self, contact: ContactProfile) -> EnrichmentResult:
        """Summarize what the contact's company does and what it struggles with."""
        return await self.fetch_and_summarize(contact.website, FocusKind.CONTACT_BUSINESS)

    async def summarize_seller_offerings(self, seller: SellerProfile) -> EnrichmentResult:
        """Derive an offerings list when the seller gave no description."""
        if not seller.needs_offerings_analysis:
            return EnrichmentResult.unavailable(None, "No products URL to analyze")
        return await self.fetch_and_summarize(seller.products_url, FocusKind.SELLER_OFFERINGS)

    async def fetch_and_summarize(
        self, url: Optional[str], focus: FocusKind
    ) -> EnrichmentResult:
        """
        Fetch a page and summarize it for one focus question.

        Checks cache first, then fetches if needed. Only successful
        summaries are cached.
        """
        if not url or not url.strip():
            return EnrichmentResult.unavailable(None, "No website provided")
        url = url.strip()

        cached = await self._cache_get(url, focus)
        if cached:
            logger.info(f"Using cached {focus.value} summary for {url}")
            return cached

        logger.info(f"Enriching {focus.value} from {url}")
        html, error = await self.fetcher.fetch(url)
        if not html or error:
            logger.warning(f"Could not fetch {url}: {error}")
            return EnrichmentResult.unavailable(url, error or "Empty response")

        text = self.extractor.extract(html, self.settings.enrichment_max_chars)
        if not text:
            logger.warning(f"No text content on {url}")
            return EnrichmentResult.unavailable(url, "No text content")

        prompt = f"{FOCUS_QUESTIONS[focus]}\n\nWebsite: {url}\nContent: {text}"
        try:
            summary = await self.client.complete(
                ENRICHMENT_SYSTEM_PROMPT,
                prompt,
                temperature=self.settings.enrichment_temperature,
                max_tokens=self.settings.enrichment_max_tokens,
                model=self.settings.ai_model_fast,
            )
        except BackendError as e:
            logger.warning(f"Could not summarize {url}: {e}")
            return EnrichmentResult.unavailable(url, str(e))

        if not summary:
            return EnrichmentResult.unavailable(url, "Empty summary")

        result = EnrichmentResult(url=url, status=EnrichmentStatus.OK, summary=summary)
        await self._cache_set(focus, result)
        return result

    async def analyze_website(self, url: str) -> WebsiteAnalysis:
        """
        Extract a structured company description from a website.

        Raises:
            EnrichmentError: if the website cannot be fetched.
            BackendError: if the backend call fails.
        """
        html, error = await self.fetcher.fetch(url)
        if not html or error:
            raise EnrichmentError(f"Could not fetch website: {error or 'empty response'}")

        text = self.extractor.extract(html, self.settings.analysis_max_chars)
        raw = await self.client.complete(
            ANALYSIS_SYSTEM_PROMPT,
            WEBSITE_ANALYSIS_TEMPLATE.format(url=url, content=text),
            temperature=self.settings.enrichment_temperature,
            max_tokens=1000,
            model=self.settings.ai_model_fast,
        )

        try:
            data = json.loads(strip_code_fences(raw))
        except json.JSONDecodeError:
            logger.warning(f"Unparsable website analysis for {url}")
            return WebsiteAnalysis(company_name=self.extractor.title(html))

        if not isinstance(data, dict):
            return WebsiteAnalysis(company_name=self.extractor.title(html))
        return WebsiteAnalysis.from_dict(data)

    async def _cache_get(self, url: str, focus: FocusKind) -> Optional[EnrichmentResult]:
        if not self.cache:
            return None
        try:
            return await self.cache.get_enrichment(url, focus)
        except Exception as e:
            logger.warning(f"Enrichment cache read failed for {url}: {e}")
            return None

    async def _cache_set(self, focus: FocusKind, result: EnrichmentResult):
        if not self.cache:
            return
        try:
            await self.cache.set_enrichment(focus, result)
        except Exception as e:
            logger.warning(f"Enrichment cache write failed for {result.url}: {e}")
