import json
from unittest.mock import AsyncMock, Mock

import pytest

from outreach_assistant.analyzer.context_analyzer import ContextEnricher
from outreach_assistant.errors import BackendError, EnrichmentError
from outreach_assistant.models.contact import ContactProfile, SellerProfile
from outreach_assistant.models.context import (
    NOT_AVAILABLE_MARKER,
    EnrichmentResult,
    EnrichmentStatus,
    FocusKind,
)

PAGE = """
<html><head><title>Globex</title><style>body { color: red; }</style>
<script>track("visit")</script></head>
<body><nav>Home  About</nav>
<h1>Globex Logistics</h1>
<p>We move   freight for
mid-size retailers.</p></body></html>
"""


def _fetcher(html=PAGE, error=None):
    fetcher = Mock()
    fetcher.fetch = AsyncMock(return_value=(html, error))
    return fetcher


def _client(reply="Globex moves freight for retailers."):
    client = Mock()
    client.complete = AsyncMock(return_value=reply)
    return client


@pytest.mark.asyncio
async def test_summarizes_stripped_page_text(settings):
    client = _client()
    enricher = ContextEnricher(_fetcher(), client, settings=settings)

    result = await enricher.fetch_and_summarize("https://globex.example", FocusKind.CONTACT_BUSINESS)

    assert result.status == EnrichmentStatus.OK
    assert result.prompt_text == "Globex moves freight for retailers."
    args = client.complete.call_args
    prompt = args.args[1]
    assert "We move freight for mid-size retailers." in prompt
    assert "track(" not in prompt
    assert "color: red" not in prompt
    assert "What problems do they solve?" in prompt
    assert args.kwargs["temperature"] == settings.enrichment_temperature
    assert args.kwargs["max_tokens"] == settings.enrichment_max_tokens


@pytest.mark.asyncio
async def test_page_text_is_truncated(settings):
    settings.enrichment_max_chars = 40
    client = _client()
    long_page = "<p>" + "word " * 500 + "</p>"
    enricher = ContextEnricher(_fetcher(long_page), client, settings=settings)

    await enricher.fetch_and_summarize("https://globex.example", FocusKind.CONTACT_BUSINESS)

    prompt = client.complete.call_args.args[1]
    content = prompt.split("Content: ", 1)[1]
    assert len(content) <= 40


@pytest.mark.asyncio
async def test_missing_url_is_unavailable_without_fetching(settings):
    fetcher = _fetcher()
    enricher = ContextEnricher(fetcher, _client(), settings=settings)

    result = await enricher.summarize_contact_business(ContactProfile(name="Dana Lee", website=None))

    assert result.status == EnrichmentStatus.NO_URL
    assert result.prompt_text == NOT_AVAILABLE_MARKER
    fetcher.fetch.assert_not_called()


@pytest.mark.asyncio
async def test_fetch_failure_degrades(settings):
    client = _client()
    enricher = ContextEnricher(_fetcher(None, "Timeout after 1.0s"), client, settings=settings)

    result = await enricher.fetch_and_summarize("https://down.example", FocusKind.CONTACT_BUSINESS)

    assert result.status == EnrichmentStatus.UNAVAILABLE
    assert result.error_message == "Timeout after 1.0s"
    client.complete.assert_not_called()


@pytest.mark.asyncio
async def test_backend_failure_degrades(settings):
    client = Mock()
    client.complete = AsyncMock(side_effect=BackendError("rate limited"))
    enricher = ContextEnricher(_fetcher(), client, settings=settings)

    result = await enricher.fetch_and_summarize("https://globex.example", FocusKind.SELLER_OFFERINGS)

    assert not result.is_available
    assert result.prompt_text == NOT_AVAILABLE_MARKER


@pytest.mark.asyncio
async def test_empty_summary_degrades(settings):
    enricher = ContextEnricher(_fetcher(), _client(""), settings=settings)

    result = await enricher.fetch_and_summarize("https://globex.example", FocusKind.CONTACT_BUSINESS)

    assert not result.is_available


@pytest.mark.asyncio
async def test_seller_with_description_is_not_fetched(settings):
    fetcher = _fetcher()
    enricher = ContextEnricher(fetcher, _client(), settings=settings)
    seller = SellerProfile(products_url="https://toolco.example/products", product_description="Scheduling software")

    result = await enricher.summarize_seller_offerings(seller)

    assert not result.is_available
    fetcher.fetch.assert_not_called()


@pytest.mark.asyncio
async def test_seller_offerings_use_offerings_question(settings):
    client = _client("Dispatch, Routes, Timesheets")
    fetcher = _fetcher()
    enricher = ContextEnricher(fetcher, client, settings=settings)

    result = await enricher.summarize_seller_offerings(SellerProfile(products_url="https://toolco.example/products"))

    assert result.summary == "Dispatch, Routes, Timesheets"
    fetcher.fetch.assert_awaited_once_with("https://toolco.example/products")
    assert "Extract products and services" in client.complete.call_args.args[1]


@pytest.mark.asyncio
async def test_cache_hit_skips_fetch(settings):
    cached = EnrichmentResult(url="https://globex.example", status=EnrichmentStatus.OK, summary="Cached summary")
    cache = Mock()
    cache.get_enrichment = AsyncMock(return_value=cached)
    cache.set_enrichment = AsyncMock()
    fetcher = _fetcher()
    enricher = ContextEnricher(fetcher, _client(), cache=cache, settings=settings)

    result = await enricher.fetch_and_summarize("https://globex.example", FocusKind.CONTACT_BUSINESS)

    assert result.summary == "Cached summary"
    fetcher.fetch.assert_not_called()


@pytest.mark.asyncio
async def test_only_successful_summaries_are_cached(settings):
    cache = Mock()
    cache.get_enrichment = AsyncMock(return_value=None)
    cache.set_enrichment = AsyncMock()

    ok = ContextEnricher(_fetcher(), _client(), cache=cache, settings=settings)
    await ok.fetch_and_summarize("https://globex.example", FocusKind.CONTACT_BUSINESS)
    failed = ContextEnricher(_fetcher(None, "HTTP error: 500"), _client(), cache=cache, settings=settings)
    await failed.fetch_and_summarize("https://down.example", FocusKind.CONTACT_BUSINESS)

    cache.set_enrichment.assert_awaited_once()
    kind, result = cache.set_enrichment.call_args.args
    assert kind == FocusKind.CONTACT_BUSINESS
    assert result.url == "https://globex.example"


@pytest.mark.asyncio
async def test_broken_cache_does_not_block_enrichment(settings):
    cache = Mock()
    cache.get_enrichment = AsyncMock(side_effect=RuntimeError("no such table"))
    cache.set_enrichment = AsyncMock(side_effect=RuntimeError("no such table"))
    enricher = ContextEnricher(_fetcher(), _client(), cache=cache, settings=settings)

    result = await enricher.fetch_and_summarize("https://globex.example", FocusKind.CONTACT_BUSINESS)

    assert result.is_available


@pytest.mark.asyncio
async def test_analyze_website_parses_json(settings):
    reply = "```json\n" + json.dumps({
        "company_name": "Globex",
        "description": "Freight for retailers.",
        "products": ["Linehaul", "Last mile"],
        "target_audience": "Mid-size retailers",
    }) + "\n```"
    enricher = ContextEnricher(_fetcher(), _client(reply), settings=settings)

    analysis = await enricher.analyze_website("https://globex.example")

    assert analysis.company_name == "Globex"
    assert analysis.products == ["Linehaul", "Last mile"]


@pytest.mark.asyncio
async def test_analyze_website_falls_back_on_bad_json(settings):
    enricher = ContextEnricher(_fetcher(), _client("I could not tell."), settings=settings)

    analysis = await enricher.analyze_website("https://globex.example")

    assert analysis.company_name == "Globex"
    assert analysis.description == "Could not analyze website"
    assert analysis.products == []


@pytest.mark.asyncio
async def test_analyze_website_fetch_failure_raises(settings):
    enricher = ContextEnricher(_fetcher(None, "Page not found (404)"), _client(), settings=settings)

    with pytest.raises(EnrichmentError, match="404"):
        await enricher.analyze_website("https://globex.example/missing")


@pytest.mark.asyncio
async def test_analyze_website_missing_description_uses_fallback(settings):
    reply = json.dumps({"company_name": "Globex", "products": ["Linehaul"]})
    enricher = ContextEnricher(_fetcher(), _client(reply), settings=settings)

    analysis = await enricher.analyze_website("https://globex.example")

    assert analysis.company_name == "Globex"
    assert analysis.description == "Could not analyze website"
