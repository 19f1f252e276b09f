"""
Tests for the keyword generation workflow.

The text-generation and crawl clients are replaced with AsyncMock so no
network call is made; retry sleeps are injected as no-ops.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from backend.agents.keywords import CrawlResult
from backend.services.error_classifier import RetryPolicy
from backend.services.keyword_generation_service import KeywordGenerator
from backend.utils.errors import UpstreamError


async def _no_sleep(delay):
    return None


def _model_output():
    return json.dumps({
        "menu_service": ["ランチセット", "テイクアウト"],
        "environment_facility": ["個室あり"],
        "recommended_scene": ["女子会", "記念日"],
    }, ensure_ascii=False)


@pytest.fixture
def text_client():
    client = MagicMock()
    client.generate_text = AsyncMock(return_value=_model_output())
    return client


@pytest.fixture
def crawl_client():
    client = MagicMock()
    client.crawl_website = AsyncMock(
        return_value=CrawlResult(title="Sample Diner", description="Family diner", content="Menu ...")
    )
    client.crawl_business_profile = AsyncMock(
        return_value=CrawlResult(title="Sample Diner - Google", description="", content="Reviews ...")
    )
    return client


def _generator(text_client, crawl_client=None, max_attempts=3):
    return KeywordGenerator(
        text_client=text_client,
        crawl_client=crawl_client,
        retry_policy=RetryPolicy(max_attempts=max_attempts, initial_delay=0, max_delay=0),
        sleep=_no_sleep,
    )


class TestSuccessfulGeneration:
    """Model output is parsed and returned with source 'ai'."""

    @pytest.mark.asyncio
    async def test_returns_model_keywords(self, text_client):
        result = await _generator(text_client).generate({"facility_name": "Sample Diner"})

        assert result.source == "ai"
        assert result.error_category is None
        assert result.keywords["menu_service"] == ["ランチセット", "テイクアウト"]
        assert set(result.keywords) == {"menu_service", "environment_facility", "recommended_scene"}

    @pytest.mark.asyncio
    async def test_crawls_both_urls_and_puts_content_in_prompt(self, text_client, crawl_client):
        facility = {
            "facility_name": "Sample Diner",
            "official_site_url": "https://diner.example.com",
            "gbp_url": "https://maps.google.com/?cid=1",
        }

        result = await _generator(text_client, crawl_client).generate(facility)

        crawl_client.crawl_business_profile.assert_awaited_once_with("https://maps.google.com/?cid=1")
        crawl_client.crawl_website.assert_awaited_once_with("https://diner.example.com")
        prompt = text_client.generate_text.await_args.args[0]
        assert "Family diner" in prompt
        assert "Reviews ..." in prompt
        assert result.crawled_sources == ["gbp", "website"]

    @pytest.mark.asyncio
    async def test_no_urls_means_no_crawl(self, text_client, crawl_client):
        await _generator(text_client, crawl_client).generate({"facility_name": "Sample Diner"})

        crawl_client.crawl_website.assert_not_awaited()
        crawl_client.crawl_business_profile.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_profile_url_only_uses_profile_crawler(self, text_client, crawl_client):
        facility = {"facility_name": "Sample Diner", "gbp_url": "https://maps.google.com/?cid=1"}

        result = await _generator(text_client, crawl_client).generate(facility)

        crawl_client.crawl_business_profile.assert_awaited_once_with("https://maps.google.com/?cid=1")
        crawl_client.crawl_website.assert_not_awaited()
        assert result.crawled_sources == ["gbp"]

    @pytest.mark.asyncio
    async def test_crawl_failure_does_not_stop_generation(self, text_client, crawl_client):
        crawl_client.crawl_website.side_effect = UpstreamError("Crawl request timed out after 30s")
        facility = {"facility_name": "Sample Diner", "official_site_url": "https://diner.example.com"}

        result = await _generator(text_client, crawl_client).generate(facility)

        assert result.source == "ai"
        assert result.crawled_sources == []
        text_client.generate_text.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_retryable_failure_is_retried(self, text_client):
        text_client.generate_text.side_effect = [
            UpstreamError("Text generation API error 429 RESOURCE_EXHAUSTED"),
            _model_output(),
        ]

        result = await _generator(text_client).generate({"facility_name": "Sample Diner"})

        assert result.source == "ai"
        assert text_client.generate_text.await_count == 2


class TestFallback:
    """Any failure in generation or parsing degrades to the fallback table."""

    @pytest.mark.asyncio
    async def test_sample_diner_fallback(self, text_client):
        text_client.generate_text.side_effect = UpstreamError("Text generation API key is not configured")

        result = await _generator(text_client).generate(
            {"facility_name": "Sample Diner", "business_type": "restaurant"}
        )

        assert result.source == "fallback"
        assert result.error_category == "credentials"
        assert all(result.keywords[category] for category in result.keywords)
        assert any(
            "Sample Diner" in keyword
            for keywords in result.keywords.values()
            for keyword in keywords
        )

    @pytest.mark.asyncio
    async def test_credentials_failure_is_not_retried(self, text_client):
        text_client.generate_text.side_effect = UpstreamError("Invalid API key")

        await _generator(text_client).generate({"facility_name": "Sample Diner"})

        assert text_client.generate_text.await_count == 1

    @pytest.mark.asyncio
    async def test_unparseable_output_falls_back(self, text_client):
        text_client.generate_text.return_value = "Sorry, I cannot help with that."

        result = await _generator(text_client).generate({"facility_name": "Sample Diner"})

        assert result.source == "fallback"
        assert result.error_category == "parse"

    @pytest.mark.asyncio
    async def test_wrong_shape_falls_back(self, text_client):
        text_client.generate_text.return_value = '{"menu_service": "not a list"}'

        result = await _generator(text_client).generate({"facility_name": "Sample Diner"})

        assert result.source == "fallback"

    @pytest.mark.asyncio
    async def test_exhausted_retries_fall_back(self, text_client):
        text_client.generate_text.side_effect = UpstreamError("Text generation timed out after 60s")

        result = await _generator(text_client, max_attempts=2).generate({"facility_name": "Sample Diner"})

        assert result.source == "fallback"
        assert result.error_category == "timeout"
        assert text_client.generate_text.await_count == 2

    @pytest.mark.asyncio
    async def test_fallback_is_deterministic(self, text_client):
        text_client.generate_text.side_effect = UpstreamError("Invalid API key")
        facility = {"facility_name": "Sample Diner", "business_type": "restaurant"}
        generator = _generator(text_client)

        first = await generator.generate(facility)
        second = await generator.generate(facility)

        assert first.keywords == second.keywords

    @pytest.mark.asyncio
    async def test_unexpected_exception_still_falls_back(self, text_client):
        text_client.generate_text.side_effect = RuntimeError("boom")

        result = await _generator(text_client).generate({})

        assert result.source == "fallback"
        assert result.error_category == "unknown"
        assert all(result.keywords[category] for category in result.keywords)
