"""
Keyword Generation Workflow

Produces a Keyword Set for one facility:

1. Crawl the Google Business Profile and the official website (each optional,
   failures are logged and skipped)
2. Build the prompt from facility attributes plus crawl text
3. Call Gemini, retried with backoff on retryable failures
4. Extract and validate the JSON keyword object
5. On any failure in 3-4, use the static fallback table

generate() never raises: it always returns a GenerationResult whose source
says whether the keywords came from the model or the fallback table. It
does not write to the database; persistence is the route's job.
"""

import logging
from typing import Any, Awaitable, Callable, List, Mapping, Optional, Tuple

from backend.agents.keywords import (
    KEYWORD_SYSTEM_PROMPT,
    CrawlResult,
    GenerationResult,
    build_keyword_user_prompt,
    generate_fallback_keywords,
    parse_keyword_response,
)
from backend.services.crawl_client import CrawlClient
from backend.services.error_classifier import (
    RetryPolicy,
    classify,
    user_message,
    with_retry,
)
from backend.services.text_generation_client import TextGenerationClient

logger = logging.getLogger(__name__)


class KeywordGenerator:
    """
    Keyword generation workflow.

    Args:
        text_client: Gemini client
        crawl_client: Firecrawl client (None disables crawling)
        retry_policy: Backoff for the generation call
        language: Language the keywords are requested in
        sleep: Awaitable sleep used between retries (injectable for tests)
    """

    def __init__(
        self,
        text_client: TextGenerationClient,
        crawl_client: Optional[CrawlClient] = None,
        retry_policy: Optional[RetryPolicy] = None,
        language: str = "Japanese",
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        self.text_client = text_client
        self.crawl_client = crawl_client
        self.retry_policy = retry_policy or RetryPolicy()
        self.language = language
        self._sleep = sleep

    async def _crawl(
        self,
        label: str,
        crawl: Callable[[str], Awaitable[CrawlResult]],
        url: Optional[str],
    ) -> Optional[CrawlResult]:
        if not url:
            return None

        try:
            result = await crawl(url)
        except Exception as e:
            classification = classify(e)
            logger.warning(
                f"Crawl of {label} failed ({classification.category.value}): {e}; "
                f"continuing without it"
            )
            return None

        return None if result.is_empty() else result

    async def _crawl_sources(
        self, facility: Mapping[str, Any]
    ) -> Tuple[Optional[CrawlResult], Optional[CrawlResult], List[str]]:
        if self.crawl_client is None:
            return None, None, []

        business_profile = await self._crawl(
            "gbp", self.crawl_client.crawl_business_profile, facility.get("gbp_url")
        )
        website = await self._crawl(
            "website", self.crawl_client.crawl_website, facility.get("official_site_url")
        )

        crawled = []
        if business_profile is not None:
            crawled.append("gbp")
        if website is not None:
            crawled.append("website")

        return website, business_profile, crawled

    async def _generate_with_model(
        self,
        facility: Mapping[str, Any],
        website: Optional[CrawlResult],
        business_profile: Optional[CrawlResult],
    ):
        prompt = build_keyword_user_prompt(
            facility,
            website=website,
            business_profile=business_profile,
            language=self.language,
        )

        async def call_model() -> str:
            return await self.text_client.generate_text(prompt, KEYWORD_SYSTEM_PROMPT)

        retry_kwargs = {"sleep": self._sleep} if self._sleep else {}
        text = await with_retry(call_model, self.retry_policy, **retry_kwargs)

        return parse_keyword_response(text)

    async def generate(self, facility: Mapping[str, Any]) -> GenerationResult:
        """
        Generate keywords for a facility.

        Args:
            facility: Facility row (facility_name, business_type, address,
                official_site_url, gbp_url, ... ; all optional)

        Returns:
            GenerationResult with all three categories present
        """
        facility_id = facility.get("id")
        logger.info(f"Keyword generation started for facility {facility_id}")

        website, business_profile, crawled = await self._crawl_sources(facility)
        logger.info(f"Crawl step finished for facility {facility_id}: sources={crawled}")

        try:
            keywords = await self._generate_with_model(facility, website, business_profile)
        except Exception as e:
            classification = classify(e)
            logger.warning(
                f"Keyword generation failed for facility {facility_id} "
                f"({classification.category.value}: {user_message(classification)}): {e}; "
                f"using fallback keywords"
            )
            return GenerationResult(
                keywords=generate_fallback_keywords(facility),
                source="fallback",
                error_category=classification.category.value,
                crawled_sources=crawled,
            )

        counts = {category: len(values) for category, values in keywords.items()}
        logger.info(f"Keyword generation succeeded for facility {facility_id}: {counts}")

        return GenerationResult(keywords=keywords, source="ai", crawled_sources=crawled)


def build_keyword_generator(settings) -> KeywordGenerator:
    """Build the workflow and its clients from application settings."""
    text_client = TextGenerationClient(
        api_key=settings.GOOGLE_API_KEY,
        model=settings.GEMINI_MODEL,
        timeout=settings.AI_TIMEOUT_SECONDS,
    )

    crawl_client = None
    if settings.FIRECRAWL_API_KEY:
        crawl_client = CrawlClient(
            api_key=settings.FIRECRAWL_API_KEY,
            base_url=settings.FIRECRAWL_API_URL,
            timeout=settings.CRAWL_TIMEOUT_SECONDS,
        )
    else:
        logger.warning("FIRECRAWL_API_KEY not configured; keyword generation will skip crawling")

    if not text_client.is_configured:
        logger.warning("GOOGLE_API_KEY not configured; keyword generation will use fallback keywords")

    retry_policy = RetryPolicy(
        max_attempts=settings.AI_RETRY_MAX_ATTEMPTS,
        initial_delay=settings.AI_RETRY_INITIAL_DELAY,
        max_delay=settings.AI_RETRY_MAX_DELAY,
        backoff_factor=settings.AI_RETRY_BACKOFF_FACTOR,
    )

    return KeywordGenerator(
        text_client=text_client,
        crawl_client=crawl_client,
        retry_policy=retry_policy,
        language=settings.KEYWORD_LANGUAGE,
    )
