# services.py
import logging
import re
from typing import Any, Dict, List, Optional

import httpx

from models import ChannelInfo, ContentPackage, VideoDetail, VideoStats, VideoSummary

logger = logging.getLogger(__name__)

SECTION_NAMES = ("SEO_TITLE", "DESCRIPTION", "KEYWORDS", "VEO_SCRIPT")
# Delimiters are matched leniently: "=== KEYWORDS ===" counts as "===KEYWORDS===".
DELIMITER_PATTERNS = tuple(re.compile(rf"===\s*{name}\s*===") for name in SECTION_NAMES)

DEFAULT_TITLE = "Generated Title"
DEFAULT_DESCRIPTION = "Generated Description"
DEFAULT_KEYWORDS = "keyword1, keyword2"

PROMPT_TEMPLATE = """Act as a Viral Content Strategist. Based on this title: [{title}] and tags: [{tags}], generate a comprehensive content package.

You MUST use the following delimiters exactly to separate sections:

===SEO_TITLE===
(Write 1 highly optimized viral title. You MUST include #shorts and 2-3 relevant hashtags at the end)

===DESCRIPTION===
(Write a compelling description covering what the video is about, with keywords and hashtags)

===KEYWORDS===
(Provide 20 high-ranking keywords, separated by commas. Do NOT use a numbered list. Example: keyword1, keyword2, keyword3)

===VEO_SCRIPT===
(Write a professional 8-second Veo 3 AI video script for a hook. Include Scene details and Visual Prompts. Do NOT include Voiceover/Audio instructions unless they are critical to the content)
"""


class ProviderFailure(Exception):
    """An upstream provider call failed or returned something undecodable."""

class SearchFailure(ProviderFailure):
    pass

class DetailFailure(ProviderFailure):
    pass

class GenerationFailure(ProviderFailure):
    pass


def build_prompt(detail: VideoDetail) -> str:
    """Builds the content-package instruction for one video."""
    return PROMPT_TEMPLATE.format(title=detail.title, tags=", ".join(detail.tags))

def normalize_keywords(raw: str) -> str:
    """Rewrites one-keyword-per-line output into a comma-separated string.

    Only applied when the text holds no comma at all; mixed comma and newline
    output is returned as-is.
    """
    if "," in raw:
        return raw
    return re.sub(r"\r?\n", ", ", raw)

def extract_sections(text: str) -> List[Optional[str]]:
    """Returns the trimmed span of each section, or None when its delimiter is missing.

    A section runs from its delimiter to the nearest later-ordered delimiter
    found after it, or to the end of the text.
    """
    spans: List[Optional[str]] = []
    for index, pattern in enumerate(DELIMITER_PATTERNS):
        match = pattern.search(text)
        if not match:
            spans.append(None)
            continue
        start, end = match.end(), len(text)
        for later in DELIMITER_PATTERNS[index + 1:]:
            following = later.search(text, start)
            if following:
                end = min(end, following.start())
        spans.append(text[start:end].strip())
    return spans

def parse_content_package(text: str) -> ContentPackage:
    """Parses a delimiter-sectioned response, falling back per section."""
    title, description, keywords, script = extract_sections(text)
    return ContentPackage(
        seo_title=title or DEFAULT_TITLE,
        description=description or DEFAULT_DESCRIPTION,
        keywords=DEFAULT_KEYWORDS if keywords is None else normalize_keywords(keywords),
        veo_script=script or text,
        raw=text,
    )

def _text(item: Dict[str, Any], key: str) -> str:
    value = item.get(key)
    return "" if value is None else str(value)


class ProviderClient:
    """Base for the HTTP providers: one GET per call, failures wrapped."""
    failure = ProviderFailure

    def __init__(self, base_url: str, timeout: float, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def _get(self, path: str, params: Dict[str, str]) -> httpx.Response:
        url = f"{self.base_url}{path}"
        logger.debug("GET %s params=%s", url, list(params))
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("%s: request to %s failed: %s", self.__class__.__name__, url, e)
            raise self.failure(f"request to {path} failed") from e
        return response

    def _json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            logger.warning("%s: undecodable JSON from %s", self.__class__.__name__, response.url)
            raise self.failure("response was not valid JSON") from e


class SearchClient(ProviderClient):
    """Searches the video provider by keyword."""
    failure = SearchFailure

    async def search(self, query: str) -> List[VideoSummary]:
        """Returns the provider's results in the provider's order."""
        payload = self._json(await self._get("/search", {"q": query}))
        if not isinstance(payload, dict):
            raise SearchFailure("search payload is not an object")
        items = payload.get("results") or []
        if not isinstance(items, list):
            raise SearchFailure("search results are not a list")

        results = []
        for item in items:
            parsed = self._parse_item(item)
            if parsed:
                results.append(parsed)
        logger.info("search %r returned %d results", query, len(results))
        return results

    def _parse_item(self, item: Any) -> Optional[VideoSummary]:
        """Parses a single raw result into a VideoSummary; None if it has no id."""
        if not isinstance(item, dict) or not item.get("id"):
            return None
        return VideoSummary(
            video_id=str(item["id"]),
            title=_text(item, "title"),
            channel=_text(item, "channel"),
            views=_text(item, "views"),
            published=_text(item, "published"),
            duration=_text(item, "duration"),
            thumbnail=_text(item, "thumbnail"),
        )


class DetailClient(ProviderClient):
    """Fetches full metadata for one video."""
    failure = DetailFailure

    async def get_details(self, video_id: str) -> VideoDetail:
        payload = self._json(await self._get("/details", {"id": video_id}))
        if not isinstance(payload, dict) or not payload.get("id"):
            raise DetailFailure("details payload has no video id")

        channel = payload.get("channel") or {}
        stats = payload.get("stats") or {}
        tags = payload.get("tags") or []
        if not isinstance(channel, dict) or not isinstance(stats, dict) or not isinstance(tags, list):
            raise DetailFailure("details payload has an unexpected shape")

        return VideoDetail(
            video_id=str(payload["id"]),
            title=_text(payload, "title"),
            channel=ChannelInfo(
                name=_text(channel, "name"),
                subscribers=_text(channel, "subscribers"),
                url=_text(channel, "url"),
            ),
            stats=VideoStats(
                views=_text(stats, "views"),
                likes=_text(stats, "likes"),
                date=_text(stats, "date"),
            ),
            tags=tuple(str(tag) for tag in tags if tag is not None),
            description=_text(payload, "description"),
        )


class ContentGenerator(ProviderClient):
    """Asks the text-generation provider for a content package."""
    failure = GenerationFailure

    async def generate(self, detail: VideoDetail) -> ContentPackage:
        """Only transport failures raise; a garbled body degrades into fallbacks."""
        response = await self._get("/", {"q": build_prompt(detail)})
        text = response.text
        logger.info("generation for %s returned %d chars", detail.video_id, len(text))
        return parse_content_package(text)
