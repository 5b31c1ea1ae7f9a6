import json

import httpx
import pytest

from config import Config
from services import ContentGenerator, DetailClient, SearchClient

SEARCH_PAYLOAD = {
    "query": "cat videos",
    "count": 2,
    "results": [
        {
            "type": "video",
            "id": "abc123",
            "title": "Funniest Cats of 2024",
            "channel": "Cat Central",
            "views": "1.2M views",
            "published": "2 weeks ago",
            "duration": "10:02",
            "thumbnail": "https://i.ytimg.com/vi/abc123/hq720.jpg",
        },
        {
            "type": "video",
            "id": "def456",
            "title": "Cats vs Cucumbers",
            "channel": "Pet Lab",
            "views": "845,112 views",
            "published": "1 year ago",
            "duration": "4:31",
            "thumbnail": "https://i.ytimg.com/vi/def456/hq720.jpg",
        },
    ],
}

DETAIL_PAYLOAD = {
    "id": "abc123",
    "title": "Funniest Cats of 2024",
    "channel": {"name": "Cat Central", "subscribers": "2.1M", "url": "https://www.youtube.com/@catcentral"},
    "stats": {"views": "1,204,332", "likes": "54K", "date": "Mar 3, 2024"},
    "tags": ["cats", "funny"],
    "description": "The best cat clips of the year.",
}

GENERATED_BODY = """===SEO_TITLE===
Cats Doing The Impossible 😹 #shorts #cats #funny

===DESCRIPTION===
Watch the funniest cats of the year.
#cats #funnycats

===KEYWORDS===
funny cats, cat videos, cute cats

===VEO_SCRIPT===
Scene 1: A cat leaps in slow motion.
Visual Prompt: golden hour, shallow depth of field.
"""


class ProviderStub:
    """Serves canned search, detail and generation responses and records requests."""

    def __init__(self, search=SEARCH_PAYLOAD, detail=DETAIL_PAYLOAD, generated=GENERATED_BODY):
        self.search = search
        self.detail = detail
        self.generated = generated
        self.statuses = {}
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        status = self.statuses.get(path, 200)
        if path == "/search":
            return httpx.Response(status, text=json.dumps(self.search))
        if path == "/details":
            return httpx.Response(status, text=json.dumps(self.detail))
        return httpx.Response(status, text=self.generated)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def config():
    return Config()

@pytest.fixture
def provider():
    return ProviderStub()

@pytest.fixture
def clients(provider, config):
    transport = provider.transport
    return (
        SearchClient(config.SEARCH_API_BASE, config.REQUEST_TIMEOUT, transport=transport),
        DetailClient(config.SEARCH_API_BASE, config.REQUEST_TIMEOUT, transport=transport),
        ContentGenerator(config.AI_API_BASE, config.GENERATION_TIMEOUT, transport=transport),
    )
