# config.py
from dataclasses import dataclass

@dataclass
class Config:
    """Holds all application configuration."""
    SEARCH_API_BASE: str = "https://yt-scrapper.fakcloud.tech"
    AI_API_BASE: str = "https://chat-gpt.fak-official.workers.dev"
    REQUEST_TIMEOUT: float = 30.0
    GENERATION_TIMEOUT: float = 120.0
    TAG_PREVIEW_LIMIT: int = 5
