"""YouTube search results as embeddable players."""

import logging
from dataclasses import dataclass, asdict
from typing import List, Optional
from urllib.parse import quote

from playwright.async_api import Page
from selectolax.lexbor import LexborHTMLParser

from shopping_agent.config import settings

logger = logging.getLogger(__name__)

SEARCH_URL = "https://www.youtube.com/results?search_query="
EMBED_URL = "https://www.youtube.com/embed/"
VIDEO_LINK_SELECTOR = "ytd-video-renderer a#video-title, ytd-grid-video-renderer a#video-title"


@dataclass
class VideoEmbed:
    video_id: str
    title: str
    embed_url: str

    def to_dict(self) -> dict:
        data = asdict(self)
        return {
            "videoId": data["video_id"],
            "title": data["title"],
            "embedUrl": data["embed_url"],
        }


def embed_url(video_id: str) -> str:
    return f"{EMBED_URL}{video_id}"


def video_id_from_href(href: str) -> Optional[str]:
    """Pull the v= parameter out of a watch link."""
    if not href or "v=" not in href:
        return None
    video_id = href.split("v=", 1)[1].split("&", 1)[0]
    return video_id or None


def parse_video_links(html: str, limit: int) -> List[VideoEmbed]:
    """Read up to ``limit`` video links from a rendered results page."""
    tree = LexborHTMLParser(html)
    videos = []
    for link in tree.css(VIDEO_LINK_SELECTOR)[:limit]:
        video_id = video_id_from_href(link.attributes.get("href") or "")
        if not video_id:
            continue
        videos.append(
            VideoEmbed(
                video_id=video_id,
                title=(link.text() or "").strip(),
                embed_url=embed_url(video_id),
            )
        )
    return videos


def pad_videos(videos: List[VideoEmbed], count: int, title: str = "No video available") -> List[VideoEmbed]:
    """Fill the list with empty slots so the UI always gets ``count`` players."""
    padded = list(videos[:count])
    while len(padded) < count:
        padded.append(VideoEmbed(video_id="", title=title, embed_url=""))
    return padded


async def fetch_youtube_embeds(page: Page, query: str) -> List[VideoEmbed]:
    """
    Search YouTube and return exactly ``settings.youtube_video_count`` embeds.

    Failures never raise: the slots are filled with error placeholders.
    """
    count = settings.youtube_video_count
    try:
        await page.goto(
            SEARCH_URL + quote(query or "", safe=""),
            wait_until="domcontentloaded",
            timeout=settings.platform_nav_timeout_ms,
        )
        await page.wait_for_timeout(settings.youtube_settle_ms)

        html = await page.content()
        videos = parse_video_links(html, count)
    except Exception as e:
        logger.warning(f"YouTube fetch failed: {e}")
        return pad_videos([], count, title="Error loading video")

    return pad_videos(videos, count)
