from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field

import httpx
from bs4 import BeautifulSoup

from .errors import NetworkFailureError, NetworkTimeoutError
from .types import Platform, VideoMetadata, VideoReference

logger = logging.getLogger(__name__)

WHITESPACE_PATTERN = re.compile(r"\s+")
JSON_LD_TYPE = "application/ld+json"

BASE_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Accept-Encoding": "gzip, deflate",
    "DNT": "1",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
}

TITLE_META_SOURCES = (
    ("property", "og:title"),
    ("name", "twitter:title"),
)
DESCRIPTION_META_SOURCES = (
    ("property", "og:description"),
    ("name", "twitter:description"),
    ("name", "description"),
)


@dataclass(frozen=True)
class ClientIdentity:
    name: str
    user_agent: str

    def headers(self) -> dict[str, str]:
        return {**BASE_HEADERS, "User-Agent": self.user_agent}


@dataclass(frozen=True)
class PlatformSelectors:
    title: tuple[str, ...] = ()
    description: tuple[str, ...] = ()

    def merged_with(self, other: PlatformSelectors) -> PlatformSelectors:
        return PlatformSelectors(
            title=self.title + tuple(s for s in other.title if s not in self.title),
            description=self.description + tuple(s for s in other.description if s not in self.description),
        )


DEFAULT_IDENTITIES: tuple[ClientIdentity, ...] = (
    ClientIdentity(
        name="ios-safari",
        user_agent=(
            "Mozilla/5.0 (iPhone; CPU iPhone OS 15_0 like Mac OS X) AppleWebKit/605.1.15 "
            "(KHTML, like Gecko) Version/15.0 Mobile/15E148 Safari/604.1"
        ),
    ),
    ClientIdentity(
        name="desktop-chrome",
        user_agent=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
        ),
    ),
    ClientIdentity(
        name="facebook-crawler",
        user_agent="facebookexternalhit/1.1 (+http://www.facebook.com/externalhit_uatext.php)",
    ),
)

_TIKTOK_SELECTORS = PlatformSelectors(
    title=(".video-meta-title", '[data-e2e="browse-video-desc"]'),
    description=(".video-meta-caption", '[data-e2e="video-desc"]'),
)
_INSTAGRAM_SELECTORS = PlatformSelectors(
    title=(".media-desc",),
    description=(".Caption",),
)

DEFAULT_PLATFORM_SELECTORS: dict[Platform, PlatformSelectors] = {
    Platform.TIKTOK: _TIKTOK_SELECTORS,
    Platform.INSTAGRAM: _INSTAGRAM_SELECTORS,
    Platform.UNKNOWN: _TIKTOK_SELECTORS.merged_with(_INSTAGRAM_SELECTORS),
}


@dataclass(frozen=True)
class ScraperConfig:
    identities: tuple[ClientIdentity, ...] = DEFAULT_IDENTITIES
    platform_selectors: dict[Platform, PlatformSelectors] = field(
        default_factory=lambda: dict(DEFAULT_PLATFORM_SELECTORS)
    )
    timeout_seconds: float = 10.0
    max_redirects: int = 5
    good_title_chars: int = 20
    good_description_chars: int = 50

    def selectors_for(self, platform: Platform) -> PlatformSelectors:
        return (
            self.platform_selectors.get(platform)
            or self.platform_selectors.get(Platform.UNKNOWN)
            or PlatformSelectors()
        )


def _clean_text(value: object) -> str:
    if not isinstance(value, str):
        return ""
    return WHITESPACE_PATTERN.sub(" ", value).strip()


def _longest(candidates: list[str]) -> str:
    best = ""
    for candidate in candidates:
        if len(candidate) > len(best):
            best = candidate
    return best


def _meta_content(soup: BeautifulSoup, attr: str, key: str) -> str:
    tag = soup.find("meta", attrs={attr: key})
    if tag is None:
        return ""
    return _clean_text(tag.get("content"))


def _selector_texts(soup: BeautifulSoup, selectors: tuple[str, ...]) -> list[str]:
    texts: list[str] = []
    for selector in selectors:
        for node in soup.select(selector):
            text = _clean_text(node.get_text(" "))
            if text:
                texts.append(text)
    return texts


def _iter_json_ld_objects(soup: BeautifulSoup):
    for script in soup.find_all("script", type=JSON_LD_TYPE):
        raw = script.string or script.get_text()
        if not raw or not raw.strip():
            continue
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            logger.debug("scrape.json_ld_unparseable size=%d", len(raw))
            continue

        items = data if isinstance(data, list) else [data]
        for item in items:
            if not isinstance(item, dict):
                continue
            graph = item.get("@graph")
            if isinstance(graph, list):
                yield from (node for node in graph if isinstance(node, dict))
            else:
                yield item


def _apply_json_ld(soup: BeautifulSoup, title: str, description: str) -> tuple[str, str]:
    for item in _iter_json_ld_objects(soup):
        ld_description = _clean_text(item.get("description"))
        if len(ld_description) <= len(description):
            continue
        ld_title = _clean_text(item.get("name")) or _clean_text(item.get("headline"))
        return ld_title or title, ld_description
    return title, description


def extract_page_metadata(
    html: str,
    platform: Platform,
    selectors: PlatformSelectors | None = None,
) -> VideoMetadata:
    """Pick the most complete title/description the page exposes.

    Every source is read and the longest non-empty candidate wins per field.
    A JSON-LD block with a longer description takes over both fields.
    """
    selectors = selectors or DEFAULT_PLATFORM_SELECTORS.get(platform, PlatformSelectors())
    soup = BeautifulSoup(html or "", "html.parser")

    title_candidates = [_meta_content(soup, attr, key) for attr, key in TITLE_META_SOURCES]
    if soup.title is not None:
        title_candidates.append(_clean_text(soup.title.get_text()))
    title_candidates.extend(_selector_texts(soup, selectors.title))

    description_candidates = [_meta_content(soup, attr, key) for attr, key in DESCRIPTION_META_SOURCES]
    description_candidates.extend(_selector_texts(soup, selectors.description))

    title = _longest(title_candidates)
    description = _longest(description_candidates)
    title, description = _apply_json_ld(soup, title, description)

    return VideoMetadata(title=title, description=description, platform=platform)


def _merge_best(best: VideoMetadata, candidate: VideoMetadata) -> VideoMetadata:
    return VideoMetadata(
        title=candidate.title if len(candidate.title) > len(best.title) else best.title,
        description=(
            candidate.description
            if len(candidate.description) > len(best.description)
            else best.description
        ),
        platform=best.platform,
    )


class MetadataScraper:
    """Best-effort page scraper that rotates through client identities.

    Platforms serve different markup to different user agents, so each
    identity is tried in order until the accumulated metadata is good enough.
    A failure on one identity never aborts the rotation.
    """

    def __init__(
        self,
        config: ScraperConfig | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.config = config or ScraperConfig()
        self._client = client

    def _create_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=self.config.timeout_seconds,
            follow_redirects=True,
            max_redirects=self.config.max_redirects,
        )

    def _fetch_page(self, client: httpx.Client, url: str, identity: ClientIdentity) -> str:
        try:
            response = client.get(url, headers=identity.headers())
            response.raise_for_status()
            return response.text
        except httpx.TimeoutException as error:
            raise NetworkTimeoutError(url, self.config.timeout_seconds) from error
        except httpx.HTTPStatusError as error:
            raise NetworkFailureError(
                f"HTTP {error.response.status_code} for {url}"
            ) from error
        except httpx.HTTPError as error:
            raise NetworkFailureError(f"Request failed for {url}: {error}") from error
        except httpx.InvalidURL as error:
            # raised while building the request, e.g. a non-numeric port
            raise NetworkFailureError(f"Invalid URL {url}: {error}") from error

    def _is_good_enough(self, metadata: VideoMetadata) -> bool:
        return (
            len(metadata.title) > self.config.good_title_chars
            and len(metadata.description) > self.config.good_description_chars
        )

    def _rotate(self, client: httpx.Client, ref: VideoReference) -> VideoMetadata:
        best = VideoMetadata(platform=ref.platform)
        selectors = self.config.selectors_for(ref.platform)

        for identity in self.config.identities:
            try:
                html = self._fetch_page(client, ref.url, identity)
            except NetworkFailureError as error:
                logger.warning(
                    "scrape.identity_failed identity=%s url=%s error=%s",
                    identity.name,
                    ref.url,
                    error,
                )
                continue

            page = extract_page_metadata(html, ref.platform, selectors)
            best = _merge_best(best, page)
            logger.info(
                "scrape.identity_ok identity=%s title_len=%d description_len=%d",
                identity.name,
                len(page.title),
                len(page.description),
            )

            if self._is_good_enough(best):
                break

        return best

    def scrape(self, ref: VideoReference) -> VideoMetadata:
        if self._client is not None:
            metadata = self._rotate(self._client, ref)
        else:
            with self._create_client() as client:
                metadata = self._rotate(client, ref)

        if metadata.is_empty:
            logger.warning("scrape.empty url=%s platform=%s", ref.url, ref.platform.value)
        return metadata


def scrape_metadata(ref: VideoReference, config: ScraperConfig | None = None) -> VideoMetadata:
    return MetadataScraper(config=config).scrape(ref)
