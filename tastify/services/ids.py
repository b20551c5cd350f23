# tastify/services/ids.py
import re
from urllib.parse import urlparse

from tastify.services.types import Platform, VideoReference

# Prefixos aceitos pelo pipeline (TikTok e Instagram, com ou sem www.)
_TIKTOK_RE = re.compile(r"^https?://(www\.)?(tiktok\.com|vm\.tiktok\.com)")
_INSTAGRAM_RE = re.compile(r"^https?://(www\.)?(instagram\.com|instagr\.am)")

# Ordem importa: o primeiro marcador encontrado no host vence
_HOST_MARKERS: tuple[tuple[str, Platform], ...] = (
    ("tiktok", Platform.TIKTOK),
    ("instagram", Platform.INSTAGRAM),
    ("instagr.am", Platform.INSTAGRAM),
)


def _host_portion(url: str) -> str:
    parsed = urlparse(url)
    if parsed.netloc:
        return parsed.netloc.lower()
    # sem esquema: "tiktok.com/@chef/video/1" cai inteiro em path
    return url.split("/", 1)[0].lower()


def detect_platform(url: str) -> Platform:
    """Retorna a plataforma a partir do host da URL, ou UNKNOWN."""
    host = _host_portion(url.strip())
    for marker, platform in _HOST_MARKERS:
        if marker in host:
            return platform
    return Platform.UNKNOWN


def classify(raw: str) -> VideoReference:
    url = (raw or "").strip()
    return VideoReference(url=url, platform=detect_platform(url))


def is_supported_video_url(url: str) -> bool:
    if not url:
        return False
    candidate = url.strip()
    return bool(_TIKTOK_RE.match(candidate) or _INSTAGRAM_RE.match(candidate))
