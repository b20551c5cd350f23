from dataclasses import dataclass
from enum import Enum


class Platform(str, Enum):
    TIKTOK = "tiktok"
    INSTAGRAM = "instagram"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class VideoReference:
    url: str
    platform: Platform


@dataclass(frozen=True)
class VideoMetadata:
    title: str = ""
    description: str = ""
    platform: Platform = Platform.UNKNOWN

    @property
    def is_empty(self) -> bool:
        return not self.title and not self.description
