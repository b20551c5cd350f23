from __future__ import annotations

from tastify.services.prompt import MISSING_VALUE, build_prompt
from tastify.services.types import Platform, VideoMetadata, VideoReference

REF = VideoReference(url="https://www.tiktok.com/@chef/video/123", platform=Platform.TIKTOK)
METADATA = VideoMetadata(
    title="Spicy Garlic Noodles – 10 min!",
    description="quick weeknight noodles with chili oil",
    platform=Platform.TIKTOK,
)


class TestBuildPrompt:
    def test_includes_metadata_and_platform(self) -> None:
        prompt = build_prompt(REF, METADATA)

        assert "Spicy Garlic Noodles – 10 min!" in prompt.text
        assert "quick weeknight noodles with chili oil" in prompt.text
        assert "Platform: tiktok" in prompt.text
        assert REF.url in prompt.text
        assert prompt.platform is Platform.TIKTOK
        assert prompt.url == REF.url

    def test_is_deterministic(self) -> None:
        assert build_prompt(REF, METADATA) == build_prompt(REF, METADATA)

    def test_describes_output_schema(self) -> None:
        text = build_prompt(REF, METADATA).text

        for key in ('"title"', '"ingredients"', '"item"', '"quantity"', '"notes"', '"steps"',
                    '"macros"', '"calories"', '"protein"', '"fat"', '"carbs"', '"fiber"',
                    '"prep_time"', '"cook_time"', '"servings"'):
            assert key in text
        assert "ONLY return valid JSON" in text

    def test_asks_model_to_fill_gaps(self) -> None:
        text = build_prompt(REF, METADATA).text

        assert "popular tiktok recipes to fill gaps" in text
        assert "If minimal info is provided" in text

    def test_empty_metadata_is_marked_not_available(self) -> None:
        prompt = build_prompt(REF, VideoMetadata(platform=Platform.TIKTOK))

        assert f"Video Title: {MISSING_VALUE}" in prompt.text
        assert f"Video Description: {MISSING_VALUE}" in prompt.text

    def test_braces_in_metadata_are_kept_verbatim(self) -> None:
        metadata = VideoMetadata(title="{weird} title", description="{}", platform=Platform.INSTAGRAM)
        ref = VideoReference(url="https://www.instagram.com/reel/abc/", platform=Platform.INSTAGRAM)

        text = build_prompt(ref, metadata).text

        assert "Video Title: {weird} title" in text
        assert "Platform: instagram" in text
