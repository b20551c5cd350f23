from __future__ import annotations

import json
import time
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from tastify.app.config import settings
from tastify.app.deps import get_extractor
from tastify.app.main import app
from tastify.services.errors import TransportError
from tastify.services.extract import RecipeExtractor
from tastify.services.types import VideoMetadata, VideoReference

TIKTOK_URL = "https://www.tiktok.com/@chef/video/123"

NOODLES = {
    "title": "Spicy Garlic Noodles",
    "ingredients": [{"item": "Wheat noodles", "quantity": "200 g"}],
    "steps": ["Boil the noodles", "Toss with chili oil"],
    "macros": {"calories": 520, "protein": 14},
    "servings": "2",
}


class ScraperStub:
    def __init__(self) -> None:
        self.calls = 0

    def scrape(self, ref: VideoReference) -> VideoMetadata:
        self.calls += 1
        return VideoMetadata(platform=ref.platform)


class PipelineStubs:
    def __init__(self) -> None:
        self.scraper = ScraperStub()
        self.response = json.dumps(NOODLES)
        self.error: Exception | None = None
        self.delay = 0.0

    def generate(self, prompt: str) -> str:
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def stubs() -> PipelineStubs:
    return PipelineStubs()


@pytest.fixture
def client(stubs: PipelineStubs) -> Iterator[TestClient]:
    app.dependency_overrides[get_extractor] = lambda: RecipeExtractor(
        generate=stubs.generate,
        scraper=stubs.scraper,
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestParseRecipeSuccess:
    def test_returns_model_recipe(self, client: TestClient, stubs: PipelineStubs) -> None:
        response = client.post("/api/parseRecipe", json={"videoUrl": TIKTOK_URL})

        assert response.status_code == 200
        assert response.json() == NOODLES
        assert response.headers["access-control-allow-origin"] == "*"
        assert stubs.scraper.calls == 1

    def test_transport_error_still_returns_recipe(self, client: TestClient, stubs: PipelineStubs) -> None:
        stubs.error = TransportError("provider down")

        response = client.post("/api/parseRecipe", json={"videoUrl": TIKTOK_URL})

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Delicious tiktok Recipe"
        assert len(body["ingredients"]) == 3
        assert len(body["steps"]) == 3

    def test_prose_response_still_returns_recipe(self, client: TestClient, stubs: PipelineStubs) -> None:
        stubs.response = "I am unable to help with that."

        response = client.post("/api/parseRecipe", json={"videoUrl": TIKTOK_URL})

        assert response.status_code == 200
        assert response.json()["title"] == "Delicious tiktok Recipe"


class TestParseRecipeErrors:
    @pytest.mark.parametrize("payload", [{}, {"videoUrl": ""}, {"videoUrl": "   "}])
    def test_missing_video_url(self, client: TestClient, payload: dict) -> None:
        response = client.post("/api/parseRecipe", json=payload)

        assert response.status_code == 400
        assert response.json() == {"error": "Bad request", "message": "videoUrl is required"}

    def test_missing_body(self, client: TestClient) -> None:
        response = client.post("/api/parseRecipe")

        assert response.status_code == 400

    @pytest.mark.parametrize("body", [b"{not json", b"[1, 2]", b"null"])
    def test_unreadable_body_is_bad_request(self, client: TestClient, body: bytes) -> None:
        response = client.post(
            "/api/parseRecipe",
            content=body,
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Bad request", "message": "videoUrl is required"}
        assert response.headers["access-control-allow-origin"] == "*"

    @pytest.mark.parametrize("video_url", [123, ["https://www.tiktok.com/@chef/video/1"], {"url": "x"}])
    def test_non_string_video_url_is_invalid(
        self,
        client: TestClient,
        stubs: PipelineStubs,
        video_url: object,
    ) -> None:
        response = client.post("/api/parseRecipe", json={"videoUrl": video_url})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid URL"
        assert stubs.scraper.calls == 0

    def test_unsupported_url_makes_no_network_calls(self, client: TestClient, stubs: PipelineStubs) -> None:
        response = client.post("/api/parseRecipe", json={"videoUrl": "https://example.com/video"})

        assert response.status_code == 400
        assert response.json() == {
            "error": "Invalid URL",
            "message": "Please provide a valid TikTok or Instagram URL",
        }
        assert stubs.scraper.calls == 0

    @pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE"])
    def test_method_not_allowed(self, client: TestClient, method: str) -> None:
        response = client.request(method, "/api/parseRecipe")

        assert response.status_code == 405
        assert response.json()["error"] == "Method not allowed"

    def test_unexpected_error_is_500(self, client: TestClient, stubs: PipelineStubs) -> None:
        stubs.error = KeyError("boom")

        response = client.post("/api/parseRecipe", json={"videoUrl": TIKTOK_URL})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Internal server error"
        assert body["message"] == "Failed to parse recipe from video"
        assert "boom" in body["details"]

    def test_budget_exceeded_is_504(
        self,
        client: TestClient,
        stubs: PipelineStubs,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(settings, "EXTRACTION_TIMEOUT_SECONDS", 0.05)
        stubs.delay = 0.5

        response = client.post("/api/parseRecipe", json={"videoUrl": TIKTOK_URL})

        assert response.status_code == 504
        assert response.json()["error"] == "Gateway timeout"


class TestParseRecipePreflight:
    def test_options_returns_cors_headers(self, client: TestClient) -> None:
        response = client.options("/api/parseRecipe")

        assert response.status_code == 200
        assert response.content == b""
        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["access-control-allow-methods"] == "GET, POST, OPTIONS"
        assert response.headers["access-control-allow-headers"] == "Content-Type, Authorization"


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["ok"] is True
