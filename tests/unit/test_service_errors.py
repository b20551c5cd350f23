from __future__ import annotations

import pytest

from tastify.services.errors import (
    ServiceError,
    InvalidURLError,
    NetworkFailureError,
    NetworkTimeoutError,
    TransportError,
    RateLimitedError,
    GeminiConfigurationError,
    MalformedResponseError,
)


class TestServiceError:
    def test_base_exception(self) -> None:
        error = ServiceError("Base service error")
        assert str(error) == "Base service error"
        assert isinstance(error, Exception)


class TestInvalidURLError:
    def test_keeps_url_and_default_message(self) -> None:
        error = InvalidURLError("https://example.com/video")
        assert "https://example.com/video" in str(error)
        assert error.url == "https://example.com/video"
        assert error.message == "Please provide a valid TikTok or Instagram URL"

    def test_custom_message(self) -> None:
        error = InvalidURLError("ftp://x", message="Nope")
        assert error.message == "Nope"


class TestNetworkTimeoutError:
    def test_timeout_with_url_and_seconds(self) -> None:
        error = NetworkTimeoutError("https://www.tiktok.com/@chef/video/1", 10.0)
        assert "https://www.tiktok.com/@chef/video/1" in str(error)
        assert "10" in str(error)
        assert error.url == "https://www.tiktok.com/@chef/video/1"
        assert error.timeout_seconds == 10.0

    def test_is_a_network_failure(self) -> None:
        assert isinstance(NetworkTimeoutError("https://x", 1.0), NetworkFailureError)


class TestMalformedResponseError:
    def test_keeps_raw_text(self) -> None:
        error = MalformedResponseError("No JSON", raw_text="just prose")
        assert str(error) == "No JSON"
        assert error.raw_text == "just prose"

    def test_raw_text_optional(self) -> None:
        assert MalformedResponseError("bad").raw_text is None


class TestExceptionHierarchy:
    def test_all_errors_inherit_from_service_error(self) -> None:
        assert issubclass(InvalidURLError, ServiceError)
        assert issubclass(NetworkFailureError, ServiceError)
        assert issubclass(NetworkTimeoutError, ServiceError)
        assert issubclass(TransportError, ServiceError)
        assert issubclass(MalformedResponseError, ServiceError)

    @pytest.mark.parametrize("error_cls", [RateLimitedError, GeminiConfigurationError])
    def test_provider_errors_are_transport_errors(self, error_cls: type) -> None:
        assert issubclass(error_cls, TransportError)

    def test_malformed_response_is_not_transport(self) -> None:
        assert not issubclass(MalformedResponseError, TransportError)
