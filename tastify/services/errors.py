class ServiceError(Exception):
    pass


class InvalidURLError(ServiceError):
    def __init__(self, url: str, message: str = "Please provide a valid TikTok or Instagram URL"):
        super().__init__(f"{message}: {url}")
        self.url = url
        self.message = message


class NetworkFailureError(ServiceError):
    pass


class NetworkTimeoutError(NetworkFailureError):
    def __init__(self, url: str, timeout_seconds: float):
        super().__init__(f"Network timeout after {timeout_seconds}s: {url}")
        self.url = url
        self.timeout_seconds = timeout_seconds


class TransportError(ServiceError):
    pass


class RateLimitedError(TransportError):
    pass


class GeminiConfigurationError(TransportError):
    pass


class MalformedResponseError(ServiceError):
    def __init__(self, message: str, raw_text: str | None = None):
        super().__init__(message)
        self.raw_text = raw_text
