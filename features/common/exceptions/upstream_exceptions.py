class UpstreamError(Exception):
    """Base exception for upstream data provider errors."""
    pass

class UpstreamStatusError(UpstreamError):
    """Raised when a provider answers with a non-success status."""

    def __init__(self, source: str, status: int):
        self.source = source
        self.status = status
        super().__init__(f"{source} {status}")

class UpstreamPayloadError(UpstreamError):
    """Raised when a provider response is missing the data we need."""
    pass
