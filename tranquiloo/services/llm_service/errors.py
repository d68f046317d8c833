"""Provider error taxonomy.

Provider clients raise these; the gateway turns every one of them into a
ProviderFailure result so nothing above it has to catch exceptions.
"""
from typing import Optional


class ProviderError(Exception):
    """Base class for every external text-generator failure."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"[{provider}] {message}")
        self.provider = provider


class ProviderUnavailable(ProviderError):
    """No credentials configured; the tier is skipped without a request."""

    def __init__(self, provider: str):
        super().__init__(provider, "no API key configured")


class ProviderHTTPError(ProviderError):
    """Provider answered with a non-2xx status."""

    def __init__(self, provider: str, status: int, body: Optional[str] = None):
        super().__init__(provider, f"HTTP {status}")
        self.status = status
        self.body = body or ""
