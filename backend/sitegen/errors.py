"""Exception types raised by the generation pipeline and the store lookups."""

from typing import Optional

PREVIEW_LENGTH = 500


class SiteGenError(Exception):
    """Base class for all website generation errors"""


class EmptyResponse(SiteGenError):
    """The completion endpoint answered without any text"""

    def __init__(self, message: str = "No response content from completion API"):
        super().__init__(message)


class UnparsableResponse(SiteGenError):
    """Every repair stage failed to turn the model output into a JSON object"""

    def __init__(self, message: str, text: str = ""):
        super().__init__(message)
        self.preview = text[:PREVIEW_LENGTH]


class NoJsonObjectFound(UnparsableResponse):
    """The model output does not contain a '{...}' span at all"""


class UpstreamError(SiteGenError):
    """Transport, auth or rate-limit failure reported by the completion API"""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        type: Optional[str] = None,
    ):
        super().__init__(message)
        self.status = status
        self.type = type


class NotFound(SiteGenError):
    """Unknown site id, page key or edit target"""
