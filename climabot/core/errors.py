"""Failure kinds raised by the Gemini client."""


class UpstreamError(Exception):
    """Base class for every failure talking to the AI service."""


class ConnectionFailed(UpstreamError):
    """The AI service could not be reached."""


class DnsFailure(UpstreamError):
    """The AI service host name could not be resolved."""


class UpstreamTimeout(UpstreamError):
    """The AI service did not answer within the configured timeout."""


class DecodeFailure(UpstreamError):
    """The AI service answered with a body that is not the expected JSON."""


class UpstreamStatus(UpstreamError):
    """The AI service answered with a non-success HTTP status."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"AI service returned HTTP {status_code}")
        self.status_code = status_code
        self.body = body
