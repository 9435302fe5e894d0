"""Failure taxonomy for Canto asset resolution"""

from typing import List, Optional


class CantoError(Exception):
    """Base class for every failure raised by the Canto field components"""

    reason = "canto_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotConfiguredError(CantoError):
    reason = "not_configured"

    def __init__(self, errors: Optional[List[str]] = None):
        self.errors = list(errors or [])
        super().__init__("Canto API is not properly configured")


class TransportError(CantoError):
    """Network failure or timeout talking to the upstream service"""

    reason = "transport_error"


class UpstreamHttpError(CantoError):
    reason = "http_error"

    def __init__(self, code: int, body: str = ""):
        self.code = code
        self.body = body
        super().__init__(f"API returned HTTP {code}")


class UpstreamMalformedError(CantoError):
    reason = "malformed_response"


class EmptyResponseError(UpstreamMalformedError):
    reason = "empty_response"

    def __init__(self):
        super().__init__("API returned empty response")


class InvalidJsonError(UpstreamMalformedError):
    reason = "invalid_json"


class UpstreamReportedError(CantoError):
    """The upstream answered 200 but the body carries an ``error`` key"""

    reason = "upstream_error"

    def __init__(self, upstream_message: str):
        self.upstream_message = upstream_message
        super().__init__(f"API error: {upstream_message}")


class AssetNotFoundError(CantoError):
    reason = "asset_not_found"

    def __init__(self, asset_id: str, last_error: Optional[CantoError] = None):
        self.asset_id = asset_id
        self.last_error = last_error
        super().__init__(f"Asset not found: {asset_id}")


class InvalidInputError(CantoError, ValueError):
    reason = "invalid_input"
