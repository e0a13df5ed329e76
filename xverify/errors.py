"""Exceptions raised by the xverify client."""

from typing import Optional

from .models import VerificationResult


class XVerifyError(Exception):
    """Base class for every error raised by this package."""


class UnknownServiceError(XVerifyError):
    def __init__(self, service) -> None:
        super().__init__(f"Service does not exist: {service!r}")
        self.service = service


class RequiredFieldsError(XVerifyError, ValueError):
    pass


class EmptyResponseError(XVerifyError):
    def __init__(self, status_code: int = 0) -> None:
        super().__init__("Empty body response received from service")
        self.status_code = status_code


class MalformedResponseError(XVerifyError):
    """
    The body was not a wrapper object holding a decodable result.

    ``result`` is a synthetic record carrying the HTTP status code and the
    failure text, so callers still see what the server answered.
    """

    def __init__(self, detail: str, status_code: int = 0) -> None:
        text = f"Could not unmarshal the response: {detail}"
        super().__init__(text)
        self.status_code = status_code
        self.result: Optional[VerificationResult] = VerificationResult(
            responsecode=status_code, message=text, error=text
        )
