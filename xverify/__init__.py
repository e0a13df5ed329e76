"""Client for the xverify identity-verification service."""

from .client import (
    BASE_URL,
    DEFAULT_TIMEOUT,
    ENDPOINTS,
    ServiceKind,
    VerificationClient,
    parse_body,
)
from .errors import (
    EmptyResponseError,
    MalformedResponseError,
    RequiredFieldsError,
    UnknownServiceError,
    XVerifyError,
)
from .models import AutoCorrect, CallOptions, PhoneNumber, VerificationResult

__all__ = [
    "BASE_URL",
    "DEFAULT_TIMEOUT",
    "ENDPOINTS",
    "ServiceKind",
    "VerificationClient",
    "parse_body",
    "XVerifyError",
    "UnknownServiceError",
    "RequiredFieldsError",
    "EmptyResponseError",
    "MalformedResponseError",
    "AutoCorrect",
    "CallOptions",
    "PhoneNumber",
    "VerificationResult",
]
