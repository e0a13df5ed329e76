"""xverify REST client: email, phone, address, scoring and call confirmation."""

import json
import logging
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional
from urllib.parse import urlsplit, urlunsplit

import requests

from .errors import (
    EmptyResponseError,
    MalformedResponseError,
    RequiredFieldsError,
    UnknownServiceError,
)
from .models import CallOptions, PhoneNumber, VerificationResult

logger = logging.getLogger(__name__)

BASE_URL = "http://www.xverify.com/services"
DEFAULT_TIMEOUT = 2.0
CALL_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class ServiceKind(Enum):
    PHONE = "phone"
    EMAIL = "email"
    ADDRESS = "address"
    SCORING = "scoring"
    ALL_SERVICES = "allservices"
    PLACE_CALL = "placecall"
    CONFIRM_CODE = "confirmcode"


ENDPOINTS: Mapping[ServiceKind, str] = MappingProxyType(
    {
        ServiceKind.PHONE: "/phone/verify",
        ServiceKind.EMAIL: "/email/verify",
        ServiceKind.ADDRESS: "/address/verify",
        ServiceKind.SCORING: "/scoring/verify",
        ServiceKind.ALL_SERVICES: "/allservices/verify",
        ServiceKind.PLACE_CALL: "/phoneconfirm/placecall/",
        ServiceKind.CONFIRM_CODE: "/phoneconfirm/verifycode",
    }
)


def parse_body(body: bytes, status_code: int = 0) -> VerificationResult:
    """
    Decode ``{"<wrapper>": {...}}`` into a VerificationResult.

    The wrapper name is not stable upstream, so only the first key in
    document order is used.
    """
    try:
        wrapper = json.loads(body)
    except ValueError as e:
        raise MalformedResponseError(f"invalid JSON ({e})", status_code) from e

    if not isinstance(wrapper, dict) or not wrapper:
        raise MalformedResponseError("no wrapper node", status_code)

    node = next(iter(wrapper.values()))
    try:
        return VerificationResult.from_dict(node)
    except ValueError as e:
        raise MalformedResponseError(str(e), status_code) from e


class VerificationClient:
    """
    Holds the xverify credentials and the HTTP session used for every call.

    ``timeout`` is handed to requests, so it bounds the connect and each
    socket read separately rather than the whole exchange.
    """

    def __init__(
        self,
        api_key: str,
        domain: str,
        base_url: str = BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._api_key = api_key
        self._domain = domain
        self._base_url = base_url
        self._timeout = timeout
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def domain(self) -> str:
        return self._domain

    @property
    def timeout(self) -> float:
        return self._timeout

    def close(self) -> None:
        """Close the session if this client created it."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "VerificationClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # --------------------------
    # Email / phone
    # --------------------------

    def verify_email(self, email: str) -> VerificationResult:
        """Check deliverability of an email address."""
        return self._call_service(ServiceKind.EMAIL, {"email": email})

    def is_email_verified(self, email: str) -> bool:
        """True when the service reports the address as valid."""
        return self.verify_email(email).is_valid

    def verify_phone(self, phone: str) -> VerificationResult:
        """Check that a phone number exists and is reachable."""
        return self._call_service(ServiceKind.PHONE, {"phone": phone})

    def is_phone_verified(self, phone: str) -> bool:
        """True when the service reports the number as valid."""
        return self.verify_phone(phone).is_valid

    # --------------------------
    # Address / scoring
    # --------------------------

    def verify_address(self, street: str, zip_code: str) -> VerificationResult:
        """Check a postal address."""
        return self._call_service(
            ServiceKind.ADDRESS, {"street": street, "zip": zip_code}
        )

    def verify_scoring(self, street: str, zip_code: str) -> VerificationResult:
        """Score a postal address."""
        return self._call_service(
            ServiceKind.SCORING, {"street": street, "zip": zip_code}
        )

    def verify_all_services(
        self, email: str = "", phone: str = "", street: str = "", zip_code: str = ""
    ) -> VerificationResult:
        """Run every check in one request; blank inputs are left out."""
        params: Dict[str, str] = {}
        if email:
            params["services[email]"] = email
        if phone:
            params["services[phone]"] = phone
        if street:
            params["services[address][street]"] = street
        if zip_code:
            params["services[address][zip]"] = zip_code
        return self._call_service(ServiceKind.ALL_SERVICES, params)

    # --------------------------
    # Phone confirmation
    # --------------------------

    def place_call(
        self, phone_number: PhoneNumber, options: Optional[CallOptions] = None
    ) -> VerificationResult:
        """
        Place an automated call that reads ``phone_number.code`` to the user.

        The returned result carries the transaction number needed by
        confirm_code(). Raises RequiredFieldsError, without touching the
        network, when the number, country code or code is blank.
        """
        if (
            not phone_number.code
            or not phone_number.phone_number
            or not phone_number.country_code
        ):
            raise RequiredFieldsError(
                "Phone number, country code and code must all be filled"
            )
        options = options or CallOptions()

        params = {
            "phone": phone_number.phone_number,
            "country_code": phone_number.country_code,
            "code": phone_number.code,
        }
        if options.redial_count:
            params["redial_count"] = str(options.redial_count)
        interval = int(options.redial_interval.total_seconds())
        if interval:
            params["redial_interval"] = str(interval)
        if options.call_place_time is not None:
            params["call_place_tile"] = options.call_place_time.strftime(
                CALL_TIME_FORMAT
            )

        return self._call_service(ServiceKind.PLACE_CALL, params)

    def confirm_code(self, transaction_number: str, code: str) -> VerificationResult:
        """Confirm the code the user heard during a placed call."""
        return self._call_service(
            ServiceKind.CONFIRM_CODE,
            {"transaction_number": transaction_number, "code": code},
        )

    # --------------------------
    # Plumbing
    # --------------------------

    def build_url(self, service: ServiceKind) -> str:
        """Full endpoint URL; any query string on the base URL is kept."""
        path = ENDPOINTS.get(service)
        if path is None:
            raise UnknownServiceError(service)
        parts = urlsplit(self._base_url)
        return urlunsplit(parts._replace(path=parts.path.rstrip("/") + path))

    def _signed(self, params: Mapping[str, str]) -> Dict[str, str]:
        signed = dict(params)
        signed["apikey"] = self._api_key
        signed["domain"] = self._domain
        signed["type"] = "json"
        return signed

    def _call_service(
        self, service: ServiceKind, params: Mapping[str, str]
    ) -> VerificationResult:
        url = self.build_url(service)
        r = self._session.get(url, params=self._signed(params), timeout=self._timeout)
        logger.debug("xverify %s %s -> HTTP %s", service.value, url, r.status_code)

        body = r.content
        if not body:
            raise EmptyResponseError(r.status_code)

        try:
            return parse_body(body, r.status_code)
        except MalformedResponseError as e:
            logger.warning("xverify %s: %s", service.value, e)
            raise
