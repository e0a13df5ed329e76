"""Shared data models for the xverify service."""

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class AutoCorrect:
    corrected: str = ""  # "true" when the account has auto-correct and it fired
    address: str = ""  # suggested address


# Result attribute -> accepted JSON keys. Phone fields come back untagged.
_STR_FIELDS: Dict[str, Tuple[str, ...]] = {
    "address": ("address",),
    "syntax": ("syntax",),
    "handle": ("handle",),
    "domain": ("domain",),
    "error": ("error",),
    "status": ("status",),
    "message": ("message",),
    "duration": ("duration",),
    "catch_all": ("catch_all",),
    "transaction_number": ("transaction_number",),
}

_INT_FIELDS: Dict[str, Tuple[str, ...]] = {
    "responsecode": ("responsecode",),
    "area_code": ("areacode", "area_code"),
    "prefix": ("prefix",),
    "suffix": ("sufix", "suffix"),
}


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ValueError(f"expected a scalar, got {type(value).__name__}")


def _as_int(value: Any) -> int:
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise ValueError("expected a number, got bool")
    if isinstance(value, str):
        value = float(value)
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"expected a finite number, got {value}")
    if isinstance(value, (int, float)):
        return int(value)
    raise ValueError(f"expected a number, got {type(value).__name__}")


@dataclass(frozen=True)
class VerificationResult:
    """
    Everything any xverify endpoint may return, flattened into one record.

    Responses differ per service, so most fields are empty for a given call.
    """

    address: str = ""  # echo of the submitted address
    syntax: str = ""  # "1" good format, "0" bad format
    handle: str = ""  # part before the @
    domain: str = ""  # part after the @
    error: str = ""  # "0" when the request was fine
    status: str = ""  # "valid" / "invalid" / other
    auto_correct: AutoCorrect = field(default_factory=AutoCorrect)
    message: str = ""
    duration: str = ""
    catch_all: str = ""  # yes / no / unknown
    responsecode: int = 0
    area_code: int = 0
    prefix: int = 0
    suffix: int = 0
    transaction_number: str = ""

    @property
    def is_valid(self) -> bool:
        return self.status == "valid"

    @classmethod
    def from_dict(cls, data: Any) -> "VerificationResult":
        """Decode the payload nested under the wrapper node.

        Keys are matched case-insensitively; unknown keys are ignored.
        Raises ValueError when the payload does not fit the record.
        """
        if not isinstance(data, dict):
            raise ValueError(f"expected an object, got {type(data).__name__}")
        lowered = {str(k).lower(): v for k, v in data.items()}

        kwargs: Dict[str, Any] = {}
        for name, keys in _STR_FIELDS.items():
            for key in keys:
                if key in lowered:
                    kwargs[name] = _as_str(lowered[key])
                    break
        for name, keys in _INT_FIELDS.items():
            for key in keys:
                if key in lowered:
                    kwargs[name] = _as_int(lowered[key])
                    break

        ac = lowered.get("auto_correct")
        if ac is not None:
            if not isinstance(ac, dict):
                raise ValueError("auto_correct must be an object")
            kwargs["auto_correct"] = AutoCorrect(
                corrected=_as_str(ac.get("corrected")),
                address=_as_str(ac.get("address")),
            )
        return cls(**kwargs)


@dataclass(frozen=True)
class PhoneNumber:
    country_code: str  # country the call is placed to
    phone_number: str  # number receiving the automated call
    code: str  # code read out to the user


@dataclass(frozen=True)
class CallOptions:
    redial_count: int = 0  # redial if nobody picks up
    redial_interval: timedelta = timedelta(0)  # gap between redials
    call_place_time: Optional[datetime] = None  # schedule the call
