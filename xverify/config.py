"""Credentials and endpoint settings, read from the environment / .env."""

import math
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .client import BASE_URL, DEFAULT_TIMEOUT, VerificationClient


@dataclass
class Settings:
    api_key: Optional[str]
    domain: Optional[str]
    base_url: str = BASE_URL
    timeout: float = DEFAULT_TIMEOUT

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.domain)

    def client(self) -> VerificationClient:
        if not self.configured:
            raise RuntimeError("XVERIFY_API_KEY and XVERIFY_DOMAIN must be set")
        return VerificationClient(
            self.api_key, self.domain, base_url=self.base_url, timeout=self.timeout
        )


def load_settings() -> Settings:
    """
    Environment (.env)
      XVERIFY_API_KEY=...
      XVERIFY_DOMAIN=...
      XVERIFY_BASE_URL=...   (optional)
      XVERIFY_TIMEOUT=2      (optional, seconds)
    """
    load_dotenv()
    raw_timeout = os.getenv("XVERIFY_TIMEOUT")
    timeout = DEFAULT_TIMEOUT
    if raw_timeout:
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise RuntimeError(
                f"XVERIFY_TIMEOUT must be a number of seconds, got {raw_timeout!r}"
            ) from None
        if not math.isfinite(timeout) or timeout <= 0:
            raise RuntimeError(
                f"XVERIFY_TIMEOUT must be a positive number, got {raw_timeout!r}"
            )
    return Settings(
        api_key=os.getenv("XVERIFY_API_KEY"),
        domain=os.getenv("XVERIFY_DOMAIN"),
        base_url=os.getenv("XVERIFY_BASE_URL") or BASE_URL,
        timeout=timeout,
    )
