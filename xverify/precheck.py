"""Local email checks run before spending a service call: syntax and MX."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import dns.resolver
from dns.exception import DNSException
from dns.exception import Timeout as DnsTimeout
from email_validator import EmailNotValidError, validate_email


@dataclass
class BasicChecks:
    syntax_valid: bool
    normalized_email: Optional[str] = None
    domain: Optional[str] = None
    mx_ok: bool = False
    primary_mx: Optional[str] = None
    notes: List[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.syntax_valid and self.mx_ok


def normalize_email(email: str) -> Tuple[bool, Optional[str], Optional[str], List[str]]:
    """Validate syntax only; return (valid, normalized, domain, notes)."""
    try:
        v = validate_email(email, check_deliverability=False)
    except EmailNotValidError as e:
        return False, None, None, [f"Syntax error: {e}"]
    return True, v.normalized, v.domain, []


def mx_lookup(
    domain: str, timeout_sec: float = 5.0
) -> Tuple[bool, Optional[str], List[str]]:
    """
    Look up MX records. Returns (mx_ok, primary_mx, notes).
    Primary MX is the lowest-preference host.
    """
    try:
        answers = dns.resolver.resolve(domain, "MX", lifetime=timeout_sec)
    except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer) as e:
        return False, None, [f"MX lookup: {e.__class__.__name__}"]
    except DnsTimeout:
        return False, None, ["MX lookup: timeout"]
    except DNSException as e:
        return False, None, [f"MX lookup error: {e}"]

    rows = sorted(
        (r.preference, r.exchange.to_text().rstrip("."))
        for r in answers
        if r.exchange.to_text().rstrip(".")
    )
    if not rows:
        return False, None, ["MX lookup returned no usable records."]
    return True, rows[0][1], []


def run_basic_checks(email: str) -> BasicChecks:
    syntax_valid, normalized, domain, notes = normalize_email(email)
    checks = BasicChecks(syntax_valid, normalized, domain, notes=notes)
    if syntax_valid and domain:
        checks.mx_ok, checks.primary_mx, mx_notes = mx_lookup(domain)
        checks.notes.extend(mx_notes)
    return checks
