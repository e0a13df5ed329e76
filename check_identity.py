#!/usr/bin/env python3
"""
check_identity.py — xverify identity checks from the command line

Features
- Email: syntax validation (email-validator) + MX/DNS check (dnspython),
  then the xverify email service
- Phone, address, scoring and all-services verification
- Automated phone-call confirmation (place a call, confirm the code)

Environment (.env)
  XVERIFY_API_KEY=...
  XVERIFY_DOMAIN=...
  XVERIFY_BASE_URL=...   (optional)
  XVERIFY_TIMEOUT=2      (optional)

Usage
  python check_identity.py email EMAIL [--no-apis]
  python check_identity.py phone PHONE
  python check_identity.py address STREET ZIP
  python check_identity.py place-call --phone P --country-code CC --code C
  python check_identity.py confirm-code TRANSACTION CODE
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timedelta
from typing import Callable, Optional, Tuple

import click
import requests

from xverify.client import CALL_TIME_FORMAT, VerificationClient
from xverify.config import load_settings
from xverify.errors import MalformedResponseError, XVerifyError
from xverify.models import CallOptions, PhoneNumber, VerificationResult
from xverify.precheck import BasicChecks, run_basic_checks

# --------------------------
# Decision logic
# --------------------------


def combine_results(
    basic: BasicChecks, result: Optional[VerificationResult]
) -> Tuple[str, str]:
    if not basic.syntax_valid:
        return ("DO NOT SEND", "Invalid syntax.")
    if not basic.mx_ok:
        return ("DO NOT SEND", "Domain has no valid MX records.")
    if result is None:
        return ("RISKY / UNKNOWN", "Basics passed, service was not consulted.")
    if result.is_valid:
        return ("LIKELY OK TO SEND", "xverify reported valid; basics passed.")
    if result.status == "invalid":
        return ("DO NOT SEND", "xverify reported invalid.")
    return ("RISKY / UNKNOWN", f"xverify status: {result.status or 'unknown'}.")


# --------------------------
# Output
# --------------------------


def print_result(title: str, result: VerificationResult) -> None:
    print(f"\n================ {title} =================")
    icon = "✅" if result.is_valid else "❌"
    print(f"{icon} Status:          {result.status or '-'}")
    rows = [
        ("Address", result.address),
        ("Syntax", result.syntax),
        ("Handle", result.handle),
        ("Domain", result.domain),
        ("Catch-all", result.catch_all),
        ("Error", result.error),
        ("Message", result.message),
        ("Duration", result.duration),
        ("Transaction", result.transaction_number),
    ]
    for label, value in rows:
        if value:
            print(f"   {label + ':':16s} {value}")
    if result.area_code or result.prefix or result.suffix:
        print(f"   {'Number:':16s} ({result.area_code}) {result.prefix}-{result.suffix}")
    if result.auto_correct.corrected == "true":
        print(f"↪︎ Corrected:       {result.auto_correct.address}")
    if result.responsecode:
        print(f"   {'HTTP:':16s} {result.responsecode}")
    print("============================================\n")


def _client(ctx: click.Context) -> VerificationClient:
    settings = ctx.obj
    if not settings.configured:
        print("\n❌ Error: XVERIFY_API_KEY and XVERIFY_DOMAIN must be set")
        sys.exit(2)
    return settings.client()


def _run(
    ctx: click.Context, title: str, call: Callable[[VerificationClient], VerificationResult]
) -> None:
    with _client(ctx) as client:
        try:
            result = call(client)
        except MalformedResponseError as e:
            print(f"\n❌ {e}")
            if e.result is not None and e.result.responsecode:
                print(f"   HTTP status: {e.result.responsecode}")
            sys.exit(1)
        except (XVerifyError, requests.RequestException) as e:
            print(f"\n❌ Error: {e}")
            sys.exit(1)
    print_result(title, result)


# --------------------------
# CLI
# --------------------------


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-v", "--verbose", is_flag=True, help="Log HTTP traffic.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        ctx.obj = load_settings()
    except RuntimeError as e:
        print(f"\n❌ Error: {e}")
        sys.exit(2)


@cli.command()
@click.argument("email")
@click.option("--no-apis", is_flag=True, help="Skip xverify; only run syntax+MX.")
@click.pass_context
def email(ctx: click.Context, email: str, no_apis: bool) -> None:
    """Verify an email address."""
    basic = run_basic_checks(email)
    result: Optional[VerificationResult] = None
    service_note = "Skipped"

    if not no_apis and basic.syntax_valid:
        if not ctx.obj.configured:
            service_note = "No API key"
        else:
            with ctx.obj.client() as client:
                try:
                    result = client.verify_email(basic.normalized_email or email)
                    service_note = result.message or result.status or "No message"
                except (XVerifyError, requests.RequestException) as e:
                    service_note = f"Error: {e}"

    verdict, rationale = combine_results(basic, result)

    print("\n================ Email Check =================")
    print(f"📧 Email:           {email}")
    if basic.normalized_email and basic.normalized_email != email:
        print(f"↪︎ Normalized:      {basic.normalized_email}")
    print(f"✅ Syntax:          {'valid' if basic.syntax_valid else 'invalid'}")
    print(f"🧩 Domain:          {basic.domain or '-'}")
    print(f"📮 MX records:      {'found' if basic.mx_ok else 'not found'}")
    if basic.primary_mx:
        print(f"   Primary MX:      {basic.primary_mx}")
    for n in basic.notes:
        print(f"   note: {n}")
    print(f"🔎 xverify:         {result.status if result else '-'} ({service_note})")
    if result is not None and result.auto_correct.corrected == "true":
        print(f"↪︎ Suggested:       {result.auto_correct.address}")

    print("\n============================================")
    icon = {"DO NOT SEND": "🚫", "LIKELY OK TO SEND": "✅", "RISKY / UNKNOWN": "⚠️"}[
        verdict
    ]
    print(f"{icon} Verdict: {verdict}")
    print(f"💡 Why:    {rationale}")
    print("============================================\n")


@cli.command()
@click.argument("phone")
@click.pass_context
def phone(ctx: click.Context, phone: str) -> None:
    """Verify a phone number."""
    _run(ctx, "Phone Check", lambda c: c.verify_phone(phone))


@cli.command()
@click.argument("street")
@click.argument("zip_code", metavar="ZIP")
@click.pass_context
def address(ctx: click.Context, street: str, zip_code: str) -> None:
    """Verify a postal address."""
    _run(ctx, "Address Check", lambda c: c.verify_address(street, zip_code))


@cli.command()
@click.argument("street")
@click.argument("zip_code", metavar="ZIP")
@click.pass_context
def scoring(ctx: click.Context, street: str, zip_code: str) -> None:
    """Score a postal address."""
    _run(ctx, "Scoring", lambda c: c.verify_scoring(street, zip_code))


@cli.command(name="all")
@click.option("--email", "email_", default="", help="Email address")
@click.option("--phone", default="", help="Phone number")
@click.option("--street", default="", help="Street")
@click.option("--zip", "zip_code", default="", help="Zip code")
@click.pass_context
def all_services(
    ctx: click.Context, email_: str, phone: str, street: str, zip_code: str
) -> None:
    """Run every check in a single request."""
    if not any((email_, phone, street, zip_code)):
        print("\n❌ Error: give at least one of --email, --phone, --street, --zip")
        sys.exit(2)
    _run(
        ctx,
        "All Services",
        lambda c: c.verify_all_services(email_, phone, street, zip_code),
    )


@cli.command(name="place-call")
@click.option("--phone", required=True, help="Number to call")
@click.option("--country-code", required=True, help="Country code of the number")
@click.option("--code", required=True, help="Code read out to the user")
@click.option("--redial-count", type=int, default=0, show_default=True)
@click.option("--redial-interval", type=int, default=0, help="Seconds between redials")
@click.option("--at", "at", default=None, help='Schedule as "YYYY-MM-DD HH:MM:SS"')
@click.pass_context
def place_call(
    ctx: click.Context,
    phone: str,
    country_code: str,
    code: str,
    redial_count: int,
    redial_interval: int,
    at: Optional[str],
) -> None:
    """Place an automated confirmation call."""
    when = None
    if at:
        try:
            when = datetime.strptime(at, CALL_TIME_FORMAT)
        except ValueError:
            raise click.BadParameter(f"expected {CALL_TIME_FORMAT}", param_hint="--at")
    number = PhoneNumber(country_code=country_code, phone_number=phone, code=code)
    options = CallOptions(
        redial_count=redial_count,
        redial_interval=timedelta(seconds=redial_interval),
        call_place_time=when,
    )
    _run(ctx, "Place Call", lambda c: c.place_call(number, options))


@cli.command(name="confirm-code")
@click.argument("transaction_number")
@click.argument("code")
@click.pass_context
def confirm_code(ctx: click.Context, transaction_number: str, code: str) -> None:
    """Confirm the code the user received by phone."""
    _run(ctx, "Confirm Code", lambda c: c.confirm_code(transaction_number, code))


if __name__ == "__main__":
    cli()
