"""Email composition for contacting a representative.

Turns a selected representative and the constituent's details into the
pieces a caller needs: recipient address, body text, ``mailto:`` link,
Gmail compose link and a plain-text copy.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Iterable
from urllib.parse import quote, urlencode

from pydantic import BaseModel, Field, field_validator

from mp_lookup.core.config import settings
from mp_lookup.schemas.representative import RepresentativeContact
from mp_lookup.utils.postal_code import format_postal_code, normalize_postal_code

_EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_NON_NAME_CHARS = re.compile(r"[^a-z-]")

GMAIL_COMPOSE_URL = "https://mail.google.com/mail/"

EMAIL_BODY_TEMPLATE = """Dear {representative_name},

I am writing as a constituent to encourage a clear, cross-partisan show of support for the people of Iran who continue to protest for basic rights and freedoms.

Amnesty International and UN human rights experts have documented lethal violence against largely peaceful protesters, mass arrests, and enforced disappearances. Independent reporting indicates thousands may have been killed or injured, with internet shutdowns and reports of security forces targeting hospitals further obscuring the scale of abuses.

These are serious human rights concerns, not partisan claims. A unified message from Canadian leaders would send a powerful signal of Canada's commitment to democratic values.

Thank you for your time and service.

Sincerely,
{first_name} {last_name}
{street_address}
{city}, {province} {postal_code}"""


class Constituent(BaseModel):
    """Sender details used to sign the email."""

    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: str = Field(..., description="Sender's own address.")
    street_address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    province: str = Field(..., min_length=1)
    postal_code: str

    @field_validator("first_name", "last_name", "street_address", "city", "province", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def _validate_email(cls, value: str) -> str:
        value = value.strip()
        if not _EMAIL_REGEX.match(value):
            raise ValueError("Please enter a valid email address")
        return value

    @field_validator("postal_code")
    @classmethod
    def _validate_postal_code(cls, value: str) -> str:
        normalized = normalize_postal_code(value)
        if normalized is None:
            raise ValueError("Please enter a valid postal code (e.g., A1A 1A1)")
        return normalized


def _clean_name_part(part: str) -> str:
    decomposed = unicodedata.normalize("NFD", part.lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _NON_NAME_CHARS.sub("", stripped)


def derive_email_from_name(name: str | None, domain: str = "parl.gc.ca") -> str | None:
    """Guess a House of Commons address as ``first.last@domain``.

    Best effort only: the convention has exceptions, so the result may be a
    wrong address.

    Args:
        name: Full display name, e.g. "Jean-Yves Duclos".
        domain: Organizational email domain.

    Returns:
        str | None: Derived address, or None when fewer than two name parts
            remain or a part is empty after cleaning.
    """
    if not name:
        return None
    parts = name.split()
    if len(parts) < 2:
        return None

    first = _clean_name_part(parts[0])
    last = _clean_name_part(parts[-1])
    if not first or not last:
        return None
    return f"{first}.{last}@{domain}"


def parse_cc(cc: str | Iterable[str] | None) -> list[str]:
    """Split a comma-separated CC list, dropping blanks."""
    if not cc:
        return []
    items = cc.split(",") if isinstance(cc, str) else cc
    return [item.strip() for item in items if item and item.strip()]


def build_email_body(representative_name: str, constituent: Constituent) -> str:
    return EMAIL_BODY_TEMPLATE.format(
        representative_name=representative_name,
        first_name=constituent.first_name,
        last_name=constituent.last_name,
        street_address=constituent.street_address,
        city=constituent.city,
        province=constituent.province,
        postal_code=format_postal_code(constituent.postal_code),
    )


def build_mailto_link(to_email: str, subject: str, body: str, cc: str | Iterable[str] | None = None) -> str:
    params = {"subject": subject, "body": body}
    cc_list = parse_cc(cc)
    if cc_list:
        params["cc"] = ",".join(cc_list)
    # mailto bodies must use %20, not '+', for spaces
    return f"mailto:{quote(to_email, safe='@')}?{urlencode(params, quote_via=quote)}"


def build_gmail_link(to_email: str, subject: str, body: str, cc: str | Iterable[str] | None = None) -> str:
    params = {"view": "cm", "fs": "1", "to": to_email}
    cc_list = parse_cc(cc)
    if cc_list:
        params["cc"] = ",".join(cc_list)
    params["su"] = subject
    params["body"] = body
    return f"{GMAIL_COMPOSE_URL}?{urlencode(params)}"


def build_full_email_text(to_email: str, subject: str, body: str, cc: str | Iterable[str] | None = None) -> str:
    """Render the email as copyable plain text with To/CC/Subject headers."""
    lines = [f"To: {to_email}"]
    cc_list = parse_cc(cc)
    if cc_list:
        lines.append(f"CC: {','.join(cc_list)}")
    lines.append(f"Subject: {subject}")
    return "\n".join(lines) + "\n\n" + body


class ComposedEmail(BaseModel):
    """Everything needed to send or copy the email."""

    to: str
    cc: list[str] = Field(default_factory=list)
    subject: str
    body: str
    mailto_link: str
    gmail_link: str
    full_text: str


def compose_email(
    representative: RepresentativeContact,
    constituent: Constituent,
    *,
    subject: str | None = None,
    body: str | None = None,
    cc: str | Iterable[str] | None = None,
) -> ComposedEmail:
    """Compose the email to a representative.

    ``subject`` and ``cc`` default to the configured values; ``body`` defaults
    to the template signed by the constituent. Pass an edited body to rebuild
    the links after the user changes the text.
    """
    subject = settings.app.email_subject if subject is None else subject
    cc_list = parse_cc(settings.app.email_cc if cc is None else cc)
    body = build_email_body(representative.name, constituent) if body is None else body

    return ComposedEmail(
        to=representative.email,
        cc=cc_list,
        subject=subject,
        body=body,
        mailto_link=build_mailto_link(representative.email, subject, body, cc_list),
        gmail_link=build_gmail_link(representative.email, subject, body, cc_list),
        full_text=build_full_email_text(representative.email, subject, body, cc_list),
    )
