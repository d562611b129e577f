"""Field checks and normalizers for shop data."""

from __future__ import annotations

import re

PHONE_STRIP_RE = re.compile(r"[\s\-().]")
UK_PHONE_RE = re.compile(r"^(?:\+44|0)(?:1\d{8,9}|2\d{9}|3\d{9}|7\d{9}|8\d{9})$")
EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
WEBSITE_RE = re.compile(
    r"^(https?://)?(www\.)?([a-zA-Z0-9][-a-zA-Z0-9]*\.)+[a-zA-Z0-9]{2,}(:\d+)?(/[-a-zA-Z0-9()@:%_+.~#?&/=]*)?$"
)
UK_POSTCODE_RE = re.compile(r"^[A-Z]{1,2}[0-9][A-Z0-9]? ?[0-9][A-Z]{2}$", re.IGNORECASE)

# Rough bounding box around Edinburgh.
EDINBURGH_LAT_MIN = 55.8
EDINBURGH_LAT_MAX = 56.0
EDINBURGH_LNG_MIN = -3.4
EDINBURGH_LNG_MAX = -3.0

FABRICATED_PHONE_MARKER = "555-"


def is_valid_uk_phone(phone: str | None) -> bool:
    if not phone:
        return True
    return bool(UK_PHONE_RE.match(PHONE_STRIP_RE.sub("", phone)))


def is_valid_email(email: str | None) -> bool:
    if not email:
        return True
    return bool(EMAIL_RE.match(email.strip()))


def is_valid_website(website: str | None) -> bool:
    if not website:
        return True
    website = website.strip()
    if re.search(r"\s", website):
        return False
    return bool(WEBSITE_RE.match(website))


def is_valid_uk_postcode(postcode: str | None) -> bool:
    if not postcode:
        return True
    return bool(UK_POSTCODE_RE.match(postcode.strip()))


def format_website_url(url: str | None) -> str | None:
    """Blank → None; a bare domain gets ``https://``."""

    if url is None:
        return None
    url = url.strip()
    if not url:
        return None
    if not re.match(r"^https?://", url, re.IGNORECASE):
        return f"https://{url}"
    return url


def format_uk_postcode(postcode: str | None) -> str | None:
    """``eh11aa`` → ``EH1 1AA``; too-short values are only upper-cased."""

    if postcode is None:
        return None
    clean = re.sub(r"\s", "", postcode).upper()
    if not clean:
        return None
    if len(clean) < 5:
        return clean
    return f"{clean[:-3]} {clean[-3:]}"


def within_edinburgh(lat: float | None, lng: float | None) -> bool:
    if lat is None or lng is None:
        return False
    return EDINBURGH_LAT_MIN <= lat <= EDINBURGH_LAT_MAX and EDINBURGH_LNG_MIN <= lng <= EDINBURGH_LNG_MAX


def looks_fabricated_phone(phone: str | None) -> bool:
    return bool(phone) and FABRICATED_PHONE_MARKER in phone


def blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None
