import pytest

from antiques_trail.domain.places.validation import (
    format_uk_postcode,
    format_website_url,
    is_valid_email,
    is_valid_uk_phone,
    is_valid_uk_postcode,
    is_valid_website,
    looks_fabricated_phone,
    within_edinburgh,
)


@pytest.mark.parametrize("phone", ["0131 553 7286", "+44 131 553 7286", "07700 900123", "01636 702326", None])
def test_valid_uk_phones(phone: str | None) -> None:
    assert is_valid_uk_phone(phone)


@pytest.mark.parametrize("phone", ["12345", "0131 553", "555-1234"])
def test_invalid_uk_phones(phone: str) -> None:
    assert not is_valid_uk_phone(phone)


def test_email_and_website() -> None:
    assert is_valid_email("info@georgianantiques.net")
    assert not is_valid_email("info@")
    assert is_valid_website("www.armchairbooks.co.uk")
    assert is_valid_website("https://www.georgianantiques.net/")
    assert not is_valid_website("not a website")


def test_postcodes() -> None:
    assert format_uk_postcode("eh11aa") == "EH1 1AA"
    assert format_uk_postcode(" EH6 7HF ") == "EH6 7HF"
    assert format_uk_postcode("  ") is None
    assert is_valid_uk_postcode("EH28 8NB")
    assert not is_valid_uk_postcode("12345")


def test_format_website_url() -> None:
    assert format_website_url("example.com") == "https://example.com"
    assert format_website_url("http://example.com") == "http://example.com"
    assert format_website_url("   ") is None


def test_edinburgh_bounds_and_fabricated_phones() -> None:
    assert within_edinburgh(55.95, -3.19)
    assert not within_edinburgh(51.5, -0.12)
    assert looks_fabricated_phone("0131 555-0199")
    assert not looks_fabricated_phone(None)
