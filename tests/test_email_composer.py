"""Unit tests for email derivation and composition helpers."""

from urllib.parse import parse_qs, unquote, urlparse

import pytest
from pydantic import ValidationError

from mp_lookup.core.config import settings
from mp_lookup.schemas.representative import RepresentativeContact
from mp_lookup.services.email_composer import (
    Constituent,
    build_email_body,
    build_full_email_text,
    build_gmail_link,
    build_mailto_link,
    compose_email,
    derive_email_from_name,
    parse_cc,
)
from mp_lookup.utils.postal_code import format_postal_code, normalize_postal_code


@pytest.fixture
def constituent() -> Constituent:
    return Constituent(
        first_name=" Ada ",
        last_name="Lovelace",
        email="ada@example.com",
        street_address="1 Wellington St",
        city="Ottawa",
        province="ON",
        postal_code="k1a 0a6",
    )


class TestDeriveEmail:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Justin Trudeau", "justin.trudeau@parl.gc.ca"),
            ("Jean-Yves Duclos", "jean-yves.duclos@parl.gc.ca"),
            ("François-Philippe Champagne", "francois-philippe.champagne@parl.gc.ca"),
            ("Ginette Petitpas Taylor", "ginette.taylor@parl.gc.ca"),
            ("  Leah   Gazan  ", "leah.gazan@parl.gc.ca"),
            ("Seamus O'Regan", "seamus.oregan@parl.gc.ca"),
        ],
    )
    def test_first_dot_last(self, name: str, expected: str) -> None:
        assert derive_email_from_name(name) == expected

    @pytest.mark.parametrize("name", [None, "", "   ", "Madonna"])
    def test_fewer_than_two_parts_is_undeterminable(self, name) -> None:
        assert derive_email_from_name(name) is None

    def test_part_empty_after_cleaning_is_undeterminable(self) -> None:
        assert derive_email_from_name("Jane 123") is None

    def test_custom_domain(self) -> None:
        assert derive_email_from_name("Ada Lovelace", "example.org") == "ada.lovelace@example.org"


class TestConstituent:
    def test_normalizes_fields(self, constituent: Constituent) -> None:
        assert constituent.first_name == "Ada"
        assert constituent.postal_code == "K1A0A6"

    def test_rejects_bad_email(self) -> None:
        with pytest.raises(ValidationError):
            Constituent(
                first_name="Ada",
                last_name="Lovelace",
                email="not-an-email",
                street_address="1 Wellington St",
                city="Ottawa",
                province="ON",
                postal_code="K1A0A6",
            )

    def test_rejects_blank_name(self) -> None:
        with pytest.raises(ValidationError):
            Constituent(
                first_name="   ",
                last_name="Lovelace",
                email="ada@example.com",
                street_address="1 Wellington St",
                city="Ottawa",
                province="ON",
                postal_code="K1A0A6",
            )

    def test_rejects_bad_postal_code(self) -> None:
        with pytest.raises(ValidationError):
            Constituent(
                first_name="Ada",
                last_name="Lovelace",
                email="ada@example.com",
                street_address="1 Wellington St",
                city="Ottawa",
                province="ON",
                postal_code="90210",
            )


class TestComposition:
    def test_body_is_signed_by_constituent(self, constituent: Constituent) -> None:
        body = build_email_body("Yasir Naqvi", constituent)

        assert body.startswith("Dear Yasir Naqvi,")
        assert body.endswith("Ada Lovelace\n1 Wellington St\nOttawa, ON K1A 0A6")

    def test_mailto_link(self) -> None:
        link = build_mailto_link("mp@parl.gc.ca", "Hello MP", "Line 1\nLine 2", cc="a@x.ca, b@x.ca")

        parsed = urlparse(link)
        assert parsed.scheme == "mailto"
        assert unquote(parsed.path) == "mp@parl.gc.ca"
        assert "+" not in parsed.query
        params = parse_qs(parsed.query)
        assert params["subject"] == ["Hello MP"]
        assert params["body"] == ["Line 1\nLine 2"]
        assert params["cc"] == ["a@x.ca,b@x.ca"]

    def test_mailto_link_without_cc(self) -> None:
        params = parse_qs(urlparse(build_mailto_link("mp@parl.gc.ca", "s", "b")).query)

        assert "cc" not in params

    def test_gmail_link(self) -> None:
        link = build_gmail_link("mp@parl.gc.ca", "Subject", "Body text", cc=["pm@pm.gc.ca"])

        parsed = urlparse(link)
        assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == "https://mail.google.com/mail/"
        params = parse_qs(parsed.query)
        assert params["view"] == ["cm"]
        assert params["fs"] == ["1"]
        assert params["to"] == ["mp@parl.gc.ca"]
        assert params["cc"] == ["pm@pm.gc.ca"]
        assert params["su"] == ["Subject"]
        assert params["body"] == ["Body text"]

    def test_full_email_text(self) -> None:
        text = build_full_email_text("mp@parl.gc.ca", "Subject", "Body", cc="pm@pm.gc.ca")

        assert text == "To: mp@parl.gc.ca\nCC: pm@pm.gc.ca\nSubject: Subject\n\nBody"

    def test_full_email_text_without_cc(self) -> None:
        assert build_full_email_text("mp@parl.gc.ca", "S", "B") == "To: mp@parl.gc.ca\nSubject: S\n\nB"

    def test_parse_cc_drops_blanks(self) -> None:
        assert parse_cc("a@x.ca, ,b@x.ca,") == ["a@x.ca", "b@x.ca"]
        assert parse_cc(None) == []

    def test_compose_email_uses_configured_defaults(self, constituent: Constituent) -> None:
        contact = RepresentativeContact(name="Yasir Naqvi", riding="Ottawa Centre", email="yasir.naqvi@parl.gc.ca")

        email = compose_email(contact, constituent)

        assert email.to == "yasir.naqvi@parl.gc.ca"
        assert email.subject == settings.app.email_subject
        assert email.cc == parse_cc(settings.app.email_cc)
        assert email.body.startswith("Dear Yasir Naqvi,")
        assert email.full_text.endswith(email.body)
        assert parse_qs(urlparse(email.gmail_link).query)["su"] == [settings.app.email_subject]

    def test_compose_email_with_edited_body(self, constituent: Constituent) -> None:
        contact = RepresentativeContact(name="Yasir Naqvi", riding="Ottawa Centre", email="yasir.naqvi@parl.gc.ca")

        email = compose_email(contact, constituent, subject="Hi", body="Edited", cc="")

        assert email.cc == []
        assert email.full_text == "To: yasir.naqvi@parl.gc.ca\nSubject: Hi\n\nEdited"
        assert parse_qs(urlparse(email.mailto_link).query)["body"] == ["Edited"]


class TestPostalCodeUtils:
    def test_normalize(self) -> None:
        assert normalize_postal_code(" h2x 1y4 ") == "H2X1Y4"
        assert normalize_postal_code("H2X1Y") is None
        assert normalize_postal_code(None) is None

    def test_format(self) -> None:
        assert format_postal_code("h2x1y4") == "H2X 1Y4"
        assert format_postal_code("H2X") == "H2X"
