"""
Unit tests for form parsing and the page container.
"""

from datetime import date

import pytest

from admit_portal.core.errors import ValidationError
from admit_portal.modules.applications.models import FormVariant
from admit_portal.modules.applications.schemas import ApplicationPage, parse_form


class TestParseForm:
    """Tests for parse_form."""

    def test_full_form_types(self, full_form_data):
        fields = parse_form(FormVariant.FULL, full_form_data)

        assert fields["dob"] == date(2000, 5, 17)
        assert fields["percentage"] == 78.5
        assert fields["passing_year"] == 2021
        assert fields["full_name"] == "Asha Verma"

    def test_full_form_strips_whitespace(self, full_form_data):
        full_form_data["full_name"] = "  Asha Verma  "

        assert parse_form(FormVariant.FULL, full_form_data)["full_name"] == "Asha Verma"

    def test_basic_form_maps_name_to_full_name(self, basic_form_data):
        fields = parse_form(FormVariant.BASIC, basic_form_data)

        assert fields == {"full_name": "Ravi Kumar", "age": 24, "email": "ravi@example.com"}

    def test_basic_form_blank_age(self, basic_form_data):
        basic_form_data["age"] = ""

        assert parse_form(FormVariant.BASIC, basic_form_data)["age"] is None

    @pytest.mark.parametrize(
        "field,value",
        [
            ("dob", "17/05/2000"),
            ("percentage", "abc"),
            ("percentage", "101"),
            ("passing_year", "20x1"),
        ],
    )
    def test_invalid_values(self, full_form_data, field, value):
        full_form_data[field] = value

        with pytest.raises(ValidationError) as exc_info:
            parse_form(FormVariant.FULL, full_form_data)

        assert exc_info.value.message.startswith(f"Invalid value for {field}")


class TestApplicationPage:
    """Tests for ApplicationPage navigation flags."""

    def test_first_of_many(self):
        page = ApplicationPage(items=[], total=12, page=1, pages=3, page_size=5)
        assert not page.has_previous
        assert page.has_next

    def test_last_page(self):
        page = ApplicationPage(items=[], total=12, page=3, pages=3, page_size=5)
        assert page.has_previous
        assert not page.has_next
