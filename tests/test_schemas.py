"""Tests for the application input schema."""

import pytest
from pydantic import ValidationError

from schemas import ApplicationIn, TC_NO_LENGTH_MESSAGE, validation_messages


def _body(**overrides):
    body = {"tcNo": "12345678901", "fullName": "Zeynep Kaya", "email": "zeynep@example.com"}
    body.update(overrides)
    return body


class TestApplicationIn:

    def test_maps_body_fields_to_columns(self):
        payload = ApplicationIn.model_validate(_body(
            weeklyHours="12.5",
            normStatus="Norm fazlası",
            preferences={"ilTercihi": "Ankara"},
        ))

        columns = payload.to_columns()

        assert columns["tc_no"] == "12345678901"
        assert columns["full_name"] == "Zeynep Kaya"
        assert columns["weekly_hours"] == 12.5
        assert columns["norm_status"] == "Norm fazlası"
        assert columns["preferences"] == {"ilTercihi": "Ankara"}
        assert columns["branch"] is None

    def test_unknown_fields_are_dropped(self):
        payload = ApplicationIn.model_validate(_body(status="approved", applicationId="X", extra=1))

        columns = payload.to_columns()

        assert "status" not in columns
        assert "application_id" not in columns
        assert "extra" not in columns

    def test_strips_whitespace(self):
        payload = ApplicationIn.model_validate(_body(fullName="  Zeynep Kaya  "))

        assert payload.full_name == "Zeynep Kaya"

    @pytest.mark.parametrize("tc_no", ["1234567890", "123456789012", "1234567890a", "١٢٣٤٥٦٧٨٩٠١"])
    def test_rejects_bad_tc_no(self, tc_no):
        with pytest.raises(ValidationError) as excinfo:
            ApplicationIn.model_validate(_body(tcNo=tc_no))

        assert validation_messages(excinfo.value.errors()) == [TC_NO_LENGTH_MESSAGE]


class TestValidationMessages:

    def test_missing_fields(self):
        with pytest.raises(ValidationError) as excinfo:
            ApplicationIn.model_validate({})

        assert validation_messages(excinfo.value.errors()) == [
            "T.C. identity number is required.",
            "Full name is required.",
            "Email is required.",
        ]

    def test_null_required_field(self):
        with pytest.raises(ValidationError) as excinfo:
            ApplicationIn.model_validate(_body(email=None))

        assert validation_messages(excinfo.value.errors()) == ["Email is required."]

    def test_empty_required_field(self):
        with pytest.raises(ValidationError) as excinfo:
            ApplicationIn.model_validate(_body(tcNo=""))

        assert validation_messages(excinfo.value.errors()) == ["T.C. identity number is required."]

    def test_other_errors_are_prefixed(self):
        errors = [{"type": "float_parsing", "loc": ("body", "weeklyHours"), "msg": "Input should be a valid number"}]

        assert validation_messages(errors) == ["weeklyHours: Input should be a valid number"]

    def test_body_level_error(self):
        errors = [{"type": "missing", "loc": ("body",), "msg": "Field required"}]

        assert validation_messages(errors) == ["Field required"]

    def test_duplicates_collapsed(self):
        errors = [
            {"type": "missing", "loc": ("body", "email"), "msg": "Field required"},
            {"type": "missing", "loc": ("body", "email"), "msg": "Field required"},
        ]

        assert validation_messages(errors) == ["Email is required."]
