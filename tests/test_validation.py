"""Tests for email / feature request validation helpers."""

import pytest

from launchpad.errors import ValidationError
from launchpad.utils.validation import (
    clean_feature_request,
    is_valid_email,
    normalize_email,
    require_email,
)


class TestEmail:
    @pytest.mark.parametrize(
        "email",
        ["a@x.com", "first.last+tag@sub.example.org", "UPPER@EXAMPLE.COM"],
    )
    def test_valid(self, email):
        assert is_valid_email(email)

    @pytest.mark.parametrize(
        "email",
        ["plainaddress", "no-tld@example", "a b@x.com", "@x.com", "a@@x.com", "a@x .com", "", None, 42],
    )
    def test_invalid(self, email):
        assert not is_valid_email(email)

    def test_normalize_lowercases(self):
        assert normalize_email("Jane.Doe@Example.COM") == "jane.doe@example.com"

    def test_require_email_returns_normalized(self):
        assert require_email("Jane@Example.com") == "jane@example.com"

    def test_require_email_missing(self):
        with pytest.raises(ValidationError) as exc:
            require_email(None)
        assert exc.value.status_code == 400
        assert exc.value.detail == "Email is required"

    def test_require_email_malformed(self):
        with pytest.raises(ValidationError) as exc:
            require_email("not-an-email")
        assert exc.value.detail == "Invalid email format"


class TestFeatureRequestText:
    def test_nine_characters_rejected(self):
        with pytest.raises(ValidationError):
            clean_feature_request("x" * 9)

    def test_ten_characters_accepted(self):
        assert clean_feature_request("x" * 10) == "x" * 10

    def test_thousand_characters_accepted(self):
        assert len(clean_feature_request("y" * 1000)) == 1000

    def test_thousand_and_one_rejected(self):
        with pytest.raises(ValidationError):
            clean_feature_request("y" * 1001)

    def test_length_measured_after_trim(self):
        with pytest.raises(ValidationError):
            clean_feature_request("   " + "x" * 9 + "   ")
        assert clean_feature_request("  " + "x" * 10 + "\n") == "x" * 10

    def test_missing(self):
        with pytest.raises(ValidationError) as exc:
            clean_feature_request(None)
        assert exc.value.detail == "Feature request is required"
