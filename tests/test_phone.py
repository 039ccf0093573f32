"""
Test Kenyan Phone Normalization - accepted formats and typed errors
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from hurecore.contacts.phone import (
    PHONE_VALIDATION_MESSAGES,
    format_phone_for_display,
    is_valid_kenyan_phone,
    normalize_kenyan_phone,
    require_kenyan_phone,
)
from hurecore.coreutils.errors import InvalidLength, InvalidPrefix, PhoneRequired


def test_equivalent_inputs_share_canonical_form():
    print("🧪 Testing equivalent phone inputs...")

    inputs = [
        "0712345678",
        "712345678",
        "+254712345678",
        "254712345678",
        "0254712345678",
        "+254 712 345 678",
        " (0712) 345-678 ",
    ]
    for value in inputs:
        result = normalize_kenyan_phone(value)
        assert result.is_valid, f"{value!r} rejected: {result.error}"
        assert result.normalized == "+254712345678", f"{value!r} -> {result.normalized}"

    print(f"✅ {len(inputs)} formats normalize to +254712345678")


def test_safaricom_011_and_landline_prefixes():
    assert normalize_kenyan_phone("0112345678").normalized == "+254112345678"
    assert normalize_kenyan_phone("0201234567").normalized == "+254201234567"


def test_short_number_is_length_error():
    result = normalize_kenyan_phone("12345")

    assert not result.is_valid
    assert result.normalized is None
    assert isinstance(result.error, InvalidLength)
    assert result.error.code == "length"
    assert result.error.length == 5


def test_long_number_is_length_error():
    result = normalize_kenyan_phone("07123456789")
    assert isinstance(result.error, InvalidLength)


def test_bad_leading_digit_is_prefix_error():
    result = normalize_kenyan_phone("0812345678")

    assert isinstance(result.error, InvalidPrefix)
    assert result.error.code == "prefix"


def test_empty_and_missing_input_is_required_error():
    for value in (None, "", "   ", "+", 712345678):
        result = normalize_kenyan_phone(value)
        assert isinstance(result.error, PhoneRequired), f"{value!r} -> {result.error}"
        assert str(result.error) == PHONE_VALIDATION_MESSAGES["required"]


def test_is_valid_helper():
    assert is_valid_kenyan_phone("0712345678")
    assert not is_valid_kenyan_phone("0812345678")
    assert not is_valid_kenyan_phone(None)


def test_format_for_display():
    assert format_phone_for_display("+254712345678") == "+254 712 345 678"
    assert format_phone_for_display("0712345678") == "0712345678"
    assert format_phone_for_display(None) == ""


class TestRequirePhone(unittest.TestCase):
    def test_require_returns_canonical(self):
        self.assertEqual(require_kenyan_phone("0712345678"), "+254712345678")

    def test_require_raises_typed_error(self):
        with self.assertRaises(InvalidLength):
            require_kenyan_phone("12345")
        with self.assertRaises(InvalidPrefix):
            require_kenyan_phone("0912345678")
        with self.assertRaises(PhoneRequired):
            require_kenyan_phone("")


if __name__ == "__main__":
    unittest.main()
