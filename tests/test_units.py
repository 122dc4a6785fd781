"""Tests for units module."""

import pytest
from lemlibpath.core.units import (
    Quantity,
    UnitConverter,
    UnitOfLength,
    clamp,
    parse_number_in_string,
    round_user,
)


class TestUnitOfLength:
    def test_inch_to_mm(self):
        assert UnitOfLength.INCH.to_mm(1.0) == pytest.approx(25.4)

    def test_mm_to_mm(self):
        assert UnitOfLength.MILLIMETER.to_mm(25.4) == pytest.approx(25.4)

    def test_inch_from_mm(self):
        assert UnitOfLength.INCH.from_mm(25.4) == pytest.approx(1.0)

    def test_foot_from_mm(self):
        assert UnitOfLength.FOOT.from_mm(304.8) == pytest.approx(1.0)

    def test_labels(self):
        assert UnitOfLength.INCH.label() == "in"
        assert UnitOfLength.MILLIMETER.label() == "mm"
        assert UnitOfLength.CENTIMETER.label() == "cm"

    def test_from_label(self):
        assert UnitOfLength.from_label("ft") is UnitOfLength.FOOT

    def test_from_unknown_label(self):
        with pytest.raises(ValueError):
            UnitOfLength.from_label("furlong")


class TestUnitConverter:
    def test_same_unit_is_identity(self):
        uc = UnitConverter(UnitOfLength.INCH, UnitOfLength.INCH)
        assert uc.from_a_to_b(3.3) == 3.3
        assert uc.from_b_to_a(3.3) == 3.3

    def test_cm_to_inch(self):
        uc = UnitConverter(UnitOfLength.CENTIMETER, UnitOfLength.INCH)
        assert uc.from_a_to_b(2.54) == pytest.approx(1.0)
        assert uc.from_b_to_a(1.0) == pytest.approx(2.54)

    def test_round_trip(self):
        uc = UnitConverter(UnitOfLength.METER, UnitOfLength.FOOT)
        assert uc.from_b_to_a(uc.from_a_to_b(1.234)) == pytest.approx(1.234)


class TestQuantity:
    def test_to_other_unit(self):
        assert Quantity(100, UnitOfLength.CENTIMETER).to(UnitOfLength.METER) == pytest.approx(1.0)

    def test_str(self):
        assert str(Quantity(2, UnitOfLength.INCH)) == "2 in"


class TestHelpers:
    def test_round_user(self):
        assert round_user(1.23456) == 1.235
        assert round_user(100.0) == 100.0

    def test_round_user_drops_negative_zero(self):
        assert str(round_user(-0.0001)) == "0.0"

    def test_clamp(self):
        assert clamp(5, 0, 3) == 3
        assert clamp(-1, 0, 3) == 0
        assert clamp(2, 0, 3) == 2


class TestParseNumberInString:
    lo = Quantity(0.1, UnitOfLength.CENTIMETER)
    hi = Quantity(100, UnitOfLength.CENTIMETER)

    def test_plain_number(self):
        assert parse_number_in_string("2", UnitOfLength.INCH, self.lo, self.hi) == 2.0

    def test_decimal_with_whitespace(self):
        assert parse_number_in_string(" 2.5 ", UnitOfLength.INCH, self.lo, self.hi) == 2.5

    def test_rejects_non_numbers(self):
        assert parse_number_in_string("abc", UnitOfLength.INCH, self.lo, self.hi) is None
        assert parse_number_in_string("-1", UnitOfLength.INCH, self.lo, self.hi) is None
        assert parse_number_in_string("", UnitOfLength.INCH, self.lo, self.hi) is None

    def test_clamps_to_upper_bound(self):
        value = parse_number_in_string("1000", UnitOfLength.INCH, self.lo, self.hi)
        assert value == pytest.approx(39.37)

    def test_clamps_to_lower_bound(self):
        value = parse_number_in_string("0", UnitOfLength.CENTIMETER, self.lo, self.hi)
        assert value == pytest.approx(0.1)
