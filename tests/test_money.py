import pytest

from app.utils.money import clamp, format_minor_units, net_amount, percent_of


class TestPercentOf:
    def test_exact_percentage(self):
        assert percent_of(50000, 10) == 5000

    @pytest.mark.parametrize(
        "amount, percent, expected",
        [
            (5, 10, 1),    # 0.5 rounds up
            (15, 10, 2),   # 1.5 rounds up
            (25, 10, 3),   # 2.5 rounds away from zero, not to even
            (4, 10, 0),    # 0.4 rounds down
            (333, 33, 110),  # 109.89
            (0, 50, 0),
            (12345, 0, 0),
            (12345, 100, 12345),
        ],
    )
    def test_rounds_half_away_from_zero(self, amount, percent, expected):
        assert percent_of(amount, percent) == expected

    def test_negative_amount_rounds_away_from_zero(self):
        assert percent_of(-15, 10) == -2

    def test_rejects_floats(self):
        with pytest.raises(TypeError):
            percent_of(100.0, 10)

    def test_rejects_bools(self):
        with pytest.raises(TypeError):
            percent_of(True, 10)


class TestNetAmount:
    def test_subtracts_discounts(self):
        assert net_amount(50000, 5000) == 45000
        assert net_amount(50000, 5000, 2000) == 43000

    def test_floors_at_zero(self):
        assert net_amount(gross_amount=50000, scholarship_amount=30000, custom_discount_amount=25000) == 0


def test_clamp():
    assert clamp(-5, 0, 10) == 0
    assert clamp(15, 0, 10) == 10
    assert clamp(7, 0, 10) == 7


def test_format_minor_units():
    assert format_minor_units(50000) == "INR 500.00"
    assert format_minor_units(-123456, "USD") == "USD -1,234.56"
    assert format_minor_units(5) == "INR 0.05"


def test_format_minor_units_without_fraction():
    assert format_minor_units(50000, "JPY", minor_units=1) == "JPY 50,000"
    assert format_minor_units(-7, "JPY", minor_units=1) == "JPY -7"
    assert format_minor_units(1234567, "BHD", minor_units=1000) == "BHD 1,234.567"
