"""Form input conversion."""

from datetime import date

import pytest

from bookinv.exceptions import ValidationError
from bookinv.utils.parsing import to_int, to_float, to_date, blank_to_none


class TestToFloat:

    def test_parses_strings_and_numbers(self):
        assert to_float('2.5', 'price') == 2.5
        assert to_float(3, 'price') == 3.0

    def test_blank_uses_default(self):
        assert to_float('  ', 'paid', default=0.0) == 0.0
        with pytest.raises(ValidationError):
            to_float('', 'price')

    @pytest.mark.parametrize('value', ['nan', 'NaN', 'inf', '-inf', 'Infinity', float('nan')])
    def test_non_finite_rejected(self, value):
        with pytest.raises(ValidationError):
            to_float(value, 'price', minimum=0)

    def test_minimum(self):
        with pytest.raises(ValidationError):
            to_float('-0.01', 'price', minimum=0)


class TestToInt:

    def test_rejects_float_infinity(self):
        with pytest.raises(ValidationError):
            to_int(float('inf'), 'quantity')

    def test_rejects_text(self):
        with pytest.raises(ValidationError):
            to_int('nan', 'quantity')

    def test_minimum(self):
        assert to_int(' 4 ', 'quantity', minimum=1) == 4
        with pytest.raises(ValidationError):
            to_int('0', 'quantity', minimum=1)


def test_to_date_and_blank():
    assert to_date('2024-03-01', 'date') == date(2024, 3, 1)
    assert to_date('', 'date', required=False) is None
    assert blank_to_none('  x ') == 'x'
    assert blank_to_none('   ') is None
