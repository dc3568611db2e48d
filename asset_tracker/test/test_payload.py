"""
Coercion of JSON body values into the types the business layer expects.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from asset_tracker.buisness.core.errors import ValidationFailedError
from asset_tracker.presentation.payload import parse_datetime, parse_decimal, parse_str, pick


def test_parse_str():
    assert parse_str('Laptop', 'name') == 'Laptop'
    assert parse_str('', 'name') == ''
    assert parse_str(None, 'name') is None


@pytest.mark.parametrize('value', [['Laptop'], {'name': 'Laptop'}, 7, 1.5, True])
def test_parse_str_rejects_other_json_types(value):
    with pytest.raises(ValidationFailedError) as exc:
        parse_str(value, 'name')
    assert exc.value.message == "Invalid text for name"
    assert exc.value.status_code == 400


@pytest.mark.parametrize('value,expected', [
    ('2024-01-15', datetime(2024, 1, 15)),
    ('2024-01-15T10:00:00', datetime(2024, 1, 15, 10, 0)),
    ('2024-01-15T10:00:00Z', datetime(2024, 1, 15, 10, 0)),
    ('2024-01-15T10:00:00+02:00', datetime(2024, 1, 15, 8, 0)),
    ('2024-01-15T23:30:00-05:00', datetime(2024, 1, 16, 4, 30)),
])
def test_parse_datetime_normalizes_to_utc(value, expected):
    parsed = parse_datetime(value, 'purchaseDate')
    assert parsed == expected
    assert parsed.tzinfo is None


@pytest.mark.parametrize('value', ['yesterday', '2024-13-01', 20240115, ['2024-01-15']])
def test_parse_datetime_rejects_invalid(value):
    with pytest.raises(ValidationFailedError) as exc:
        parse_datetime(value, 'purchaseDate')
    assert exc.value.message == "Invalid date for purchaseDate"


def test_parse_decimal():
    assert parse_decimal('2499.99', 'value') == Decimal('2499.99')
    assert parse_decimal(15, 'value') == Decimal('15')
    assert parse_decimal('', 'value') is None
    assert parse_decimal(None, 'value') is None


@pytest.mark.parametrize('value', ['NaN', 'nan', 'Infinity', '-Infinity', 'sNaN', True, 'abc', ['1']])
def test_parse_decimal_rejects_non_finite_and_non_numbers(value):
    with pytest.raises(ValidationFailedError) as exc:
        parse_decimal(value, 'value')
    assert exc.value.message == "Invalid number for value"


def test_pick_checks_text_fields():
    mapping = {'name': 'name', 'dataType': 'data_type', 'isRequired': 'is_required'}

    fields = pick({'name': 'RAM', 'isRequired': True, 'other': 1}, mapping, ('name', 'data_type'))
    assert fields == {'name': 'RAM', 'is_required': True}

    with pytest.raises(ValidationFailedError) as exc:
        pick({'dataType': ['text']}, mapping, ('name', 'data_type'))
    assert exc.value.message == "Invalid text for dataType"
