from datetime import date, datetime

import pytest

import forms
from store import ValidationError


def product_form(**overrides):
    data = {'name': ' Pen ', 'category': 'Stationery', 'cost_price': '1.50',
            'selling_price': '2', 'quantity': '10'}
    data.update(overrides)
    return data


def test_parse_product_form():
    assert forms.parse_product_form(product_form()) == {
        'name': 'Pen', 'category': 'Stationery', 'cost_price': 1.5,
        'selling_price': 2.0, 'quantity': 10,
    }


@pytest.mark.parametrize('overrides', [
    {'name': ''},
    {'category': '   '},
    {'cost_price': '-1'},
    {'selling_price': 'abc'},
    {'quantity': '-2'},
    {'quantity': '1.5'},
    {'cost_price': 'nan'},
    {'selling_price': 'inf'},
    {'selling_price': '-inf'},
])
def test_parse_product_form_rejects(overrides):
    with pytest.raises(ValidationError):
        forms.parse_product_form(product_form(**overrides))


def test_parse_sale_form():
    parsed = forms.parse_sale_form({'product_id': '3', 'quantity_sold': '5',
                                    'date_sold': '2026-03-14T09:30'})
    assert parsed == {'product_id': 3, 'quantity': 5, 'date_sold': datetime(2026, 3, 14, 9, 30)}


def test_parse_sale_form_defaults_to_now():
    now = datetime(2026, 3, 14, 12, 0)
    parsed = forms.parse_sale_form({'product_id': '3', 'quantity_sold': '1'}, now)
    assert parsed['date_sold'] == now


@pytest.mark.parametrize('form', [
    {'quantity_sold': '1'},
    {'product_id': '1', 'quantity_sold': '0'},
    {'product_id': '1', 'quantity_sold': '-4'},
    {'product_id': '1', 'quantity_sold': 'lots'},
    {'product_id': '1', 'quantity_sold': '1', 'date_sold': 'yesterday'},
])
def test_parse_sale_form_rejects(form):
    with pytest.raises(ValidationError):
        forms.parse_sale_form(form)


def test_parse_day():
    assert forms.parse_day('2026-03-14') == date(2026, 3, 14)
    assert forms.parse_day('') is None
    assert forms.parse_day('14/03/2026') is None


def test_validate_signup():
    forms.validate_signup('Ann', 'ann@example.com', 'longenough', 'longenough')

    cases = [
        (('', 'ann@example.com', 'longenough', 'longenough'), 'Name is required'),
        (('Ann', 'ann@example', 'longenough', 'longenough'), 'Invalid email address'),
        (('Ann', 'ann@example.com', 'short', 'short'), 'at least 8 characters'),
        (('Ann', 'ann@example.com', 'longenough', 'different'), 'Passwords do not match'),
    ]
    for args, message in cases:
        with pytest.raises(ValidationError, match=message):
            forms.validate_signup(*args)


def test_password_strength():
    assert forms.password_strength('') == ''
    assert forms.password_strength('abcdefgh') == 'Weak'
    assert forms.password_strength('abcdefgh12') == 'Weak'
    assert forms.password_strength('Abcdefgh12') == 'Medium'
    assert forms.password_strength('Abcdefgh12!xyz') == 'Strong'


def test_parse_adjustment():
    assert forms.parse_adjustment('-1') == -1
    with pytest.raises(ValidationError):
        forms.parse_adjustment(None)
