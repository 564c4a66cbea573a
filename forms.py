# forms.py - turns submitted form fields into clean values
# raises store.ValidationError with a message the page can flash

import math
import re
from datetime import datetime

from store import ValidationError

EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
MIN_PASSWORD_LENGTH = 8
SALE_DATE_FORMAT = '%Y-%m-%dT%H:%M'


def _number(form, key, label):
    try:
        value = float(form.get(key, ''))
    except (TypeError, ValueError):
        raise ValidationError(f'{label} must be a number')
    if not math.isfinite(value):
        raise ValidationError(f'{label} must be a number')
    if value < 0:
        raise ValidationError(f'{label} cannot be negative')
    return value


def _whole(form, key, label):
    try:
        return int(form.get(key, ''))
    except (TypeError, ValueError):
        raise ValidationError(f'{label} must be a whole number')


def parse_product_form(form):
    name = (form.get('name') or '').strip()
    category = (form.get('category') or '').strip()
    if not name:
        raise ValidationError('Name is required')
    if not category:
        raise ValidationError('Category is required')

    quantity = _whole(form, 'quantity', 'Quantity')
    if quantity < 0:
        raise ValidationError('Quantity cannot be negative')

    return {
        'name': name,
        'category': category,
        'cost_price': _number(form, 'cost_price', 'Cost price'),
        'selling_price': _number(form, 'selling_price', 'Selling price'),
        'quantity': quantity,
    }


def parse_sale_date(value, now=None):
    if not value:
        return now or datetime.now()
    try:
        return datetime.strptime(value, SALE_DATE_FORMAT)
    except ValueError:
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            raise ValidationError('Invalid sale date')


def parse_sale_form(form, now=None):
    product_id = form.get('product_id')
    if not product_id:
        raise ValidationError('Please select a product')
    try:
        product_id = int(product_id)
    except ValueError:
        raise ValidationError('Please select a product')

    quantity = _whole(form, 'quantity_sold', 'Quantity')
    if quantity <= 0:
        raise ValidationError('Quantity must be greater than 0')

    return {
        'product_id': product_id,
        'quantity': quantity,
        'date_sold': parse_sale_date(form.get('date_sold'), now),
    }


def parse_adjustment(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError('Adjustment must be a whole number')


def parse_day(value):
    """Read a YYYY-MM-DD filter value; blank or malformed means no bound."""
    if not value:
        return None
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        return None


def validate_signup(name, email, password, confirm):
    if not (name or '').strip():
        raise ValidationError('Name is required')
    if not (email or '').strip():
        raise ValidationError('Email is required')
    if not EMAIL_RE.match(email.strip()):
        raise ValidationError('Invalid email address')
    if not password:
        raise ValidationError('Password is required')
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')
    if password != confirm:
        raise ValidationError('Passwords do not match')


def password_strength(password):
    if not password:
        return ''
    score = 0
    if len(password) >= 8:
        score += 1
    if len(password) >= 12:
        score += 1
    if re.search(r'[a-z]', password) and re.search(r'[A-Z]', password):
        score += 1
    if re.search(r'[0-9]', password):
        score += 1
    if re.search(r'[^a-zA-Z0-9]', password):
        score += 1

    if score <= 2:
        return 'Weak'
    if score <= 3:
        return 'Medium'
    return 'Strong'
