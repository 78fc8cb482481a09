"""
Request payload and query-string validation.

Validators return cleaned values ready for the models, or raise
``ValidationError`` carrying a field -> messages mapping.
"""

import re
import unicodedata
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from retail_pos.security import sanitize_input

MAX_PRODUCT_NAME_LENGTH = 100
MAX_PRICE = Decimal('999999.99')
MIN_DATE = date(2000, 1, 1)
RESULT_TYPES = ('raw', 'daily', 'monthly')

DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}(T\d{2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}:?\d{2})?)?$')
MONTH_PATTERN = re.compile(r'^\d{4}-(0[1-9]|1[0-2])$')
NAME_PUNCTUATION = set(' -_.(),')


class ValidationError(Exception):
    def __init__(self, message, errors=None):
        super().__init__(message)
        self.message = message
        self.errors = errors or {}

    def to_dict(self):
        payload = {'error': self.message}
        if self.errors:
            payload['details'] = self.errors
        return payload


@dataclass(frozen=True)
class PriceQuery:
    product: Optional[str] = None
    month: Optional[str] = None
    type: str = 'raw'
    limit: Optional[int] = None


def _is_name_char(char):
    # combining marks carry vowels and tones in scripts such as Thai
    return char.isalnum() or char in NAME_PUNCTUATION or unicodedata.category(char).startswith('M')


def clean_product_name(value, errors, field='productName'):
    if not isinstance(value, str) or not value.strip():
        errors.setdefault(field, []).append('Product name is required')
        return None
    name = sanitize_input(value)
    if not name:
        errors.setdefault(field, []).append('Product name is required')
    elif len(name) > MAX_PRODUCT_NAME_LENGTH:
        errors.setdefault(field, []).append(
            f'Product name must be less than {MAX_PRODUCT_NAME_LENGTH} characters')
    elif not all(_is_name_char(c) for c in name):
        errors.setdefault(field, []).append('Product name contains invalid characters')
    return name


def clean_price(value, errors, field='price'):
    if isinstance(value, bool) or value is None or value == '':
        errors.setdefault(field, []).append('Price must be a valid number')
        return None
    try:
        price = Decimal(str(value).strip())
    except InvalidOperation:
        errors.setdefault(field, []).append('Price must be a valid number')
        return None
    if not price.is_finite():
        errors.setdefault(field, []).append('Price must be a valid number')
        return None
    if price <= 0:
        errors.setdefault(field, []).append('Price must be positive')
    elif price > MAX_PRICE:
        errors.setdefault(field, []).append('Price is too large')
    elif price.as_tuple().exponent < -2 and price != price.quantize(Decimal('0.01')):
        errors.setdefault(field, []).append('Price can have at most 2 decimal places')
    return price


def clean_date(value, errors, field='date', today=None):
    today = today or date.today()
    if isinstance(value, datetime):
        parsed = value.date()
    elif isinstance(value, date):
        parsed = value
    elif isinstance(value, str) and DATE_PATTERN.match(value.strip()):
        try:
            parsed = date.fromisoformat(value.strip()[:10])
        except ValueError:
            errors.setdefault(field, []).append('Date must be in YYYY-MM-DD format')
            return None
    else:
        errors.setdefault(field, []).append('Date must be in YYYY-MM-DD format')
        return None

    if parsed < MIN_DATE or parsed > today:
        errors.setdefault(field, []).append('Date must be between 2000-01-01 and today')
    return parsed


def clean_quantity(value, errors, field='quantity'):
    if isinstance(value, bool):
        errors.setdefault(field, []).append('Quantity must be a whole number')
        return None
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        number = None
    if number is None or not number.is_finite() or number != number.to_integral_value():
        errors.setdefault(field, []).append('Quantity must be a whole number')
        return None
    quantity = int(number)
    if quantity <= 0:
        errors.setdefault(field, []).append('Quantity must be positive')
    return quantity


def validate_price_payload(item, today=None):
    """Validate one ``{productName, price, date}`` object from a POST body."""
    if not isinstance(item, dict):
        raise ValidationError('Each price entry must be an object')

    missing = [f for f in ('productName', 'price', 'date') if item.get(f) in (None, '')]
    if missing:
        raise ValidationError('Missing required fields: productName, price, date',
                              {f: ['This field is required'] for f in missing})

    errors = {}
    cleaned = {
        'product_name': clean_product_name(item['productName'], errors),
        'price': clean_price(item['price'], errors),
        'date': clean_date(item['date'], errors, today=today),
    }
    if errors:
        first = next(iter(errors.values()))[0]
        raise ValidationError(first, errors)
    return cleaned


def validate_checklist_item(item, today=None):
    if not isinstance(item, dict):
        raise ValidationError('Invalid input: Missing required fields in values object.')

    required = ('product_name', 'price', 'date', 'quantity')
    if any(not item.get(f) for f in required):
        raise ValidationError('Invalid input: Missing required fields in one or more items.',
                              {f: ['This field is required'] for f in required if not item.get(f)})

    errors = {}
    cleaned = {
        'product_name': clean_product_name(item['product_name'], errors, field='product_name'),
        'price': clean_price(item['price'], errors),
        'date': clean_date(item['date'], errors, today=today),
        'quantity': clean_quantity(item['quantity'], errors),
    }
    if errors:
        first = next(iter(errors.values()))[0]
        raise ValidationError(first, errors)
    return cleaned


def parse_summary_filters(args):
    """Read the ``product`` and ``month`` filters; anything else is ignored."""
    product = (args.get('product') or '').strip() or None

    month = (args.get('month') or '').strip() or None
    if month and not MONTH_PATTERN.match(month):
        raise ValidationError('Month must be in YYYY-MM format', {'month': ['Invalid month']})

    return product, month


def parse_price_query(args):
    """Read ``product``, ``month``, ``type`` and ``limit`` from a query string."""
    product, month = parse_summary_filters(args)

    result_type = (args.get('type') or 'raw').strip().lower()
    if result_type not in RESULT_TYPES:
        raise ValidationError(f"type must be one of: {', '.join(RESULT_TYPES)}",
                              {'type': ['Unknown result type']})

    # non-numeric limits are ignored rather than rejected
    limit = None
    raw_limit = (args.get('limit') or '').strip()
    if raw_limit.isdigit() and int(raw_limit) > 0:
        limit = int(raw_limit)

    return PriceQuery(product=product, month=month, type=result_type, limit=limit)
