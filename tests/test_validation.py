"""Tests for payload and query validation."""

from datetime import date
from decimal import Decimal

import pytest
from werkzeug.datastructures import MultiDict

from retail_pos.validation import (
    PriceQuery,
    ValidationError,
    parse_price_query,
    parse_summary_filters,
    validate_checklist_item,
    validate_price_payload,
)

TODAY = date(2024, 6, 30)


class TestPricePayload:

    def test_valid_payload(self):
        cleaned = validate_price_payload(
            {'productName': 'Jasmine Rice 5kg', 'price': 165.5, 'date': '2024-01-01'}, today=TODAY)
        assert cleaned == {
            'product_name': 'Jasmine Rice 5kg',
            'price': Decimal('165.5'),
            'date': date(2024, 1, 1),
        }

    def test_string_price_is_coerced(self):
        cleaned = validate_price_payload({'productName': 'Oil', 'price': '52.50', 'date': '2024-01-01'}, today=TODAY)
        assert cleaned['price'] == Decimal('52.50')

    def test_iso_timestamp_is_truncated(self):
        cleaned = validate_price_payload(
            {'productName': 'Oil', 'price': 1, 'date': '2024-01-01T10:30:00.000Z'}, today=TODAY)
        assert cleaned['date'] == date(2024, 1, 1)

    def test_thai_product_name(self):
        cleaned = validate_price_payload({'productName': 'ข้าวหอมมะลิ', 'price': 1, 'date': '2024-01-01'}, today=TODAY)
        assert cleaned['product_name'] == 'ข้าวหอมมะลิ'

    @pytest.mark.parametrize('field', ['productName', 'price', 'date'])
    def test_missing_field(self, field):
        payload = {'productName': 'Oil', 'price': 1, 'date': '2024-01-01'}
        del payload[field]
        with pytest.raises(ValidationError) as exc:
            validate_price_payload(payload, today=TODAY)
        assert exc.value.message == 'Missing required fields: productName, price, date'

    @pytest.mark.parametrize('price, message', [
        ('abc', 'Price must be a valid number'),
        (0, 'Price must be positive'),
        (-3, 'Price must be positive'),
        (1000000, 'Price is too large'),
        (1.234, 'Price can have at most 2 decimal places'),
        (True, 'Price must be a valid number'),
    ])
    def test_bad_price(self, price, message):
        with pytest.raises(ValidationError) as exc:
            validate_price_payload({'productName': 'Oil', 'price': price, 'date': '2024-01-01'}, today=TODAY)
        assert exc.value.message == message
        assert 'price' in exc.value.errors

    @pytest.mark.parametrize('value', ['01/02/2024', '2024-13-01', '1999-12-31', '2024-07-01', '2024-01-01garbage',
                                       '2024-01-01 10:00'])
    def test_bad_date(self, value):
        with pytest.raises(ValidationError):
            validate_price_payload({'productName': 'Oil', 'price': 1, 'date': value}, today=TODAY)

    def test_markup_is_stripped_from_name(self):
        cleaned = validate_price_payload({'productName': '<Oil>', 'price': 1, 'date': '2024-01-01'}, today=TODAY)
        assert cleaned['product_name'] == 'Oil'

    @pytest.mark.parametrize('name', ['<>', '"";'])
    def test_name_of_only_markup_is_required(self, name):
        with pytest.raises(ValidationError) as exc:
            validate_price_payload({'productName': name, 'price': 1, 'date': '2024-01-01'}, today=TODAY)
        assert exc.value.message == 'Product name is required'

    def test_name_too_long(self):
        with pytest.raises(ValidationError):
            validate_price_payload({'productName': 'x' * 101, 'price': 1, 'date': '2024-01-01'}, today=TODAY)

    def test_not_an_object(self):
        with pytest.raises(ValidationError):
            validate_price_payload(['Oil', 1, '2024-01-01'])

    def test_error_envelope(self):
        with pytest.raises(ValidationError) as exc:
            validate_price_payload({'productName': 'Oil', 'price': 'x', 'date': '2024-01-01'}, today=TODAY)
        payload = exc.value.to_dict()
        assert payload['error'] == 'Price must be a valid number'
        assert payload['details'] == {'price': ['Price must be a valid number']}


class TestChecklistItem:

    def test_valid_item(self):
        cleaned = validate_checklist_item(
            {'product_name': 'Oil', 'price': '52.5', 'date': '2024-01-02', 'quantity': '3'}, today=TODAY)
        assert cleaned['quantity'] == 3
        assert cleaned['date'] == date(2024, 1, 2)

    @pytest.mark.parametrize('quantity', [0, '', None])
    def test_missing_quantity(self, quantity):
        with pytest.raises(ValidationError):
            validate_checklist_item(
                {'product_name': 'Oil', 'price': 1, 'date': '2024-01-02', 'quantity': quantity}, today=TODAY)

    @pytest.mark.parametrize('quantity', [1.5, 'two', -1])
    def test_bad_quantity(self, quantity):
        with pytest.raises(ValidationError) as exc:
            validate_checklist_item(
                {'product_name': 'Oil', 'price': 1, 'date': '2024-01-02', 'quantity': quantity}, today=TODAY)
        assert 'quantity' in exc.value.errors


class TestPriceQuery:

    def test_summary_filters_ignore_other_parameters(self):
        args = MultiDict({'product': ' Oil ', 'month': '2024-01', 'type': 'all', 'limit': 'x'})
        assert parse_summary_filters(args) == ('Oil', '2024-01')

    def test_summary_filters_check_month(self):
        with pytest.raises(ValidationError):
            parse_summary_filters(MultiDict({'month': '2024-13'}))

    def test_defaults(self):
        assert parse_price_query(MultiDict()) == PriceQuery()

    def test_all_parameters(self):
        query = parse_price_query(MultiDict({'product': 'Oil', 'month': '2024-01', 'type': 'daily', 'limit': '5'}))
        assert query == PriceQuery(product='Oil', month='2024-01', type='daily', limit=5)

    @pytest.mark.parametrize('limit', ['abc', '-1', '0', '2.5'])
    def test_unusable_limit_is_ignored(self, limit):
        assert parse_price_query(MultiDict({'limit': limit})).limit is None

    @pytest.mark.parametrize('month', ['2024-1', '2024-13', 'January'])
    def test_bad_month(self, month):
        with pytest.raises(ValidationError):
            parse_price_query(MultiDict({'month': month}))

    def test_unknown_type(self):
        with pytest.raises(ValidationError):
            parse_price_query(MultiDict({'type': 'weekly'}))
