"""Tests for the API client retry and cancellation behaviour."""

import json
import threading
from unittest.mock import MagicMock, call, patch

import pytest
import requests

from retail_pos.client import ApiError, PosApiClient, RequestCancelled


def make_response(status_code, payload=None):
    response = requests.Response()
    response.status_code = status_code
    response.encoding = 'utf-8'
    response._content = json.dumps(payload).encode('utf-8') if payload is not None else b''
    return response


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def api(session):
    return PosApiClient('http://pos.test/', retry_count=3, retry_delay=1.0, session=session)


@pytest.fixture
def sleep():
    with patch('retail_pos.client.time.sleep') as mocked:
        yield mocked


class TestRetry:

    def test_success_first_try(self, api, session, sleep):
        session.request.return_value = make_response(200, {'data': [{'id': 1}]})
        assert api.get_all_prices() == [{'id': 1}]
        session.request.assert_called_once_with('GET', 'http://pos.test/api/prices', timeout=None, params=None)
        sleep.assert_not_called()

    def test_retries_transport_errors_with_linear_delay(self, api, session, sleep):
        session.request.side_effect = [
            requests.ConnectionError('down'),
            requests.Timeout('slow'),
            make_response(200, {'data': []}),
        ]
        assert api.get_all_prices() == []
        assert session.request.call_count == 3
        assert sleep.call_args_list == [call(1.0), call(2.0)]

    def test_retries_server_errors(self, api, session, sleep):
        session.request.side_effect = [
            make_response(503, {'error': 'busy'}),
            make_response(200, {'data': [1]}),
        ]
        assert api.get_all_prices() == [1]

    def test_gives_up_after_retry_count(self, api, session, sleep):
        session.request.side_effect = requests.ConnectionError('down')
        with pytest.raises(ApiError):
            api.get_all_prices()
        assert session.request.call_count == 4
        assert sleep.call_args_list == [call(1.0), call(2.0), call(3.0)]

    def test_last_server_error_is_raised(self, api, session, sleep):
        session.request.return_value = make_response(500, {'error': 'Database unavailable'})
        with pytest.raises(ApiError) as exc:
            api.get_daily_summary()
        assert exc.value.status_code == 500
        assert exc.value.detail == 'Database unavailable'

    def test_client_errors_are_not_retried(self, api, session, sleep):
        session.request.return_value = make_response(400, {'error': 'Price must be positive'})
        with pytest.raises(ApiError) as exc:
            api.add_product_price('Oil', -1, '2024-01-01')
        assert exc.value.status_code == 400
        assert exc.value.detail == 'Price must be positive'
        assert session.request.call_count == 1
        sleep.assert_not_called()

    def test_invalid_json(self, api, session, sleep):
        response = make_response(200)
        response._content = b'<html>'
        session.request.return_value = response
        with pytest.raises(ApiError, match='Invalid JSON'):
            api.get_all_prices()


class TestCancel:

    def test_cancelled_before_first_attempt(self, api, session):
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(RequestCancelled):
            api.get_all_prices(cancel=cancel)
        session.request.assert_not_called()

    def test_cancelled_while_waiting(self, api, session):
        cancel = MagicMock()
        cancel.is_set.return_value = False
        cancel.wait.return_value = True
        session.request.side_effect = requests.ConnectionError('down')
        with pytest.raises(RequestCancelled):
            api.get_all_prices(cancel=cancel)
        assert session.request.call_count == 1
        cancel.wait.assert_called_once_with(1.0)


class TestEndpoints:

    def test_summary_params_drop_none(self, api, session):
        session.request.return_value = make_response(200, {'data': []})
        api.get_monthly_summary(month='2024-01')
        assert session.request.call_args.kwargs['params'] == {'type': 'monthly', 'month': '2024-01'}

    def test_add_product_price_body(self, api, session):
        session.request.return_value = make_response(201, {'data': []})
        api.add_product_price('Oil', 52.5, '2024-01-15')
        assert session.request.call_args.kwargs['json'] == {'productName': 'Oil', 'price': 52.5, 'date': '2024-01-15'}

    def test_create_checklist_returns_data(self, api, session):
        session.request.return_value = make_response(201, {'success': True, 'data': {'sheet': {'id': 1}, 'items': []}})
        assert api.create_checklist([{'product_name': 'Oil'}]) == {'sheet': {'id': 1}, 'items': []}

    def test_checklist_items_for_sheet(self, api, session):
        session.request.return_value = make_response(200, {'success': True, 'data': []})
        api.get_checklist_items(sheet_id=7)
        assert session.request.call_args.args == ('GET', 'http://pos.test/api/checklist/sheets/7/items')

    def test_missing_data_is_empty_list(self, api, session):
        session.request.return_value = make_response(200, {})
        assert api.get_checklist_sheets() == []


class TestRecentPrices:

    def test_normalizes_rows(self, api, session):
        session.request.return_value = make_response(200, {'data': [
            {'id': 3, 'product_name': 'Oil', 'price': '52.50', 'date': '2024-01-15'},
            {'product_name': None, 'price': 'abc'},
            'junk',
        ]})
        rows = api.get_recent_prices(limit=5)
        assert rows == [
            {'id': 3, 'product_name': 'Oil', 'price': 52.5, 'date': '2024-01-15'},
            {'id': '', 'product_name': '', 'price': 0, 'date': ''},
        ]
        assert session.request.call_args.kwargs['params'] == {'limit': 5}

    @pytest.mark.parametrize('price', ['nan', 'inf', '-Infinity'])
    def test_non_finite_price_becomes_zero(self, api, session, price):
        session.request.return_value = make_response(200, {'data': [{'id': 1, 'price': price}]})
        assert api.get_recent_prices()[0]['price'] == 0

    def test_errors_become_empty_list(self, api, session, sleep):
        session.request.side_effect = requests.ConnectionError('down')
        assert api.get_recent_prices() == []
