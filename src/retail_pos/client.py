"""
HTTP client for the Retail POS API.

Requests that fail with a transport error or a 5xx status are retried a
bounded number of times with a linearly growing delay
(``retry_delay * attempt``). A ``threading.Event`` can be passed as
``cancel`` to abandon a request that has been superseded; it is checked
before every attempt and while waiting between attempts.
"""

import logging
import math
import os
import time

import requests

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A request failed after all retries; ``detail`` holds the server's message."""

    def __init__(self, message, status_code=None, detail=None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class RequestCancelled(Exception):
    pass


class PosApiClient:
    def __init__(self, base_url=None, retry_count=3, retry_delay=1.0, timeout=None, session=None):
        self.base_url = (base_url or os.getenv('POS_API_URL', 'http://localhost:5000')).rstrip('/')
        self.retry_count = retry_count
        self.retry_delay = retry_delay
        self.timeout = timeout
        self.session = session or requests.Session()

    def _wait(self, seconds, cancel):
        if cancel is None:
            time.sleep(seconds)
        elif cancel.wait(seconds):
            raise RequestCancelled('Request cancelled')

    def _request(self, method, path, cancel=None, **kwargs):
        url = f'{self.base_url}{path}'
        last_error = None

        for attempt in range(self.retry_count + 1):
            if cancel is not None and cancel.is_set():
                raise RequestCancelled('Request cancelled')
            if attempt:
                delay = self.retry_delay * attempt
                logger.warning(f"Retry {attempt}/{self.retry_count} for {method} {path} after {delay:.1f}s: {last_error}")
                self._wait(delay, cancel)

            try:
                response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            except requests.RequestException as e:
                last_error = e
                continue

            if response.status_code >= 500:
                last_error = ApiError(f'Server error {response.status_code}', response.status_code,
                                      _error_message(response))
                continue

            if not response.ok:
                raise ApiError(f'Request failed with status {response.status_code}',
                               response.status_code, _error_message(response))

            try:
                return response.json()
            except ValueError as e:
                raise ApiError('Invalid JSON response', response.status_code) from e

        logger.error(f"Max retries ({self.retry_count}) exceeded for {method} {path}: {last_error}")
        if isinstance(last_error, ApiError):
            raise last_error
        raise ApiError(f'Unable to reach {url}', detail=str(last_error)) from last_error

    def _get_data(self, path, params=None, cancel=None):
        payload = self._request('GET', path, params=params, cancel=cancel)
        data = payload.get('data') if isinstance(payload, dict) else None
        return data if data is not None else []

    def add_product_price(self, product_name, price, date, cancel=None):
        body = {'productName': product_name, 'price': price, 'date': str(date)}
        return self._request('POST', '/api/prices', json=body, cancel=cancel)

    def add_product_prices(self, items, cancel=None):
        return self._request('POST', '/api/prices', json=list(items), cancel=cancel)

    def get_all_prices(self, cancel=None):
        return self._get_data('/api/prices', cancel=cancel)

    def get_recent_prices(self, limit=10, cancel=None):
        """Latest price rows; returns an empty list instead of raising"""
        try:
            rows = self._get_data('/api/prices', params={'limit': limit}, cancel=cancel)
        except (ApiError, RequestCancelled) as e:
            logger.error(f"Error fetching recent prices: {e}")
            return []

        if not isinstance(rows, list):
            return []
        return [_normalize_price_row(row) for row in rows if isinstance(row, dict)]

    def get_daily_summary(self, product=None, month=None, cancel=None):
        return self._get_data('/api/prices', params=_params(type='daily', product=product, month=month),
                              cancel=cancel)

    def get_monthly_summary(self, product=None, month=None, cancel=None):
        return self._get_data('/api/prices', params=_params(type='monthly', product=product, month=month),
                              cancel=cancel)

    def get_all_summary(self, product=None, month=None, cancel=None):
        return self._get_data('/api/summary/all', params=_params(product=product, month=month), cancel=cancel)

    def get_checklist_sheets(self, cancel=None):
        return self._get_data('/api/checklist/sheets', cancel=cancel)

    def get_checklist_items(self, sheet_id=None, cancel=None):
        if sheet_id is not None:
            return self._get_data(f'/api/checklist/sheets/{sheet_id}/items', cancel=cancel)
        return self._get_data('/api/checklist/items', cancel=cancel)

    def create_checklist(self, values, cancel=None):
        payload = self._request('POST', '/api/checklist', json={'values': values}, cancel=cancel)
        return payload.get('data')


def _params(**kwargs):
    return {key: value for key, value in kwargs.items() if value is not None}


def _error_message(response):
    try:
        body = response.json()
    except ValueError:
        return response.text or None
    if isinstance(body, dict):
        return body.get('error') or body.get('message')
    return None


def _normalize_price_row(row):
    price = row.get('price')
    if not isinstance(price, (int, float)) or isinstance(price, bool):
        try:
            price = float(price)
        except (TypeError, ValueError):
            price = 0
    if not math.isfinite(price):
        price = 0
    return {
        'id': row.get('id') or '',
        'product_name': row.get('product_name') or '',
        'price': price,
        'date': row.get('date') or '',
    }
