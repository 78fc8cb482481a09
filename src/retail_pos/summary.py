"""
Summary aggregation over price records.

Price records are grouped by day, by month, or by (month, product) and each
group is reduced to count / average / min / max in a single pass. Records
that cannot contribute (missing date, non-numeric price) are set aside by
``validate_record`` and reported back instead of raising.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any, List, Optional, Tuple, Union

PERIODS = ('daily', 'monthly', 'all')


@dataclass(frozen=True)
class ValidRecord:
    product_name: Optional[str]
    price: float
    date: Union[str, date]
    raw: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class SkippedRecord:
    record: Any
    reason: str


@dataclass(frozen=True)
class DailySummary:
    date: str
    count: int
    average_price: float
    min_price: float
    max_price: float

    def to_dict(self):
        return {
            'date': self.date,
            'count': self.count,
            'averagePrice': self.average_price,
            'minPrice': self.min_price,
            'maxPrice': self.max_price
        }


@dataclass(frozen=True)
class MonthlySummary:
    month: str
    count: int
    average_price: float
    min_price: float
    max_price: float

    def to_dict(self):
        return {
            'month': self.month,
            'count': self.count,
            'averagePrice': self.average_price,
            'minPrice': self.min_price,
            'maxPrice': self.max_price
        }


@dataclass(frozen=True)
class AllSummary:
    month: str
    product_name: str
    date: Union[str, date]
    price: float
    count: int
    average_price: float
    min_price: float
    max_price: float
    total_sales: float

    def to_dict(self):
        return {
            'month': self.month,
            'productName': self.product_name,
            'date': self.date.isoformat() if isinstance(self.date, date) else self.date,
            'price': self.price,
            'count': self.count,
            'averagePrice': self.average_price,
            'minPrice': self.min_price,
            'maxPrice': self.max_price,
            'totalSales': self.total_sales
        }


@dataclass
class SummaryResult:
    """Aggregated rows plus the records that were left out."""
    rows: list
    skipped: List[SkippedRecord]

    @property
    def skipped_count(self):
        return len(self.skipped)

    def to_dicts(self):
        return [row.to_dict() for row in self.rows]


class _Accumulator:
    __slots__ = ('count', 'total', 'min_price', 'max_price')

    def __init__(self):
        self.count = 0
        self.total = 0.0
        self.min_price = None
        self.max_price = None

    def add(self, price):
        self.count += 1
        self.total += price
        if self.min_price is None or price < self.min_price:
            self.min_price = price
        if self.max_price is None or price > self.max_price:
            self.max_price = price

    @property
    def average(self):
        # float rounding can push the mean just outside [min, max]
        mean = self.total / self.count
        return min(max(mean, self.min_price), self.max_price)


class _ProductMonthAccumulator(_Accumulator):
    __slots__ = ('latest_date', 'latest_price', 'latest_ts')

    def __init__(self, first):
        super().__init__()
        self.latest_date = first.date
        self.latest_price = first.price
        self.latest_ts = _timestamp(first.date)

    def add_record(self, record):
        self.add(record.price)
        ts = _timestamp(record.date)
        if ts is not None and (self.latest_ts is None or ts > self.latest_ts):
            self.latest_date = record.date
            self.latest_price = record.price
            self.latest_ts = ts


def _is_numeric(value):
    if isinstance(value, bool):
        return False
    if isinstance(value, Decimal):
        return value.is_finite()
    if isinstance(value, (int, float)):
        return math.isfinite(value)
    return False


def validate_record(record) -> Union[ValidRecord, SkippedRecord]:
    """Check a raw price record and classify it as valid or skipped."""
    if not isinstance(record, Mapping):
        return SkippedRecord(record, 'record is not a mapping')

    date_value = record.get('date')
    if date_value is None or date_value == '':
        return SkippedRecord(record, 'missing date')
    if not isinstance(date_value, (str, date)):
        return SkippedRecord(record, 'unsupported date type')

    price = record.get('price')
    if price is None:
        return SkippedRecord(record, 'missing price')
    if not _is_numeric(price):
        return SkippedRecord(record, 'price is not numeric')

    product_name = record.get('product_name') or record.get('productName')
    return ValidRecord(product_name, float(price), date_value, record)


def partition_records(records) -> Tuple[List[ValidRecord], List[SkippedRecord]]:
    valid, skipped = [], []
    for record in records or []:
        result = validate_record(record)
        if isinstance(result, ValidRecord):
            valid.append(result)
        else:
            skipped.append(result)
    return valid, skipped


def day_key(value):
    """Grouping key for a single day."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


def month_key(value):
    """Grouping key for a calendar month (YYYY-MM)."""
    if isinstance(value, date):
        return f'{value.year:04d}-{value.month:02d}'
    return value[:7]


def _timestamp(value):
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, date):
        ts = datetime.combine(value, time())
    else:
        try:
            ts = datetime.fromisoformat(value.replace('Z', '+00:00'))
        except ValueError:
            return None
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc).replace(tzinfo=None)
    return ts


def _group(valid, key_func):
    groups = {}
    for record in valid:
        key = key_func(record.date)
        acc = groups.get(key)
        if acc is None:
            acc = groups[key] = _Accumulator()
        acc.add(record.price)
    return groups


def summarize_by_day(records) -> SummaryResult:
    valid, skipped = partition_records(records)
    groups = _group(valid, day_key)
    rows = [
        DailySummary(key, acc.count, acc.average, acc.min_price, acc.max_price)
        for key, acc in groups.items()
    ]
    rows.sort(key=lambda row: row.date, reverse=True)
    return SummaryResult(rows, skipped)


def summarize_by_month(records) -> SummaryResult:
    valid, skipped = partition_records(records)
    groups = _group(valid, month_key)
    rows = [
        MonthlySummary(key, acc.count, acc.average, acc.min_price, acc.max_price)
        for key, acc in groups.items()
    ]
    rows.sort(key=lambda row: row.month, reverse=True)
    return SummaryResult(rows, skipped)


def summarize_all(records) -> SummaryResult:
    """Group by (month, product) and keep the latest price seen per group.

    A ``{'data': [...]}`` envelope is unwrapped; anything else that is not a
    sequence of records yields an empty result.
    """
    if isinstance(records, Mapping):
        records = records.get('data')
    if not isinstance(records, (list, tuple)):
        return SummaryResult([], [])

    valid, skipped = partition_records(records)
    groups = {}
    for record in valid:
        if not record.product_name:
            skipped.append(SkippedRecord(record.raw, 'missing product name'))
            continue
        key = (month_key(record.date), record.product_name)
        acc = groups.get(key)
        if acc is None:
            acc = groups[key] = _ProductMonthAccumulator(record)
        acc.add_record(record)

    rows = [
        AllSummary(
            month=month,
            product_name=product_name,
            date=acc.latest_date,
            price=acc.latest_price,
            count=acc.count,
            average_price=acc.average,
            min_price=acc.min_price,
            max_price=acc.max_price,
            total_sales=acc.total
        )
        for (month, product_name), acc in groups.items()
    ]
    # newest month first, products alphabetical within a month
    rows.sort(key=lambda row: row.product_name)
    rows.sort(key=lambda row: row.month, reverse=True)
    return SummaryResult(rows, skipped)


def summarize(records, period) -> SummaryResult:
    if period == 'daily':
        return summarize_by_day(records)
    if period == 'monthly':
        return summarize_by_month(records)
    if period == 'all':
        return summarize_all(records)
    raise ValueError(f'Unknown summary period: {period}')


def aggregate_by_day(records) -> List[DailySummary]:
    return summarize_by_day(records).rows


def aggregate_by_month(records) -> List[MonthlySummary]:
    return summarize_by_month(records).rows


def aggregate_all(records) -> List[AllSummary]:
    return summarize_all(records).rows
