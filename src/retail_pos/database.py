import logging
import time
from datetime import date, timedelta

from sqlalchemy.exc import SQLAlchemyError

from retail_pos.models import db, PriceRecord, ChecklistSheet, ChecklistItem
from retail_pos.validation import ValidationError, validate_checklist_item

logger = logging.getLogger(__name__)

SAMPLE_PRODUCTS = [
    ('Jasmine Rice 5kg', 165.00),
    ('Cooking Oil 1L', 52.50),
    ('Instant Noodles (pack)', 6.00),
    ('Drinking Water 1.5L', 14.00),
    ('Fish Sauce 700ml', 29.75),
]

def init_database(app, seed=False):
    """Create all tables and optionally load sample prices"""
    with app.app_context():
        db.create_all()
        if seed:
            insert_sample_prices()

def insert_sample_prices(days=14, today=None):
    """Insert sample price history for demos"""
    if PriceRecord.query.count() > 0:
        return 0

    today = today or date.today()
    records = []
    for offset in range(days):
        day = today - timedelta(days=offset)
        for index, (name, base_price) in enumerate(SAMPLE_PRODUCTS):
            # small deterministic drift so summaries have a spread
            drift = ((offset + index) % 5 - 2) * 0.25
            records.append(PriceRecord(product_name=name, price=round(base_price + drift, 2), date=day))

    db.session.add_all(records)
    db.session.commit()
    logger.info(f"Inserted {len(records)} sample price records")
    return len(records)

def _month_bounds(month):
    year, month_no = (int(part) for part in month.split('-'))
    start = date(year, month_no, 1)
    end = date(year + 1, 1, 1) if month_no == 12 else date(year, month_no + 1, 1)
    return start, end

def query_prices(product=None, month=None, limit=None):
    """Fetch price rows newest first with optional product/month filters"""
    query = PriceRecord.query.order_by(PriceRecord.date.desc(), PriceRecord.id.desc())

    if product:
        query = query.filter(PriceRecord.product_name == product)

    if month:
        start, end = _month_bounds(month)
        query = query.filter(PriceRecord.date >= start, PriceRecord.date < end)

    if limit:
        query = query.limit(limit)

    return query.all()

def insert_prices(items):
    """Insert validated price rows and return the created records"""
    records = [PriceRecord(**item) for item in items]
    try:
        db.session.add_all(records)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
    logger.info(f"Inserted {len(records)} price record(s)")
    return records

def list_checklist_sheets():
    return ChecklistSheet.query.order_by(
        ChecklistSheet.created_at.desc(), ChecklistSheet.id.desc()
    ).all()

def list_checklist_items(sheet_id=None):
    query = ChecklistItem.query
    if sheet_id is not None:
        query = query.filter_by(checklist_sheet_id=sheet_id)
    return query.order_by(ChecklistItem.created_at.desc(), ChecklistItem.id.desc()).all()

def generate_sheet_no(now_ms=None):
    """Sheet numbers look like ORD-1234567 (tail of the millisecond clock)"""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f'ORD-{str(now_ms)[6:]}'

def _unused_sheet_no():
    now_ms = int(time.time() * 1000)
    sheet_no = generate_sheet_no(now_ms)
    while ChecklistSheet.query.filter_by(checklist_sheet_no=sheet_no).first():
        now_ms += 1
        sheet_no = generate_sheet_no(now_ms)
    return sheet_no

def create_checklist_with_sheet(values):
    """Create a checklist sheet and the items that belong to it.

    ``values`` is a single item dict or a list of them. All items are
    validated before anything is written; the sheet and its items are
    committed together.
    """
    if not values:
        raise ValidationError('Invalid input: Missing required fields in values object.')

    raw_items = values if isinstance(values, list) else [values]
    cleaned = [validate_checklist_item(item) for item in raw_items]

    try:
        sheet = ChecklistSheet(checklist_sheet_no=_unused_sheet_no())
        db.session.add(sheet)
        db.session.flush()

        items = [ChecklistItem(checklist_sheet_id=sheet.id, **item) for item in cleaned]
        db.session.add_all(items)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error creating checklist sheet: {str(e)}")
        raise

    logger.info(f"Created checklist sheet {sheet.checklist_sheet_no} with {len(items)} item(s)")
    return sheet, items

def update_checklist_item(item_id, values):
    cleaned = validate_checklist_item(values)

    item = db.session.get(ChecklistItem, item_id)
    if item is None:
        raise LookupError(f'Checklist item {item_id} not found')

    for field, value in cleaned.items():
        setattr(item, field, value)

    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
    return item

def delete_checklist_item(item_id):
    item = db.session.get(ChecklistItem, item_id)
    if item is None:
        raise LookupError(f'Checklist item {item_id} not found')

    try:
        db.session.delete(item)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
    return True
