from retail_pos.models.models import db, PriceRecord, ChecklistSheet, ChecklistItem

__all__ = ['db', 'PriceRecord', 'ChecklistSheet', 'ChecklistItem']
