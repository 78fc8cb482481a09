"""Retail POS price book: price records, checklist sheets and sales summaries."""

__version__ = '1.0.0'
