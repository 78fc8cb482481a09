"""
Table export for price rows and summaries.

CSV is a plain header row plus data rows. PDF is an A4 page with a title,
an "Exported on" line and one table, rendered with reportlab.
"""

import csv
import io
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, List, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

logger = logging.getLogger(__name__)

MISSING = 'N/A'


def format_money(value):
    return f'{value:,.2f}'


@dataclass(frozen=True)
class ExportColumn:
    header: str
    accessor: str
    format: Optional[Callable[[Any], Any]] = None

    def render(self, row):
        value = row.get(self.accessor)
        if value is None:
            return MISSING
        return self.format(value) if self.format else value


PRICE_COLUMNS = [
    ExportColumn('Date', 'date'),
    ExportColumn('Product', 'product_name'),
    ExportColumn('Price', 'price', format_money),
]

DAILY_COLUMNS = [
    ExportColumn('Date', 'date'),
    ExportColumn('Count', 'count'),
    ExportColumn('Average Price', 'averagePrice', format_money),
    ExportColumn('Min Price', 'minPrice', format_money),
    ExportColumn('Max Price', 'maxPrice', format_money),
]

MONTHLY_COLUMNS = [
    ExportColumn('Month', 'month'),
    ExportColumn('Count', 'count'),
    ExportColumn('Average Price', 'averagePrice', format_money),
    ExportColumn('Min Price', 'minPrice', format_money),
    ExportColumn('Max Price', 'maxPrice', format_money),
]

ALL_SUMMARY_COLUMNS = [
    ExportColumn('Month', 'month'),
    ExportColumn('Product', 'productName'),
    ExportColumn('Latest Date', 'date'),
    ExportColumn('Latest Price', 'price', format_money),
    ExportColumn('Count', 'count'),
    ExportColumn('Average Price', 'averagePrice', format_money),
    ExportColumn('Min Price', 'minPrice', format_money),
    ExportColumn('Max Price', 'maxPrice', format_money),
    ExportColumn('Total Sales', 'totalSales', format_money),
]


def export_filename(title, extension, today=None):
    """``Daily Summary`` -> ``Daily_Summary_2024-01-31.pdf``"""
    today = today or date.today()
    stem = re.sub(r'\s+', '_', title.strip())
    return f'{stem}_{today.isoformat()}.{extension}'


def _columns_for(rows, columns):
    if columns:
        return columns
    if not rows:
        raise ValueError('No data available for export')
    return [ExportColumn(key, key) for key in rows[0].keys()]


def rows_to_csv(rows: List[dict], columns: Optional[List[ExportColumn]] = None) -> str:
    columns = _columns_for(rows, columns)

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator='\n')
    writer.writerow([column.header for column in columns])
    for row in rows:
        writer.writerow([column.render(row) for column in columns])
    return buffer.getvalue()


def rows_to_pdf(rows: List[dict], title: str, columns: Optional[List[ExportColumn]] = None,
                exported_at: Optional[datetime] = None) -> bytes:
    columns = _columns_for(rows, columns)
    exported_at = exported_at or datetime.now()

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=30,
        leftMargin=30,
        topMargin=30,
        bottomMargin=30,
        title=title,
    )
    styles = getSampleStyleSheet()
    title_style = styles['Title']
    title_style.fontSize = 16
    date_style = styles['Normal']
    date_style.fontSize = 10
    date_style.alignment = 1

    table_data = [[column.header for column in columns]]
    for row in rows:
        table_data.append([str(column.render(row)) for column in columns])

    table = Table(table_data, repeatRows=1)
    table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#f2f2f2')),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTNAME', (0, 1), (-1, -1), 'Helvetica'),
        ('FONTSIZE', (0, 0), (-1, -1), 10),
        ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ('TOPPADDING', (0, 0), (-1, -1), 5),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 5),
        ('INNERGRID', (0, 0), (-1, -1), 0.5, colors.HexColor('#bfbfbf')),
        ('BOX', (0, 0), (-1, -1), 1, colors.HexColor('#bfbfbf')),
    ]))

    elements = [
        Paragraph(title, title_style),
        Paragraph(f"Exported on: {exported_at.strftime('%d/%m/%Y %H:%M')}", date_style),
        Spacer(1, 20),
        table,
    ]
    doc.build(elements)

    logger.debug(f"Rendered PDF '{title}' with {len(rows)} row(s)")
    return buffer.getvalue()
