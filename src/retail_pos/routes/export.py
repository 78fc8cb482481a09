from flask import Blueprint, Response, request, jsonify
import logging

from retail_pos.database import query_prices
from retail_pos.exporters import (
    ALL_SUMMARY_COLUMNS,
    DAILY_COLUMNS,
    MONTHLY_COLUMNS,
    PRICE_COLUMNS,
    export_filename,
    rows_to_csv,
    rows_to_pdf,
)
from retail_pos.summary import summarize
from retail_pos.validation import ValidationError, parse_price_query

export_bp = Blueprint('export', __name__)
logger = logging.getLogger(__name__)

# dataset -> (title, columns, summary period or None for raw rows)
DATASETS = {
    'prices': ('Price Records', PRICE_COLUMNS, None),
    'daily': ('Daily Summary', DAILY_COLUMNS, 'daily'),
    'monthly': ('Monthly Summary', MONTHLY_COLUMNS, 'monthly'),
    'all': ('All Summary', ALL_SUMMARY_COLUMNS, 'all'),
}

FORMATS = {
    'csv': 'text/csv; charset=utf-8',
    'pdf': 'application/pdf',
}

@export_bp.route('/export/<dataset>.<fmt>', methods=['GET'])
def export_dataset(dataset, fmt):
    if dataset not in DATASETS:
        return jsonify({'error': f'Unknown export dataset: {dataset}'}), 404
    if fmt not in FORMATS:
        return jsonify({'error': f'Unsupported export format: {fmt}'}), 404

    try:
        query = parse_price_query(request.args)
        title, columns, period = DATASETS[dataset]

        rows = [record.to_dict() for record in query_prices(query.product, query.month, query.limit)]
        if period:
            rows = summarize(rows, period).to_dicts()

        if fmt == 'csv':
            body = rows_to_csv(rows, columns)
        else:
            body = rows_to_pdf(rows, title, columns)

        filename = export_filename(title, fmt)
        logger.info(f"Exported {len(rows)} row(s) as {filename}")

        return Response(
            body,
            content_type=FORMATS[fmt],
            headers={'Content-Disposition': f'attachment; filename="{filename}"'}
        )

    except ValidationError as e:
        return jsonify(e.to_dict()), 400
    except Exception as e:
        logger.error(f"Error generating {fmt} export: {str(e)}")
        return jsonify({'error': f'Failed to generate {fmt.upper()}'}), 500
