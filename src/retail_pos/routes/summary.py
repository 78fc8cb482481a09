from flask import Blueprint, current_app, request, jsonify
import logging

from retail_pos.database import query_prices
from retail_pos.monitoring import monitor_performance
from retail_pos.summary import summarize_all
from retail_pos.validation import ValidationError, parse_summary_filters

summary_bp = Blueprint('summary', __name__)
logger = logging.getLogger(__name__)

@monitor_performance
def get_all_summary_data(product=None, month=None):
    """Per-product monthly statistics, newest month first"""
    def build():
        rows = [record.to_dict() for record in query_prices(product, month)]
        result = summarize_all(rows)
        if result.skipped_count:
            logger.warning(f"Skipped {result.skipped_count} invalid price record(s) in all summary")
        return result.to_dicts()

    cache = current_app.extensions['summary_cache']
    return cache.get_or_build('all', build, product=product, month=month)

@summary_bp.route('/summary/all', methods=['GET'])
def get_all_summary():
    try:
        product, month = parse_summary_filters(request.args)
        return jsonify({'data': get_all_summary_data(product, month)}), 200

    except ValidationError as e:
        return jsonify(e.to_dict()), 400
    except Exception as e:
        logger.error(f"Error building all summary: {str(e)}")
        return jsonify({'error': f'Failed to fetch summary data: {str(e)}'}), 500
