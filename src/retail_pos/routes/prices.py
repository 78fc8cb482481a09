from flask import Blueprint, current_app, request, jsonify
import logging

from retail_pos.database import query_prices, insert_prices
from retail_pos.monitoring import monitor_performance
from retail_pos.summary import summarize
from retail_pos.validation import ValidationError, parse_price_query, validate_price_payload

prices_bp = Blueprint('prices', __name__)
logger = logging.getLogger(__name__)

def _fetch_rows(query):
    rows = [record.to_dict() for record in query_prices(query.product, query.month, query.limit)]
    logger.debug(f"Fetched {len(rows)} price record(s)")
    return rows

@monitor_performance
def load_price_data(query):
    """Raw rows or a daily/monthly summary for a parsed PriceQuery"""
    if query.type == 'raw':
        return _fetch_rows(query)

    def build():
        result = summarize(_fetch_rows(query), query.type)
        if result.skipped_count:
            logger.warning(f"Skipped {result.skipped_count} invalid price record(s) in {query.type} summary")
        return result.to_dicts()

    cache = current_app.extensions['summary_cache']
    return cache.get_or_build(query.type, build, product=query.product, month=query.month, limit=query.limit)

@prices_bp.route('/prices', methods=['GET'])
def get_prices():
    try:
        query = parse_price_query(request.args)
        return jsonify({'data': load_price_data(query)}), 200

    except ValidationError as e:
        return jsonify(e.to_dict()), 400
    except Exception as e:
        logger.error(f"Error fetching prices: {str(e)}")
        return jsonify({'error': f'Error fetching prices: {str(e)}', 'data': []}), 500

@prices_bp.route('/prices', methods=['POST'])
def add_prices():
    try:
        body = request.get_json(silent=True)
        if body is None:
            return jsonify({'error': 'Request body must be JSON'}), 400

        items = body if isinstance(body, list) else [body]
        if not items:
            return jsonify({'error': 'Missing required fields: productName, price, date'}), 400

        cleaned = [validate_price_payload(item) for item in items]
        records = insert_prices(cleaned)
        current_app.extensions['summary_cache'].invalidate()

        return jsonify({'data': [record.to_dict() for record in records]}), 201

    except ValidationError as e:
        return jsonify(e.to_dict()), 400
    except Exception as e:
        logger.error(f"Error inserting prices: {str(e)}")
        return jsonify({'error': f'Failed to insert prices: {str(e)}'}), 500
