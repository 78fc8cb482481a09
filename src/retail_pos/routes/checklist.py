from flask import Blueprint, request, jsonify
import logging

from retail_pos.database import (
    create_checklist_with_sheet,
    delete_checklist_item,
    list_checklist_items,
    list_checklist_sheets,
    update_checklist_item,
)
from retail_pos.validation import ValidationError

checklist_bp = Blueprint('checklist', __name__)
logger = logging.getLogger(__name__)

def _failure(message, status):
    return jsonify({'success': False, 'error': message}), status

@checklist_bp.route('/checklist', methods=['GET'])
@checklist_bp.route('/checklist/sheets', methods=['GET'])
def get_checklist_sheets():
    try:
        sheets = list_checklist_sheets()
        return jsonify({'success': True, 'data': [sheet.to_dict() for sheet in sheets]}), 200

    except Exception as e:
        logger.error(f"Error fetching checklist sheets: {str(e)}")
        return _failure(f'Error fetching checklist sheets: {str(e)}', 500)

@checklist_bp.route('/checklist', methods=['POST'])
def create_checklist():
    try:
        body = request.get_json(silent=True) or {}
        values = body.get('values') if isinstance(body, dict) else None

        if isinstance(values, list) and not values:
            return _failure('Invalid input: Empty array of items', 400)

        sheet, items = create_checklist_with_sheet(values)

        return jsonify({
            'success': True,
            'data': {
                'sheet': sheet.to_dict(),
                'items': [item.to_dict() for item in items]
            }
        }), 201

    except ValidationError as e:
        return _failure(e.message, 400)
    except Exception as e:
        logger.error(f"Error creating checklist: {str(e)}")
        return _failure(f'Error creating checklist item(s): {str(e)}', 500)

@checklist_bp.route('/checklist/items', methods=['GET'])
def get_checklist_items():
    try:
        sheet_id = request.args.get('sheet_id', type=int)
        items = list_checklist_items(sheet_id)
        return jsonify({'success': True, 'data': [item.to_dict() for item in items]}), 200

    except Exception as e:
        logger.error(f"Error fetching checklist items: {str(e)}")
        return _failure(f'Error fetching checklist items: {str(e)}', 500)

@checklist_bp.route('/checklist/sheets/<int:sheet_id>/items', methods=['GET'])
def get_sheet_items(sheet_id):
    try:
        items = list_checklist_items(sheet_id)
        return jsonify({'success': True, 'data': [item.to_dict() for item in items]}), 200

    except Exception as e:
        logger.error(f"Error fetching items for sheet {sheet_id}: {str(e)}")
        return _failure(f'Error fetching checklist items: {str(e)}', 500)

@checklist_bp.route('/checklist/items/<int:item_id>', methods=['PUT'])
def update_item(item_id):
    try:
        values = request.get_json(silent=True)
        if isinstance(values, dict) and isinstance(values.get('values'), dict):
            values = values['values']

        item = update_checklist_item(item_id, values)
        return jsonify({'success': True, 'data': item.to_dict()}), 200

    except ValidationError as e:
        return _failure(e.message, 400)
    except LookupError as e:
        return _failure(str(e), 404)
    except Exception as e:
        logger.error(f"Error updating checklist item {item_id}: {str(e)}")
        return _failure(f'Error updating checklist item: {str(e)}', 500)

@checklist_bp.route('/checklist/items/<int:item_id>', methods=['DELETE'])
def delete_item(item_id):
    try:
        delete_checklist_item(item_id)
        return jsonify({'success': True, 'data': {'id': item_id}}), 200

    except LookupError as e:
        return _failure(str(e), 404)
    except Exception as e:
        logger.error(f"Error deleting checklist item {item_id}: {str(e)}")
        return _failure(f'Error deleting checklist item: {str(e)}', 500)
