from flask import Blueprint, jsonify, request

from utils import json_errors
from utils.constants import ExpenseCategory, FinanceType
from utils.settings import get_sync_urls
from utils.sheets import push_record
from utils.store import ValidationError, add_finance_record, load_snapshot

finance_bp = Blueprint('finance', __name__, url_prefix='/finance')


@finance_bp.route('/records')
@json_errors
def list_records():
    records = load_snapshot().finance_records
    wanted = request.args.get('type')
    if wanted:
        kind = FinanceType.parse(wanted)
        if kind is None:
            raise ValidationError(f'unknown record type: {wanted}')
        records = [r for r in records if r.record_type == kind]
    return jsonify({
        'records': [r.to_dict() for r in records],
        'expenseCategories': [c.value for c in ExpenseCategory],
    })


@finance_bp.route('/records', methods=['POST'])
@json_errors
def create_record():
    rec = add_finance_record(request.get_json(silent=True) or {})
    synced = push_record(get_sync_urls()['finance'], rec.to_dict())
    return jsonify({'record': rec.to_dict(), 'synced': synced}), 201
