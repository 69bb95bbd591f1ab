from flask import Blueprint, abort, current_app, jsonify, request

from utils import json_errors
from utils.constants import MONTHS, PaymentType
from utils.ledger import transaction_history
from utils.money import to_float
from utils.search import suggest_payment_amount
from utils.settings import get_sync_urls
from utils.sheets import push_record
from utils.store import add_payment, load_snapshot

fee_bp = Blueprint('fees', __name__, url_prefix='/fees')


@fee_bp.route('/structure')
def fee_structure():
    snap = load_snapshot()
    return jsonify({
        'classConfigs': [c.to_dict() for c in snap.class_configs],
        'examFeeConfigs': [e.to_dict() for e in snap.exam_fee_configs],
        'paymentTypes': [t.value for t in PaymentType],
        'months': MONTHS,
    })


@fee_bp.route('/suggest')
def suggest_amount():
    snap = load_snapshot()
    student = snap.student(request.args.get('student_id', ''))
    if student is None:
        abort(404)
    amount = suggest_payment_amount(
        student,
        request.args.get('type', PaymentType.TUITION.value),
        snap.class_configs,
        snap.exam_fee_configs,
        exam_name=request.args.get('exam_name'),
    )
    return jsonify({'amount': to_float(amount)})


@fee_bp.route('/payments', methods=['POST'])
@json_errors
def record_payment():
    payment = add_payment(request.get_json(silent=True) or {})
    synced = push_record(get_sync_urls()['payments'], payment.to_dict())
    if not synced:
        current_app.logger.info('Payment %s saved locally only', payment.id)
    return jsonify({'payment': payment.to_dict(), 'synced': synced}), 201


@fee_bp.route('/history')
def history():
    snap = load_snapshot()
    return jsonify({
        'transactions': transaction_history(snap.payments, snap.finance_records, snap.students),
    })
