from flask import Blueprint, Response, abort, current_app, jsonify, request

from routes.analytics import months_passed_arg
from utils import json_errors
from utils.liability import compute_student_liability, current_month_index
from utils.money import to_float
from utils.receipts import render_receipt
from utils.search import filter_students, quick_lookup, student_history
from utils.store import add_student, load_snapshot

student_bp = Blueprint('students', __name__, url_prefix='/students')


@student_bp.route('/', strict_slashes=False)
@json_errors
def view_students():
    months = months_passed_arg()
    snap = load_snapshot()
    found = filter_students(snap.students, request.args.get('q', ''), request.args.get('class'))
    rows = []
    for s in found:
        due = compute_student_liability(s, snap.class_configs, snap.exam_fee_configs, snap.payments, months)
        row = s.to_dict()
        row['due'] = to_float(due.total_due)
        row['isPaid'] = due.is_paid
        rows.append(row)
    return jsonify({'students': rows, 'count': len(rows), 'total': len(snap.students)})


@student_bp.route('/lookup')
def lookup_students():
    snap = load_snapshot()
    hits = quick_lookup(snap.students, request.args.get('q', ''))
    return jsonify({'students': [s.to_dict() for s in hits]})


@student_bp.route('/', methods=['POST'], strict_slashes=False)
@json_errors
def create_student():
    rec = add_student(request.get_json(silent=True) or {})
    return jsonify({'student': rec.to_dict()}), 201


@student_bp.route('/<student_id>')
@json_errors
def student_detail(student_id):
    months = months_passed_arg()
    snap = load_snapshot()
    student = snap.student(student_id)
    if student is None:
        abort(404)
    due = compute_student_liability(student, snap.class_configs, snap.exam_fee_configs, snap.payments, months)
    return jsonify({
        'student': student.to_dict(),
        'monthsPassed': current_month_index() if months is None else months,
        'liability': due.as_dict(),
        'isPaid': due.is_paid,
        'history': [p.to_dict() for p in student_history(student.id, snap.payments)],
    })


@student_bp.route('/<student_id>/receipts/<payment_id>.pdf')
def payment_receipt(student_id, payment_id):
    snap = load_snapshot()
    payment = next(
        (p for p in snap.payments if p.id == payment_id and p.student_id == student_id),
        None,
    )
    if payment is None:
        abort(404)
    cfg = current_app.config
    pdf = render_receipt(
        payment,
        snap.student(student_id),
        cfg.get('SCHOOL_NAME', 'School'),
        currency=cfg.get('CURRENCY_LABEL', 'BDT'),
        font_path=cfg.get('RECEIPT_FONT_PATH') or None,
        latin_school_name=cfg.get('SCHOOL_NAME_LATIN', ''),
    )
    return Response(
        pdf,
        mimetype='application/pdf',
        headers={'Content-Disposition': f'inline; filename=receipt-{payment.id}.pdf'},
    )
