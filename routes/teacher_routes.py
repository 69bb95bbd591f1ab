from flask import Blueprint, abort, jsonify, request

from utils import json_errors
from utils.ledger import build_salary_record, former_teachers, running_teachers, salary_history
from utils.money import ZERO, to_amount
from utils.settings import get_sync_urls
from utils.sheets import push_record
from utils.store import ValidationError, load_snapshot, save_finance_record

teacher_bp = Blueprint('teachers', __name__, url_prefix='/teachers')


def _find_teacher(teachers, name):
    for t in teachers:
        if t.name == name:
            return t
    return None


@teacher_bp.route('/', strict_slashes=False)
def list_teachers():
    term = request.args.get('q', '')
    teachers = load_snapshot().teachers
    return jsonify({
        'running': [t.to_dict() for t in running_teachers(teachers, term)],
        'former': [t.to_dict() for t in former_teachers(teachers, term)],
    })


@teacher_bp.route('/<name>/salaries')
def teacher_salaries(name):
    snap = load_snapshot()
    if _find_teacher(snap.teachers, name) is None:
        abort(404)
    return jsonify({'history': [r.to_dict() for r in salary_history(name, snap.finance_records)]})


@teacher_bp.route('/<name>/salaries', methods=['POST'])
@json_errors
def pay_salary(name):
    teacher = _find_teacher(load_snapshot().teachers, name)
    if teacher is None:
        abort(404)
    data = request.get_json(silent=True) or {}
    amount = to_amount(data.get('amount'))
    if amount <= ZERO:
        raise ValidationError('a positive amount is required')
    rec = save_finance_record(build_salary_record(teacher, amount, data.get('month')))
    synced = push_record(get_sync_urls()['finance'], rec.to_dict())
    return jsonify({'record': rec.to_dict(), 'synced': synced}), 201
