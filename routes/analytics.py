from typing import Optional

from flask import Blueprint, jsonify, request

from utils import json_errors
from utils.ledger import recent_expenses
from utils.liability import compute_school_stats, current_month_index
from utils.settings import get_last_sync, get_sync_urls
from utils.store import ValidationError, load_snapshot

analytics_bp = Blueprint('analytics', __name__, url_prefix='/api')


def months_passed_arg() -> Optional[int]:
    """``?month=`` overrides the clock's month index (0-12) for what-if views."""
    raw = request.args.get('month', '').strip()
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError('month must be a number between 0 and 12')
    if not 0 <= value <= 12:
        raise ValidationError('month must be a number between 0 and 12')
    return value


@analytics_bp.route('/stats')
@json_errors
def dashboard_stats():
    months = months_passed_arg()
    snap = load_snapshot()
    stats = compute_school_stats(
        snap.students,
        snap.payments,
        snap.finance_records,
        snap.class_configs,
        snap.exam_fee_configs,
        months,
    )
    urls = get_sync_urls()
    return jsonify({
        'stats': stats.as_dict(),
        'monthsPassed': current_month_index() if months is None else months,
        'recentExpenses': [r.to_dict() for r in recent_expenses(snap.finance_records)],
        'sync': {
            'lastSync': get_last_sync(),
            'configured': {name: bool(url) for name, url in urls.items()},
        },
    })
