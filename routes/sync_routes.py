from datetime import datetime

from flask import Blueprint, current_app, jsonify, request

from utils import json_errors
from utils.settings import LAST_SYNC_KEY, get_last_sync, get_sync_urls, set_setting, set_sync_urls
from utils.sheets import SheetSyncError, fetch_base_data, validate_link
from utils.store import replace_base_data

sync_bp = Blueprint('sync', __name__, url_prefix='/sync')


@sync_bp.route('/settings')
def sync_settings():
    return jsonify({'urls': get_sync_urls(), 'lastSync': get_last_sync()})


@sync_bp.route('/settings', methods=['POST'])
def update_sync_settings():
    data = request.get_json(silent=True) or {}
    urls = set_sync_urls({k: data.get(k) for k in ('raw_students', 'payments', 'finance') if k in data})
    return jsonify({'urls': urls, 'lastSync': get_last_sync()})


@sync_bp.route('/refresh', methods=['POST'])
@json_errors
def refresh_base_data():
    url = get_sync_urls()['raw_students']
    if not url:
        raise SheetSyncError('Set the student list sheet link in sync settings first')
    data = fetch_base_data(url)
    counts = replace_base_data(data)
    stamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
    set_setting(LAST_SYNC_KEY, stamp)
    current_app.logger.info('Base data refreshed from sheet: %s', counts)
    return jsonify({'counts': counts, 'lastSync': stamp})


@sync_bp.route('/validate', methods=['POST'])
def validate_sheet_link():
    data = request.get_json(silent=True) or {}
    ok, message = validate_link((data.get('url') or '').strip())
    return jsonify({'success': ok, 'message': message})
