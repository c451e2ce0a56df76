"""
Family Dashboard backend.

A minimal JSON-file server: the browsers read the whole Document and write
back whole collections. Also serves a small read-only glance page.
"""

from datetime import date, datetime
import logging

from flask import Flask, request, jsonify
from flask_cors import CORS
from markupsafe import escape

from . import config
from .schedule import todays_agenda, format_event_time
from .storage import DocumentStore

logger = logging.getLogger(__name__)


# ============================================
# SHARED CSS STYLES
# ============================================
def get_base_styles():
    return """
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1, user-scalable=no">
    <meta http-equiv="refresh" content="30">
    <style>
        * { box-sizing: border-box; margin: 0; padding: 0; }
        html { font-size: 18px; }
        body {
            font-family: 'Segoe UI', -apple-system, Arial, sans-serif;
            background: linear-gradient(135deg, #2e1065 0%, #1e3a8a 50%, #312e81 100%);
            min-height: 100vh;
            color: #eee;
            padding: 20px;
        }
        .header {
            display: flex;
            align-items: center;
            justify-content: space-between;
            margin-bottom: 24px;
            padding: 0 10px;
        }
        .page-title {
            font-size: 1.8rem;
            font-weight: 600;
            color: #f9a8d4;
        }
        .time-display {
            text-align: right;
            color: #bbb;
            font-size: 0.9rem;
        }
        .section-title {
            font-size: 1rem;
            color: #bbb;
            margin: 24px 0 12px 0;
            text-transform: uppercase;
            letter-spacing: 1px;
        }
        .item-list {
            display: flex;
            flex-direction: column;
            gap: 10px;
        }
        .item {
            display: flex;
            justify-content: space-between;
            background: rgba(255,255,255,0.08);
            border-radius: 14px;
            padding: 14px 18px;
        }
        .item-time {
            color: #f9a8d4;
            min-width: 90px;
        }
        .no-data {
            text-align: center;
            color: #999;
            padding: 24px;
        }
    </style>
    """


# ============================================
# APP
# ============================================
def create_app(data_file=None):
    app = Flask(__name__)
    CORS(app, resources={r"/api/*": {"origins": "*"}})

    store = DocumentStore(data_file or config.DATA_FILE)
    store.init()
    app.config['DOCUMENT_STORE'] = store

    @app.route('/api/data', methods=['GET'])
    def get_data():
        return jsonify(store.read()), 200

    def replace_collection(key):
        body = request.get_json(silent=True)
        try:
            store.replace(key, body if isinstance(body, list) else [])
        except OSError:
            return jsonify({'error': f'Failed to update {key}'}), 500
        return jsonify({'success': True}), 200

    @app.route('/api/events', methods=['POST'])
    def update_events():
        return replace_collection('events')

    @app.route('/api/groceries', methods=['POST'])
    def update_groceries():
        return replace_collection('groceries')

    @app.route('/api/settings', methods=['POST'])
    def update_settings():
        body = request.get_json(silent=True)
        try:
            store.replace('settings', body if body is not None else {})
        except OSError:
            return jsonify({'error': 'Failed to update settings'}), 500
        return jsonify({'success': True}), 200

    @app.route('/')
    def home():
        data = store.read()
        settings = data.get('settings') or {}
        time_format = settings.get('timeFormat', '12')
        now = datetime.now()
        clock_fmt = '%I:%M %p' if time_format == '12' else '%H:%M'
        family = settings.get('familyName') or ''

        html = f"""
        <!DOCTYPE html>
        <html>
        <head>
            <title>Family Dashboard</title>
            {get_base_styles()}
        </head>
        <body>
            <div class="header">
                <div class="page-title">{escape(family + ' ' if family else '')}Family Dashboard</div>
                <div class="time-display">
                    <div>{now.strftime(clock_fmt)}</div>
                    <div>{now.strftime('%A, %B %d')}</div>
                </div>
            </div>

            <div class="section-title">Today's Schedule</div>
            <div class="item-list">
        """

        agenda = todays_agenda(data.get('events') or [], date.today())
        if not agenda:
            html += '<div class="no-data">No events today</div>'
        for event in agenda:
            html += f"""
                <div class="item">
                    <div class="item-time">{format_event_time(event.get('time'), time_format)}</div>
                    <div>{escape(event.get('title', ''))}</div>
                </div>
            """

        html += """
            </div>

            <div class="section-title">Groceries</div>
            <div class="item-list">
        """

        pending = [g for g in data.get('groceries') or [] if not g.get('checked')]
        if not pending:
            html += '<div class="no-data">Nothing on the list</div>'
        for item in pending:
            html += f'<div class="item"><div>{escape(item.get("text", ""))}</div></div>'

        html += """
            </div>
        </body>
        </html>
        """
        return html

    return app
