import logging
import uuid

from flask import Flask, g, jsonify
from werkzeug.exceptions import HTTPException

from config import Config
from extensions import db, limiter, migrate
from routes.analytics import analytics_bp
from routes.fee_routes import fee_bp
from routes.finance_routes import finance_bp
from routes.gemini_routes import gemini_bp
from routes.student_routes import student_bp
from routes.sync_routes import sync_bp
from routes.teacher_routes import teacher_bp


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    logging.basicConfig(
        level=getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.json.ensure_ascii = False

    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)

    for bp in (analytics_bp, student_bp, fee_bp, finance_bp, teacher_bp, sync_bp, gemini_bp):
        app.register_blueprint(bp)

    with app.app_context():
        import models  # noqa: F401 - register tables before create_all
        db.create_all()

    # Assign a per-request correlation id for tracing
    @app.before_request
    def _assign_request_id():
        g.request_id = uuid.uuid4().hex[:16]

    @app.after_request
    def _set_security_headers(resp):
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
        resp.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        if "request_id" in g:
            resp.headers.setdefault("X-Request-ID", g.request_id)
        return resp

    @app.errorhandler(HTTPException)
    def _json_http_error(e):
        return jsonify({"error": e.description}), e.code

    @app.route("/health")
    def health():
        return jsonify({"status": "ok"})

    return app


app = create_app()


if __name__ == "__main__":
    app.run(debug=True)
