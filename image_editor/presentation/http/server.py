from __future__ import annotations
import uuid

from flask import Flask, g, request
from flask_cors import CORS

from image_editor.core.container import Container
from image_editor.presentation.http.blueprints.health_bp import bp as health_bp
from image_editor.presentation.http.blueprints.session_bp import bp as session_bp
from image_editor.shared.trace import set_trace_id


def _bind_trace_id():
    trace_id = (request.headers.get("X-Request-Id") or "").strip() or uuid.uuid4().hex
    g.trace_id = trace_id
    set_trace_id(trace_id)


def _echo_trace_id(response):
    trace_id = getattr(g, "trace_id", None)
    if trace_id:
        response.headers["X-Request-Id"] = trace_id
    return response


def create_app() -> Flask:
    app = Flask(__name__, static_folder=None)
    app.container = Container()  # type: ignore
    CORS(app, origins=list(app.container.settings.cors_origins))

    app.before_request(_bind_trace_id)
    app.after_request(_echo_trace_id)

    app.register_blueprint(health_bp)
    app.register_blueprint(session_bp)
    return app
