"""Endpoints driving the single editing session."""

from __future__ import annotations

import io

from flask import Blueprint, current_app, jsonify, request, send_file

from image_editor.application.services.image_encoder import decode_image
from image_editor.domain.errors import FileReadError
from image_editor.domain.models import EncodedImage, SessionState
from image_editor.shared.setup_logger import LOGGER
from image_editor.shared.text_utils import edited_filename, safe_filename

bp = Blueprint("session", __name__)
logger = LOGGER.get_logger(__name__)


def _image_payload(encoded: EncodedImage | None, url: str) -> dict | None:
    if encoded is None:
        return None
    return {
        "mime_type": encoded.mime_type,
        "size_bytes": len(decode_image(encoded)),
        "data_url": encoded.to_data_url(),
        "url": url,
    }


def _state_payload(state: SessionState) -> dict:
    return {
        "phase": state.phase.value,
        "in_flight": state.in_flight,
        "can_generate": state.can_generate,
        "prompt": state.prompt,
        "error": state.error,
        "filename": state.source.filename if state.source else None,
        "image": _image_payload(state.encoded, "/session/image"),
        "result": _image_payload(state.result, "/session/result"),
    }


def _state_response(ok: bool = True, status: int = 200, error: str | None = None):
    body = {"ok": ok, "state": _state_payload(current_app.container.session.snapshot())}
    if error:
        body["error"] = error
    return jsonify(body), status


@bp.get("/session")
def get_session():
    return _state_response()


@bp.post("/session/image")
def select_image_route():
    c = current_app.container
    try:
        if request.is_json:
            body = request.get_json(silent=True) or {}
            content = body.get("image_data")
            if not isinstance(content, str) or not content:
                return jsonify({"ok": False, "error": "missing_image"}), 400
            mime_type = content[len("data:"):].split(";", 1)[0].lower() if content.startswith("data:") else ""
            filename = safe_filename(str(body.get("filename") or "image.png"))
        elif "image" in request.files:
            f = request.files["image"]
            content = f.stream
            mime_type = (f.mimetype or "").lower()
            filename = safe_filename(f.filename or "image.png")
        else:
            return jsonify({"ok": False, "error": "missing_image"}), 400

        if mime_type and mime_type not in c.settings.allowed_mime_types and mime_type != "application/octet-stream":
            return jsonify({"ok": False, "error": "unsupported_media_type"}), 400

        try:
            applied = c.session.select_image(content, mime_type or None, filename=filename)
        except FileReadError as exc:
            return _state_response(ok=False, status=400, error=f"invalid_image:{exc}")

        if not applied:
            return _state_response(ok=False, status=409, error="session_busy")
        return _state_response()
    except Exception as exc:
        logger.exception("[session] select_image exception")
        return jsonify({"ok": False, "error": f"select_image_exception:{exc}"}), 500


@bp.put("/session/prompt")
def edit_prompt_route():
    c = current_app.container
    body = request.get_json(silent=True) or {}
    prompt = body.get("prompt")
    if prompt is not None and not isinstance(prompt, str):
        return jsonify({"ok": False, "error": "invalid_prompt"}), 400
    if not c.session.edit_prompt(prompt):
        return _state_response(ok=False, status=409, error="session_busy")
    return _state_response()


@bp.post("/session/generate")
def generate_route():
    c = current_app.container
    try:
        if not c.edit_client:
            return jsonify({"ok": False, "error": "missing_GEMINI_API_KEY"}), 500

        if not c.session.generate():
            return _state_response(ok=False, status=409, error="generate_unavailable")

        state = c.session.snapshot()
        if state.error:
            return _state_response(ok=False, status=502, error="image_edit_failed")
        return _state_response()
    except Exception as exc:
        logger.exception("[session] generate exception")
        return jsonify({"ok": False, "error": f"generate_exception:{exc}"}), 500


@bp.post("/session/reset")
def reset_route():
    current_app.container.session.reset()
    return _state_response()


@bp.get("/session/image")
def source_image_route():
    state = current_app.container.session.snapshot()
    if state.source is None:
        return jsonify({"ok": False, "error": "no_image"}), 404
    return send_file(
        io.BytesIO(state.source.data),
        mimetype=state.source.mime_type,
        download_name=state.source.filename or "image.png",
    )


@bp.get("/session/result")
def result_image_route():
    state = current_app.container.session.snapshot()
    if state.result is None:
        return jsonify({"ok": False, "error": "no_result"}), 404
    filename = state.source.filename if state.source else None
    return send_file(
        io.BytesIO(decode_image(state.result)),
        mimetype=state.result.mime_type,
        download_name=edited_filename(filename, state.result.mime_type),
    )
