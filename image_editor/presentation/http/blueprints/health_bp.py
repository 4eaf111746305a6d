from flask import Blueprint, jsonify, current_app

bp = Blueprint("health", __name__)


@bp.get("/health")
def health():
    c = current_app.container
    state = c.session.snapshot()
    return jsonify({
        "ok": True,
        "model": getattr(c.edit_client, "model", None),
        "has_api_key": bool(c.settings.gemini_api_key),
        "mock": c.settings.image_edit_mock,
        "phase": state.phase.value,
        "upload": {
            "accepted_types": list(c.settings.allowed_mime_types),
            "size_hint_mb": c.settings.upload_hint_mb,
        },
    })
