"""Use-case that sends one image edit request to the external model."""

from __future__ import annotations

import base64
import binascii
import time

from image_editor.domain.errors import EditFailed, PreconditionUnmet
from image_editor.domain.models import EditRequest, EncodedImage
from image_editor.domain.ports import IImageEditClient
from image_editor.shared.setup_logger import LOGGER

logger = LOGGER.get_logger(__name__)


def execute(image_client: IImageEditClient | None, args: EditRequest) -> EncodedImage:
    if not args.image.data:
        raise PreconditionUnmet("missing_image")
    if not (args.prompt or "").strip():
        raise PreconditionUnmet("missing_prompt")
    if image_client is None:
        raise EditFailed("missing_GEMINI_API_KEY")

    t0 = time.time()
    try:
        out = image_client.edit_image(
            image_b64=args.image.data,
            mime_type=args.image.mime_type,
            prompt=args.prompt,
        )
    except Exception as exc:
        raise EditFailed(f"image_edit_failed:{exc}") from exc
    latency_ms = int((time.time() - t0) * 1000)

    if not isinstance(out, dict):
        raise EditFailed(f"image_edit_failed:unexpected_response_type:{type(out).__name__}")
    out_b64 = out.get("image_base64") or ""
    if not out_b64:
        raise EditFailed("image_edit_failed:empty_image_payload")
    if not isinstance(out_b64, str):
        raise EditFailed("image_edit_failed:malformed_image_payload")
    try:
        base64.b64decode(out_b64, validate=True)
    except (binascii.Error, TypeError, ValueError) as exc:
        raise EditFailed("image_edit_failed:malformed_image_payload") from exc

    out_mime = out.get("mime_type") or args.image.mime_type
    logger.info(
        "[submit_edit] done model=%s latency_ms=%s mime_type=%s",
        out.get("model"),
        latency_ms,
        out_mime,
    )
    return EncodedImage(data=out_b64, mime_type=out_mime)
