"""Gemini image editing adapter."""

from __future__ import annotations

import requests

from image_editor.core.settings import Settings
from image_editor.domain.ports import IImageEditClient
from image_editor.shared.setup_logger import LOGGER

logger = LOGGER.get_logger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"


class GeminiImageClient(IImageEditClient):
    def __init__(self, settings: Settings):
        self._s = settings
        if not self._s.gemini_api_key:
            raise RuntimeError("missing_GEMINI_API_KEY")
        self._model = (self._s.gemini_image_model or "gemini-2.5-flash-image").strip()
        self._api_key = (self._s.gemini_api_key or "").strip()
        self._timeout = self._s.gemini_timeout_s
        self._url = f"{GEMINI_BASE_URL}/{self._model}:generateContent"
        self._session = requests.Session()
        self._session.headers.update({"Content-Type": "application/json"})

    @property
    def model(self) -> str:
        return self._model

    def _request_edit(self, payload: dict) -> dict:
        r = self._session.post(
            self._url,
            params={"key": self._api_key},
            json=payload,
            timeout=self._timeout,
        )
        if not r.ok:
            body = (r.text or "").replace("\n", " ").strip()
            body = body[:400] if body else ""
            raise RuntimeError(f"gemini_http_{r.status_code}:{body}")
        data = r.json() or {}

        image_part = None
        text_part = ""
        finish_reasons: list[str] = []
        for cand in data.get("candidates", []) or []:
            reason = str(cand.get("finishReason") or cand.get("finish_reason") or "").strip()
            if reason:
                finish_reasons.append(reason)
            content = cand.get("content") or {}
            for part in content.get("parts", []) or []:
                inline = part.get("inlineData") or part.get("inline_data")
                if inline and inline.get("data"):
                    image_part = inline
                    break
                if (not text_part) and part.get("text"):
                    text_part = str(part.get("text") or "").strip()
            if image_part:
                break

        if not image_part:
            prompt_feedback = data.get("promptFeedback") or data.get("prompt_feedback") or {}
            block_reason = str(prompt_feedback.get("blockReason") or prompt_feedback.get("block_reason") or "").strip()
            details = []
            if finish_reasons:
                details.append(f"finish={','.join(finish_reasons)[:120]}")
            if block_reason:
                details.append(f"block={block_reason}")
            text_compact = text_part.replace("\n", " ").strip()[:180] if text_part else ""
            if text_compact:
                details.append(f"text={text_compact}")
            suffix = ";".join(details)
            logger.warning("[gemini] no image in response model=%s %s", self._model, suffix)
            if suffix:
                raise RuntimeError(f"gemini_no_image_in_response:{suffix}")
            raise RuntimeError("gemini_no_image_in_response")

        return {
            "model": self._model,
            "mime_type": image_part.get("mimeType") or image_part.get("mime_type") or "image/png",
            "image_base64": image_part.get("data") or "",
            "usage_metadata": data.get("usageMetadata") or data.get("usage_metadata"),
        }

    def edit_image(self, image_b64: str, mime_type: str, prompt: str) -> dict:
        if not image_b64:
            raise ValueError("missing_image")
        if not (prompt or "").strip():
            raise ValueError("missing_prompt")
        payload = {
            "contents": [
                {
                    "parts": [
                        {
                            "inline_data": {
                                "mime_type": mime_type or "image/png",
                                "data": image_b64,
                            }
                        },
                        {"text": prompt},
                    ]
                }
            ],
            "generation_config": {
                "response_modalities": ["IMAGE", "TEXT"],
            },
        }
        logger.info("[gemini] edit request model=%s mime_type=%s", self._model, mime_type)
        return self._request_edit(payload)
