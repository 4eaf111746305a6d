"""Offline stand-in for the Gemini image client."""

from image_editor.domain.ports import IImageEditClient


class GeminiMockClient(IImageEditClient):
    model = "mock-image-editor"

    def __init__(self, settings=None):
        self.settings = settings

    def edit_image(self, image_b64: str, mime_type: str, prompt: str) -> dict:
        # echoes the source image back unchanged
        return {
            "model": self.model,
            "mime_type": mime_type or "image/png",
            "image_base64": image_b64,
            "usage_metadata": {"prompt": prompt},
        }
