"""Ports implemented by infrastructure adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod


class IImageEditClient(ABC):
    @abstractmethod
    def edit_image(self, image_b64: str, mime_type: str, prompt: str) -> dict:
        """Returns {"model", "mime_type", "image_base64", "usage_metadata"}."""
        raise NotImplementedError
