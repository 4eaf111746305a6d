import os
from dataclasses import dataclass

DEFAULT_ALLOWED_MIME_TYPES = (
    "image/png",
    "image/jpeg",
    "image/gif",
    "image/webp",
    "image/bmp",
)


@dataclass(frozen=True)
class Settings:
    gemini_api_key: str | None
    gemini_image_model: str
    gemini_timeout_s: float
    image_edit_mock: bool

    upload_hint_mb: int
    allowed_mime_types: tuple[str, ...]
    cors_origins: tuple[str, ...]

    app_host: str
    app_port: int
    app_debug: bool

    @staticmethod
    def load() -> "Settings":
        origins = os.getenv("CORS_ORIGINS", "*")
        return Settings(
            gemini_api_key=(os.getenv("GEMINI_API_KEY") or "").strip() or None,
            gemini_image_model=os.getenv("GEMINI_IMAGE_MODEL", "gemini-2.5-flash-image"),
            gemini_timeout_s=float(os.getenv("GEMINI_TIMEOUT_S", "90")),
            image_edit_mock=os.getenv("IMAGE_EDIT_MOCK", "false").lower() == "true",
            upload_hint_mb=int(os.getenv("UPLOAD_HINT_MB", "10")),
            allowed_mime_types=DEFAULT_ALLOWED_MIME_TYPES,
            cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()) or ("*",),
            app_host=os.getenv("APP_HOST", "127.0.0.1"),
            app_port=int(os.getenv("APP_PORT", "5001")),
            app_debug=os.getenv("APP_DEBUG", "false").lower() == "true",
        )
