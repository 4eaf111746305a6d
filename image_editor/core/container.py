from dataclasses import dataclass, field
from typing import Optional

from image_editor.application.services.session_controller import SessionController
from image_editor.core.settings import Settings
from image_editor.domain.ports import IImageEditClient
from image_editor.infrastructure.gemini_image_client import GeminiImageClient
from image_editor.infrastructure.gemini_mock_client import GeminiMockClient


@dataclass
class Container:
    settings: Settings = field(default_factory=Settings.load)

    edit_client: Optional[IImageEditClient] = None
    session: SessionController = field(init=False)

    def __post_init__(self):
        if self.settings.image_edit_mock:
            self.edit_client = GeminiMockClient(self.settings)
        # no key, no client: /session/generate answers missing_GEMINI_API_KEY
        elif self.settings.gemini_api_key:
            self.edit_client = GeminiImageClient(self.settings)
        self.session = SessionController(self.edit_client)

    def use_edit_client(self, client: IImageEditClient | None) -> None:
        """Swaps the edit client and starts a fresh session bound to it."""
        self.edit_client = client
        self.session = SessionController(client)
