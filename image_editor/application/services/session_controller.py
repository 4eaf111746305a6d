"""Single-session state machine driving image selection and edit requests.

Phases: EMPTY -> READY -> GENERATING -> READY, back to EMPTY on reset.
Every dispatched request takes a generation ticket; a resolution whose ticket
no longer matches (the session was reset meanwhile) is dropped.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from typing import BinaryIO, Union

from image_editor.application.services.image_encoder import encode_image, read_source_image
from image_editor.application.use_cases.submit_edit import execute as submit_edit_uc
from image_editor.domain.errors import EditFailed, FileReadError, PreconditionUnmet
from image_editor.domain.models import EditRequest, EditResult, SessionPhase, SessionState
from image_editor.domain.ports import IImageEditClient
from image_editor.shared.setup_logger import LOGGER

logger = LOGGER.get_logger(__name__)

FILE_READ_ERROR_MESSAGE = "Failed to load image. Please try another file."
EDIT_FAILED_MESSAGE = "Failed to generate image. The model may be overloaded. Please try again later."


class SessionController:
    def __init__(self, edit_client: IImageEditClient | None):
        self._client = edit_client
        self._state = SessionState()
        self._generation = 0
        self._lock = threading.Lock()

    def snapshot(self) -> SessionState:
        with self._lock:
            return replace(self._state)

    def select_image(
        self,
        content: Union[bytes, str, BinaryIO],
        mime_type: str | None,
        filename: str | None = None,
    ) -> bool:
        with self._lock:
            if self._state.in_flight:
                logger.info("[session] select_image ignored phase=generating")
                return False

        try:
            source = read_source_image(content, mime_type, filename)
        except FileReadError as exc:
            logger.warning("[session] select_image failed filename=%s error=%s", filename, exc)
            with self._lock:
                if not self._state.in_flight:
                    self._generation += 1
                    self._state = SessionState(error=FILE_READ_ERROR_MESSAGE)
            raise

        encoded = encode_image(source)
        with self._lock:
            if self._state.in_flight:
                return False
            self._state = SessionState(
                source=source,
                encoded=encoded,
                prompt=self._state.prompt,
            )
        logger.info(
            "[session] image_selected filename=%s mime_type=%s size=%s",
            filename,
            source.mime_type,
            len(source.data),
        )
        return True

    def edit_prompt(self, text: str | None) -> bool:
        with self._lock:
            if self._state.in_flight:
                return False
            self._state.prompt = text or ""
        return True

    def generate(self) -> bool:
        with self._lock:
            if not self._state.can_generate:
                logger.info(
                    "[session] generate ignored phase=%s has_prompt=%s",
                    self._state.phase.value,
                    bool(self._state.prompt.strip()),
                )
                return False
            self._generation += 1
            ticket = self._generation
            self._state.in_flight = True
            self._state.result = None
            self._state.error = None
            source = self._state.source
            prompt = self._state.prompt

        logger.info("[session] generate dispatched generation=%s", ticket)
        outcome = EditResult(error=EDIT_FAILED_MESSAGE)
        try:
            image = submit_edit_uc(
                self._client,
                EditRequest(image=encode_image(source), prompt=prompt),
            )
            outcome = EditResult(image=image)
        except (EditFailed, PreconditionUnmet) as exc:
            logger.error("[session] generate failed generation=%s error=%s", ticket, exc)
            outcome = EditResult(error=EDIT_FAILED_MESSAGE)
        except Exception:
            logger.exception("[session] generate crashed generation=%s", ticket)
            outcome = EditResult(error=EDIT_FAILED_MESSAGE)
        finally:
            with self._lock:
                if ticket != self._generation:
                    logger.info(
                        "[session] stale resolution dropped generation=%s current=%s",
                        ticket,
                        self._generation,
                    )
                else:
                    self._state.in_flight = False
                    self._state.result = outcome.image
                    self._state.error = outcome.error
        return True

    def reset(self) -> None:
        with self._lock:
            if self._state.phase is SessionPhase.GENERATING:
                logger.info("[session] reset while generating generation=%s", self._generation)
            self._generation += 1
            self._state = SessionState()
