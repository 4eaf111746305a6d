from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SessionPhase(str, Enum):
    EMPTY = "empty"
    READY = "ready"
    GENERATING = "generating"


@dataclass(frozen=True)
class SourceImage:
    data: bytes
    mime_type: str
    filename: Optional[str] = None


@dataclass(frozen=True)
class EncodedImage:
    data: str  # base64, ascii
    mime_type: str

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


@dataclass(frozen=True)
class EditRequest:
    image: EncodedImage
    prompt: str


@dataclass(frozen=True)
class EditResult:
    image: Optional[EncodedImage] = None
    error: Optional[str] = None

    def __post_init__(self):
        if (self.image is None) == (self.error is None):
            raise ValueError("edit_result_requires_exactly_one_of_image_or_error")

    @property
    def ok(self) -> bool:
        return self.image is not None


@dataclass
class SessionState:
    source: Optional[SourceImage] = None
    encoded: Optional[EncodedImage] = None
    prompt: str = ""
    in_flight: bool = False
    result: Optional[EncodedImage] = None
    error: Optional[str] = None

    @property
    def phase(self) -> SessionPhase:
        if self.in_flight:
            return SessionPhase.GENERATING
        if self.source is None:
            return SessionPhase.EMPTY
        return SessionPhase.READY

    @property
    def can_generate(self) -> bool:
        return (
            self.phase is SessionPhase.READY
            and self.encoded is not None
            and bool(self.prompt.strip())
        )
