"""Error taxonomy for the editing session.

Each error carries a short snake_case code as its message; the session
controller turns them into user-facing text.
"""


class ImageEditorError(Exception):
    """Base class for failures raised by the editing flow."""


class FileReadError(ImageEditorError):
    """The selected file could not be read or is not an image."""


class PreconditionUnmet(ImageEditorError):
    """An edit was requested without an image or without a prompt."""


class EditFailed(ImageEditorError):
    """The external edit call failed or returned an unusable payload."""
