"""
form.py

State of the upload form, kept apart from Streamlit so it can be tested.

The page calls these functions in order:
accept_file() -> (service call) -> apply_response() or apply_transport_error()
and clear() when the user presses "Clear All".
"""

import enum
from dataclasses import dataclass
from typing import Any, Dict, Optional

NOT_AN_IMAGE_MESSAGE = "Please drop an image file (PNG, JPG, etc.)"
PROCESSING_MESSAGE = "Processing image..."
SUCCESS_MESSAGE = "Image processed successfully!"
NOTHING_FOUND_MESSAGE = "No BOL number or weight found in the image. Please try a clearer image."


class MessageKind(enum.Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class FormState:
    bol_number: str = ""
    weight: str = ""
    weight_type: str = ""
    message: str = ""
    message_kind: MessageKind = MessageKind.INFO
    preview: Optional[bytes] = None
    is_processing: bool = False

    @property
    def has_content(self) -> bool:
        return bool(self.bol_number or self.weight or self.weight_type or self.preview)


def _say(state: FormState, kind: MessageKind, message: str) -> None:
    state.message_kind = kind
    state.message = message


def accept_file(state: FormState, filename: str, content_type: Optional[str], data: bytes) -> bool:
    """
    Decide whether a chosen file may be sent.

    Returns False (and sets a message) for anything that is not
    declared as an image; nothing should be sent in that case.
    """

    if not (content_type or "").startswith("image/"):
        _say(state, MessageKind.INFO, NOT_AN_IMAGE_MESSAGE)
        return False

    state.preview = data
    state.bol_number = ""
    state.weight = ""
    state.weight_type = ""
    state.is_processing = True
    _say(state, MessageKind.INFO, PROCESSING_MESSAGE)
    return True


def apply_response(state: FormState, payload: Dict[str, Any]) -> None:
    """Fill the form from the service's JSON reply."""

    state.is_processing = False

    if not payload.get("success"):
        _say(state, MessageKind.ERROR, f"Error: {payload.get('error')}")
        return

    data = payload.get("data") or {}
    state.bol_number = data.get("bolNumber") or ""
    state.weight = data.get("weight") or ""
    state.weight_type = data.get("weightType") or ""

    if not state.bol_number and not state.weight:
        _say(state, MessageKind.INFO, NOTHING_FOUND_MESSAGE)
    else:
        _say(state, MessageKind.SUCCESS, SUCCESS_MESSAGE)


def apply_transport_error(state: FormState, error: Optional[Exception]) -> None:
    state.is_processing = False
    detail = str(error) if error is not None and str(error) else "Unknown error"
    _say(state, MessageKind.ERROR, f"Failed to process image: {detail}")


def clear(state: FormState) -> None:
    """Reset everything. Does not contact the service."""
    state.bol_number = ""
    state.weight = ""
    state.weight_type = ""
    state.preview = None
    state.is_processing = False
    _say(state, MessageKind.INFO, "")
