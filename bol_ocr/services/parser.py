"""
parser.py

Turns the language model's reply into BOL fields.

The model is asked for JSON but does not always comply, so parsing
has two modes:

1. JSON    - strip code fences, json.loads succeeds and gives an object:
             the three fields are taken from it as-is (nulls included).
2. PATTERN - anything else: each field is searched for independently
             as `"field": "value"` in the raw reply. A missing field
             only makes that one field None.

Neither mode raises; the worst outcome is three None fields.
"""

import enum
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

FIELD_NAMES = ("bolNumber", "weight", "weightType")

_CODE_FENCE_JSON = re.compile(r"```json\n?")
_CODE_FENCE = re.compile(r"```\n?")

_FIELD_PATTERNS = {
    name: re.compile(r'"%s":\s*"([^"]+)"' % name) for name in FIELD_NAMES
}


class ParseMode(enum.Enum):
    JSON = "json"
    PATTERN = "pattern"


@dataclass(frozen=True)
class ParsedCompletion:
    """Fields recovered from one model reply, tagged with how they were found."""

    mode: ParseMode
    bol_number: Optional[str] = None
    weight: Optional[str] = None
    weight_type: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.bol_number is None and self.weight is None


def strip_code_fences(completion: str) -> str:
    """Remove ```json / ``` markers and surrounding whitespace."""
    cleaned = _CODE_FENCE_JSON.sub("", completion)
    cleaned = _CODE_FENCE.sub("", cleaned)
    return cleaned.strip()


def _load_json_object(text: str) -> Optional[Dict[str, Any]]:
    # Anything that is not a JSON object counts as "not JSON"
    try:
        value = json.loads(text)
    except ValueError:
        return None
    return value if isinstance(value, dict) else None


def _as_text(value: Any) -> Optional[str]:
    # Models occasionally send numbers, e.g. "weight": 500
    if value is None or isinstance(value, str):
        return value
    return str(value)


def _search_field(completion: str, name: str) -> Optional[str]:
    match = _FIELD_PATTERNS[name].search(completion)
    return match.group(1) if match else None


def parse_completion(completion: Optional[str]) -> ParsedCompletion:
    """
    Parse a model reply into a ParsedCompletion.

    Parameters:
    - completion: raw text returned by the model (None is treated as "")

    Returns:
    - ParsedCompletion in JSON mode when the cleaned reply is a JSON
      object, otherwise in PATTERN mode

    Called by:
    - BOLExtractionPipeline.process() in services/pipeline.py
    """

    completion = completion or ""
    cleaned = strip_code_fences(completion)
    logger.info(f"Cleaned model reply: {cleaned}")

    data = _load_json_object(cleaned)
    if data is not None:
        return ParsedCompletion(
            mode=ParseMode.JSON,
            bol_number=_as_text(data.get("bolNumber")),
            weight=_as_text(data.get("weight")),
            weight_type=_as_text(data.get("weightType")),
        )

    logger.warning("JSON parsing failed, attempting pattern extraction")

    return ParsedCompletion(
        mode=ParseMode.PATTERN,
        bol_number=_search_field(completion, "bolNumber"),
        weight=_search_field(completion, "weight"),
        weight_type=_search_field(completion, "weightType"),
    )
