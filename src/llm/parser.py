"""JSON extraction from model responses.

Models often wrap JSON in markdown code fences or surround it with prose
("Here is your presentation: {...} Let me know if..."). This module recovers
the JSON document from raw model output, the same way every time:

  1. Trim surrounding whitespace
  2. Strip a leading ```json fence (or a bare ``` fence) and its closing fence
  3. Slice from the first '{' to the last '}', dropping surrounding prose
  4. Parse

No partial recovery is attempted: if the sliced text does not parse, or the
presentation keys are missing, extraction fails.
"""

import json
import re
from typing import Any

from src.utils.logging import log, get_logger

MODULE = "llm.parser"
logger = get_logger()

# Must be present and non-empty; `structure` only has to be present
REQUIRED_TEXT_KEYS = ("title", "oneLiner")

_JSON_FENCE_OPEN = re.compile(r"^```json\n?")
_BARE_FENCE_OPEN = re.compile(r"^```\n?")
_FENCE_CLOSE = re.compile(r"\n?```$")


class JSONExtractionError(Exception):
    """Raised when a JSON document cannot be recovered from model output."""

    def __init__(self, message: str, raw_output: str, attempted: str = ""):
        super().__init__(message)
        self.raw_output = raw_output
        self.attempted = attempted


def strip_code_fence(text: str) -> str:
    """Remove a leading ```json / ``` fence and the matching closing fence."""
    if text.startswith("```json"):
        return _FENCE_CLOSE.sub("", _JSON_FENCE_OPEN.sub("", text, count=1), count=1)
    if text.startswith("```"):
        return _FENCE_CLOSE.sub("", _BARE_FENCE_OPEN.sub("", text, count=1), count=1)
    return text


def isolate_object(text: str) -> str:
    """Slice `text` to the span between the first '{' and the last '}'.

    Returns the text unchanged if there is no such span.
    """
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end != -1 and end > start:
        return text[start:end + 1]
    return text


def extract_json(raw: str) -> Any:
    """Extract a JSON document from raw model output.

    Handles:
    - Raw JSON: {"key": "value"}
    - Fenced blocks: ```json\\n{"key": "value"}\\n``` or ```\\n{...}\\n```
    - Preamble/trailing prose around a single object

    Args:
        raw: Raw model output string

    Returns:
        Parsed JSON value

    Raises:
        JSONExtractionError: If the recovered text is not valid JSON
    """
    text = isolate_object(strip_code_fence(raw.strip()))

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        log.warning(logger, MODULE, "parse_failed",
                    "JSON parsing failed",
                    error=str(e), attempted=text[:200], raw_length=len(raw))
        raise JSONExtractionError(
            f"Failed to parse JSON from model output: {e.msg} "
            f"(line {e.lineno}, column {e.colno})",
            raw_output=raw,
            attempted=text,
        ) from e
    except RecursionError as e:
        # Nesting deeper than the decoder can follow
        log.warning(logger, MODULE, "parse_failed",
                    "JSON nesting too deep",
                    attempted=text[:200], raw_length=len(raw))
        raise JSONExtractionError(
            "Failed to parse JSON from model output: nesting too deep",
            raw_output=raw,
            attempted=text,
        ) from e


def extract_presentation(raw: str) -> dict[str, Any]:
    """Extract the presentation object and check its top-level shape.

    `title` and `oneLiner` must be present and non-empty, and `structure`
    must be a list (possibly empty). Field-level rules (section count, section
    contents) belong to the validator.

    Raises:
        JSONExtractionError: If the output is not a presentation-shaped object
    """
    parsed = extract_json(raw)

    if not isinstance(parsed, dict):
        raise JSONExtractionError(
            f"Invalid presentation structure: expected an object, got {type(parsed).__name__}",
            raw_output=raw,
        )

    missing = [key for key in REQUIRED_TEXT_KEYS if not parsed.get(key)]
    if "structure" not in parsed:
        missing.append("structure")
    if missing:
        raise JSONExtractionError(
            f"Invalid presentation structure: missing {', '.join(missing)}",
            raw_output=raw,
        )

    if not isinstance(parsed["structure"], list):
        raise JSONExtractionError(
            "Invalid presentation structure: 'structure' is not a list",
            raw_output=raw,
        )

    log.debug(logger, MODULE, "extract_done", "Extracted presentation object",
              sections=len(parsed["structure"]))
    return parsed
