"""Structural validation of extracted presentations.

The parser guarantees we have a dict with title/oneLiner/structure keys.
This module decides whether that dict is good enough to hand back to a
caller. All rules must pass; nothing is repaired.

Rules:
- title and oneLiner are non-empty strings
- structure is a list with at least `min_sections` entries (fewer means the
  source text was too thin to make a real presentation)
- every entry has non-empty string `section` and `content`
- language, if given, is a string
"""

from typing import Any, Optional

from src.schemas.llm_outputs import PresentationDocument, Section
from src.utils.logging import log, get_logger

MODULE = "llm.validators"
logger = get_logger()

MIN_SECTIONS = 3


class DocumentValidationError(Exception):
    """Raised when a candidate document breaks one of the rules above.

    `rule` names the rule that failed, for user-facing messaging.
    """

    def __init__(self, message: str, rule: str):
        super().__init__(message)
        self.rule = rule


def _non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _check(candidate: Any, min_sections: int) -> Optional[tuple[str, str]]:
    """Return (rule, message) for the first broken rule, or None."""
    if not isinstance(candidate, dict):
        return "document_type", "Presentation must be a JSON object"

    if not _non_empty_string(candidate.get("title")):
        return "title", "Presentation title is missing or empty"

    if not _non_empty_string(candidate.get("oneLiner")):
        return "one_liner", "Presentation summary (oneLiner) is missing or empty"

    language = candidate.get("language")
    if language is not None and not isinstance(language, str):
        return "language", "Presentation language must be a string"

    structure = candidate.get("structure")
    if not isinstance(structure, list):
        return "structure_type", "Presentation structure must be a list"

    if len(structure) < min_sections:
        return (
            "min_sections",
            f"Presentation structure is too short ({len(structure)} of at least "
            f"{min_sections} sections). Please provide more content.",
        )

    for i, entry in enumerate(structure):
        if not isinstance(entry, dict):
            return "section_type", f"Section {i} must be an object"
        if not _non_empty_string(entry.get("section")):
            return "section_heading", f"Section {i} has an empty heading"
        if not _non_empty_string(entry.get("content")):
            return "section_content", f"Section {i} has empty content"

    return None


def validate_presentation(candidate: Any, min_sections: int = MIN_SECTIONS) -> PresentationDocument:
    """Turn a candidate dict into a PresentationDocument, or fail.

    Raises:
        DocumentValidationError: Naming the first rule that failed
    """
    failure = _check(candidate, min_sections)
    if failure:
        rule, message = failure
        log.warning(logger, MODULE, "validation_failed", message, rule=rule)
        raise DocumentValidationError(message, rule=rule)

    language = candidate.get("language")
    document = PresentationDocument(
        title=candidate["title"].strip(),
        one_liner=candidate["oneLiner"].strip(),
        language=(language.strip() or None) if language else None,
        structure=[
            Section(section=entry["section"].strip(), content=entry["content"].strip())
            for entry in candidate["structure"]
        ],
    )
    log.debug(logger, MODULE, "validation_done", "Presentation accepted",
              sections=len(document.structure), language=document.language)
    return document
