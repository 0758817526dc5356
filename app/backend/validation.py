import copy
import json
import logging
import re
from typing import Any, Dict

from errors import ParseError, ValidationError
from portfolio_schema import ESSENTIAL_SECTIONS, SECTION_DEFAULTS, SKILL_LEVEL_MIN, SKILL_LEVEL_MAX

logger = logging.getLogger(__name__)

LEADING_FENCE = re.compile(r"^```(?:json)?[ \t]*\n?", re.IGNORECASE)
TRAILING_FENCE = re.compile(r"\n?```$")


def strip_code_fences(raw_text: str) -> str:
    """Removes a Markdown fence wrapping the whole text; fences inside values are kept."""
    text = raw_text.strip()
    if text.startswith("```"):
        text = LEADING_FENCE.sub("", text, count=1)
        text = TRAILING_FENCE.sub("", text, count=1)
    return text.strip()


def reject_constant(name: str):
    # json.loads accepts NaN/Infinity, which are not JSON
    raise ParseError(f"Failed to parse generated content as JSON: {name} is not a valid JSON value")


def is_missing(value: Any) -> bool:
    # An empty list or record still counts as present.
    if isinstance(value, (dict, list)):
        return False
    return not value


def clamp_skill_levels(data: Dict[str, Any]) -> None:
    skills = data.get("skills")
    if skills is None:
        return
    if not isinstance(skills, list):
        raise ValidationError("Generated data has an invalid 'skills' section.")
    for skill in skills:
        if not isinstance(skill, dict):
            continue
        level = skill.get("level")
        # bool is an int subclass; leave it alone
        if isinstance(level, bool) or not isinstance(level, (int, float)):
            continue
        clamped = min(max(level, SKILL_LEVEL_MIN), SKILL_LEVEL_MAX)
        if clamped != level:
            logger.warning("Clamped skill level for %r from %s to %s", skill.get("name"), level, clamped)
            skill["level"] = clamped


def normalize_portfolio(raw_text: str) -> Dict[str, Any]:
    """
    Parses the model's raw text into the portfolio document.

    Raises ParseError if the text is not valid JSON and ValidationError if the
    essential sections are missing. Only sections listed in SECTION_DEFAULTS are
    filled in when absent; every other omission is left for the caller to see.
    """
    cleaned = strip_code_fences(raw_text or "")
    try:
        data = json.loads(cleaned, parse_constant=reject_constant)
    except json.JSONDecodeError as e:
        logger.error("Error decoding JSON from LLM response: %s", e)
        logger.debug("LLM Response was:\n%s", cleaned)
        raise ParseError(f"Failed to parse generated content as JSON: {e}")

    if not isinstance(data, dict) or any(is_missing(data.get(section)) for section in ESSENTIAL_SECTIONS):
        raise ValidationError("Generated data is missing essential fields.")

    for section, default in SECTION_DEFAULTS.items():
        if data.get(section) is None:
            data[section] = copy.deepcopy(default)

    clamp_skill_levels(data)
    return data
