import copy
import logging
from typing import Any, Dict

import requests

from portfolio_schema import ESSENTIAL_SECTIONS, SECTION_DEFAULTS
from validation import is_missing

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Failed to generate portfolio content from the provided text. Please try again later."


class PortfolioGenerationFailed(Exception):
    """The only error end users see; details go to the log."""
    def __init__(self):
        super().__init__(GENERIC_FAILURE_MESSAGE)


def generate_portfolio_content(resume_text: str, base_url: str = "http://localhost:8000", timeout: float = None) -> Dict[str, Any]:
    """
    Sends resume text to the generation proxy and returns the portfolio document.
    Any failure is logged and re-raised as PortfolioGenerationFailed.
    """
    try:
        res = requests.post(
            f"{base_url.rstrip('/')}/api/generate",
            json={"resumeText": resume_text},
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )
        if not res.ok:
            raise RuntimeError(f"Server error: {res.status_code} - {res.text}")

        data = res.json()
        if not isinstance(data, dict) or any(is_missing(data.get(section)) for section in ESSENTIAL_SECTIONS):
            raise RuntimeError("Generated data is missing essential fields.")
        for section, default in SECTION_DEFAULTS.items():
            if data.get(section) is None:
                data[section] = copy.deepcopy(default)

        return data
    except Exception as e:
        logger.error("Error generating portfolio content (client): %s", e)
        raise PortfolioGenerationFailed() from e
