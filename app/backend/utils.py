import os
import yaml
import copy
import logging
from typing import Dict, List

logger = logging.getLogger(__name__)

# --- Constants ---
PORTFOLIO_PATH = os.getenv("PORTFOLIO_PATH", "/app/data/portfolio.json")
VARIABLES_PATH = os.getenv("VARIABLES_PATH", "/app/variables.yaml")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DEFAULT_VARIABLES = {
    "font_settings": {"base_font_name": "Helvetica"},
    "styles": {
        "name": {"fontsize": 20, "spaceAfter": 4, "fontName": "Helvetica-Bold", "alignment": "center"},
        "title": {"fontsize": 12, "spaceAfter": 4, "alignment": "center"},
        "contact": {"fontsize": 9, "spaceAfter": 8, "alignment": "center"},
        "header": {"fontsize": 12, "spaceBefore": 8, "spaceAfter": 2},
        "subheader": {"fontsize": 10, "spaceAfter": 1},
        "body": {"fontsize": 10, "spaceAfter": 3},
        "bulleted_list": {"fontsize": 10, "leftIndent": 12, "bulletIndent": 4},
        "horizontal_line": {"thickness": 0.5, "spaceBefore": 2, "spaceAfter": 4},
    },
    "spaces": {"vertical": {"section_gap_inch": 0.08, "item_gap_inch": 0.05}},
}

# --- Helper Functions ---

def parse_origins(raw: str) -> List[str]:
    """Splits a comma separated origin list, dropping blanks."""
    return [origin.strip() for origin in raw.split(",") if origin.strip()]

def load_variables(path: str = None) -> Dict:
    """Loads PDF formatting variables from the YAML file, layered over the built-in defaults."""
    path = path or VARIABLES_PATH
    try:
        with open(path, 'r') as f:
            return merge_variables(DEFAULT_VARIABLES, yaml.safe_load(f) or {})
    except (FileNotFoundError, yaml.YAMLError):
        logger.warning("%s not found or is invalid. Using fallback defaults.", path)
        return copy.deepcopy(DEFAULT_VARIABLES)

def merge_variables(base: Dict, updates: Dict) -> Dict:
    """
    Recursively merges the 'updates' dictionary into a deep copy of the 'base' dictionary.
    The base dictionary is never modified.
    """
    merged = copy.deepcopy(base)

    if updates is None:
        return merged

    for key, value in updates.items():
        if isinstance(value, dict) and key in merged and isinstance(merged.get(key), dict):
            merged[key] = merge_variables(merged[key], value)
        else:
            merged[key] = value

    return merged
