import os
import json
import copy
import logging
import tempfile
import threading
from typing import Any, Dict

from portfolio_schema import DEFAULT_PORTFOLIO

logger = logging.getLogger(__name__)

_write_lock = threading.Lock()


class PortfolioStore:
    """Keeps the single portfolio document in a JSON file, replaced wholesale on every save."""

    def __init__(self, path: str):
        self.path = path

    def get(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return copy.deepcopy(DEFAULT_PORTFOLIO)
        with open(self.path, 'r', encoding='utf-8') as f:
            try:
                return json.load(f)
            except json.JSONDecodeError:
                logger.warning("Stored portfolio at %s is not valid JSON; serving the default.", self.path)
                return copy.deepcopy(DEFAULT_PORTFOLIO)

    def set(self, data: Dict[str, Any]) -> Dict[str, Any]:
        directory = os.path.dirname(self.path) or "."
        with _write_lock:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                os.replace(tmp_path, self.path)
            except OSError:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        logger.info("Portfolio saved to %s", self.path)
        return data
