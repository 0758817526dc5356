"""
Working-copy editing for the admin dashboard.

Every edit function takes a document and returns a new deep copy with the
change applied; the input is never mutated. The committed document in the
store is only replaced when a draft is saved.
"""
import copy
import threading
from typing import Any, Callable, Dict, Optional

from errors import RequestError
from portfolio_schema import SECTIONS, LIST_SECTIONS, nested_list_fields

# Templates for new, empty items
NEW_ITEM_TEMPLATES: Dict[str, Dict[str, Any]] = {
    "workExperience": {"company": "", "jobTitle": "", "startDate": "", "endDate": "Present", "responsibilities": [""]},
    "education": {"institution": "", "degree": "", "fieldOfStudy": "", "startDate": "", "endDate": "", "description": ""},
    "skills": {"category": "", "name": "", "level": 0},
    "projects": {"name": "", "description": "", "technologies": [""], "link": "", "imageUrl": ""},
    "achievements": {"title": "", "description": ""},
    "certifications": {"name": "", "issuingOrganization": "", "date": "", "credentialUrl": ""},
}


def _check_section(data: Dict, section: str) -> None:
    if section not in SECTIONS:
        raise RequestError(f"Unknown section '{section}'.")
    if section not in data:
        raise RequestError(f"Section '{section}' is not present in the document.")

def _list_item(data: Dict, section: str, index: int) -> Dict:
    _check_section(data, section)
    items = data[section]
    if not isinstance(items, list):
        raise RequestError(f"Section '{section}' is not a list.")
    if index is None or not 0 <= index < len(items):
        raise RequestError(f"No item {index} in '{section}'.", status_code=404)
    return items[index]

def _nested_list(data: Dict, section: str, index: int, field: str) -> list:
    item = _list_item(data, section, index)
    if field not in nested_list_fields(section):
        raise RequestError(f"'{field}' is not a list field of '{section}'.")
    return item.setdefault(field, [])


def set_field(data: Dict, section: str, field: str, value: Any, index: Optional[int] = None) -> Dict:
    if not field:
        raise RequestError("set_field requires a 'field'.")
    new_data = copy.deepcopy(data)
    if section in LIST_SECTIONS:
        target = _list_item(new_data, section, index)
    else:
        _check_section(new_data, section)
        target = new_data[section]
    if field in nested_list_fields(section):
        raise RequestError(f"'{field}' is a list; edit its entries individually.")
    target[field] = value
    return new_data

def set_nested_item(data: Dict, section: str, index: int, field: str, sub_index: int, value: str) -> Dict:
    new_data = copy.deepcopy(data)
    entries = _nested_list(new_data, section, index, field)
    if sub_index is None or not 0 <= sub_index < len(entries):
        raise RequestError(f"No entry {sub_index} in '{field}'.", status_code=404)
    entries[sub_index] = value
    return new_data

def add_nested_item(data: Dict, section: str, index: int, field: str) -> Dict:
    new_data = copy.deepcopy(data)
    _nested_list(new_data, section, index, field).append("")
    return new_data

def remove_nested_item(data: Dict, section: str, index: int, field: str, sub_index: int) -> Dict:
    new_data = copy.deepcopy(data)
    entries = _nested_list(new_data, section, index, field)
    if sub_index is None or not 0 <= sub_index < len(entries):
        raise RequestError(f"No entry {sub_index} in '{field}'.", status_code=404)
    del entries[sub_index]
    return new_data

def add_item(data: Dict, section: str) -> Dict:
    if section not in NEW_ITEM_TEMPLATES:
        raise RequestError(f"Cannot add items to '{section}'.")
    new_data = copy.deepcopy(data)
    new_data.setdefault(section, []).append(copy.deepcopy(NEW_ITEM_TEMPLATES[section]))
    return new_data

def remove_item(data: Dict, section: str, index: int) -> Dict:
    new_data = copy.deepcopy(data)
    _list_item(new_data, section, index)
    del new_data[section][index]
    return new_data


def apply_edit(data: Dict, edit: Dict[str, Any]) -> Dict:
    """Dispatches one edit request body (with an 'op' key) to the matching function."""
    op = edit.get("op")
    section = edit.get("section")
    handlers: Dict[str, Callable[[], Dict]] = {
        "set_field": lambda: set_field(data, section, edit.get("field"), edit.get("value"), edit.get("index")),
        "set_nested_item": lambda: set_nested_item(data, section, edit.get("index"), edit.get("field"), edit.get("subIndex"), edit.get("value")),
        "add_nested_item": lambda: add_nested_item(data, section, edit.get("index"), edit.get("field")),
        "remove_nested_item": lambda: remove_nested_item(data, section, edit.get("index"), edit.get("field"), edit.get("subIndex")),
        "add_item": lambda: add_item(data, section),
        "remove_item": lambda: remove_item(data, section, edit.get("index")),
    }
    if op not in handlers:
        raise RequestError(f"Unknown edit operation '{op}'.")
    return handlers[op]()


class DraftRegistry:
    """One working copy per admin session token."""

    def __init__(self):
        self._drafts: Dict[str, Dict] = {}
        self._lock = threading.Lock()

    def get(self, token: str, load_committed: Callable[[], Dict]) -> Dict:
        with self._lock:
            if token not in self._drafts:
                self._drafts[token] = copy.deepcopy(load_committed())
            return copy.deepcopy(self._drafts[token])

    def update(self, token: str, load_committed: Callable[[], Dict], change: Callable[[Dict], Dict]) -> Dict:
        """Applies `change` to the session's draft while holding the lock and returns a copy of the result."""
        with self._lock:
            current = self._drafts.get(token)
            if current is None:
                current = copy.deepcopy(load_committed())
            updated = change(current)
            self._drafts[token] = updated
            return copy.deepcopy(updated)

    def put(self, token: str, data: Dict) -> None:
        with self._lock:
            self._drafts[token] = data

    def discard(self, token: str) -> None:
        with self._lock:
            self._drafts.pop(token, None)
