"""
JSONPath helpers for exploring sample payloads and API responses.
"""

import json
import logging
from typing import Any, Dict, List

from jsonpath_ng.ext import parse as parse_jsonpath

logger = logging.getLogger(__name__)


def parse_json_input(text: str) -> Any:
    """Parse JSON text, raising ValueError with a user-facing message."""
    try:
        return json.loads(text)
    except (TypeError, json.JSONDecodeError) as e:
        raise ValueError("Invalid JSON format") from e


def evaluate_jsonpath(data: Any, path: str) -> Any:
    """
    Evaluate a JSONPath expression against parsed JSON.

    An empty expression returns the input unchanged; otherwise the list of
    matched values is returned (empty when nothing matches).
    """
    if not path:
        return data
    try:
        expression = parse_jsonpath(path)
    except Exception as e:
        logger.debug(f"Rejected JSONPath expression {path!r}: {e}")
        raise ValueError("Invalid JSONPath expression") from e
    return [match.value for match in expression.find(data)]


def get_keys_from_json(data: Any, prefix: str = "$") -> List[Dict[str, str]]:
    """
    List every addressable path of a JSON value as {label, value} pairs.

    Arrays contribute a `[*]` wildcard entry and are only descended through
    their first element.
    """
    keys: List[Dict[str, str]] = []

    def traverse(node: Any, path: str):
        if isinstance(node, list):
            keys.append({"label": f"{path}[*]", "value": f"{path}[*]"})
            if node:
                traverse(node[0], f"{path}[0]")
        elif isinstance(node, dict):
            for key, value in node.items():
                current = f"$.{key}" if path == "$" else f"{path}.{key}"
                keys.append({"label": current, "value": current})
                traverse(value, current)

    traverse(data, prefix)
    return keys
