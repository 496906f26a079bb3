"""
Schema resolution and sample payload synthesis.

Resolves local $ref pointers and turns JSON Schema fragments into
representative JSON values used as test data.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Set

logger = logging.getLogger(__name__)

SAMPLE_EMAIL = "user@example.com"
SAMPLE_UUID = "123e4567-e89b-12d3-a456-426614174000"
SAMPLE_URI = "https://example.com"
SAMPLE_STRING = "sample_string"
SCHEMA_ERROR_PLACEHOLDER = "Check Swagger Schema"


def resolve_reference(pointer: str, document: Dict[str, Any]) -> Optional[Any]:
    """
    Resolve a local reference pointer such as '#/components/schemas/Pet'.

    Args:
        pointer: Reference string, slash-delimited from the document root
        document: Parsed API document

    Returns:
        The referenced node, or None when any segment is missing
    """
    if not pointer or not isinstance(pointer, str) or not isinstance(document, dict):
        return None

    path = pointer[2:] if pointer.startswith("#/") else pointer
    current: Any = document
    for part in path.split("/"):
        part = part.replace("~1", "/").replace("~0", "~")
        if not isinstance(current, dict) or part not in current:
            return None
        current = current[part]
    return current


def _now_iso() -> str:
    """Current UTC instant with millisecond precision, e.g. 2024-05-01T10:00:00.000Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _sample_string(schema: Dict[str, Any]) -> Any:
    fmt = schema.get("format")
    if fmt == "date-time":
        return _now_iso()
    if fmt == "date":
        return datetime.now(timezone.utc).date().isoformat()
    if fmt == "email":
        return SAMPLE_EMAIL
    if fmt == "uuid":
        return SAMPLE_UUID
    if fmt == "uri":
        return SAMPLE_URI
    enum = schema.get("enum")
    if isinstance(enum, list) and enum:
        return enum[0]
    return SAMPLE_STRING


def synthesize_sample(
    schema: Any,
    document: Dict[str, Any],
    in_flight: Optional[Set[str]] = None
) -> Any:
    """
    Build a representative JSON value for a schema node.

    `in_flight` holds the $ref pointers currently being expanded on this
    recursion path; a pointer seen twice yields an empty object.

    May raise on malformed schema shapes (e.g. `properties` given as a list);
    use render_sample for the non-raising entry point.
    """
    if in_flight is None:
        in_flight = set()

    if not schema or not isinstance(schema, dict):
        return None

    ref = schema.get("$ref")
    if ref:
        if ref in in_flight:
            logger.debug(f"Circular reference skipped: {ref}")
            return {}
        resolved = resolve_reference(ref, document)
        if resolved is None:
            logger.debug(f"Unresolved reference: {ref}")
            return {}
        in_flight.add(ref)
        try:
            return synthesize_sample(resolved, document, in_flight)
        finally:
            in_flight.discard(ref)

    if "allOf" in schema:
        combined: Dict[str, Any] = {}
        for member in schema["allOf"] or []:
            generated = synthesize_sample(member, document, in_flight)
            if isinstance(generated, dict):
                combined.update(generated)
        return combined

    if "oneOf" in schema or "anyOf" in schema:
        variants = schema.get("oneOf") or schema.get("anyOf")
        return synthesize_sample(variants[0], document, in_flight) if variants else None

    schema_type = schema.get("type")
    properties = schema.get("properties")
    if (schema_type == "object" or not schema_type) and properties is not None:
        return {
            name: synthesize_sample(prop, document, in_flight)
            for name, prop in properties.items()
        }

    if schema_type == "array" and schema.get("items") is not None:
        return [synthesize_sample(schema["items"], document, in_flight)]

    if "example" in schema:
        return schema["example"]
    if "default" in schema:
        return schema["default"]

    if schema_type == "string":
        return _sample_string(schema)
    if schema_type in ("number", "integer"):
        return 0
    if schema_type == "boolean":
        return True
    return None


def render_sample(schema: Any, document: Dict[str, Any]) -> str:
    """
    Render a sample payload as indented JSON text.

    Never raises: traversal errors are logged and replaced with a fixed
    placeholder so export can always proceed.
    """
    if not schema:
        return ""
    try:
        sample = synthesize_sample(schema, document)
        return json.dumps(sample, indent=2, ensure_ascii=False, default=str)
    except Exception as e:
        logger.error(f"Error generating sample JSON: {e}")
        return SCHEMA_ERROR_PLACEHOLDER
