"""
Parser for reading Swagger/OpenAPI specifications and flattening their operations.
Supports loading from local files, URLs and inline JSON text.
"""

import json
import os
import yaml
import logging
import httpx
from urllib.parse import urlparse
from typing import Dict, Any, List, Optional

from .models import Operation, ParameterSpec
from .schema import resolve_reference

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _parse_parameters(params: List[Any]) -> List[ParameterSpec]:
    result = []
    for p in params:
        if not isinstance(p, dict):
            logger.warning(f"Skipping malformed parameter entry: {p!r}")
            continue
        result.append(
            ParameterSpec(
                name=str(p.get("name", "")),
                required=bool(p.get("required", False)),
                example=p.get("example"),
                location=str(p.get("in", "query")),
            )
        )
    return result


def _json_schema(content: Any) -> Optional[Dict[str, Any]]:
    """Return the application/json schema from an OpenAPI 3.x content map."""
    media = _as_dict(content).get(JSON_CONTENT_TYPE)
    schema = _as_dict(media).get("schema")
    return schema if isinstance(schema, dict) else None


def _request_body_schema(request_body: Optional[Dict[str, Any]], params: List[Any]) -> Optional[Dict[str, Any]]:
    if request_body is not None:
        return _json_schema(request_body.get("content"))
    # Swagger 2.0 keeps the body in a parameter
    for p in params:
        if isinstance(p, dict) and p.get("in") == "body" and isinstance(p.get("schema"), dict):
            return p["schema"]
    return None


def _response_schemas(responses: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    schemas = {}
    for status, response in responses.items():
        response = _as_dict(response)
        schema = _json_schema(response.get("content"))
        if schema is None and isinstance(response.get("schema"), dict):
            schema = response["schema"]
        if schema is not None:
            schemas[str(status)] = schema
    return schemas


def extract_operations(document: Dict[str, Any]) -> List[Operation]:
    """
    Flatten the document's path/method tree into a list of operations.

    Order follows the document: paths first, then methods within each path.
    Malformed entries are skipped or defaulted so the rest of the document
    is still processed.
    """
    operations = []
    paths = _as_dict(_as_dict(document).get("paths"))

    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            logger.warning(f"Skipping path with unexpected shape: {path}")
            continue

        for method, op in path_item.items():
            if not isinstance(op, dict):
                logger.warning(f"Skipping {str(method).upper()} {path}: operation is not an object")
                continue

            method = str(method).upper()
            raw_params = _as_list(op.get("parameters"))
            request_body = op.get("requestBody") if isinstance(op.get("requestBody"), dict) else None
            responses = _as_dict(op.get("responses"))
            operation_id = op.get("operationId")

            operations.append(
                Operation(
                    path=str(path),
                    method=method,
                    summary=str(op.get("summary") or op.get("description") or f"{method} {path}"),
                    parameters=_parse_parameters(raw_params),
                    request_body=request_body,
                    request_body_schema=_request_body_schema(request_body, raw_params),
                    responses={str(k): v for k, v in responses.items()},
                    response_schemas=_response_schemas(responses),
                    tags=[str(t) for t in _as_list(op.get("tags"))],
                    operation_id=str(operation_id) if operation_id is not None else None,
                )
            )
            logger.debug(f"Extracted operation: {method} {path}")

    logger.info(f"Extracted {len(operations)} operations")
    return operations


class SwaggerParser:
    """Loads a Swagger/OpenAPI document from a file, a URL or inline JSON."""

    def __init__(self, source: Optional[str] = None, timeout: float = 30.0):
        self.source = source
        self.timeout = timeout
        self.spec: Dict[str, Any] = {}
        self.spec_version = None
        if source is not None:
            self.is_url = self._is_url(source)
            self.load_spec()
            self.detect_version()
        else:
            self.is_url = False

    @classmethod
    def from_dict(cls, document: Dict[str, Any]) -> "SwaggerParser":
        """Wrap an already-parsed document."""
        parser = cls()
        parser.spec = cls._check_document(document)
        parser.detect_version()
        return parser

    @staticmethod
    def _is_url(path: str) -> bool:
        """Return True if the given source looks like an http(s) URL."""
        try:
            result = urlparse(path.strip())
            return result.scheme in ("http", "https") and bool(result.netloc)
        except Exception:
            return False

    @staticmethod
    def _check_document(document: Any) -> Dict[str, Any]:
        if not document:
            raise ValueError("Specification payload is empty")
        if not isinstance(document, dict):
            raise ValueError("Specification must be a JSON object at the top level")
        return document

    def load_spec(self):
        """Load the spec from a URL, a file or inline text."""
        try:
            if self.is_url:
                self._load_from_url()
            elif os.path.exists(self.source):
                self._load_from_file()
            else:
                self._load_from_text()
            logger.info(f"Specification loaded: {self._describe_source()}")
        except Exception as e:
            logger.error(f"Failed to load specification: {e}")
            raise

    def _describe_source(self) -> str:
        if self.is_url or os.path.exists(self.source):
            return self.source
        return f"inline document ({len(self.source)} chars)"

    def _load_from_url(self):
        """Load specification from a URL."""
        url = self.source.strip()
        logger.info(f"Fetching specification from URL: {url}")

        try:
            response = httpx.get(url, timeout=self.timeout, follow_redirects=True)
            response.raise_for_status()

            content_type = response.headers.get('content-type', '').lower()

            if 'json' in content_type or url.endswith('.json'):
                spec = response.json()
                logger.debug("Format detected: JSON (Content-Type or extension)")
            elif 'yaml' in content_type or 'yml' in content_type or url.endswith(('.yaml', '.yml')):
                spec = yaml.safe_load(response.text)
                logger.debug("Format detected: YAML (Content-Type or extension)")
            else:
                try:
                    spec = response.json()
                    logger.info("Format detected: JSON (content sniffing)")
                except json.JSONDecodeError:
                    try:
                        spec = yaml.safe_load(response.text)
                        logger.info("Format detected: YAML (content sniffing)")
                    except yaml.YAMLError:
                        raise ValueError(
                            "Unable to determine spec format. "
                            "Use .json or .yaml/.yml in the URL or make sure the server returns a proper Content-Type."
                        )

            self.spec = self._check_document(spec)
            logger.info(f"Specification fetched successfully ({len(response.content)} bytes)")

        except httpx.TimeoutException:
            raise ConnectionError(f"Timeout while loading spec from URL: {url}")
        except httpx.HTTPStatusError as e:
            raise ConnectionError(f"HTTP error {e.response.status_code} while loading spec: {e}")
        except httpx.RequestError as e:
            raise ConnectionError(f"Network error while loading spec: {e}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Failed to parse JSON from URL: {e}")
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse YAML from URL: {e}")

    def _load_from_file(self):
        """Load specification from a local file."""
        try:
            with open(self.source, 'r', encoding='utf-8') as f:
                if self.source.endswith('.json'):
                    spec = json.load(f)
                elif self.source.endswith(('.yaml', '.yml')):
                    spec = yaml.safe_load(f)
                else:
                    raise ValueError("Only .json and .yaml/.yml files are supported")
        except FileNotFoundError:
            raise FileNotFoundError(f"Specification file not found: {self.source}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Failed to parse JSON file: {e}")
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse YAML file: {e}")
        self.spec = self._check_document(spec)

    def _load_from_text(self):
        """Parse a document pasted as JSON text."""
        try:
            spec = json.loads(self.source)
        except json.JSONDecodeError as e:
            raise ValueError(f"Failed to parse JSON document: {e}")
        self.spec = self._check_document(spec)

    def detect_version(self):
        """Detect whether the spec is Swagger 2.0 or OpenAPI 3.x."""
        if 'openapi' in self.spec:
            self.spec_version = 'openapi3'
            logger.info("Detected OpenAPI 3.x specification")
        elif 'swagger' in self.spec:
            self.spec_version = 'swagger2'
            logger.info("Detected Swagger 2.0 specification")
        else:
            logger.warning("Unable to determine spec version, assuming Swagger 2.0")
            self.spec_version = 'swagger2'

    def resolve_ref(self, ref_path: str) -> Optional[Any]:
        """Resolve a $ref pointer within the spec."""
        return resolve_reference(ref_path, self.spec)

    def get_paths(self) -> Dict[str, Dict[str, Any]]:
        """Return the `paths` dictionary."""
        return _as_dict(self.spec.get("paths"))

    def get_operations(self) -> List[Operation]:
        """Return every operation of the spec in document order."""
        return extract_operations(self.spec)

    def get_title(self, default: str = "Swagger Collection") -> str:
        """Return the API title from the info block."""
        title = _as_dict(self.spec.get("info")).get("title")
        return str(title) if title else default
