"""
Configuration helper for the Swagger automation suite.
"""

import os
import yaml
from typing import Any, Optional
from dotenv import load_dotenv

load_dotenv(override=True)


class Config:
    """Utility wrapper around user-provided and default configuration."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the config helper.

        Args:
            config_path: Optional path to a YAML config file
        """
        # Load user config if provided
        self._config = {}
        if config_path and os.path.exists(config_path):
            with open(config_path, 'r', encoding='utf-8') as f:
                self._config = yaml.safe_load(f) or {}

        # Default values
        self.defaults = {
            "fetch": {
                "timeout": 30.0
            },
            "export": {
                "output_dir": ".",
                "encoding": "utf-8"
            },
            "postman": {
                "collection_name": "Swagger Collection",
                "response_time_ms": 800
            },
            "soapui": {
                "endpoint": "http://localhost:8080",
                "sla_ms": 1000
            },
            "python": {
                "base_url": "http://localhost:8080"
            },
            "filters": {
                "include_paths": [],
                "exclude_paths": [],
                "include_methods": [],
                "include_tags": []
            }
        }

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a configuration value by dot-path (e.g. 'postman.collection_name').

        Args:
            key_path: Dot-separated path
            default: Value returned when the key is missing

        Returns:
            Config value or `default`
        """
        keys = key_path.split('.')

        # First check the user-provided config
        value = self._config
        found_in_user_config = True
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                found_in_user_config = False
                break

        # Fallback to defaults
        if not found_in_user_config:
            value = self.defaults
            for key in keys:
                if isinstance(value, dict) and key in value:
                    value = value[key]
                else:
                    return default

        return value if value is not None else default

    def set(self, key_path: str, value: Any):
        """Override a value in the user config (used for CLI flags)."""
        keys = key_path.split('.')
        target = self._config
        for key in keys[:-1]:
            target = target.setdefault(key, {})
        target[keys[-1]] = value

    @property
    def fetch_timeout(self) -> float:
        """Timeout (seconds) for fetching a spec by URL."""
        env_value = os.getenv("SWAGGER_AUTOMATION_FETCH_TIMEOUT")
        if env_value:
            return float(env_value)
        return float(self.get("fetch.timeout", self.defaults["fetch"]["timeout"]))

    @property
    def output_dir(self) -> str:
        """Directory where exported files are written."""
        return self.get("export.output_dir", self.defaults["export"]["output_dir"])

    @property
    def encoding(self) -> str:
        """Encoding used for text exports."""
        return self.get("export.encoding", self.defaults["export"]["encoding"])

    @property
    def collection_name(self) -> str:
        """Postman collection name."""
        return self.get("postman.collection_name", self.defaults["postman"]["collection_name"])

    @property
    def postman_response_time_ms(self) -> int:
        """Response-time threshold asserted by the Postman test script."""
        return int(self.get("postman.response_time_ms", self.defaults["postman"]["response_time_ms"]))

    @property
    def soapui_endpoint(self) -> str:
        """Service endpoint written into the SoapUI project."""
        return self.get("soapui.endpoint", self.defaults["soapui"]["endpoint"])

    @property
    def soapui_sla_ms(self) -> int:
        """Response SLA asserted by the SoapUI test steps."""
        return int(self.get("soapui.sla_ms", self.defaults["soapui"]["sla_ms"]))

    @property
    def base_url(self) -> str:
        """Base URL used by the generated Python test script."""
        env_value = os.getenv("SWAGGER_AUTOMATION_BASE_URL")
        if env_value:
            return env_value
        return self.get("python.base_url", self.defaults["python"]["base_url"])

    def should_process_path(self, path: str) -> bool:
        """Return True when the API path passes include/exclude filters."""
        include_paths = self.get("filters.include_paths", [])
        exclude_paths = self.get("filters.exclude_paths", [])

        if include_paths and not any(path.startswith(p) for p in include_paths):
            return False

        if exclude_paths and any(path.startswith(p) for p in exclude_paths):
            return False

        return True

    def should_process_method(self, method: str) -> bool:
        """Return True when the HTTP method passes filters."""
        include_methods = self.get("filters.include_methods", [])
        if include_methods:
            return method.upper() in [m.upper() for m in include_methods]
        return True

    def should_process_tag(self, tags: list) -> bool:
        """Return True when at least one tag matches the filter (if any)."""
        include_tags = self.get("filters.include_tags", [])
        if include_tags:
            return any(tag in include_tags for tag in tags)
        return True
