"""
One conversion run: document -> operations -> test cases -> export.
"""

import logging
import os
from collections import Counter
from typing import Any, Dict, List, Optional

from .config import Config
from .exporter import EXPORTERS
from .generator import TestCaseGenerator
from .models import Operation, TestCase
from .parser import SwaggerParser, extract_operations

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Failed to parse Swagger. Please ensure it is a valid JSON or URL."


class ConversionError(Exception):
    """Raised when a document cannot be loaded or converted."""

    def __init__(self, message: str = GENERIC_FAILURE_MESSAGE):
        super().__init__(message)


class ConversionResult:
    """Operations and test cases produced by a single run."""

    def __init__(self, operations: List[Operation], test_cases: List[TestCase]):
        self.operations = operations
        self.test_cases = test_cases

    def summary(self) -> str:
        return (
            f"Successfully parsed {len(self.operations)} endpoints and "
            f"generated {len(self.test_cases)} test cases."
        )

    def scenario_counts(self) -> Dict[str, int]:
        """Number of generated cases per scenario kind."""
        counts: Counter = Counter()
        for tc in self.test_cases:
            scenario = tc.test_scenario
            if scenario.startswith("Verify successful"):
                counts["Positive"] += 1
            elif scenario.endswith("without authentication"):
                counts["Unauthorized"] += 1
            elif scenario.endswith("missing mandatory parameters"):
                counts["Missing mandatory parameter"] += 1
            elif scenario.endswith("unsupported Content-Type"):
                counts["Unsupported content type"] += 1
            elif scenario.endswith("malformed JSON body"):
                counts["Malformed body"] += 1
            else:
                counts["Invalid data types"] += 1
        return dict(counts)


class SwaggerConverter:
    """Runs extraction and test case generation over one parsed document."""

    def __init__(self, document: Dict[str, Any], config: Optional[Config] = None):
        self.document = document
        self.config = config or Config()
        self.result: Optional[ConversionResult] = None

    def _filter(self, operations: List[Operation]) -> List[Operation]:
        selected = [
            op for op in operations
            if self.config.should_process_path(op.path)
            and self.config.should_process_method(op.method)
            and self.config.should_process_tag(op.tags)
        ]
        if len(selected) != len(operations):
            logger.info(f"Filters kept {len(selected)} of {len(operations)} operations")
        return selected

    def run(self) -> ConversionResult:
        """Extract operations and generate their test cases."""
        operations = self._filter(extract_operations(self.document))
        if not operations:
            logger.warning("No operations found in the specification")

        test_cases = TestCaseGenerator(self.document).generate(operations)
        self.result = ConversionResult(operations, test_cases)
        logger.info(self.result.summary())
        return self.result

    def export(self, fmt: str, output_dir: Optional[str] = None) -> str:
        """Write the given format into `output_dir` under its fixed filename and return the path."""
        exporter = EXPORTERS.get(fmt.lower())
        if exporter is None:
            raise ValueError(f"Unknown export format: {fmt}. Choose one of: {', '.join(EXPORTERS)}")

        if self.result is None:
            self.run()

        output_dir = output_dir or self.config.output_dir
        os.makedirs(output_dir, exist_ok=True)
        output_path = os.path.join(output_dir, exporter.FILENAME)

        items = self.result.test_cases if exporter.CONSUMES == "test_cases" else self.result.operations
        exporter.export(items, output_path, **self._export_options(fmt.lower()))
        logger.debug(f"Wrote {exporter.MIME_TYPE} document: {output_path}")
        return output_path

    def _export_options(self, fmt: str) -> Dict[str, Any]:
        options: Dict[str, Any] = {"encoding": self.config.encoding}
        if fmt == "postman":
            options["name"] = self.config.collection_name
            options["response_time_ms"] = self.config.postman_response_time_ms
        elif fmt == "soapui":
            options["endpoint"] = self.config.soapui_endpoint
            options["sla_ms"] = self.config.soapui_sla_ms
        elif fmt == "python":
            options["base_url"] = self.config.base_url
        return options


def convert_source(source: str, config: Optional[Config] = None) -> SwaggerConverter:
    """
    Load a document from a path, URL or inline JSON and run the conversion.

    Any failure is reported as a ConversionError carrying one generic message.
    """
    config = config or Config()
    try:
        parser = SwaggerParser(source, timeout=config.fetch_timeout)
        converter = SwaggerConverter(parser.spec, config)
        converter.run()
    except Exception as e:
        logger.error(f"Conversion failed: {e}")
        raise ConversionError() from e
    return converter
