"""
Rule-based test case generator.

Every operation receives a fixed sequence of positive and negative scenarios;
the wording is exported verbatim into the generated documents.
"""

import json
import logging
from typing import Any, Dict, Iterable, List

from .models import Operation, TestCase
from .schema import render_sample

logger = logging.getLogger(__name__)

BODY_METHODS = ("POST", "PUT", "PATCH")

DEFAULT_PREREQUISITE = "API Service is up and running"
AUTH_PREREQUISITE = "Endpoint requires authentication"
GENERIC_TEST_DATA = "Valid parameters as per Swagger spec"
MALFORMED_JSON = '{ "invalid": json }'


def success_status(method: str) -> str:
    """Expected status line of the positive scenario."""
    return "201 Created" if method == "POST" else "200 OK"


def _param_value(example: Any) -> str:
    if not example:
        return "value"
    if isinstance(example, str):
        return example
    return json.dumps(example, ensure_ascii=False, default=str)


class TestCaseGenerator:
    """Generate the standard scenario battery for a list of operations."""

    def __init__(self, document: Dict[str, Any]):
        self.document = document
        self.test_cases: List[TestCase] = []
        self._counter = 0

    def generate(self, operations: Iterable[Operation]) -> List[TestCase]:
        """Generate test cases for every operation, numbering them TC-1, TC-2, ..."""
        self.test_cases = []
        self._counter = 0

        for operation in operations:
            before = len(self.test_cases)
            self._generate_for_operation(operation)
            logger.debug(
                f"Generated {len(self.test_cases) - before} cases for {operation.method} {operation.path}"
            )

        logger.info(f"Total test cases generated: {len(self.test_cases)}")
        return self.test_cases

    def _generate_for_operation(self, op: Operation):
        method, path = op.method, op.path
        prepare = f"1. Prepare {method} request for {path}"

        # 1. Positive: successful request
        self._add(
            op,
            scenario=f"Verify successful {method} request to {path}",
            steps=f"{prepare}\n2. Send request with valid parameters/body\n3. Verify response status and body",
            test_data=self._positive_test_data(op),
            expected=f"Response status should be {success_status(method)} and body should contain expected fields.",
        )

        # 2. Unauthorized access
        self._add(
            op,
            scenario=f"Verify {method} request to {path} without authentication",
            steps=f"{prepare}\n2. Send request without Auth token\n3. Verify response status",
            prerequisite=AUTH_PREREQUISITE,
            test_data="No Auth Header",
            expected="Response status should be 401 Unauthorized.",
        )

        # 3. Missing mandatory parameter
        mandatory = op.required_parameters
        if mandatory:
            name = mandatory[0].name
            self._add(
                op,
                scenario=f"Verify {method} request to {path} with missing mandatory parameters",
                steps=f"{prepare}\n2. Remove mandatory parameter: {name}\n3. Send request\n4. Verify error response",
                test_data=f"Missing {name}",
                expected="Response status should be 400 Bad Request with validation error message.",
            )

        # 4-5. Body-carrying methods
        if method in BODY_METHODS:
            self._add(
                op,
                scenario=f"Verify {method} request to {path} with unsupported Content-Type",
                steps=f"{prepare}\n2. Set Content-Type to 'text/plain'\n3. Send request\n4. Verify error response",
                test_data="Content-Type: text/plain",
                expected="Response status should be 415 Unsupported Media Type.",
            )
            self._add(
                op,
                scenario=f"Verify {method} request to {path} with malformed JSON body",
                steps=f"{prepare}\n2. Provide malformed JSON string in body\n3. Send request\n4. Verify error response",
                test_data=MALFORMED_JSON,
                expected="Response status should be 400 Bad Request.",
            )

        # 6. Invalid data types
        self._add(
            op,
            scenario=f"Verify {method} request to {path} with invalid data types",
            steps=(
                f"{prepare}\n2. Provide string where integer is expected (or vice versa)"
                "\n3. Send request\n4. Verify error response"
            ),
            test_data="Invalid data types for parameters",
            expected="Response status should be 400 Bad Request or 422 Unprocessable Entity.",
        )

    def _positive_test_data(self, op: Operation) -> str:
        if op.request_body_schema:
            return f"Request Body:\n{render_sample(op.request_body_schema, self.document)}"
        if op.parameters:
            pairs = ", ".join(f"{p.name}={_param_value(p.example)}" for p in op.parameters)
            return f"Query/Path Params: {pairs}"
        return GENERIC_TEST_DATA

    def _add(
        self,
        op: Operation,
        scenario: str,
        steps: str,
        test_data: str,
        expected: str,
        prerequisite: str = DEFAULT_PREREQUISITE
    ):
        test_case = TestCase(
            test_case_id=f"TC-{self._counter + 1}",
            endpoint=op.path,
            method=op.method,
            test_scenario=scenario,
            test_steps=steps,
            prerequisite=prerequisite,
            test_data=test_data,
            expected_result=expected,
        )

        self._counter += 1
        self.test_cases.append(test_case)


def generate_test_cases(operations: Iterable[Operation], document: Dict[str, Any]) -> List[TestCase]:
    """Convenience wrapper around TestCaseGenerator."""
    return TestCaseGenerator(document).generate(operations)
