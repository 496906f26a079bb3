"""
Unit tests for the rule-based test case generator.
"""

import json
import pytest


PETS_DOCUMENT = {
    "openapi": "3.0.0",
    "paths": {
        "/pets": {
            "get": {"summary": "List pets"},
            "post": {
                "summary": "Create pet",
                "requestBody": {
                    "required": True,
                    "content": {
                        "application/json": {
                            "schema": {"type": "object", "properties": {"name": {"type": "string"}}}
                        }
                    }
                }
            }
        }
    }
}


def _operation(method, path="/items", parameters=None, **kwargs):
    from swagger_automation.models import Operation, ParameterSpec

    return Operation(
        path=path,
        method=method,
        summary=f"{method} {path}",
        parameters=[ParameterSpec(**p) for p in (parameters or [])],
        **kwargs
    )


class TestScenarioRules:
    """Tests for the fixed scenario set."""

    def test_pets_end_to_end(self):
        from swagger_automation.parser import extract_operations
        from swagger_automation.generator import generate_test_cases

        operations = extract_operations(PETS_DOCUMENT)
        cases = generate_test_cases(operations, PETS_DOCUMENT)

        get_cases = [c for c in cases if c.method == "GET"]
        post_cases = [c for c in cases if c.method == "POST"]

        assert len(cases) == 8
        assert len(get_cases) == 3
        assert len(post_cases) == 5
        assert [c.test_scenario for c in post_cases] == [
            "Verify successful POST request to /pets",
            "Verify POST request to /pets without authentication",
            "Verify POST request to /pets with unsupported Content-Type",
            "Verify POST request to /pets with malformed JSON body",
            "Verify POST request to /pets with invalid data types",
        ]

    def test_positive_case_uses_rendered_request_body(self):
        from swagger_automation.parser import extract_operations
        from swagger_automation.generator import generate_test_cases

        cases = generate_test_cases(extract_operations(PETS_DOCUMENT), PETS_DOCUMENT)
        positive_post = cases[3]

        assert positive_post.test_data.startswith("Request Body:\n")
        assert json.loads(positive_post.test_data.split("\n", 1)[1]) == {"name": "sample_string"}

    @pytest.mark.parametrize("method,status", [
        ("POST", "201 Created"),
        ("GET", "200 OK"),
        ("PUT", "200 OK"),
        ("PATCH", "200 OK"),
        ("DELETE", "200 OK"),
    ])
    def test_positive_status_depends_on_method(self, method, status):
        from swagger_automation.generator import TestCaseGenerator

        cases = TestCaseGenerator({}).generate([_operation(method)])

        assert cases[0].expected_result == (
            f"Response status should be {status} and body should contain expected fields."
        )

    def test_positive_case_text(self):
        from swagger_automation.generator import TestCaseGenerator

        positive = TestCaseGenerator({}).generate([_operation("GET")])[0]

        assert positive.test_case_id == "TC-1"
        assert positive.endpoint == "/items"
        assert positive.test_scenario == "Verify successful GET request to /items"
        assert positive.test_steps == (
            "1. Prepare GET request for /items\n"
            "2. Send request with valid parameters/body\n"
            "3. Verify response status and body"
        )
        assert positive.prerequisite == "API Service is up and running"
        assert positive.test_data == "Valid parameters as per Swagger spec"
        assert positive.actual_result == ""
        assert positive.status == ""

    def test_positive_case_lists_parameters(self):
        from swagger_automation.generator import TestCaseGenerator

        op = _operation("GET", parameters=[
            {"name": "limit", "example": 5},
            {"name": "sort"},
            {"name": "offset", "example": 0},
        ])

        positive = TestCaseGenerator({}).generate([op])[0]

        assert positive.test_data == "Query/Path Params: limit=5, sort=value, offset=value"

    def test_non_string_examples_render_as_json(self):
        from swagger_automation.generator import TestCaseGenerator

        op = _operation("GET", parameters=[
            {"name": "active", "example": True},
            {"name": "filter", "example": {"a": 1}},
            {"name": "ids", "example": [1, 2]},
            {"name": "q", "example": "rex"},
        ])

        positive = TestCaseGenerator({}).generate([op])[0]

        assert positive.test_data == 'Query/Path Params: active=true, filter={"a": 1}, ids=[1, 2], q=rex'

    def test_empty_path_still_yields_every_case(self):
        from swagger_automation.parser import extract_operations
        from swagger_automation.generator import generate_test_cases

        document = {"paths": {"": {"get": {}}}}
        operations = extract_operations(document)

        cases = generate_test_cases(operations, document)

        assert len(operations) == 1
        assert [c.test_case_id for c in cases] == ["TC-1", "TC-2", "TC-3"]
        assert all(c.endpoint == "" for c in cases)

    def test_unauthorized_case(self):
        from swagger_automation.generator import TestCaseGenerator

        unauthorized = TestCaseGenerator({}).generate([_operation("DELETE")])[1]

        assert unauthorized.test_scenario == "Verify DELETE request to /items without authentication"
        assert unauthorized.prerequisite == "Endpoint requires authentication"
        assert unauthorized.test_data == "No Auth Header"
        assert unauthorized.expected_result == "Response status should be 401 Unauthorized."

    def test_missing_mandatory_parameter_uses_first_required(self):
        from swagger_automation.generator import TestCaseGenerator

        op = _operation("GET", parameters=[
            {"name": "page"},
            {"name": "id", "required": True, "location": "path"},
            {"name": "token", "required": True},
        ])

        cases = TestCaseGenerator({}).generate([op])
        missing = cases[2]

        assert len(cases) == 4
        assert missing.test_scenario == "Verify GET request to /items with missing mandatory parameters"
        assert "2. Remove mandatory parameter: id\n" in missing.test_steps
        assert missing.test_data == "Missing id"
        assert missing.expected_result == "Response status should be 400 Bad Request with validation error message."

    def test_body_method_cases(self):
        from swagger_automation.generator import TestCaseGenerator

        cases = TestCaseGenerator({}).generate([_operation("PATCH")])
        content_type, malformed = cases[2], cases[3]

        assert content_type.test_data == "Content-Type: text/plain"
        assert content_type.expected_result == "Response status should be 415 Unsupported Media Type."
        assert "2. Set Content-Type to 'text/plain'" in content_type.test_steps
        assert malformed.test_data == '{ "invalid": json }'
        assert malformed.expected_result == "Response status should be 400 Bad Request."

    def test_invalid_data_types_case_is_last(self):
        from swagger_automation.generator import TestCaseGenerator

        last = TestCaseGenerator({}).generate([_operation("PUT")])[-1]

        assert last.test_scenario == "Verify PUT request to /items with invalid data types"
        assert last.test_data == "Invalid data types for parameters"
        assert last.expected_result == "Response status should be 400 Bad Request or 422 Unprocessable Entity."

    def test_broken_request_schema_does_not_abort(self):
        from swagger_automation.generator import TestCaseGenerator

        op = _operation("POST", request_body_schema={"type": "object", "properties": "broken"})

        positive = TestCaseGenerator({}).generate([op])[0]

        assert positive.test_data == "Request Body:\nCheck Swagger Schema"


class TestCountsAndIdentifiers:
    """Tests for case counts and identifier assignment."""

    @pytest.mark.parametrize("method,has_required,expected", [
        ("GET", False, 3),
        ("GET", True, 4),
        ("DELETE", True, 4),
        ("POST", False, 5),
        ("PUT", True, 6),
        ("PATCH", True, 6),
        ("OPTIONS", False, 3),
    ])
    def test_cases_per_operation(self, method, has_required, expected):
        from swagger_automation.generator import TestCaseGenerator

        params = [{"name": "q", "required": has_required}]

        cases = TestCaseGenerator({}).generate([_operation(method, parameters=params)])

        assert len(cases) == expected

    def test_identifiers_are_dense_across_operations(self):
        from swagger_automation.generator import TestCaseGenerator

        operations = [
            _operation("GET", path="/a"),
            _operation("POST", path="/b", parameters=[{"name": "x", "required": True}]),
            _operation("DELETE", path="/c"),
        ]

        cases = TestCaseGenerator({}).generate(operations)

        assert len(cases) == 3 + 6 + 3
        assert [c.number for c in cases] == list(range(1, len(cases) + 1))
        assert [c.test_case_id for c in cases[:2]] == ["TC-1", "TC-2"]

    def test_every_case_maps_to_an_operation(self):
        from swagger_automation.parser import extract_operations
        from swagger_automation.generator import generate_test_cases

        operations = extract_operations(PETS_DOCUMENT)
        cases = generate_test_cases(operations, PETS_DOCUMENT)
        pairs = {(op.path, op.method) for op in operations}

        assert all((c.endpoint, c.method) in pairs for c in cases)

    def test_counter_restarts_per_run(self):
        from swagger_automation.generator import TestCaseGenerator

        generator = TestCaseGenerator({})
        generator.generate([_operation("GET")])
        second = generator.generate([_operation("GET")])

        assert second[0].test_case_id == "TC-1"

    def test_empty_operation_list(self):
        from swagger_automation.generator import generate_test_cases

        assert generate_test_cases([], {}) == []


class TestTestCaseModel:
    """Tests for the TestCase record."""

    def test_row_uses_column_names_in_order(self):
        from swagger_automation.generator import TestCaseGenerator
        from swagger_automation.models import TestCase

        row = TestCaseGenerator({}).generate([_operation("GET")])[0].to_row()

        assert list(row) == TestCase.COLUMNS
        assert row["Test Case ID"] == "TC-1"
        assert row["Status"] == ""
