"""
Unit tests for the export formats.
"""

import ast
import csv
import io
import json
import xml.etree.ElementTree as ET
import pytest


SOAPUI_NS = {"con": "http://eviware.com/soapui/config"}

DOCUMENT = {
    "openapi": "3.0.0",
    "paths": {
        "/pets": {
            "get": {
                "summary": "List all pets",
                "tags": ["pets", "public"],
                "responses": {
                    "200": {
                        "description": "ok",
                        "content": {"application/json": {"schema": {"type": "array"}}}
                    }
                }
            },
            "post": {
                "summary": "Create a pet",
                "tags": ["pets"],
                "requestBody": {
                    "content": {"application/json": {"schema": {"type": "object"}}}
                },
                "responses": {"201": {"description": "created"}}
            },
        },
        "/pets/{petId}": {
            "delete": {
                "summary": "!!!",
                "responses": {"204": {"description": "gone"}}
            }
        },
        "/health": {
            "get": {"summary": "Health check"}
        },
    }
}


@pytest.fixture
def operations():
    from swagger_automation.parser import extract_operations
    return extract_operations(DOCUMENT)


@pytest.fixture
def test_cases(operations):
    from swagger_automation.generator import generate_test_cases
    return generate_test_cases(operations, DOCUMENT)


class TestExcelExporter:
    """Tests for the workbook export."""

    def test_one_row_per_test_case(self, test_cases):
        from openpyxl import load_workbook
        from swagger_automation.exporter import ExcelExporter
        from swagger_automation.models import TestCase

        workbook = load_workbook(io.BytesIO(ExcelExporter.render(test_cases)))
        sheet = workbook["Test Cases"]
        rows = list(sheet.iter_rows(values_only=True))

        assert list(rows[0]) == TestCase.COLUMNS
        assert len(rows) == len(test_cases) + 1
        assert rows[1][0] == "TC-1"
        assert rows[1][1] == "/pets"
        assert rows[-1][0] == test_cases[-1].test_case_id

    def test_export_writes_file(self, test_cases, tmp_path):
        from swagger_automation.exporter import ExcelExporter

        output = tmp_path / ExcelExporter.FILENAME
        ExcelExporter.export(test_cases, str(output))

        assert output.read_bytes()[:2] == b"PK"
        assert ExcelExporter.MIME_TYPE == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class TestPostmanExporter:
    """Tests for the Postman collection export."""

    def test_groups_by_first_tag(self, operations):
        from swagger_automation.exporter import PostmanExporter

        collection = PostmanExporter.render(operations)

        assert collection["info"]["name"] == "Swagger Collection"
        assert collection["info"]["schema"].endswith("/v2.1.0/collection.json")
        assert [folder["name"] for folder in collection["item"]] == ["pets", "General"]
        assert [item["name"] for item in collection["item"][0]["item"]] == ["List all pets", "Create a pet"]
        assert [item["name"] for item in collection["item"][1]["item"]] == ["!!!", "Health check"]

    def test_request_shape(self, operations):
        from swagger_automation.exporter import PostmanExporter

        item = PostmanExporter.build_item(operations[2])

        assert item["request"]["method"] == "DELETE"
        assert item["request"]["url"]["raw"] == "{{baseUrl}}/pets/{petId}"
        assert item["request"]["url"]["host"] == ["{{baseUrl}}"]
        assert item["request"]["url"]["path"] == ["pets", "{petId}"]
        assert item["request"]["header"] == [{"key": "Content-Type", "value": "application/json"}]
        assert item["event"][0]["listen"] == "test"

    def test_schema_assertion_only_with_success_schema(self, operations):
        from swagger_automation.exporter import PostmanExporter

        with_schema = PostmanExporter.build_test_script(operations[0])
        without_schema = PostmanExporter.build_test_script(operations[1])

        assert len(without_schema) == 10
        assert "    pm.expect(pm.response.code).to.be.oneOf([200, 201]);" in without_schema
        assert "    pm.expect(pm.response.responseTime).to.be.below(800);" in without_schema
        assert "    pm.response.to.be.json;" in without_schema
        assert len(with_schema) == 14
        assert '    var schema = {"type":"array"};' in with_schema

    def test_export_writes_json(self, operations, tmp_path):
        from swagger_automation.exporter import PostmanExporter

        output = tmp_path / "collection.json"
        PostmanExporter.export(operations, str(output), name="Pets")

        assert json.loads(output.read_text(encoding="utf-8"))["info"]["name"] == "Pets"


class TestSoapUIExporter:
    """Tests for the SoapUI project export."""

    def test_project_structure(self, operations):
        from swagger_automation.exporter import SoapUIExporter

        xml = SoapUIExporter.render(operations)
        root = ET.fromstring(xml.split("\n", 1)[1])

        assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        assert root.tag == "{http://eviware.com/soapui/config}soapui-project"
        resources = root.findall("con:interface/con:resource", SOAPUI_NS)
        test_cases = root.findall("con:testSuite/con:testCase", SOAPUI_NS)
        assert [r.get("path") for r in resources] == [op.path for op in operations]
        assert [r.find("con:method", SOAPUI_NS).get("method") for r in resources] == ["GET", "POST", "DELETE", "GET"]
        assert [tc.get("name") for tc in test_cases] == [op.summary for op in operations]

    def test_each_step_has_three_assertions(self, operations):
        from swagger_automation.exporter import SoapUIExporter

        root = SoapUIExporter.build_project(operations)

        for request in root.iter("{http://eviware.com/soapui/config}restRequest"):
            assertions = request.findall("con:assertion", SOAPUI_NS)
            assert [a.get("type") for a in assertions] == [
                "Valid HTTP Status Codes", "Response SLA Assertion", "JSON Path Match"
            ]
            assert assertions[0].find("con:configuration/codes", SOAPUI_NS).text == "200,201"
            assert assertions[1].find("con:configuration/SLA", SOAPUI_NS).text == "1000"
            assert assertions[2].find("con:configuration/path", SOAPUI_NS).text == "$"
            assert assertions[2].find("con:configuration/content", SOAPUI_NS).text == "*"

    def test_identifiers_are_unique(self, operations):
        from swagger_automation.exporter import SoapUIExporter

        root = SoapUIExporter.build_project(operations * 10)
        ids = [element.get("id") for element in root.iter() if element.get("id")]

        assert len(ids) == len(set(ids))
        assert root.get("id").startswith("Project_")


class TestPythonScriptExporter:
    """Tests for the generated unittest script."""

    def test_method_names(self, operations):
        from swagger_automation.exporter import PythonScriptExporter

        names = [PythonScriptExporter.method_name(op, i) for i, op in enumerate(operations)]

        assert names == ["list_all_pets", "create_a_pet", "___", "health_check"]

    def test_empty_summary_falls_back_to_index(self):
        from swagger_automation.exporter import PythonScriptExporter
        from swagger_automation.models import Operation

        op = Operation(path="/x", method="GET", summary="")

        assert PythonScriptExporter.method_name(op, 4) == "test_endpoint_4"

    def test_script_is_valid_python(self, operations):
        from swagger_automation.exporter import PythonScriptExporter

        script = PythonScriptExporter.render(operations, base_url="http://api.local")
        tree = ast.parse(script)
        test_class = next(node for node in tree.body if isinstance(node, ast.ClassDef))

        assert 'BASE_URL = "http://api.local"' in script
        assert [fn.name for fn in test_class.body] == [
            "test_list_all_pets", "test_create_a_pet", "test____", "test_health_check"
        ]
        assert 'requests.request("DELETE", url)' in script
        assert 'url = f"{BASE_URL}/pets/{{petId}}"' in script
        assert "self.assertIn(response.status_code, [200, 201])" in script


class TestTabularExporters:
    """Tests for CSV and JSON dumps of the test cases."""

    def test_csv(self, test_cases, tmp_path):
        from swagger_automation.exporter import CSVExporter
        from swagger_automation.models import TestCase

        output = tmp_path / CSVExporter.FILENAME
        CSVExporter.export(test_cases, str(output))

        with open(output, newline="", encoding="utf-8") as f:
            reader = csv.DictReader(f)
            rows = list(reader)

        assert reader.fieldnames == TestCase.COLUMNS
        assert len(rows) == len(test_cases)
        assert rows[0]["Test Steps"] == test_cases[0].test_steps

    def test_json(self, test_cases, tmp_path):
        from swagger_automation.exporter import JSONExporter

        output = tmp_path / JSONExporter.FILENAME
        JSONExporter.export(test_cases, str(output))
        data = json.loads(output.read_text(encoding="utf-8"))

        assert data["metadata"]["total_test_cases"] == len(test_cases)
        assert data["test_cases"][0]["test_case_id"] == "TC-1"

    def test_export_failure_is_raised(self, test_cases, tmp_path):
        from swagger_automation.exporter import CSVExporter

        with pytest.raises(OSError):
            CSVExporter.export(test_cases, str(tmp_path / "missing" / "out.csv"))
