"""
Export helpers for serializing operations and generated test cases.

Each exporter has a fixed output filename and MIME type, a `render` method
producing the document in memory and an `export` method writing it to disk.
"""

import csv
import io
import json
import logging
import xml.etree.ElementTree as ET
from datetime import datetime
from typing import Any, Dict, List, Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font

from .models import Operation, TestCase
from .utils import random_token, sanitize_identifier

logger = logging.getLogger(__name__)

POSTMAN_SCHEMA_URL = "https://schema.getpostman.com/json/collection/v2.1.0/collection.json"
SOAPUI_NS = "http://eviware.com/soapui/config"
XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"

ET.register_namespace("con", SOAPUI_NS)
ET.register_namespace("xsi", XSI_NS)


class ExcelExporter:
    """Export test cases into an Excel workbook, one row per test case."""

    FILENAME = "API_Test_Cases.xlsx"
    MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    CONSUMES = "test_cases"
    SHEET_TITLE = "Test Cases"

    @staticmethod
    def render(test_cases: List[TestCase]) -> bytes:
        """Build the workbook and return its bytes."""
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = ExcelExporter.SHEET_TITLE

        sheet.append(TestCase.COLUMNS)
        for cell in sheet[1]:
            cell.font = Font(bold=True)

        for test_case in test_cases:
            row = test_case.to_row()
            sheet.append([row[column] for column in TestCase.COLUMNS])

        for row in sheet.iter_rows(min_row=2):
            for cell in row:
                cell.alignment = Alignment(wrap_text=True, vertical="top")

        buffer = io.BytesIO()
        workbook.save(buffer)
        return buffer.getvalue()

    @staticmethod
    def export(test_cases: List[TestCase], output_path: str, **options):
        """Write the workbook to `output_path`."""
        try:
            with open(output_path, 'wb') as f:
                f.write(ExcelExporter.render(test_cases))

            logger.info(f"Test cases exported to Excel: {output_path}")
            logger.info(f"  Total test cases: {len(test_cases)}")

        except Exception as e:
            logger.error(f"Excel export failed: {e}")
            raise


class PostmanExporter:
    """Export operations as a Postman v2.1 collection grouped by first tag."""

    FILENAME = "Postman_Collection.json"
    MIME_TYPE = "application/json"
    CONSUMES = "operations"

    @staticmethod
    def build_test_script(operation: Operation, response_time_ms: int = 800) -> List[str]:
        """Assertion script attached to the request's test event."""
        script = [
            'pm.test("Status code is 200/201", function () {',
            '    pm.expect(pm.response.code).to.be.oneOf([200, 201]);',
            '});',
            f'pm.test("Response time is less than {response_time_ms}ms", function () {{',
            f'    pm.expect(pm.response.responseTime).to.be.below({response_time_ms});',
            '});',
            'pm.test("Response is valid JSON", function () {',
            '    pm.response.to.be.withBody;',
            '    pm.response.to.be.json;',
            '});',
        ]

        schema = operation.success_schema()
        if schema:
            script.extend([
                'pm.test("Response schema is valid", function () {',
                f'    var schema = {json.dumps(schema, separators=(",", ":"), ensure_ascii=False)};',
                '    pm.response.to.have.jsonSchema(schema);',
                '});',
            ])
        return script

    @staticmethod
    def build_item(operation: Operation, response_time_ms: int = 800) -> Dict[str, Any]:
        return {
            "name": operation.summary,
            "request": {
                "method": operation.method,
                "header": [
                    {"key": "Content-Type", "value": "application/json"}
                ],
                "url": {
                    "raw": "{{baseUrl}}" + operation.path,
                    "host": ["{{baseUrl}}"],
                    "path": [segment for segment in operation.path.split("/") if segment],
                },
                "description": operation.summary,
            },
            "event": [
                {
                    "listen": "test",
                    "script": {
                        "exec": PostmanExporter.build_test_script(operation, response_time_ms),
                        "type": "text/javascript",
                    },
                }
            ],
        }

    @staticmethod
    def render(
        operations: List[Operation],
        name: str = "Swagger Collection",
        response_time_ms: int = 800
    ) -> Dict[str, Any]:
        """Build the collection as a dict."""
        folders: Dict[str, List[Dict[str, Any]]] = {}
        for operation in operations:
            folders.setdefault(operation.first_tag, []).append(
                PostmanExporter.build_item(operation, response_time_ms)
            )

        return {
            "info": {
                "name": name,
                "schema": POSTMAN_SCHEMA_URL,
            },
            "item": [{"name": tag, "item": items} for tag, items in folders.items()],
        }

    @staticmethod
    def export(operations: List[Operation], output_path: str, encoding: str = "utf-8", **options):
        """Write the collection JSON to `output_path`."""
        try:
            collection = PostmanExporter.render(operations, **options)
            with open(output_path, 'w', encoding=encoding) as f:
                json.dump(collection, f, ensure_ascii=False, indent=2)

            logger.info(f"Postman collection exported: {output_path}")
            logger.info(f"  Folders: {len(collection['item'])}, requests: {len(operations)}")

        except Exception as e:
            logger.error(f"Postman export failed: {e}")
            raise


def _con(tag: str) -> str:
    return f"{{{SOAPUI_NS}}}{tag}"


def _sub(parent: ET.Element, tag: str, text: Optional[str] = None, **attrib) -> ET.Element:
    element = ET.SubElement(parent, _con(tag), {k: str(v) for k, v in attrib.items()})
    if text is not None:
        element.text = text
    return element


class SoapUIExporter:
    """Export operations as a SoapUI REST project with one test case per operation."""

    FILENAME = "SoapUI_Project.xml"
    MIME_TYPE = "application/xml"
    CONSUMES = "operations"
    SERVICE_NAME = "REST Service"

    @staticmethod
    def _add_assertion(parent: ET.Element, kind: str, name: str, used: set, **settings):
        assertion = _sub(parent, "assertion", type=kind, name=name, id=random_token(9, used))
        configuration = _sub(assertion, "configuration")
        for key, value in settings.items():
            ET.SubElement(configuration, key).text = value

    @staticmethod
    def build_project(
        operations: List[Operation],
        endpoint: str = "http://localhost:8080",
        sla_ms: int = 1000
    ) -> ET.Element:
        """Build the project element tree."""
        used: set = set()
        xsi_type = f"{{{XSI_NS}}}type"

        project = ET.Element(_con("soapui-project"), {
            "id": f"Project_{random_token(9, used)}",
            "activeEnvironment": "Default",
            "name": "Swagger_Automation_Project",
            "resourceRoot": "",
            "soapui-version": "5.6.0",
        })

        interface = _sub(project, "interface", **{
            xsi_type: "con:RestService",
            "id": f"Interface_{random_token(9, used)}",
            "name": SoapUIExporter.SERVICE_NAME,
            "type": "rest",
        })
        _sub(interface, "definitionCache", type="TEXT", rootPart="")
        endpoints = _sub(interface, "endpoints")
        _sub(endpoints, "endpoint", endpoint)

        for operation in operations:
            resource = _sub(interface, "resource", name=operation.path, path=operation.path,
                            id=f"Res_{random_token(5, used)}")
            method = _sub(resource, "method", name=operation.method, id=f"Meth_{random_token(5, used)}",
                          method=operation.method)
            request = _sub(method, "request", name="Request 1", id=random_token(9, used),
                           mediaType="application/json")
            _sub(request, "settings")
            _sub(request, "endpoint", endpoint)
            _sub(request, "parameters")

        suite = _sub(project, "testSuite", id=f"TestSuite_{random_token(9, used)}", name="Automation TestSuite")
        _sub(suite, "settings")
        _sub(suite, "runType", "SEQUENTIAL")

        for operation in operations:
            step_name = f"{operation.method} Request"
            test_case = _sub(suite, "testCase", id=f"TC_{random_token(5, used)}", failOnError="true",
                             inheritOptions="true", name=operation.summary, keepSession="false",
                             maxResults="0", searchProperties="true")
            _sub(test_case, "settings")
            step = _sub(test_case, "testStep", type="restrequest", name=step_name,
                        id=f"Step_{random_token(5, used)}")
            _sub(step, "settings")
            config = _sub(step, "config", **{
                "service": SoapUIExporter.SERVICE_NAME,
                "resourcePath": operation.path,
                "methodName": operation.method,
                xsi_type: "con:RestRequestStep",
            })
            rest_request = _sub(config, "restRequest", name=step_name, id=random_token(9, used),
                                mediaType="application/json")
            _sub(rest_request, "settings")
            _sub(rest_request, "endpoint", endpoint)
            _sub(rest_request, "request")
            SoapUIExporter._add_assertion(rest_request, "Valid HTTP Status Codes", "Valid HTTP Status Codes",
                                          used, codes="200,201")
            SoapUIExporter._add_assertion(rest_request, "Response SLA Assertion", "Response SLA",
                                          used, SLA=str(sla_ms))
            SoapUIExporter._add_assertion(rest_request, "JSON Path Match", "Check for Content",
                                          used, path="$", content="*", allowWildcards="true")
            credentials = _sub(rest_request, "credentials")
            _sub(credentials, "authType", "No Authorization")
            _sub(rest_request, "jmsConfig", JMSDeliveryMode="PERSISTENT")
            _sub(rest_request, "parameters")
            _sub(test_case, "properties")

        for tag in ("properties", "wssContainer", "oAuth2ProfileContainer", "oAuth1ProfileContainer"):
            _sub(project, tag)
        return project

    @staticmethod
    def render(operations: List[Operation], endpoint: str = "http://localhost:8080", sla_ms: int = 1000) -> str:
        """Serialize the project to XML text."""
        project = SoapUIExporter.build_project(operations, endpoint, sla_ms)
        ET.indent(project, space="  ")
        return '<?xml version="1.0" encoding="UTF-8"?>\n' + ET.tostring(project, encoding="unicode")

    @staticmethod
    def export(operations: List[Operation], output_path: str, encoding: str = "utf-8", **options):
        """Write the SoapUI project to `output_path`."""
        try:
            xml = SoapUIExporter.render(operations, **options)
            with open(output_path, 'w', encoding=encoding) as f:
                f.write(xml)

            logger.info(f"SoapUI project exported: {output_path}")
            logger.info(f"  Test cases: {len(operations)}")

        except Exception as e:
            logger.error(f"SoapUI export failed: {e}")
            raise


class PythonScriptExporter:
    """Export operations as a requests + unittest smoke test script."""

    FILENAME = "api_automation_tests.py"
    MIME_TYPE = "text/x-python"
    CONSUMES = "operations"

    @staticmethod
    def method_name(operation: Operation, index: int) -> str:
        """Identifier-safe name derived from the summary, or an index-based fallback."""
        return sanitize_identifier(operation.summary) or f"test_endpoint_{index}"

    @staticmethod
    def render(operations: List[Operation], base_url: str = "http://localhost:8080") -> str:
        """Build the script text."""
        lines = [
            "import requests",
            "import unittest",
            "",
            f"BASE_URL = {json.dumps(base_url)}",
            "",
            "class TestAPI(unittest.TestCase):",
        ]

        for index, operation in enumerate(operations):
            docstring = operation.summary.replace("\\", "\\\\").replace('"', '\\"')
            path = operation.path.replace("{", "{{").replace("}", "}}").replace('"', '\\"')
            lines.extend([
                "",
                f"    def test_{PythonScriptExporter.method_name(operation, index)}(self):",
                f'        """{docstring}"""',
                f'        url = f"{{BASE_URL}}{path}"',
                f'        response = requests.request("{operation.method}", url)',
                "        self.assertIn(response.status_code, [200, 201])",
                f'        print(f"Tested {path} - Status: {{response.status_code}}")',
            ])

        lines.extend([
            "",
            'if __name__ == "__main__":',
            "    unittest.main()",
            "",
        ])
        return "\n".join(lines)

    @staticmethod
    def export(operations: List[Operation], output_path: str, encoding: str = "utf-8", **options):
        """Write the script to `output_path`."""
        try:
            with open(output_path, 'w', encoding=encoding) as f:
                f.write(PythonScriptExporter.render(operations, **options))

            logger.info(f"Python test script exported: {output_path}")
            logger.info(f"  Test methods: {len(operations)}")

        except Exception as e:
            logger.error(f"Python script export failed: {e}")
            raise


class CSVExporter:
    """Export test cases into a CSV file with the same columns as the workbook."""

    FILENAME = "API_Test_Cases.csv"
    MIME_TYPE = "text/csv"
    CONSUMES = "test_cases"

    @staticmethod
    def export(test_cases: List[TestCase], output_path: str, encoding: str = "utf-8", **options):
        """Export the provided test cases into a CSV file."""
        try:
            with open(output_path, 'w', newline='', encoding=encoding) as csvfile:
                writer = csv.DictWriter(csvfile, fieldnames=TestCase.COLUMNS)
                writer.writeheader()
                writer.writerows(tc.to_row() for tc in test_cases)

            logger.info(f"Test cases exported to CSV: {output_path}")
            logger.info(f"  Total test cases: {len(test_cases)}")

        except Exception as e:
            logger.error(f"CSV export failed: {e}")
            raise


class JSONExporter:
    """Export test cases as JSON."""

    FILENAME = "API_Test_Cases.json"
    MIME_TYPE = "application/json"
    CONSUMES = "test_cases"

    @staticmethod
    def export(test_cases: List[TestCase], output_path: str, encoding: str = "utf-8", indent: int = 2, **options):
        """Export the provided test cases into a JSON file."""
        try:
            data = {
                "metadata": {
                    "total_test_cases": len(test_cases),
                    "generated_at": datetime.now().isoformat()
                },
                "test_cases": [tc.to_dict() for tc in test_cases]
            }

            with open(output_path, 'w', encoding=encoding) as f:
                json.dump(data, f, ensure_ascii=False, indent=indent)

            logger.info(f"Test cases exported to JSON: {output_path}")
            logger.info(f"  Total test cases: {len(test_cases)}")

        except Exception as e:
            logger.error(f"JSON export failed: {e}")
            raise


EXPORTERS = {
    "excel": ExcelExporter,
    "postman": PostmanExporter,
    "soapui": SoapUIExporter,
    "python": PythonScriptExporter,
    "csv": CSVExporter,
    "json": JSONExporter,
}
