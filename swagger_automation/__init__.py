"""
Swagger Automation Suite.
Turns Swagger/OpenAPI specifications into test case workbooks, Postman
collections, SoapUI projects and Python smoke test scripts.
"""

__version__ = "1.0.0"

from .parser import SwaggerParser, extract_operations
from .schema import resolve_reference, synthesize_sample, render_sample
from .generator import TestCaseGenerator, generate_test_cases
from .exporter import (
    EXPORTERS,
    CSVExporter,
    ExcelExporter,
    JSONExporter,
    PostmanExporter,
    PythonScriptExporter,
    SoapUIExporter,
)
from .converter import ConversionError, ConversionResult, SwaggerConverter, convert_source
from .config import Config
from .models import Operation, ParameterSpec, TestCase
from .utils import setup_logging

__all__ = [
    "SwaggerParser",
    "extract_operations",
    "resolve_reference",
    "synthesize_sample",
    "render_sample",
    "TestCaseGenerator",
    "generate_test_cases",
    "EXPORTERS",
    "CSVExporter",
    "ExcelExporter",
    "JSONExporter",
    "PostmanExporter",
    "PythonScriptExporter",
    "SoapUIExporter",
    "ConversionError",
    "ConversionResult",
    "SwaggerConverter",
    "convert_source",
    "Config",
    "Operation",
    "ParameterSpec",
    "TestCase",
    "setup_logging",
]
