"""
Data models used across the Swagger automation suite.
"""

from typing import ClassVar, Dict, List, Any, Optional
from pydantic import BaseModel, ConfigDict, Field


DEFAULT_TAG = "General"


# =============================================================================
# Operation records produced by the endpoint extractor
# =============================================================================

class ParameterSpec(BaseModel):
    """A single declared operation parameter."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(
        ...,
        description="Parameter name as declared in the document"
    )
    required: bool = Field(
        default=False,
        description="Whether the parameter is mandatory"
    )
    example: Optional[Any] = Field(
        default=None,
        description="Example value, when the document provides one"
    )
    location: str = Field(
        default="query",
        description="Where the parameter lives: query, path, header, cookie or body"
    )


class Operation(BaseModel):
    """One path + method pair flattened out of the document."""
    model_config = ConfigDict(frozen=True)

    path: str
    method: str
    summary: str
    parameters: List[ParameterSpec] = Field(default_factory=list)
    request_body: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Raw requestBody object (OpenAPI 3.x)"
    )
    request_body_schema: Optional[Dict[str, Any]] = Field(
        default=None,
        description="JSON schema of the request body (requestBody or Swagger 2.0 body parameter)"
    )
    responses: Dict[str, Any] = Field(default_factory=dict)
    response_schemas: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict,
        description="JSON response schema per status code"
    )
    tags: List[str] = Field(default_factory=list)
    operation_id: Optional[str] = None

    @property
    def first_tag(self) -> str:
        """Tag used for grouping; falls back to the default group."""
        return self.tags[0] if self.tags else DEFAULT_TAG

    @property
    def required_parameters(self) -> List[ParameterSpec]:
        return [p for p in self.parameters if p.required]

    def success_schema(self) -> Optional[Dict[str, Any]]:
        """JSON schema of the 200 response, or of the 201 response when 200 is absent."""
        for status in ("200", "201"):
            if status in self.responses:
                return self.response_schemas.get(status)
        return None


# =============================================================================
# Test case records (exported verbatim into human-facing documents)
# =============================================================================

class TestCase(BaseModel):
    """Represents a single generated test case."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    test_case_id: str = Field(..., alias="Test Case ID")
    endpoint: str = Field(..., alias="Endpoint")
    method: str = Field(..., alias="Method")
    test_scenario: str = Field(..., alias="Test Scenario")
    test_steps: str = Field(..., alias="Test Steps")
    prerequisite: str = Field(..., alias="Prerequisite")
    test_data: str = Field(..., alias="Test Data")
    expected_result: str = Field(..., alias="Expected Result")
    actual_result: str = Field(default="", alias="Actual Result")
    status: str = Field(default="", alias="Status")

    COLUMNS: ClassVar[List[str]] = [
        "Test Case ID",
        "Endpoint",
        "Method",
        "Test Scenario",
        "Test Steps",
        "Prerequisite",
        "Test Data",
        "Expected Result",
        "Actual Result",
        "Status",
    ]

    @property
    def number(self) -> int:
        """Numeric part of the identifier (TC-7 -> 7)."""
        return int(self.test_case_id.split("-", 1)[1])

    def to_row(self) -> Dict[str, str]:
        """Convert the test case into a row keyed by column name."""
        return self.model_dump(by_alias=True)

    def to_dict(self) -> Dict[str, str]:
        """Convert to a dict ready for JSON export."""
        return self.model_dump()
