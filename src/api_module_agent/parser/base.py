"""Shared data models for extracted API endpoints and module documents.

The partitioner writes these models to disk and the runtime client reads
them back, so field aliases follow the camelCase wire format of the
generated JSON files.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH"]

HTTP_METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "PATCH")


class WireModel(BaseModel):
    """Base model serialized by alias, with unset optional fields left out."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Param(WireModel):
    """A flattened operation parameter."""

    name: str
    location: str = Field(default="query", alias="in")  # path / query / header / cookie
    required: bool | None = None
    type: str | None = None


class RequestBodyRef(WireModel):
    """Request body summary: whether it is required and which schema it uses."""

    required: bool | None = None
    schema_ref: str | None = Field(default=None, alias="schemaRef")


class ApiEndpoint(WireModel):
    """A single API operation. Identity is the (method, path) pair."""

    operation_id: str = Field(alias="operationId")
    method: HttpMethod
    path: str
    summary: str | None = None
    description: str | None = None
    tags: list[str] = []
    parameters: list[Param] | None = None
    request_body: RequestBodyRef | None = Field(default=None, alias="requestBody")

    @property
    def identity(self) -> tuple[str, str]:
        return (self.method, self.path)


class ModuleDocument(WireModel):
    """The served unit for one module: its endpoints plus a token estimate."""

    module: str
    label: str | None = None
    version: str
    generated_at: str = Field(alias="generatedAt")
    endpoints: list[ApiEndpoint]
    token_count: int = Field(default=0, alias="tokenCount")
