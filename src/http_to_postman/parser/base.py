"""Document models for converted HTTP request files.

The line parser builds these models and the collection generator
assembles them into a Postman Collection v2.1 document. Field names
are Pythonic; the serialization aliases carry the Postman keys, so
dump with ``by_alias=True, exclude_none=True``.
"""

from enum import Enum

from pydantic import BaseModel, Field


class HttpMethod(str, Enum):
    GET = "GET"
    PUT = "PUT"
    POST = "POST"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    PATCH = "PATCH"
    HEAD = "HEAD"


class Header(BaseModel):
    """A single request header. Order within a request is display order."""

    key: str
    value: str
    type: str = "text"


class QueryParam(BaseModel):
    key: str
    value: str


class Variable(BaseModel):
    """A collection-level or path-level variable."""

    key: str
    value: str
    type: str = "string"


class Body(BaseModel):
    mode: str | None = None  # "raw" once any body content exists
    raw: str | None = None
    options: dict | None = None  # {"raw": {"language": "json"}}


class Url(BaseModel):
    raw: str
    protocol: str | None = None
    host: list[str] | None = None
    path: list[str] | None = None
    query: list[QueryParam] | None = None
    variables: list[Variable] | None = Field(default=None, serialization_alias="variable")


class Request(BaseModel):
    method: str
    headers: list[Header] = Field(default=[], serialization_alias="header")
    body: Body = Body()
    url: Url


class Item(BaseModel):
    """A collection item: either a request or a folder of nested items."""

    name: str
    description: str | None = None
    items: list["Item"] | None = Field(default=None, serialization_alias="item")
    request: Request | None = None


class Group(BaseModel):
    """Requests collected under a ``# @group_name`` annotation."""

    name: str
    items: list[Item] = []


class Info(BaseModel):
    name: str
    schema_url: str = Field(serialization_alias="schema")


class Collection(BaseModel):
    info: Info
    items: list[Item] = Field(default=[], serialization_alias="item")
    variables: list[Variable] = Field(default=[], serialization_alias="variable")

    def to_json(self) -> str:
        """Serialize with Postman keys as 2-space indented JSON."""
        return self.model_dump_json(indent=2, by_alias=True, exclude_none=True)
