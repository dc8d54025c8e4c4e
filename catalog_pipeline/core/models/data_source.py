"""
DataSource descriptor consumed by the transformation pipeline.
"""

from typing import Any, Literal

from pydantic import ConfigDict, Field, JsonValue

from .base import CatalogModel

SourceType = Literal["filesystem", "json_transformed", "database", "api"]


class FileRef(CatalogModel):
    """
    A file attached to a data source.

    Attributes:
        name: File name (extension is used for format detection)
        type: MIME type
        size: Size in bytes
        content: Text content (extracted text for PDF/DOCX); None when unavailable
    """

    name: str
    type: str = ""
    size: int | None = None
    content: str | None = None


class SourceConfiguration(CatalogModel):
    """Files and/or materialized rows carried by a data source."""

    model_config = ConfigDict(extra="allow")

    files: list[FileRef] | None = None
    data: list[JsonValue] | None = None


class DataSource(CatalogModel):
    """
    Represents an origin of data (uploaded files, database import, API payload).

    Attributes:
        id: Unique identifier for the data source
        name: Human-readable name
        type: filesystem, json_transformed, database or api
        configuration: Files and/or materialized rows
        metadata: Free-form metadata; relational_import and primary_table
                  (or their camelCase spellings) describe joined
                  database imports
        record_count: Record count reported by the host application
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "src_1",
                "name": "Customers",
                "type": "filesystem",
                "configuration": {
                    "files": [
                        {
                            "name": "customers.csv",
                            "type": "text/csv",
                            "size": 64,
                            "content": "customer_name,customer_email\nAda,ada@example.com",
                        }
                    ]
                },
            }
        }
    )

    id: str = Field(..., min_length=1)
    name: str = ""
    type: SourceType
    configuration: SourceConfiguration = Field(default_factory=SourceConfiguration)
    metadata: dict[str, Any] = Field(default_factory=dict)
    record_count: int | None = None
