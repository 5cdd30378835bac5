from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class RecordPayload(BaseModel):
    """Create/update body. Fields a table has no column for are kept as extras."""

    url: Optional[str] = Field(None, title="Pretty URL", description="Unique slug; generated from the title when empty.")

    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={
            "example": {
                "title": "Sidebar",
                "content": "<p>Hello</p>",
                "url": "sidebar",
            }
        },
    )

    def to_data(self) -> dict[str, Any]:
        """Payload fields actually sent, minus ownership fields the route decides."""
        data = self.model_dump(exclude_unset=True)
        for key in ("id", "library"):
            data.pop(key, None)
        return data


class IndexResponse(BaseModel):
    documents: list[dict[str, Any]] = Field(..., description="Records on the requested page.")
    limit: int = Field(..., description="Page size.")
    page: int = Field(..., description="1-based page number.")
    total: int = Field(..., description="Number of records matching the filters.")


class ReadResponse(BaseModel):
    record: dict[str, Any]
