"""
Shared schema building blocks.
The housing backend speaks camelCase JSON with MongoDB-style `_id` keys.
"""

from datetime import datetime
from typing import Dict, Generic, List, Optional, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model: snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False,
    )

    def to_payload(self, exclude_unset: bool = False) -> dict:
        """Dump in the backend's JSON shape."""
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            exclude_unset=exclude_unset,
        )


class EntityResponse(CamelModel):
    """Common fields of every backend entity."""

    id: str = Field(
        ...,
        validation_alias=AliasChoices("_id", "id"),
        description="Backend identifier"
    )

    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")


EntityT = TypeVar("EntityT", bound=BaseModel)


class ResourceListResponse(BaseModel, Generic[EntityT]):
    """Filtered table view over one resource collection."""

    items: List[EntityT] = Field(..., description="Rows matching the current search and filter")
    total: int = Field(..., description="Number of rows loaded from the backend")
    visible: int = Field(..., description="Number of rows matching the search and filter")
    counts: Dict[str, int] = Field(default_factory=dict, description="Loaded rows per filter value")


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    success: bool = True
    message: str


class UploadFailureResponse(BaseModel):
    """A file from a multi-file upload that was not stored."""

    filename: str
    message: str


class PreviewResponse(BaseModel):
    """Inline data-URL previews of selected images."""

    previews: List[str]
