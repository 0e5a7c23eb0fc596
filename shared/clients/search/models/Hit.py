"""Hit model: one search result as returned by a search backend."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Hit(BaseModel):
    """A single search result.

    Keys the model does not declare (e.g. "sort", "highlight") are kept as
    extras so raw mode can pass the hit through unchanged.

    Attributes:
        id:     Document identifier ("_id").
        index:  Collection the document lives in ("_index").
        type:   Mapping type label ("_type"), empty on backends without types.
        score:  Relevance score ("_score"), None when the backend sorted without scoring.
        source: Stored document body ("_source"), if returned.
        field_values: Requested field values ("fields"), field name → JSON value (usually an array).
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(alias="_id")
    index: str = Field(default="", alias="_index")
    type: str = Field(default="", alias="_type")
    score: float | None = Field(default=None, alias="_score")
    source: dict[str, Any] | None = Field(default=None, alias="_source")
    field_values: dict[str, Any] = Field(default_factory=dict, alias="fields")

    def to_raw(self) -> dict[str, Any]:
        """Returns the hit with the backend's own key names, restricted to the keys the backend sent."""
        return self.model_dump(by_alias=True, exclude_unset=True)
