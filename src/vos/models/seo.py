"""SEO metadata and script generation result models."""

from pathlib import Path
from typing import List

import yaml
from pydantic import BaseModel, Field


class SEOMetadata(BaseModel):
    """Publishing metadata produced alongside a topic script."""

    title: str = Field(..., description="Clickable, keyword-rich title")
    description: str = Field(..., description="Search-optimized description")
    tags: List[str] = Field(default_factory=list, description="Ordered keyword tags")
    pinned_comment: str = Field(
        default="",
        alias="pinnedComment",
        description="Comment to pin under the published video",
    )

    class Config:
        """Pydantic config."""
        frozen = True
        populate_by_name = True

    @classmethod
    def from_yaml(cls, path: Path) -> "SEOMetadata":
        """Load metadata from a YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls(**data)

    def to_yaml(self, path: Path) -> None:
        """Save metadata to a YAML file."""
        with open(path, "w") as f:
            yaml.safe_dump(self.model_dump(), f, default_flow_style=False, sort_keys=False)


class ScriptResult(BaseModel):
    """Structured response of a script generation request."""

    script: str = Field(..., description="The full spoken script with natural fillers")
    seo: SEOMetadata = Field(..., description="SEO metadata for the script")

    class Config:
        """Pydantic config."""
        frozen = True
