"""Blog post models. Wire keys are the column names of the blog sheet."""

from pydantic import BaseModel, ConfigDict, Field


class BlogPost(BaseModel):
    """A published post as listed by the blog endpoint."""

    # Sheet cells come back as numbers when a column looks numeric
    model_config = ConfigDict(populate_by_name=True, extra="allow", coerce_numbers_to_str=True)

    id: str = Field(..., alias="ID")
    title: str = Field(default="", alias="Title")
    author: str = Field(default="", alias="Author")
    content: str = Field(default="", alias="Content", description="Markdown body")
    thumbnail_url: str = Field(default="", alias="ThumbnailURL")
    thumbnail_small_url: str = Field(default="", alias="ThumbnailSmallURL")


class BlogDraft(BaseModel):
    """Fields sent when creating or updating a post."""

    title: str
    author: str
    content: str = ""
    thumbnail_url: str = Field(default="", serialization_alias="thumbnailUrl")
    thumbnail_small_url: str = Field(default="", serialization_alias="thumbnailSmallUrl")

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)
