"""Pydantic models for request bodies."""

from pydantic import BaseModel, Field


class MultipartFormSection(BaseModel):
    """One part of a multipart/form-data body.

    Sections without a filename are sent as plain form fields.
    """

    name: str = Field(min_length=1)
    data: bytes | str
    filename: str | None = None
    content_type: str | None = None

    def as_file_tuple(self) -> tuple[str | None, bytes, str | None]:
        """Return the (filename, content, content_type) tuple httpx expects."""
        data = self.data.encode("utf-8") if isinstance(self.data, str) else self.data
        return (self.filename, data, self.content_type)
