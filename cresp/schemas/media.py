"""Media Schemas — upload negotiation and stored-file metadata."""

from pydantic import BaseModel, Field

from cresp.core.domain_types import FileKind


class UploadUrlRequest(BaseModel):
    file_name: str = Field(min_length=1, max_length=255)
    content_type: str = Field(min_length=1, max_length=100)
    size: int = Field(ge=0)
    kind: FileKind = FileKind.IMAGE


class UploadUrlOut(BaseModel):
    upload_url: str
    key: str
    public_url: str
    expires_in: int


class StoredFileOut(BaseModel):
    key: str
    url: str
    size: int
    mime_type: str
    file_name: str
