"""Host licence DTOs."""

from pydantic import BaseModel, Field


class LicenseIgnoredUpdate(BaseModel):
    """Mark a database licence entry as ignored (or count it again)."""

    ignored: bool
    ignored_comment: str | None = Field(default=None, max_length=2000)


class LicenseIgnoredResponse(BaseModel):
    """Result of an ignored flag update."""

    hostname: str
    dbname: str
    license_type_id: str
    ignored: bool
    ignored_comment: str | None = None
