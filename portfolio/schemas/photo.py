from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field


def rfc3339(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat(timespec="seconds")


class PhotoOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    filename: str
    title: str
    category: str
    url: str
    upload_date: str = Field(serialization_alias="uploadDate")

    @classmethod
    def from_photo(cls, photo, base_url: str) -> "PhotoOut":
        """Build the public view of a catalogued photo.

        ``base_url`` is the scheme and host of the current request; photo URLs
        are never stored, so the same catalog can be served behind any host.
        """
        return cls(
            id=photo.id,
            filename=photo.filename,
            title=photo.title,
            category=photo.category,
            url=f"{base_url.rstrip('/')}/photos/{photo.category}/{photo.filename}",
            upload_date=rfc3339(photo.uploaded_at),
        )

    def as_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
