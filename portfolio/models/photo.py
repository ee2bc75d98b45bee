from tortoise import fields
from .base import BaseModel

# Files placed in a category folder by hand keep their own stem as id
ID_MAX_LENGTH = 64

class Photo(BaseModel):
    # 32 hex chars for uploads; also the stem of the stored filename
    id = fields.CharField(max_length=ID_MAX_LENGTH, pk=True)
    filename = fields.CharField(max_length=255)
    title = fields.CharField(max_length=255)
    category = fields.CharField(max_length=32, index=True)
    content_type = fields.CharField(max_length=100, null=True)
    size_bytes = fields.BigIntField(default=0)
    uploaded_at = fields.DatetimeField(index=True)

    class Meta:
        table = "photos"
        ordering = ["-uploaded_at", "id"]
