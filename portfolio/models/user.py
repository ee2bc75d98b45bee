from tortoise import fields
from .base import BaseModel

class User(BaseModel):
    id = fields.IntField(pk=True)
    name = fields.CharField(max_length=255)
    email = fields.CharField(max_length=255, unique=True, index=True)
    password_hash = fields.CharField(max_length=255)

    class Meta:
        table = "users"

    def summary(self) -> dict:
        return {"id": self.id, "name": self.name, "email": self.email}
