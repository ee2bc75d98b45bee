from pydantic import BaseModel


# Fields default to "" so missing values reach the service's own
# "required" check instead of a generic schema error.
class RegisterPayload(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""


class LoginPayload(BaseModel):
    email: str = ""
    password: str = ""


class UserOut(BaseModel):
    id: int
    name: str
    email: str
