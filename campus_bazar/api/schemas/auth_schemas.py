from pydantic import BaseModel, Field

from campus_bazar.domain.entities.user import CurrentUser


class UserPayload(BaseModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    university: str = ""
    email: str | None = None

    def to_user(self) -> CurrentUser:
        return CurrentUser(id=self.id, name=self.name, university=self.university, email=self.email)


class UserResponse(BaseModel):
    id: str
    name: str
    university: str
    email: str | None = None

    @classmethod
    def from_user(cls, user: CurrentUser) -> "UserResponse":
        return cls(id=user.id, name=user.name, university=user.university, email=user.email)


class LogoutResponse(BaseModel):
    logged_out: bool = True
