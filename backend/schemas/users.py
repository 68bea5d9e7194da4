from enum import Enum
from typing import Optional

from pydantic import BaseModel, field_validator


class Role(str, Enum):
    OWNER = "Owner"
    PROJECT_LEAD = "ProjectLead"
    TECHNICIAN = "Technician"
    LOGISTICS = "Logistics"

    @property
    def label(self) -> str:
        return ROLE_LABELS[self]


ROLE_LABELS = {
    Role.OWNER: "Hauptchef",
    Role.PROJECT_LEAD: "Projektleiter",
    Role.TECHNICIAN: "Techniker",
    Role.LOGISTICS: "Lagerist",
}


def parse_role(v) -> Role:
    """Accept a role value, member name or display label; default Technician."""
    if isinstance(v, Role):
        return v
    raw = str(v or "").strip()
    for role in Role:
        if raw.lower() in (role.value.lower(), role.name.lower(), role.label.lower()):
            return role
    return Role.TECHNICIAN


class UserAccount(BaseModel):
    id: Optional[str] = None
    username: str = ""
    # Stored and compared as plaintext, see DESIGN.md
    password: str = ""
    role: Role = Role.TECHNICIAN

    @field_validator("username", "password", mode="before")
    @classmethod
    def _text(cls, v) -> str:
        return "" if v is None else str(v)

    @field_validator("role", mode="before")
    @classmethod
    def _role(cls, v) -> Role:
        return parse_role(v)

    @property
    def is_owner(self) -> bool:
        return self.role == Role.OWNER


class UserRead(BaseModel):
    id: Optional[str] = None
    username: str
    role: Role
    role_label: str

    @classmethod
    def from_account(cls, account: UserAccount) -> "UserRead":
        return cls(
            id=account.id,
            username=account.username,
            role=account.role,
            role_label=account.role.label,
        )


class UserCreate(BaseModel):
    username: str
    password: str
    role: Role = Role.TECHNICIAN

    @field_validator("username")
    @classmethod
    def _username(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("username is required")
        return v

    @field_validator("role", mode="before")
    @classmethod
    def _role(cls, v) -> Role:
        return parse_role(v)


class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""
