"""Contact records: a person's name, email and phone number, unique by email."""

from pydantic import BaseModel, ConfigDict, Field

from recordstore.models.base import RecordModel


class ContactSchema(BaseModel):
    model_config = ConfigDict(extra="allow")

    Id: int = Field(default=0, ge=0, description="Assigned by the repository")
    Name: str = Field(..., min_length=1, pattern=r"^\s*\S", description="Full name")
    Email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", description="Email address")
    Phone: str = Field(..., pattern=r"^\(?\d{3}\)?[ .-]?\d{3}[ .-]?\d{4}$", description="Phone number, e.g. (450) 555-1234")


class ContactModel(RecordModel):
    type_name = "Contact"
    schema = ContactSchema
    key = "Email"
