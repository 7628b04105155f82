from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional

from ..utils import sanitize_text


class ContactForm(BaseModel):
    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    phone: Optional[str] = Field(None, min_length=10, max_length=15)
    subject: Optional[str] = Field(None, max_length=100)
    message: str = Field(..., min_length=10)

    @field_validator("name", "phone", "subject", "message", mode="before")
    @classmethod
    def clean_text(cls, value):
        value = sanitize_text(value)
        # Campos opcionales vacíos cuentan como no enviados
        return value if value != "" else None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value
