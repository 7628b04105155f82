from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from typing import List, Optional, Union

from ..utils import sanitize_text


class QuotationFormData(BaseModel):
    firstName: str = Field(..., min_length=2, max_length=50)
    lastName: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipCode: Optional[str] = None
    installationRequired: Union[bool, str, None] = "no"
    preferredContactMethod: Optional[str] = "email"
    additionalNotes: Optional[str] = None

    @field_validator(
        "firstName", "lastName", "phone", "address", "city", "state", "zipCode",
        "preferredContactMethod", "additionalNotes",
        mode="before",
    )
    @classmethod
    def clean_text(cls, value):
        return sanitize_text(value)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value


class OrderSummaryItem(BaseModel):
    """Línea del carrito tal como la arma el frontend al pedir la cotización."""
    name: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)
    price: Optional[float] = Field(None, ge=0)
    total: Optional[float] = Field(None, ge=0)

    @field_validator("name", mode="before")
    @classmethod
    def clean_name(cls, value):
        return sanitize_text(value)

    @model_validator(mode="after")
    def compute_total(self):
        # El total de la línea es precio x cantidad cuando el cliente no lo envía
        if self.total is None and self.price is not None:
            self.total = round(self.price * self.quantity, 2)
        return self


class QuotationRequest(BaseModel):
    formData: QuotationFormData
    orderSummary: List[OrderSummaryItem]
    subtotal: float = Field(..., ge=0)

    def to_template_data(self) -> dict:
        return {
            "formData": self.formData.model_dump(mode="json"),
            "orderSummary": [
                {
                    "name": item.name,
                    "quantity": item.quantity,
                    "price": item.price,
                    "total": f"{item.total:.2f}" if item.total is not None else "",
                }
                for item in self.orderSummary
            ],
            "subtotal": f"{self.subtotal:.2f}",
        }
