# billboard_billing/models/customers.py

from typing import Optional

from pydantic import BaseModel, EmailStr


class CustomerOut(BaseModel):
    id: str
    name: str
    contact_name: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[EmailStr] = None

    class Config:
        from_attributes = True


class CustomerRefIn(BaseModel):
    """A customer named by id, by name, or both."""

    customer_id: Optional[str] = None
    customer_name: Optional[str] = None


class CustomerRefOut(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None

    class Config:
        from_attributes = True
