"""Request model for the contact form."""

from typing import Optional
from pydantic import BaseModel


class ContactForm(BaseModel):
    """Contact-form submission. Fields are optional so missing ones yield 400, not 422."""
    name: Optional[str] = None
    email: Optional[str] = None
    message: Optional[str] = None

    def is_complete(self) -> bool:
        return all(value and value.strip() for value in (self.name, self.email, self.message))
