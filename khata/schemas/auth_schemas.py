from typing import Optional
from uuid import UUID
from pydantic import BaseModel


class CurrentUser(BaseModel):
    """Identity taken from a verified Supabase access token."""
    id: UUID
    email: Optional[str] = None
    role: str = "user"

    @property
    def username(self) -> str:
        return self.email or str(self.id)
