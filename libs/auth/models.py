from typing import Optional

from pydantic import BaseModel, Field


class AuthUser(BaseModel):
    """
    Claims of a verified bearer token.

    Tokens are minted by the OTP login flow, which lives outside this service.
    """

    user_id: str = Field(..., alias="sub")
    phone: Optional[str] = None
    role: str = "client"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
