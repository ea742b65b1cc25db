"""
User record as returned by the REST API.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """A Discord user."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="User snowflake")
    username: Optional[str] = None
    discriminator: Optional[str] = None
    avatar: Optional[str] = None
    bot: bool = False
    mfa_enabled: Optional[bool] = None
    verified: Optional[bool] = None
    email: Optional[str] = None
