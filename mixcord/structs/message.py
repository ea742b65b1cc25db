"""
Message record as returned by the REST API.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from mixcord.structs.user import User


class Message(BaseModel):
    """A message sent in a channel."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Message snowflake")
    channel_id: Optional[str] = None
    author: Optional[User] = None
    content: str = ""
    timestamp: Optional[str] = None
    edited_timestamp: Optional[str] = None
    tts: bool = False
    mention_everyone: bool = False
    mentions: List[User] = Field(default_factory=list)
    mention_roles: List[str] = Field(default_factory=list)
    attachments: List[Dict[str, Any]] = Field(default_factory=list)
    embeds: List[Dict[str, Any]] = Field(default_factory=list)
    nonce: Optional[Union[str, int]] = None
    pinned: bool = False
