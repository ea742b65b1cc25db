"""
Domain records decoded from REST responses.
"""

from mixcord.structs.message import Message
from mixcord.structs.user import User

__all__ = ["Message", "User"]
