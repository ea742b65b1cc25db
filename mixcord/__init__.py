"""
mixcord: a rate-limit-aware client for Discord's REST API.
"""

__version__ = "0.1.0"

from mixcord.rest.client import RestClient  # noqa: E402
from mixcord.rest.result import Err, Ok, Result, fail_fast, unwrap  # noqa: E402
from mixcord.shared.config import MixcordConfig, get_config  # noqa: E402
from mixcord.shared.errors import ApiError, DecodeError, MixcordException  # noqa: E402
from mixcord.structs import Message, User  # noqa: E402

__all__ = [
    "__version__",
    "RestClient",
    "Ok",
    "Err",
    "Result",
    "unwrap",
    "fail_fast",
    "MixcordConfig",
    "get_config",
    "ApiError",
    "DecodeError",
    "MixcordException",
    "Message",
    "User",
]
