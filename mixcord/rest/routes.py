"""
Route construction for REST endpoints.

A route is the path of an endpoint instance relative to the API base URL.
Routes double as rate-limit bucket keys, so the same endpoint instance must
always produce the same string.
"""

import re

_SNOWFLAKE = re.compile(r"/\d+(?=/|$)")


def channel_messages(channel_id: str) -> str:
    return f"/channels/{channel_id}/messages"


def channel_message(channel_id: str, message_id: str) -> str:
    return f"/channels/{channel_id}/messages/{message_id}"


def template(route: str) -> str:
    """Collapse numeric ids so a route can be used as a low-cardinality label.

    >>> template("/channels/81384788765712384/messages/1")
    '/channels/{id}/messages/{id}'
    """
    return _SNOWFLAKE.sub("/{id}", route)
