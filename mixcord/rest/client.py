"""
Client for Discord's REST API.

Every operation comes in two flavours. The plain coroutine returns an
``Ok``/``Err`` result and never raises for network or API failures. The
``*_or_raise`` counterpart returns the unwrapped value and raises
``ApiError`` instead.
"""

import time
from typing import Any, Callable, Dict, Optional, Type

from opentelemetry import trace
from pydantic import BaseModel, ValidationError

from mixcord.rest import routes
from mixcord.rest.outcome import ApplicationError, Outcome, Success, TransportFailure, classify, outcome_label
from mixcord.rest.ratelimit import RateLimiter
from mixcord.rest.result import Err, Ok, Result, fail_fast
from mixcord.rest.transport import HttpTransport, TransportResponse
from mixcord.shared.config import MixcordConfig
from mixcord.shared.errors import ConfigurationError, DecodeError
from mixcord.shared.logging import get_logger, request_context
from mixcord.shared.metrics import RestMetrics
from mixcord.structs import Message


tracer = trace.get_tracer(__name__)


class RestClient:
    """Rate-limit-aware client for the REST API."""

    def __init__(self,
                 config: MixcordConfig,
                 transport: Optional[HttpTransport] = None,
                 ratelimiter: Optional[RateLimiter] = None,
                 metrics: Optional[RestMetrics] = None):
        self.config = config
        self.logger = get_logger("mixcord.rest.client")
        self.metrics = metrics
        if self.metrics is None and config.enable_metrics:
            self.metrics = RestMetrics()

        self.transport = transport if transport is not None else HttpTransport(
            config.api_base_url,
            timeout=config.request_timeout,
            user_agent=config.user_agent
        )
        self.ratelimiter = ratelimiter if ratelimiter is not None else RateLimiter(
            max_wait=config.ratelimit_max_wait,
            on_wait=self._record_wait
        )

    async def __aenter__(self) -> "RestClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self):
        """Release the transport's connections."""
        await self.transport.close()

    def _record_wait(self, route: str, seconds: float):
        if self.metrics is not None:
            self.metrics.record_ratelimit_wait(routes.template(route), seconds)

    def _headers(self) -> Dict[str, str]:
        token = self.config.get_token()
        if not token:
            raise ConfigurationError(
                "No bot token configured",
                details={"setting": "MIXCORD_TOKEN"}
            )
        return {
            "Authorization": f"Bot {token}",
            "Content-Type": "application/json"
        }

    async def request(self, method: str, route: str, body: Optional[Any] = None) -> Outcome:
        """Send one call through the rate limiter and classify what came back."""
        headers = self._headers()
        route_label = routes.template(route)

        with request_context(route), tracer.start_as_current_span(
            "mixcord.rest.request",
            attributes={"http.method": method, "mixcord.route": route_label}
        ) as span:
            await self.ratelimiter.wait_for_capacity(route)

            start_time = time.perf_counter()
            response = await self.transport.send(method, route, body, headers)
            duration = time.perf_counter() - start_time

            if isinstance(response, TransportResponse):
                span.set_attribute("http.status_code", response.status_code)
                await self.ratelimiter.record_headers(route, response.headers)

            outcome = classify(response)
            label = outcome_label(outcome)
            if self.metrics is not None:
                self.metrics.record_request(method, route_label, label, duration)

            if isinstance(outcome, Success):
                self.logger.debug("REST call succeeded", method=method, duration=round(duration, 4))
            else:
                self.logger.warning("REST call failed", method=method, outcome=label)
            return outcome

    async def create_message(self, channel_id: str, content: str, tts: bool = False) -> Result[Message]:
        """Send ``content`` to the channel identified by ``channel_id``.

        ``tts`` asks clients to play the message with text to speech.
        """
        outcome = await self.request(
            "POST",
            routes.channel_messages(channel_id),
            {"content": content, "tts": tts}
        )
        return to_result(outcome, decoder=_model_decoder(Message))

    async def edit_message(self, channel_id: str, message_id: str, content: str) -> Result[Message]:
        """Replace the content of a message. Returns the edited message."""
        outcome = await self.request(
            "PATCH",
            routes.channel_message(channel_id, message_id),
            {"content": content}
        )
        return to_result(outcome, decoder=_model_decoder(Message))

    async def delete_message(self, channel_id: str, message_id: str) -> Result[None]:
        """Delete a message."""
        outcome = await self.request("DELETE", routes.channel_message(channel_id, message_id))
        return to_result(outcome)

    create_message_or_raise = fail_fast(create_message)
    edit_message_or_raise = fail_fast(edit_message)
    delete_message_or_raise = fail_fast(delete_message)


def to_result(outcome: Outcome, decoder: Optional[Callable[[bytes], Any]] = None) -> Result[Any]:
    """Turn a classified outcome into a tagged result.

    Decoding errors are not caught: an undecodable success body means the
    API broke its contract, which callers cannot handle per call.
    """
    if isinstance(outcome, Success):
        if decoder is None:
            return Ok(None)
        return Ok(decoder(outcome.body or b""))
    if isinstance(outcome, ApplicationError):
        return Err(status_code=outcome.status_code, message=outcome.message)
    if isinstance(outcome, TransportFailure):
        return Err(status_code=None, message=outcome.reason)
    raise TypeError(f"Unknown outcome: {outcome!r}")


def _model_decoder(model: Type[BaseModel]) -> Callable[[bytes], BaseModel]:
    def decode(body: bytes) -> BaseModel:
        try:
            return model.model_validate_json(body)
        except ValidationError as e:
            raise DecodeError(
                f"Response body is not a valid {model.__name__}",
                details={"errors": e.errors(include_url=False), "body": body.decode("utf-8", errors="replace")}
            ) from e

    return decode
