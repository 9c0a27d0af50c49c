from __future__ import annotations
import asyncio
import functools
import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Sequence

from .protocol import (
    CODE_FROM_REACT,
    STATUS_ERROR,
    STATUS_QUEUED,
    STATUS_SUCCESS,
    handle_message,
    make_request,
    make_response,
)

HostFn = Callable[[Dict[str, Any]], Awaitable[Dict[str, Any]]]

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 5.0
DEFAULT_RETRY_INTERVAL_S = 0.25


class CodeRelay:
    """Hands code from a conversational client to whichever host has an editor.

    A ``CODE_FROM_REACT`` message becomes a ``TYPE_CODE`` request offered to
    every candidate host in turn, round after round, until one of them
    answers ``success`` (or ``queued``) or ``timeout`` seconds have gone by.
    """

    def __init__(
        self,
        hosts: Sequence[HostFn] = (),
        *,
        timeout: float = DEFAULT_TIMEOUT_S,
        retry_interval: float = DEFAULT_RETRY_INTERVAL_S,
    ):
        self.hosts: List[HostFn] = list(hosts)
        self.timeout = timeout
        self.retry_interval = retry_interval

    @classmethod
    def for_schedulers(cls, schedulers: Iterable, **kwargs) -> "CodeRelay":
        return cls([functools.partial(handle_message, s) for s in schedulers], **kwargs)

    async def forward(self, message: Any) -> Dict[str, Any]:
        if not isinstance(message, dict) or message.get("type") != CODE_FROM_REACT:
            kind = message.get("type") if isinstance(message, dict) else type(message).__name__
            logger.info("Relay ignoring message with unexpected type %r", kind)
            return make_response(STATUS_ERROR, f"unexpected message type: {kind!r}")
        code = message.get("code")
        if not isinstance(code, str):
            return make_response(STATUS_ERROR, "CODE_FROM_REACT requires a string 'code'")
        if not self.hosts:
            logger.info("No editor host available")
            return make_response(STATUS_ERROR, "No editor host found")

        try:
            return await asyncio.wait_for(
                self._deliver(make_request(code)), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            logger.warning("No host accepted the code within %.1fs", self.timeout)
            return make_response(STATUS_ERROR, "Failed to find editor in any host")

    async def _deliver(self, request: Dict[str, Any]) -> Dict[str, Any]:
        rounds = 0
        while True:
            rounds += 1
            for index, host in enumerate(self.hosts):
                try:
                    response = await host(dict(request))
                except Exception:
                    logger.warning("Host %d failed to answer", index, exc_info=True)
                    continue
                status = response.get("status") if isinstance(response, dict) else None
                logger.debug("Host %d answered %r (round %d)", index, status, rounds)
                if status in (STATUS_SUCCESS, STATUS_QUEUED):
                    return make_response(status)
            await asyncio.sleep(self.retry_interval)
