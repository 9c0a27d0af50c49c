from __future__ import annotations
import asyncio
import logging
from typing import Callable, Awaitable, Any
from zendriver import cdp

from ..errors import AdapterOperationFailed
from ..keyboard.config import kcfg


def _drain(task: asyncio.Task) -> None:
    # Late failures of backgrounded sends are only worth a debug line
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logging.getLogger(__name__).debug("Backgrounded CDP send failed: %r", exc)


async def _send_cdp_event(
    page, fn: Callable[[], Awaitable[Any]], *, label: str
) -> Any:
    """Send a CDP command with a short timeout; stalled sends finish in background."""
    # Create the task once to ensure it runs to completion regardless of timeout
    task = asyncio.create_task(fn())
    try:
        return await asyncio.wait_for(
            asyncio.shield(task), timeout=kcfg.CDP_SEND_TIMEOUT_S
        )
    except asyncio.TimeoutError:
        logging.getLogger(__name__).warning(
            "CDP %s stalled >%.0f ms; continuing in background",
            label,
            kcfg.CDP_SEND_TIMEOUT_S * 1000.0,
        )
        task.add_done_callback(_drain)
        return None
    except Exception as exc:
        raise AdapterOperationFailed(label, str(exc)) from exc


def _unwrap_value(response: Any) -> Any:
    """Pull the by-value result out of a Runtime.evaluate response."""
    if isinstance(response, tuple):
        response = response[0] if response else None
    if response is None:
        return None
    result = response.get("result", response) if isinstance(response, dict) else response
    if isinstance(result, dict):
        return result.get("value")
    return getattr(result, "value", None)


async def _evaluate(page, expression: str, *, label: str = "evaluate") -> Any:
    response = await _send_cdp_event(
        page,
        lambda: page.send(
            cdp.runtime.evaluate(
                expression=expression,
                return_by_value=True,
                await_promise=False,
            )
        ),
        label=label,
    )
    return _unwrap_value(response)


async def _emit_insert_text(page, text: str) -> None:
    await _send_cdp_event(
        page,
        lambda: page.send(cdp.input_.insert_text(text=text)),
        label="insertText",
    )


async def _press_key(
    page, key: str, vk: int, *, down_type: str = "keyDown", text: str = ""
) -> None:
    down_kwargs = {"text": text} if text else {}
    await _send_cdp_event(
        page,
        lambda: page.send(
            cdp.input_.dispatch_key_event(
                type_=down_type,
                key=key,
                code=key,
                windows_virtual_key_code=vk,
                native_virtual_key_code=vk,
                **down_kwargs,
            )
        ),
        label=f"{key}Down",
    )
    # no sleep here; caller will pace
    await _send_cdp_event(
        page,
        lambda: page.send(
            cdp.input_.dispatch_key_event(
                type_="keyUp",
                key=key,
                code=key,
                windows_virtual_key_code=vk,
                native_virtual_key_code=vk,
            )
        ),
        label=f"{key}Up",
    )


async def _press_enter(page) -> None:
    await _press_key(page, "Enter", 13, text="\r")


async def _press_backspace(page) -> None:
    await _press_key(page, "Backspace", 8, down_type="rawKeyDown")


async def _press_arrow_right(page) -> None:
    await _press_key(page, "ArrowRight", 39, down_type="rawKeyDown")
