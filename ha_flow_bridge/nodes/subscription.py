"""Single-slot subscription holder for a node.

A node keeps at most one live hub subscription. ``acquire`` refuses to
stack a second one, and ``release`` is idempotent and never raises.
A release issued while an acquire is still in flight is remembered and
applied to the late handle as soon as it arrives.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from ha_flow_bridge.exceptions import (
    HubConnectionError,
    SubscriptionStateError,
    SubscriptionTeardownError,
)

if TYPE_CHECKING:
    from ha_flow_bridge.hub.protocol import HubConnection, MessageHandler, UnsubscribeHandle

logger = logging.getLogger(__name__)


class SubscriptionManager:
    """Owns the node's one subscription handle.

    Usage::

        subs = SubscriptionManager(hub, node_id="abc")
        handle = await subs.acquire(handler, payload)
        # ... later ...
        await subs.release()
    """

    def __init__(
        self,
        hub: HubConnection,
        *,
        node_id: str,
        debug: Callable[[str], None] | None = None,
    ) -> None:
        self._hub = hub
        self._node_id = node_id
        self._debug = debug
        self._handle: UnsubscribeHandle | None = None
        self._pending = False
        self._release_requested = False

    @property
    def is_active(self) -> bool:
        return self._handle is not None

    @property
    def is_pending(self) -> bool:
        return self._pending

    async def acquire(
        self,
        handler: MessageHandler,
        payload: dict[str, Any],
        *,
        resubscribe: bool = False,
    ) -> UnsubscribeHandle | None:
        """Subscribe through the hub and hold the returned handle.

        Returns None when a release arrived while subscribing; the late
        handle has already been torn down in that case.

        Raises:
            SubscriptionStateError: A handle is already held or pending.
            HubConnectionError: The hub rejected or could not take the subscription.
        """
        if self._handle is not None or self._pending:
            raise SubscriptionStateError(
                f"Node {self._node_id} already holds a subscription; release it first"
            )

        self._pending = True
        self._release_requested = False
        try:
            handle = await self._hub.subscribe_message(handler, payload, resubscribe=resubscribe)
        except HubConnectionError:
            raise
        except Exception as exc:
            raise HubConnectionError(str(exc), node_id=self._node_id) from exc
        finally:
            self._pending = False

        if self._release_requested:
            self._release_requested = False
            logger.debug("Node %s released while subscribing, dropping late handle", self._node_id)
            await self._teardown(handle)
            return None

        self._handle = handle
        return handle

    async def release(self) -> None:
        """Unsubscribe if subscribed. Safe to call any number of times."""
        if self._pending:
            self._release_requested = True

        handle, self._handle = self._handle, None
        if handle is None:
            return

        if self._debug:
            self._debug("Unregistering from HA")
        await self._teardown(handle)

    def discard(self) -> None:
        """Forget the handle without calling it.

        Used when the connection that issued the handle has been replaced.
        A subscription still in flight is dropped when it arrives.
        """
        if self._pending:
            self._release_requested = True
        self._handle = None

    async def _teardown(self, handle: UnsubscribeHandle) -> None:
        # Never raises; failures only reach the debug log
        try:
            result = handle()
            if inspect.isawaitable(result):
                await result
        except Exception as exc:
            error = SubscriptionTeardownError(f"Unsubscribe failed for node {self._node_id}: {exc}")
            logger.debug("%s (%s)", error, error.correlation_id)


__all__ = ["SubscriptionManager"]
