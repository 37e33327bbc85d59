from __future__ import annotations

# Realtime bridge: subscribes to backend change events and turns them into
# per-table change versions that page scripts can poll. Any event (insert,
# update or delete) just bumps the version; pages react with a full reload.

import asyncio
import logging
import threading
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional, Tuple

from supabase import acreate_client

from socialhub.config import Settings

logger = logging.getLogger(__name__)

ClientFactory = Callable[[], Awaitable[Any]]


def supabase_client_factory(url: str, key: str) -> ClientFactory:
    async def _factory():
        return await acreate_client(url, key)

    return _factory


def bridge_key(settings: Settings) -> str:
    """
    Key for the process-wide subscription. Change events are filtered by row
    level security, and a bridge has no user session to pass policies scoped
    to signed-in users, so the service role is used when it is configured.
    """
    if settings.supabase_service_role_key:
        return settings.supabase_service_role_key
    logger.warning(
        "SUPABASE_SERVICE_ROLE_KEY is not set; realtime uses the anon key and "
        "misses changes on tables readable only by signed-in users"
    )
    return settings.supabase_anon_key


class RealtimeBridge:
    """
    Owns one asyncio loop in a daemon thread. Change callbacks only touch the
    version counters, under a lock; nothing here touches Streamlit.
    """

    def __init__(self, tables: Iterable[str], client_factory: ClientFactory, channel_prefix: str = "socialhub"):
        self.tables = tuple(tables)
        self.channel_prefix = channel_prefix
        self._client_factory = client_factory
        self._versions: Dict[str, int] = {t: 0 for t in self.tables}
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._stopping: Optional[asyncio.Event] = None
        self._ready = threading.Event()

    # -----------------------------
    # Versions
    # -----------------------------
    def notify(self, table: str, payload: Any = None) -> None:
        with self._lock:
            self._versions[table] = self._versions.get(table, 0) + 1
            version = self._versions[table]
        logger.debug("Change on %s (version %d)", table, version)

    def snapshot(self, tables: Optional[Iterable[str]] = None) -> Dict[str, int]:
        wanted = self.tables if tables is None else tuple(tables)
        with self._lock:
            return {t: self._versions.get(t, 0) for t in wanted}

    def changed_since(self, seen: Optional[Dict[str, int]], tables: Optional[Iterable[str]] = None) -> Tuple[set, Dict[str, int]]:
        """
        Compare a previously seen snapshot against the current one.
        Returns (changed table names, current snapshot). A missing snapshot
        counts as no change.
        """
        current = self.snapshot(tables)
        if seen is None:
            return set(), current
        changed = {t for t, v in current.items() if seen.get(t, 0) != v}
        return changed, current

    # -----------------------------
    # Subscription
    # -----------------------------
    def _callback_for(self, table: str) -> Callable[[Any], None]:
        def _on_change(payload: Any) -> None:
            self.notify(table, payload)

        return _on_change

    async def subscribe_all(self, client: Any) -> None:
        for table in self.tables:
            channel = client.channel(f"{self.channel_prefix}-{table}")
            channel.on_postgres_changes("*", schema="public", table=table, callback=self._callback_for(table))
            await channel.subscribe()
            logger.info("Subscribed to changes on %s", table)

    async def _run(self) -> None:
        self._stopping = asyncio.Event()
        client = await self._client_factory()
        try:
            await self.subscribe_all(client)
            self._ready.set()
            await self._stopping.wait()
        finally:
            self._ready.set()
            await client.remove_all_channels()
            logger.info("Realtime bridge %s stopped", self.channel_prefix)

    def _thread_main(self) -> None:
        self._loop = asyncio.new_event_loop()
        try:
            self._loop.run_until_complete(self._run())
        except Exception:
            logger.exception("Realtime bridge %s failed", self.channel_prefix)
        finally:
            self._ready.set()
            self._loop.close()

    def start(self) -> "RealtimeBridge":
        if self._thread is not None and self._thread.is_alive():
            return self
        self._ready.clear()
        self._thread = threading.Thread(
            target=self._thread_main,
            name=f"realtime-{self.channel_prefix}",
            daemon=True,
        )
        self._thread.start()
        return self

    def wait_ready(self, timeout: Optional[float] = None) -> bool:
        return self._ready.wait(timeout)

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        loop, stopping = self._loop, self._stopping
        if loop is not None and stopping is not None and not loop.is_closed():
            loop.call_soon_threadsafe(stopping.set)
        if self._thread is not None:
            self._thread.join(timeout)
