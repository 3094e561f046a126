# schooldash/state/fetch.py
import asyncio
from typing import Awaitable, Callable, Generic, Optional, TypeVar

from schooldash.core.errors import error_message
from schooldash.core.logging import log

T = TypeVar("T")


class FetchResource(Generic[T]):
    """
    Wraps one async call as {data, loading, error, refetch}.

    Overlapping refetch() calls share the request already in flight, unless
    force=True: then a new request is sent and the older one's result is
    dropped when it lands. close() cancels the in-flight request; anything
    that completes afterwards is dropped.
    """

    def __init__(self, call: Optional[Callable[[], Awaitable[T]]], initial: Optional[T] = None, name: str = "fetch"):
        self._call = call
        self.name = name
        self.data: Optional[T] = initial
        self.error: Optional[str] = None
        self.loading: bool = call is not None
        self._inflight: Optional[asyncio.Task] = None
        self._generation = 0
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def refetch(self, force: bool = False) -> Optional[T]:
        if self._call is None:
            self.loading = False
            return self.data
        if self._closed:
            return self.data

        task = self._inflight
        if force or task is None or task.done():
            if force and task is not None and not task.done():
                log.debug("fetch_superseded", resource=self.name, generation=self._generation)
            self._generation += 1
            task = self._inflight = asyncio.ensure_future(self._run(self._generation))

        while True:
            try:
                result = await asyncio.shield(task)
            except asyncio.CancelledError:
                if self._closed and task.cancelled():
                    return self.data
                raise
            # A forced refetch replaced this request while we waited; follow the newer one
            if self._closed or self._inflight is None or task is self._inflight:
                return result
            task = self._inflight

    def _current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    async def _run(self, generation: int) -> Optional[T]:
        self.loading = True
        try:
            result = await self._call()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if self._current(generation):
                self.error = error_message(e)
                log.warning("fetch_failed", resource=self.name, error=self.error, error_type=type(e).__name__)
            return self.data
        else:
            if self._current(generation):
                self.data = result
                self.error = None
            else:
                log.debug("fetch_result_dropped", resource=self.name, generation=generation)
            return self.data
        finally:
            if self._current(generation):
                self.loading = False

    def set_data(self, value: T):
        self.data = value

    async def close(self):
        """Stop caring about this resource (page left): cancel and ignore late results"""
        self._closed = True
        self.loading = False
        task, self._inflight = self._inflight, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def __aenter__(self):
        await self.refetch()
        return self

    async def __aexit__(self, *exc_info):
        await self.close()
