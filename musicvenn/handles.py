"""
Latest-wins asynchronous handle.

One owner submits work; every consumer awaits `wait()`, which always follows
the most recent submission. Each submission gets a monotonically increasing
request id so the work itself can check `is_current(request_id)` before
publishing its result.
"""
import asyncio
import logging
from typing import Awaitable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LatestHandle(Generic[T]):

    def __init__(self, name: str = "handle"):
        self.name = name
        self._request_id = 0
        self._task: Optional["asyncio.Future[T]"] = None

    @property
    def request_id(self) -> int:
        return self._request_id

    def next_request_id(self) -> int:
        self._request_id += 1
        return self._request_id

    def submit(self, work: Awaitable[T], request_id: Optional[int] = None) -> int:
        """
        Schedule `work` as the current handle and return its request id.

        Must be called with a running event loop. Pass `request_id` when the
        work was built with an id from `next_request_id()`.
        """
        if request_id is None:
            request_id = self.next_request_id()
        elif request_id != self._request_id:
            raise ValueError(f"{self.name}: request {request_id} is already superseded.")
        self._task = asyncio.ensure_future(work)
        logger.debug("%s: submitted request %d.", self.name, request_id)
        return request_id

    def is_current(self, request_id: int) -> bool:
        return request_id == self._request_id

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    async def wait(self) -> Optional[T]:
        """
        Result of the latest submission. If another submission arrives while
        waiting, keep waiting on the newer one. Returns None if nothing was
        ever submitted.
        """
        while True:
            task, request_id = self._task, self._request_id
            if task is None:
                return None
            result = await asyncio.shield(task)
            if self.is_current(request_id) and task is self._task:
                return result
            logger.debug("%s: request %d superseded while waiting.", self.name, request_id)
