"""
Async request state holders used by generated use_route_*.py and client.py.

AutoFetchQuery (read verb) fetches when started and again when its inputs
change; Mutation (other verbs) sends on demand. Both expose data, error and
is_loading, and both support cancellation and a timeout.
"""

from __future__ import annotations

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

CANCELED_MESSAGE = "Fetch canceled by user"


class HookError(Exception):
    """Non-2xx response from a generated route."""

    def __init__(self, message: str, status_code: int, body: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body


def timeout_message(timeout: float) -> str:
    return f"Timeout: It took more than {timeout:g} seconds to get the result!"


def read_json_response(response: httpx.Response) -> Any:
    """Decoded JSON body of a 2xx response; HookError with the route's message otherwise."""
    try:
        body = response.json() if response.content else None
    except ValueError:
        body = response.text
    if response.is_success:
        return body
    message = body.get("message") if isinstance(body, dict) else None
    raise HookError(message or response.reason_phrase or "Request failed", response.status_code, body)


class _HookBase(ABC):
    method = "GET"
    timeout: float = 5.0

    def __init__(self, base_url: str = "", *, client: Optional[httpx.AsyncClient] = None, timeout: Optional[float] = None):
        self.base_url = base_url
        self._client = client
        if timeout is not None:
            self.timeout = timeout

        self.data: Any = None
        self.error: Optional[str] = None
        self.is_loading = False

    @abstractmethod
    def build_url(self, params: Optional[dict[str, Any]]) -> str:
        raise NotImplementedError

    async def _request(self, url: str, *, query: Any = None, body: Any = None) -> httpx.Response:
        kwargs: dict[str, Any] = {}
        if query:
            kwargs["params"] = query
        if body is not None:
            kwargs["json"] = body
        if self._client is not None:
            return await self._client.request(self.method, url, **kwargs)
        async with httpx.AsyncClient(base_url=self.base_url) as client:
            return await client.request(self.method, url, **kwargs)


class AutoFetchQuery(_HookBase):
    """
    Subclasses set params / query and implement build_url(params).

        query = RouteGetQuery(base_url, params={"postId": "1"})
        await query.fetch()            # or: query.start(); ...; await query.wait()
        query.set_inputs(params={"postId": "2"})   # schedules a new fetch
    """

    params: Optional[dict[str, Any]] = None
    query: Optional[dict[str, Any]] = None

    def __init__(self, base_url: str = "", *, client: Optional[httpx.AsyncClient] = None, timeout: Optional[float] = None):
        super().__init__(base_url, client=client, timeout=timeout)
        self.last_fetched_at: Optional[float] = None
        # bumped per run; only the latest run may publish its result
        self._run_id = 0
        self._task: Optional[asyncio.Task] = None
        self._inputs_key: Optional[str] = None

    def inputs_key(self) -> str:
        return repr((self.build_url(self.params), sorted((self.query or {}).items())))

    def start(self) -> asyncio.Task:
        """Begin a fetch in the background, replacing one already in flight."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._inputs_key = self.inputs_key()
        self._run_id += 1
        self._task = asyncio.ensure_future(self._run(self._run_id))
        return self._task

    async def wait(self) -> Any:
        if self._task is None:
            return self.data
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        return self.data

    async def fetch(self) -> Any:
        self.start()
        return await self.wait()

    async def refetch(self) -> Any:
        return await self.fetch()

    def set_inputs(self, **inputs: Any) -> bool:
        """Update params/query; returns True when that scheduled a new fetch."""
        for name, value in inputs.items():
            setattr(self, name, value)
        if self._inputs_key is None or self.inputs_key() == self._inputs_key:
            return False
        self.start()
        return True

    def cancel(self) -> None:
        if self._task is None or self._task.done():
            return
        self._task.cancel()
        self.error = CANCELED_MESSAGE
        self.is_loading = False

    async def _run(self, run_id: int) -> None:
        self.last_fetched_at = time.time()
        self.is_loading = True
        self.error = None
        self.data = None
        data: Any = None
        error: Optional[str] = None
        try:
            response = await asyncio.wait_for(
                self._request(self.build_url(self.params), query=self.query),
                timeout=self.timeout,
            )
            data = read_json_response(response)
        except asyncio.TimeoutError:
            error = timeout_message(self.timeout)
        except HookError as exc:
            error = exc.message
        except httpx.HTTPError as exc:
            logger.debug("GET %s failed", self.build_url(self.params), exc_info=True)
            error = str(exc) or exc.__class__.__name__
        finally:
            if run_id == self._run_id:
                self.is_loading = False
        if run_id == self._run_id:
            self.data = data
            self.error = error

    async def __aenter__(self) -> AutoFetchQuery:
        self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.cancel()


class Mutation(_HookBase):
    """
    Subclasses set method, implement build_url(params) and expose a typed
    fetch_data(...) that forwards to send().
    """

    timeout: float = 10.0

    async def send(
        self,
        *,
        body: Any = None,
        params: Optional[dict[str, Any]] = None,
        query: Optional[dict[str, Any]] = None,
        cancel_event: Optional[asyncio.Event] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """
        Perform the request. Returns the decoded data, or None with error set
        when the call failed, timed out or cancel_event was set first.
        """
        limit = self.timeout if timeout is None else timeout
        self.is_loading = True
        self.error = None

        request = asyncio.ensure_future(self._request(self.build_url(params), query=query, body=body))
        waiters = {request}
        stopper = None
        if cancel_event is not None:
            stopper = asyncio.ensure_future(cancel_event.wait())
            waiters.add(stopper)

        try:
            done, pending = await asyncio.wait(waiters, timeout=limit, return_when=asyncio.FIRST_COMPLETED)
            for task in pending:
                task.cancel()

            if request not in done:
                self.error = CANCELED_MESSAGE if stopper is not None and stopper in done else timeout_message(limit)
                return None

            self.data = read_json_response(request.result())
            return self.data
        except HookError as exc:
            self.error = exc.message
            return None
        except httpx.HTTPError as exc:
            logger.debug("%s %s failed", self.method, self.build_url(params), exc_info=True)
            self.error = str(exc) or exc.__class__.__name__
            return None
        finally:
            self.is_loading = False
