from __future__ import annotations
import asyncio
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Tuple, Union

from tracewalk.core.errors import CompletionError, UnmatchedTrace


@dataclass(frozen=True)
class Success:
    label: str


@dataclass(frozen=True)
class Failure:
    trace: Tuple[str, ...]


Result = Union[Success, Failure]

SuccessCallback = Callable[[str], None]
FailureCallback = Callable[[Tuple[str, ...]], None]


class Completion:
    """
    Single-assignment, two-outcome result cell.

    Exactly one of resolve()/reject() may ever be called; a second call raises
    CompletionError. The result is consumed by a single observer, registered either
    with subscribe() or by awaiting wait().
    """

    def __init__(self) -> None:
        self._result: Optional[Result] = None
        self._observer: Optional[Tuple[SuccessCallback, FailureCallback]] = None

    @property
    def done(self) -> bool:
        return self._result is not None

    @property
    def result(self) -> Optional[Result]:
        return self._result

    def resolve(self, label: str) -> None:
        self._set(Success(label))

    def reject(self, trace: Iterable[str]) -> None:
        self._set(Failure(tuple(trace)))

    def _set(self, result: Result) -> None:
        if self._result is not None:
            raise CompletionError(f"completion already settled with {self._result!r}")
        self._result = result
        self._notify()

    def subscribe(self, on_success: SuccessCallback, on_failure: FailureCallback) -> None:
        if self._observer is not None:
            raise CompletionError("completion already has an observer")
        self._observer = (on_success, on_failure)
        if self._result is not None:
            self._notify()

    def _notify(self) -> None:
        if self._observer is None:
            return
        on_success, on_failure = self._observer
        if isinstance(self._result, Success):
            on_success(self._result.label)
        elif isinstance(self._result, Failure):
            on_failure(self._result.trace)

    async def wait(self) -> str:
        """Wait for the outcome; return the terminal label or raise UnmatchedTrace."""
        fut: asyncio.Future = asyncio.get_running_loop().create_future()

        def _ok(label: str) -> None:
            if not fut.done():
                fut.set_result(label)

        def _fail(trace: Tuple[str, ...]) -> None:
            if not fut.done():
                fut.set_exception(UnmatchedTrace(trace))

        self.subscribe(_ok, _fail)
        return await fut
