from __future__ import annotations

import threading
import time
from typing import Optional

from .config import QUERY_TIMEOUT_SECONDS, REQUEST_TIMEOUT_SECONDS
from .errors import QueryTimeout


class Deadline:
    """
    요청 단위 deadline + 취소 토큰.

    - 하나의 요청 안에서 모든 gateway 호출에 같은 인스턴스를 넘긴다.
    - 각 호출은 call_timeout()으로 남은 시간을 받아 드라이버 / HTTP 타임아웃으로 사용.
    - 시간이 다 되었거나 cancel()된 경우 호출 전에 QueryTimeout.
    """

    def __init__(
        self,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        per_call_timeout: float = QUERY_TIMEOUT_SECONDS,
    ):
        self.timeout = timeout
        self.per_call_timeout = per_call_timeout
        self._started = time.monotonic()
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self) -> float:
        return self.timeout - (time.monotonic() - self._started)

    def call_timeout(self) -> float:
        if self.cancelled:
            raise QueryTimeout("Request was cancelled")
        remaining = self.remaining()
        if remaining <= 0:
            raise QueryTimeout(f"Request deadline of {self.timeout}s exceeded")
        return min(remaining, self.per_call_timeout)


def ensure_deadline(deadline: Optional[Deadline]) -> Deadline:
    return deadline if deadline is not None else Deadline()
