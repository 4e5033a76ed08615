"""블로킹 소스 조회를 돌리는 전용 스레드 풀이에요.

기본 실행기와 분리해 두면 오래 걸리는 조회가 다른 `to_thread` 작업을
막지 않아요. 타임아웃으로 버려진 조회도 끝날 때까지 워커를 잡고 있어서,
바쁜 워커 수를 세고 로그로 남겨요.
"""

from __future__ import annotations

import asyncio
import threading
from concurrent.futures import Future, ThreadPoolExecutor

from classsource_service.app.lookup.base import SourceLookupProvider, SourceLookupResult
from libs.common.logging import get_logger

logger = get_logger("classsource_service.lookup.workers")

DEFAULT_LOOKUP_WORKERS = 4


class LookupWorkerPool:
    """크기가 고정된 조회 전용 풀이에요."""

    def __init__(self, max_workers: int = DEFAULT_LOOKUP_WORKERS) -> None:
        self._max_workers = max(max_workers, 1)
        self._executor = ThreadPoolExecutor(
            max_workers=self._max_workers,
            thread_name_prefix="source-lookup",
        )
        self._busy = 0
        self._lock = threading.Lock()

    @property
    def max_workers(self) -> int:
        return self._max_workers

    @property
    def busy(self) -> int:
        """조회를 실행 중이거나 대기열에 있는 작업 수예요."""
        with self._lock:
            return self._busy

    async def lookup(self, provider: SourceLookupProvider, class_name: str) -> SourceLookupResult:
        with self._lock:
            self._busy += 1
            busy = self._busy
        if busy > self._max_workers:
            logger.warning(
                "lookup_workers_saturated",
                class_name=class_name,
                busy=busy,
                max_workers=self._max_workers,
            )

        try:
            submitted = self._executor.submit(provider.lookup, class_name)
        except RuntimeError:
            # 이미 닫힌 풀이에요
            with self._lock:
                self._busy -= 1
            raise
        # 실행이 끝나거나 대기 중에 취소되면 그때 바쁜 수를 줄여요
        submitted.add_done_callback(self._release)
        try:
            return await asyncio.wrap_future(submitted)
        except asyncio.CancelledError:
            logger.warning(
                "lookup_abandoned",
                class_name=class_name,
                busy=self.busy,
                max_workers=self._max_workers,
            )
            raise

    def _release(self, _: Future[SourceLookupResult]) -> None:
        with self._lock:
            self._busy -= 1

    def shutdown(self) -> None:
        """대기 중인 조회는 취소하고, 실행 중인 조회는 기다리지 않아요."""
        self._executor.shutdown(wait=False, cancel_futures=True)
