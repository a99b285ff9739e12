"""Single Flight"""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Generic, Hashable, TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")


class SingleFlight(Generic[T]):
    """
    同一キーの並行呼び出しを 1 回に集約する

    実行中のキーに対する呼び出しは同じ結果（または例外）を受け取る。
    処理は SingleFlight が所有するタスクで実行されるため、
    呼び出し元がキャンセルされても待機をやめるだけで、他の呼び出し元には影響しない。
    完了後はキーが解放され、次の呼び出しは再実行される。
    """

    def __init__(self, name: str = "single_flight"):
        self.name = name
        self._in_flight: dict[Hashable, asyncio.Future[T]] = {}

    def in_flight(self, key: Hashable) -> bool:
        return key in self._in_flight

    async def run(self, key: Hashable, factory: Callable[[], Awaitable[T]]) -> T:
        task = self._in_flight.get(key)
        if task is not None:
            logger.info("single_flight_joined", name=self.name, key=str(key))
        else:
            task = asyncio.ensure_future(factory())
            self._in_flight[key] = task
            task.add_done_callback(lambda done: self._release(key, done))

        return await asyncio.shield(task)

    def _release(self, key: Hashable, task: asyncio.Future[T]) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
        # 待機者がいない場合の "exception was never retrieved" を抑止
        if not task.cancelled():
            task.exception()
