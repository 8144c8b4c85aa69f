# === FILE: site_mapper/crawler/scheduler.py ===
from __future__ import annotations

import asyncio
import time
from typing import Callable, Dict, Iterable, List, Optional, Set

from site_mapper.crawler.content_type import DEFAULT_CONTENT_TYPES, is_crawlable
from site_mapper.crawler.fetcher import Fetcher
from site_mapper.crawler.link_extractor import extract_hrefs
from site_mapper.crawler.models import (
    CrawlResult,
    FetchError,
    InvalidReference,
    LinkScope,
    WorkBatch,
)
from site_mapper.crawler.normalizer import in_scope, normalize, sanitize_links
from site_mapper.logger import logger

__all__ = ("CrawlScheduler",)


class CrawlScheduler:
    """
    Обход в ширину с ограничением параллелизма.

    Множество посещённых адресов и счётчик незавершённой работы принадлежат
    только циклу run(): задачи загрузки присылают ему WorkBatch через очередь,
    поэтому проверка-и-вставка атомарна без блокировок. Обход завершён,
    когда счётчик опускается до нуля.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        config=None,
        *,
        extractor: Callable[[str], Iterable[str]] = extract_hrefs,
    ) -> None:
        self.fetcher = fetcher
        self.extractor = extractor
        self.max_concurrency: int = getattr(config, "max_concurrency", 4)
        self.allowed_types = tuple(getattr(config, "allowed_content_types", DEFAULT_CONTENT_TYPES))
        self.scope: LinkScope = LinkScope(getattr(config, "scope", LinkScope.SAME_ORIGIN))
        self.max_pages: Optional[int] = getattr(config, "max_pages", None)
        if self.max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self._stopping = asyncio.Event()
        self._tasks: Set[asyncio.Task[None]] = set()
        self._errors: List[BaseException] = []

    def stop(self) -> None:
        """Закрыть приём новых адресов; ещё не начатые загрузки будут пропущены."""
        self._stopping.set()

    @property
    def stopping(self) -> bool:
        return self._stopping.is_set()

    async def run(self, seed: str) -> CrawlResult:
        root = normalize(seed, seed)
        if not root or not in_scope(seed, root, root, LinkScope.UNRESTRICTED):
            raise InvalidReference(f"seed is not an absolute http(s) address: {seed!r}")

        logger.info("Старт обхода: %s (параллелизм %d, область %s)", root, self.max_concurrency, self.scope.value)
        start = time.monotonic()
        inbox: asyncio.Queue[WorkBatch] = asyncio.Queue()
        tokens = asyncio.Semaphore(self.max_concurrency)
        visited: Set[str] = {root}
        failed: Dict[str, str] = {}
        pending = 1
        self._tasks = set()
        self._errors = []
        self._spawn(root, tokens, inbox)

        try:
            while pending > 0:
                batch = await inbox.get()
                pending -= 1
                if batch.error is not None:
                    failed[batch.source] = batch.error
                for address in batch.addresses:
                    if address in visited or not self._admitting(len(visited)):
                        continue
                    visited.add(address)
                    pending += 1
                    self._spawn(address, tokens, inbox)

            # every task has delivered its batch; wait for the stragglers to exit
            if self._tasks:
                await asyncio.wait(set(self._tasks))
            if self._errors:
                raise self._errors[0]
        finally:
            for task in list(self._tasks):
                task.cancel()
            self._tasks.clear()

        duration = time.monotonic() - start
        logger.info(
            "Завершено: %d адресов за %.2f с (%.2f стр/с), ошибок: %d",
            len(visited), duration, len(visited) / duration if duration else 0, len(failed),
        )
        return CrawlResult(seed=root, visited=frozenset(visited), failed=failed)

    def _admitting(self, visited_count: int) -> bool:
        if self._stopping.is_set():
            return False
        return self.max_pages is None or visited_count < self.max_pages

    def _spawn(self, address: str, tokens: asyncio.Semaphore, inbox: asyncio.Queue[WorkBatch]) -> None:
        task = asyncio.create_task(self._visit(address, tokens, inbox))
        self._tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            self._errors.append(task.exception())

    @property
    def in_flight(self) -> int:
        """Число ещё не завершившихся задач загрузки."""
        return len(self._tasks)

    async def _visit(self, address: str, tokens: asyncio.Semaphore, inbox: asyncio.Queue[WorkBatch]) -> None:
        """Ровно один WorkBatch на адрес, при любом исходе."""
        batch = WorkBatch(source=address)
        try:
            batch = await self._collect(address, tokens)
        except FetchError as e:
            logger.warning("Failed %s: %s", address, e.reason)
            batch.error = e.reason
        finally:
            inbox.put_nowait(batch)

    async def _collect(self, address: str, tokens: asyncio.Semaphore) -> WorkBatch:
        async with tokens:
            if self._stopping.is_set():
                return WorkBatch(source=address)
            result = await self.fetcher.fetch(address)

        if result.url != address:
            logger.debug("Редирект: %s -> %s", address, result.url)
        if result.status >= 400:
            logger.warning("Failed %s: HTTP %d", address, result.status)
            return WorkBatch(source=address, error=f"HTTP {result.status}")
        if not is_crawlable(result.content_type, self.allowed_types):
            logger.debug("Не HTML: %s (%s)", address, result.content_type or "-")
            return WorkBatch(source=address)

        links: List[str] = sanitize_links(self.extractor(result.content), address, self.scope)
        logger.debug("%d %s (+%d ссылок)", result.status, address, len(links))
        return WorkBatch(source=address, addresses=links)
