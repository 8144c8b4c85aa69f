# === FILE: site_mapper/scanner.py ===
"""
Модуль-обёртка для запуска обхода.
"""
import asyncio
import signal
from typing import Optional

from site_mapper.config import CrawlerConfig
from site_mapper.crawler.fetcher import HttpFetcher
from site_mapper.crawler.models import CrawlResult
from site_mapper.crawler.scheduler import CrawlScheduler
from site_mapper.logger import logger


def _install_interrupt_handler(scheduler: CrawlScheduler) -> bool:
    """Ctrl-C останавливает приём новых адресов; начатые загрузки дорабатывают."""
    def _on_interrupt() -> None:
        logger.warning("Прерывание: новые адреса не принимаются, ждём завершения загрузок")
        scheduler.stop()

    try:
        asyncio.get_running_loop().add_signal_handler(signal.SIGINT, _on_interrupt)
    except (NotImplementedError, RuntimeError, ValueError) as exc:
        # нет поддержки сигналов в цикле (Windows) или не главный поток
        logger.debug("SIGINT handler not installed: %s", exc)
        return False
    return True


async def start_crawl(seed: str, cfg: Optional[CrawlerConfig] = None) -> CrawlResult:
    """
    Открывает HTTP-сессию, запускает CrawlScheduler от seed и возвращает результат.

    На время обхода SIGINT переводит CrawlScheduler в режим stop():
    результат возвращается по уже посещённым адресам.

    Parameters
    ----------
    seed : str
        Стартовый адрес.
    cfg : CrawlerConfig, optional
        Конфигурация обхода; по умолчанию — значения CrawlerConfig().

    Returns
    -------
    CrawlResult
        Множество посещённых адресов и адреса, загрузка которых не удалась.
    """
    cfg = cfg or CrawlerConfig()
    async with HttpFetcher.from_config(cfg) as fetcher:
        scheduler = CrawlScheduler(fetcher, cfg)
        installed = _install_interrupt_handler(scheduler)
        try:
            return await scheduler.run(seed)
        finally:
            if installed:
                asyncio.get_running_loop().remove_signal_handler(signal.SIGINT)

__all__ = ["start_crawl"]
