# === FILE: site_mapper/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска краулера SiteMapper через командную строку.

Использование:
  site_mapper [OPTIONS] START_URL

Опции:
  --config PATH        Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --concurrency INT    Число одновременных загрузок (override max_concurrency)
  --scope MODE         same-origin | relative | unrestricted
  --timeout SEC        Таймаут одного запроса (секунд)
  --limit INT          Макс. число адресов (override max_pages)
  --json PATH          Сохранить JSON-отчёт в файл
  --pretty             Преформатировать JSON (отступ 2)
  --log-level LEVEL    Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH      Файл для логов (только stderr, если не указан)
  --version, -v        Показать версию SiteMapper

Без START_URL печатает подсказку и завершается с кодом 0.
Посещённые адреса выводятся в stdout по одному на строку.

Пример:
  site_mapper --concurrency 8 --json report.json https://example.com
"""
import asyncio
import sys
from pathlib import Path

import click

from site_mapper import __version__
from site_mapper.config import CrawlerConfig, load_config
from site_mapper.crawler.models import InvalidReference, LinkScope
from site_mapper.logger import init_logging, logger
from site_mapper.report.json_report import render_json
from site_mapper.scanner import start_crawl

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.command(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteMapper, version %(version)s')
@click.argument('start_url', required=False)
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--concurrency', '-n', 'concurrency',
    type=int,
    default=None,
    help='Число одновременных загрузок (override max_concurrency)'
)
@click.option(
    '--scope', 'scope',
    type=click.Choice([s.value for s in LinkScope]),
    default=None,
    help='Какие найденные ссылки обходить'
)
@click.option(
    '--timeout', 'timeout',
    type=float,
    default=None,
    help='Таймаут одного запроса (секунд)'
)
@click.option(
    '--limit', '-l', 'limit',
    type=int,
    default=None,
    help='Макс. число адресов (override max_pages)'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--pretty', is_flag=True,
    help='Преформатировать JSON-вывод (отступ 2)'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stderr, если не указан)'
)
@click.pass_context
def cli(ctx, start_url, config_path, concurrency, scope, timeout, limit,
        json_output, pretty, log_level, log_file):
    """Обойти сайт начиная с START_URL и вывести все найденные адреса."""
    if not start_url:
        click.echo(ctx.get_usage())
        return

    init_logging(level=log_level, log_file=str(log_file) if log_file else None)

    try:
        cfg = load_config(config_path)
        overrides = {
            'max_concurrency': concurrency,
            'scope': scope,
            'timeout': timeout,
            'max_pages': limit,
        }
        overrides = {k: v for k, v in overrides.items() if v is not None}
        if overrides:
            cfg = CrawlerConfig(**{**cfg.model_dump(), **overrides})
    except (OSError, ValueError, TypeError) as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')

    try:
        result = asyncio.run(start_crawl(start_url, cfg))
    except InvalidReference as e:
        print_error(f'Некорректный стартовый адрес: {e}')
    except Exception as e:
        logger.exception("Crawl aborted")
        print_error(f'Ошибка при обходе: {e}')

    for address in sorted(result.visited):
        click.echo(address)

    if result.failed:
        logger.info("Не удалось загрузить %d адресов", len(result.failed))

    if json_output:
        try:
            saved = render_json(result, json_output, pretty=pretty)
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')
        logger.info("JSON report: %s", saved)


if __name__ == "__main__":
    cli()
