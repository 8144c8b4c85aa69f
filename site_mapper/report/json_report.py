# site_mapper/report/json_report.py

"""
Генерация JSON-отчёта для проекта SiteMapper.

Сериализация объекта CrawlResult в файл.
"""
import json
from pathlib import Path
from typing import Any, Dict

from site_mapper.crawler.models import CrawlResult


def result_to_dict(result: CrawlResult) -> Dict[str, Any]:
    """Плоское представление результата; адреса отсортированы для стабильного вывода."""
    return {
        'seed': result.seed,
        'visited': sorted(result.visited),
        'failed': dict(sorted(result.failed.items())),
    }


def render_json(result: CrawlResult, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Сохраняет результат обхода в формате JSON по указанному пути.

    :param result: объект CrawlResult
    :param output_path: путь к JSON-файлу
    :param pretty: отступ 2 пробела
    :return: Path сохранённого файла
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(result_to_dict(result), f, ensure_ascii=False, indent=2 if pretty else None)

    return output
