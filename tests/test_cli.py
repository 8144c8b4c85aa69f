# File: tests/test_cli.py
"""Тесты для CLI с использованием click.testing.CliRunner.
Проверяют вывод адресов, подсказку без аргументов, переопределение конфига и ошибки.
"""
import json

import pytest
from click.testing import CliRunner

import site_mapper.cli as cli_module
from site_mapper.cli import cli
from site_mapper.crawler.models import CrawlResult, InvalidReference, LinkScope

SEED = "http://example.com"


@pytest.fixture(autouse=True)
def patch_start_crawl(monkeypatch, tmp_path):
    """Патчим start_crawl: без сети, запоминаем переданный конфиг."""
    calls = []

    async def fake_crawl(seed, cfg):
        calls.append((seed, cfg))
        return CrawlResult(
            seed=SEED,
            visited=frozenset({SEED, f"{SEED}/b", f"{SEED}/a"}),
            failed={f"{SEED}/b": "HTTP 500"},
        )

    monkeypatch.setattr(cli_module, "start_crawl", fake_crawl)
    monkeypatch.chdir(tmp_path)
    return calls


def test_usage_without_start_url(patch_start_crawl):
    result = CliRunner().invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage:" in result.output
    assert patch_start_crawl == []


def test_version_option():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "SiteMapper" in result.output


def test_prints_visited_addresses(patch_start_crawl):
    result = CliRunner().invoke(cli, ["--log-level", "ERROR", SEED])
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[:3] == [SEED, f"{SEED}/a", f"{SEED}/b"]
    seed, cfg = patch_start_crawl[0]
    assert seed == SEED
    assert cfg.max_concurrency == 4


def test_options_override_config(tmp_path, patch_start_crawl):
    cfg_file = tmp_path / "crawl.yaml"
    cfg_file.write_text("max_concurrency: 2\ntimeout: 3.0\n", encoding="utf-8")

    result = CliRunner().invoke(
        cli,
        ["-c", str(cfg_file), "--concurrency", "7", "--scope", "relative", "--limit", "5", SEED],
    )
    assert result.exit_code == 0
    _, cfg = patch_start_crawl[0]
    assert cfg.max_concurrency == 7
    assert cfg.scope is LinkScope.RELATIVE
    assert cfg.max_pages == 5
    assert cfg.timeout == 3.0


def test_json_report(tmp_path):
    out = tmp_path / "reports" / "out.json"
    result = CliRunner().invoke(cli, ["--json", str(out), "--pretty", SEED])
    assert result.exit_code == 0
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["seed"] == SEED
    assert data["visited"] == [SEED, f"{SEED}/a", f"{SEED}/b"]
    assert data["failed"] == {f"{SEED}/b": "HTTP 500"}


def test_invalid_option_value_is_reported():
    result = CliRunner().invoke(cli, ["--concurrency", "0", SEED])
    assert result.exit_code == 1
    assert "Ошибка загрузки конфигурации" in result.output


def test_broken_config_file(tmp_path):
    cfg_file = tmp_path / "broken.yaml"
    cfg_file.write_text("- not\n- a mapping\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), SEED])
    assert result.exit_code == 1


def test_invalid_seed(monkeypatch):
    async def reject(seed, cfg):
        raise InvalidReference(f"seed is not an absolute http(s) address: {seed!r}")

    monkeypatch.setattr(cli_module, "start_crawl", reject)
    result = CliRunner().invoke(cli, ["mailto:nobody@example.com"])
    assert result.exit_code == 1
    assert "Некорректный стартовый адрес" in result.output
