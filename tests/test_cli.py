import json

import pytest

from mal_schedule_export import cli
from mal_schedule_export.errors import FetchError


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    # setup_logging caches loggers bound to the captured stream
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: None)


@pytest.fixture
def saved_page(tmp_path, schedule_page_html):
    path = tmp_path / "schedule.html"
    path.write_text(schedule_page_html, encoding="utf-8")
    return path


def test_schedule_html_to_json(tmp_path, saved_page, capsys):
    out = tmp_path / "out"
    assert cli.main(["--schedule-html", str(saved_page), "-f", "json", "-o", str(out)]) == 0

    payload = json.loads((tmp_path / "out.json").read_text(encoding="utf-8"))
    assert payload["total"] == 2
    assert "Exported 2 show(s)" in capsys.readouterr().out


def test_list_summary(saved_page, capsys):
    assert cli.main(["--schedule-html", str(saved_page), "--list"]) == 0
    out = capsys.readouterr().out
    assert "Sousou no Frieren 2nd Season" in out
    assert "123,456" in out
    assert "2 show(s) across 2 day(s)" in out


def test_missing_html_file(tmp_path, capsys):
    assert cli.main(["--schedule-html", str(tmp_path / "nope.html")]) == 1
    assert "not found" in capsys.readouterr().err


def test_no_mode(capsys):
    assert cli.main([]) == 1
    assert "No mode specified" in capsys.readouterr().err


def test_fetch_failure(monkeypatch, capsys):
    def fake_fetch(config):
        raise FetchError("Failed to fetch schedule: 500", status=500)

    monkeypatch.setattr(cli, "fetch_schedule", fake_fetch)
    assert cli.main(["--fetch"]) == 1
    assert "Failed to fetch schedule: 500" in capsys.readouterr().err


def test_directory_as_html_file(tmp_path, capsys):
    assert cli.main(["--schedule-html", str(tmp_path)]) == 1
    assert "not found" in capsys.readouterr().err


def test_unexpected_fetch_error(monkeypatch, capsys):
    def fake_fetch(config):
        raise RuntimeError("markup exploded")

    monkeypatch.setattr(cli, "fetch_schedule", fake_fetch)
    assert cli.main(["--fetch"]) == 1
    assert "markup exploded" in capsys.readouterr().err


def test_unexpected_parse_error(monkeypatch, saved_page, capsys):
    def fake_parse(**kwargs):
        raise RuntimeError("bad tree")

    monkeypatch.setattr(cli, "parse_schedule_html", fake_parse)
    assert cli.main(["--schedule-html", str(saved_page)]) == 1
    assert "bad tree" in capsys.readouterr().err


def test_serve_with_port_zero(monkeypatch):
    seen = {}
    monkeypatch.setattr(cli, "serve", lambda config: seen.update(host=config.host, port=config.port))
    assert cli.main(["--serve", "--port", "0", "--host", ""]) == 0
    assert seen == {"host": "", "port": 0}
