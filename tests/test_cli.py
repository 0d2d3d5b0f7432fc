import logging
import textwrap
from types import SimpleNamespace

import pytest

from arpeggios import cli
from arpeggios.basepath import BasePathStrategy
from arpeggios.config import AppConfig, LoggingConfig
from arpeggios.feeds import MalformedItem


def _restore_root_handlers(original_handlers):
    for handler in logging.getLogger().handlers[:]:
        logging.getLogger().removeHandler(handler)
        handler.close()
    for handler in original_handlers:
        logging.getLogger().addHandler(handler)


def test_configure_logging_defaults_to_console_only():
    original_handlers = list(logging.getLogger().handlers)
    try:
        cli.configure_logging("INFO")

        handlers = logging.getLogger().handlers
        assert any(isinstance(handler, logging.StreamHandler) for handler in handlers)
        assert not any(isinstance(handler, logging.FileHandler) for handler in handlers)
    finally:
        _restore_root_handlers(original_handlers)


def test_configure_logging_with_log_file_creates_file_handler(tmp_path):
    original_handlers = list(logging.getLogger().handlers)
    try:
        log_path = tmp_path / "logs" / "feed.log"
        cli.configure_logging("DEBUG", str(log_path))

        assert log_path.exists()
        handlers = logging.getLogger().handlers
        assert any(isinstance(handler, logging.FileHandler) for handler in handlers)
    finally:
        _restore_root_handlers(original_handlers)


def test_configure_logging_rejects_unknown_level():
    with pytest.raises(ValueError):
        cli.configure_logging("CHATTY")


def _stub_app(monkeypatch, app_config, env_vars=None):
    monkeypatch.setattr(cli, "configure_logging", lambda level, log_file=None: None)
    monkeypatch.setattr(cli, "parse_app_config", lambda path: app_config)
    monkeypatch.setattr(cli, "parse_env_config", lambda path: env_vars or {})
    captured = {}

    def fake_execute(config):
        captured["config"] = config
        return SimpleNamespace(output_text="<rss/>", document=None, site=None)

    monkeypatch.setattr(cli, "execute", fake_execute)
    return captured


def test_main_loads_config_and_runs(monkeypatch, capsys):
    app_config = AppConfig(
        content_dir="posts",
        env_file="env.xml",
        site="https://example.com",
        base_path=BasePathStrategy.env(),
        limit=5,
    )
    captured = _stub_app(monkeypatch, app_config, {"BASE_PATH": "/arpeggios/"})

    exit_code = cli.main(["--config", "configs/test.xml"])

    assert exit_code == 0
    run_config = captured["config"]
    assert run_config.content_dir == "posts"
    assert run_config.site == "https://example.com"
    assert run_config.limit == 5
    assert run_config.environ["BASE_PATH"] == "/arpeggios/"
    assert "<rss/>" in capsys.readouterr().out


def test_main_cli_overrides(monkeypatch, capsys):
    app_config = AppConfig(
        content_dir="posts",
        output_file="config.xml.out",
        limit=5,
        logging=LoggingConfig(level="INFO", file="config.log"),
    )
    captured = _stub_app(monkeypatch, app_config)
    log_config = {}

    def fake_configure(level, log_file=None):
        log_config["level"] = level
        log_config["file"] = log_file

    monkeypatch.setattr(cli, "configure_logging", fake_configure)

    exit_code = cli.main(
        [
            "--log-level",
            "DEBUG",
            "--log-file",
            "cli.log",
            "--output",
            "out.xml",
            "--base-path",
            "/fixed/",
            "--limit",
            "2",
        ]
    )

    assert exit_code == 0
    assert log_config == {"level": "DEBUG", "file": "cli.log"}
    run_config = captured["config"]
    assert run_config.output_file == "out.xml"
    assert run_config.base_path == BasePathStrategy.fixed("/fixed/")
    assert run_config.limit == 2
    assert capsys.readouterr().out == ""


def test_main_rejects_non_positive_limit(monkeypatch):
    _stub_app(monkeypatch, AppConfig(content_dir="posts"))

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--limit", "0"])

    assert excinfo.value.code == 2


def test_main_reports_config_errors_via_parser(monkeypatch):
    def broken_config(path):
        raise ValueError("Config missing <content> or <content-url>.")

    monkeypatch.setattr(cli, "parse_app_config", broken_config)

    with pytest.raises(SystemExit) as excinfo:
        cli.main([])

    assert excinfo.value.code == 2


def test_main_returns_error_on_malformed_item(monkeypatch):
    _stub_app(monkeypatch, AppConfig(content_dir="posts"))

    def failing_execute(config):
        raise MalformedItem("publish_date", 0, "a")

    monkeypatch.setattr(cli, "execute", failing_execute)

    assert cli.main([]) == 1


def test_main_returns_error_on_fetch_failure(monkeypatch):
    _stub_app(monkeypatch, AppConfig(content_url="https://example.com/posts.json"))

    def failing_execute(config):
        raise OSError("network down")

    monkeypatch.setattr(cli, "execute", failing_execute)

    assert cli.main([]) == 1


def test_main_end_to_end(monkeypatch, tmp_path, posts_dir):
    monkeypatch.setattr(cli, "configure_logging", lambda level, log_file=None: None)
    (tmp_path / "env.xml").write_text(
        '<environment><variable name="BASE_PATH">/arpeggios/</variable></environment>',
        encoding="utf-8",
    )
    config_file = tmp_path / "config.xml"
    config_file.write_text(
        textwrap.dedent(
            """\
            <config>
                <env>env.xml</env>
                <content>posts</content>
                <output>dist/rss.xml</output>
                <site>https://example.com</site>
                <base-path strategy="env" />
            </config>
            """
        ),
        encoding="utf-8",
    )

    exit_code = cli.main(["--config", str(config_file)])

    assert exit_code == 0
    xml = (tmp_path / "dist" / "rss.xml").read_text(encoding="utf-8")
    assert "<link>https://example.com/arpeggios/posts/b-flat/</link>" in xml
    assert xml.index("b-flat") < xml.index("a-minor")
