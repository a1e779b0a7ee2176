"""Unit tests for the command-line interface."""

import os
from pathlib import Path

import pytest

from page_loader import cli
from page_loader.cli import build_parser
from page_loader.errors import HttpStatusError
from page_loader.models import PageResult


class TestBuildParser:
    """Tests for CLI argument parser."""

    def test_url_only(self) -> None:
        args = build_parser().parse_args(["https://ru.hexlet.io/courses"])
        assert args.url == "https://ru.hexlet.io/courses"
        assert args.output == os.getcwd()
        assert args.verbose is False

    def test_output_short_and_long(self) -> None:
        assert build_parser().parse_args(["-o", "/tmp/x", "https://a.com"]).output == "/tmp/x"
        assert build_parser().parse_args(["--output", "/tmp/y", "https://a.com"]).output == "/tmp/y"

    def test_verbose_flag(self) -> None:
        args = build_parser().parse_args(["-v", "https://a.com"])
        assert args.verbose is True

    def test_progress_on_by_default(self) -> None:
        assert build_parser().parse_args(["https://a.com"]).progress is True
        assert build_parser().parse_args(["--no-progress", "https://a.com"]).progress is False

    def test_version(self, capsys: pytest.CaptureFixture) -> None:
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["--version"])
        assert exc_info.value.code == 0
        assert capsys.readouterr().out.startswith("page-loader ")

    def test_missing_url_raises(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestMain:
    """Tests for main exit codes and output."""

    def test_success_prints_path(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
    ) -> None:
        html_path = tmp_path / "a-com.html"

        def fake_download(url, output, **kwargs):
            assert url == "https://a.com"
            assert output == str(tmp_path)
            assert kwargs["show_progress"] is True
            return PageResult(html_path=html_path, resources_directory=tmp_path / "a-com_files")

        monkeypatch.setattr(cli, "download_page", fake_download)

        assert cli.main(["https://a.com", "-o", str(tmp_path)]) == 0
        assert capsys.readouterr().out.strip() == str(html_path)

    def test_failure_prints_message_to_stderr(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
    ) -> None:
        def fake_download(url, output, **kwargs):
            raise HttpStatusError("Request failed with status 404: https://a.com", 404)

        monkeypatch.setattr(cli, "download_page", fake_download)

        assert cli.main(["https://a.com"]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Request failed with status 404" in captured.err
