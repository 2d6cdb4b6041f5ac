"""Tests for ghr.output.console module."""

from __future__ import annotations

import pytest

from ghr.output.console import ConsoleProtocol, MockConsole, RichConsole, Style


class TestStyle:
    def test_str_conversion(self) -> None:
        assert str(Style.SUCCESS) == "success"
        assert str(Style.DIM) == "dim"


class TestMockConsole:
    def test_print_captures_message(self) -> None:
        console = MockConsole()
        console.print("hello")
        assert console.outputs[0].message == "hello"
        assert console.outputs[0].style == Style.DEFAULT

    def test_labels(self) -> None:
        console = MockConsole()
        console.success("created")
        console.error("boom")
        console.warning("careful")
        console.info("loaded")
        assert console.messages == ["OK created", "error: boom", "warning: careful", "info: loaded"]
        assert console.has_error()
        assert console.has_success()

    def test_find_and_text(self) -> None:
        console = MockConsole()
        console.info("Start handling for push event")
        console.header("changelog")
        assert len(console.find("push")) == 1
        assert console.text == "info: Start handling for push event\nchangelog"

    def test_satisfies_protocol(self) -> None:
        console: ConsoleProtocol = MockConsole()
        console.print("ok")


class TestRichConsole:
    def test_does_not_parse_markup(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole()
        console.print("* [bold]not markup[/bold]")
        console.info("[ci skip] release")
        out = capsys.readouterr().out
        assert "[bold]not markup[/bold]" in out
        assert "info: [ci skip] release" in out

    def test_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole(stderr=True).error("boom")
        captured = capsys.readouterr()
        assert "error: boom" in captured.err
        assert captured.out == ""
