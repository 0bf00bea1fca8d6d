from __future__ import annotations

import pytest

from pychip8.utils import debug as debug_module


@pytest.fixture
def categories(monkeypatch):
    def apply(value: str | None) -> None:
        if value is None:
            monkeypatch.delenv("CHIP8_DEBUG", raising=False)
        else:
            monkeypatch.setenv("CHIP8_DEBUG", value)
        debug_module.reload_categories()

    yield apply
    monkeypatch.delenv("CHIP8_DEBUG", raising=False)
    debug_module.reload_categories()


def test_disabled_by_default(categories, capsys) -> None:
    categories(None)

    assert not debug_module.debug_enabled()
    debug_module.debug_log("cpu", "hidden")
    assert capsys.readouterr().out == ""


def test_selected_categories_only(categories, capsys) -> None:
    categories("cpu, Loader")

    assert debug_module.debug_enabled("cpu")
    assert debug_module.debug_enabled("loader")
    assert not debug_module.debug_enabled("audio")

    debug_module.debug_log("cpu", "pc=%03x", 0x200)
    debug_module.debug_log("audio", "tone")
    assert capsys.readouterr().out == "[CHIP8][cpu] pc=200\n"


def test_all_enables_everything(categories) -> None:
    categories("all")

    assert debug_module.debug_enabled("anything")


def test_bad_format_arguments_do_not_raise(categories, capsys) -> None:
    categories("cpu")

    debug_module.debug_log("cpu", "value=%d", "text")

    assert capsys.readouterr().out == "[CHIP8][cpu] value=%d ('text',)\n"
