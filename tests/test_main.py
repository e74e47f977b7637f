"""End-to-end tests of the command line with the terminal replaced."""

from contextlib import contextmanager

import pytest

from iso_chooser import main as main_mod
from iso_chooser.terminal import TerminalInitError, TerminalSession
from iso_chooser.theme import Palette

from conftest import make_catalog, make_item, make_product


class _PickLast:
    def __init__(self, stdscr, choices, *, theme, palette):
        self.choices = choices

    def run(self):
        return self.choices[-1]


@pytest.fixture
def fake_terminal(monkeypatch):
    events = []

    @contextmanager
    def _session(theme):
        events.append("enter")
        try:
            yield TerminalSession(stdscr=object(), palette=Palette())
        finally:
            events.append("exit")

    monkeypatch.setattr(main_mod, "terminal_session", _session)
    monkeypatch.setattr(main_mod, "MenuPresenter", _PickLast)
    return events


def _args(tmp_path, out, *inputs):
    return ["--log", str(tmp_path / "chooser.log"), "--arch", "amd64", str(out), *map(str, inputs)]


def test_writes_selected_choice(tmp_path, write_catalog, server_catalog, fake_terminal):
    other = make_catalog(
        {"p": make_product({"20240101": {"iso": make_item("https://e/noble.iso", sha256="noble")}}, release_title="24.04")}
    )
    out = tmp_path / "out.vars"
    rc = main_mod.main(_args(tmp_path, out, write_catalog(server_catalog), write_catalog(other)))
    assert rc == 0
    assert fake_terminal == ["enter", "exit"]
    assert out.read_text(encoding="utf-8").splitlines() == [
        'MEDIA_URL="https://e/noble.iso"',
        'MEDIA_LABEL="Ubuntu Server 24.04 (Kinetic Kudu)"',
        'MEDIA_256SUM="noble"',
        'MEDIA_SIZE="1642631168"',
    ]


def test_selection_failure_shows_no_menu(tmp_path, write_catalog, server_catalog, fake_terminal):
    out = tmp_path / "out.vars"
    rc = main_mod.main(_args(tmp_path, out, write_catalog(server_catalog)) + ["--arch", "s390x"])
    assert rc == 1
    assert fake_terminal == []
    assert not out.exists()


def test_parse_failure(tmp_path, fake_terminal):
    bad = tmp_path / "bad.json"
    bad.write_text("{", encoding="utf-8")
    assert main_mod.main(_args(tmp_path, tmp_path / "out.vars", bad)) == 1
    assert fake_terminal == []


def test_terminal_failure(tmp_path, write_catalog, server_catalog, monkeypatch):
    @contextmanager
    def _broken(theme):
        raise TerminalInitError("has_colors failure")
        yield  # pragma: no cover

    monkeypatch.setattr(main_mod, "terminal_session", _broken)
    out = tmp_path / "out.vars"
    assert main_mod.main(_args(tmp_path, out, write_catalog(server_catalog))) == 1
    assert not out.exists()


def test_output_failure_after_terminal_restored(tmp_path, write_catalog, server_catalog, fake_terminal):
    out = tmp_path / "no-such-dir" / "out.vars"
    assert main_mod.main(_args(tmp_path, out, write_catalog(server_catalog))) == 1
    assert fake_terminal == ["enter", "exit"]


def test_terminal_released_when_menu_raises(tmp_path, write_catalog, server_catalog, fake_terminal, monkeypatch):
    class _Boom(_PickLast):
        def run(self):
            raise TerminalInitError("terminal too small")

    monkeypatch.setattr(main_mod, "MenuPresenter", _Boom)
    assert main_mod.main(_args(tmp_path, tmp_path / "out.vars", write_catalog(server_catalog))) == 1
    assert fake_terminal == ["enter", "exit"]


def test_bad_config(tmp_path, write_catalog, server_catalog, fake_terminal):
    cfg = tmp_path / "chooser.toml"
    cfg.write_text("", encoding="utf-8")
    args = _args(tmp_path, tmp_path / "out.vars", write_catalog(server_catalog)) + ["--config", str(cfg)]
    assert main_mod.main(args) == 1


@pytest.mark.parametrize("argv", [[], ["only-output"]])
def test_usage_errors_exit_1(argv, capsys):
    with pytest.raises(SystemExit) as exc:
        main_mod.main(argv)
    # A string code makes the interpreter exit with status 1.
    assert isinstance(exc.value.code, str)
    assert "usage:" in capsys.readouterr().err
