"""Tests for terminal output."""

import io

from nix_cli.render import DIM, RED, RESET, TerminalWriter


class _TTY(io.StringIO):
    def isatty(self):
        return True


class TestPlainOutput:
    def test_status_line(self):
        out = io.StringIO()
        TerminalWriter(out).status("running", "nix profile add nixpkgs#hello")
        assert out.getvalue() == "\n[tool running] nix profile add nixpkgs#hello\n"

    def test_status_without_detail_trims(self):
        out = io.StringIO()
        TerminalWriter(out).status("completed")
        assert out.getvalue() == "\n[tool completed]\n"

    def test_text_verbatim(self):
        out = io.StringIO()
        w = TerminalWriter(out)
        w.text("Hel")
        w.text("lo")
        assert out.getvalue() == "Hello"

    def test_output_and_newline(self):
        out = io.StringIO()
        w = TerminalWriter(out)
        w.output("installed")
        w.newline()
        assert out.getvalue() == "installed\n\n"

    def test_non_tty_has_no_color(self):
        out = io.StringIO()
        TerminalWriter(out).error("boom")
        assert out.getvalue() == "boom\n"


class TestColor:
    def test_tty_colors_status_and_errors(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        out = _TTY()
        w = TerminalWriter(out)
        w.status("running", "x")
        w.status("error", "y")
        assert out.getvalue() == f"{DIM}\n[tool running] x{RESET}\n{RED}\n[tool error] y{RESET}\n"

    def test_no_color_env(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        out = _TTY()
        TerminalWriter(out).header("Server running")
        assert out.getvalue() == "Server running\n"

    def test_text_never_styled(self):
        out = io.StringIO()
        TerminalWriter(out, color=True).text("plain")
        assert out.getvalue() == "plain"
