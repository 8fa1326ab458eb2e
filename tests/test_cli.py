# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Tests for mailto/cli.py."""

import io
from pathlib import Path

import pytest

from mailto.cli import main
from mailto.logging import AddressFilter


@pytest.fixture(autouse=True)
def _isolated_config(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Keep the user's defaults and .env files out of the tests."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setattr("mailto.config.load_dotenv_once", lambda: None)


class TestBodyCommand:
    """Tests for 'mailto body'."""

    def test_file(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Body text from a file is flattened."""
        body = tmp_path / "body.txt"
        body.write_text("Hello\n\n- a\n\t- b\n")
        assert main(["body", str(body)]) == 0
        assert capsys.readouterr().out == "Hello\n\n- a\n    - b\n"

    def test_stdin(
        self,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Body text is read from stdin without a file argument."""
        monkeypatch.setattr("sys.stdin", io.StringIO("a\nb"))
        assert main(["body"]) == 0
        assert capsys.readouterr().out == "a\nb\n"

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing input file exits with an error code."""
        assert main(["body", str(tmp_path / "missing.txt")]) == 1


class TestLinkCommand:
    """Tests for 'mailto link'."""

    def test_link(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """All options end up in the URI."""
        body = tmp_path / "body.txt"
        body.write_text("Hello World")
        code = main(
            [
                "link",
                "--to",
                "a@x.com, b@x.com",
                "--subject",
                "Hi",
                "--cc",
                "c@x.com",
                "--bcc",
                "d@x.com,e@x.com",
                "--body-file",
                str(body),
            ]
        )
        assert code == 0
        assert capsys.readouterr().out == (
            "mailto:a@x.com,b@x.com?subject=Hi&cc=c%40x.com"
            "&bcc=d%40x.com&bcc=e%40x.com&body=Hello%20World\n"
        )

    def test_bare(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Recipients alone give a bare link."""
        assert main(["link", "--to", "a@x.com"]) == 0
        assert capsys.readouterr().out == "mailto:a@x.com\n"

    def test_empty_recipients(self) -> None:
        """Blank recipient input is an error."""
        assert main(["link", "--to", " , "]) == 1


class TestRenderCommand:
    """Tests for 'mailto render'."""

    def test_render_direct(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """The anchor carries the mailto URI in direct mode."""
        message = tmp_path / "m.yaml"
        message.write_text("to: a@x.com\nsubject: Hi\ntrigger: Mail\n")
        assert main(["render", str(message)]) == 0
        assert capsys.readouterr().out == (
            '<a href="mailto:a@x.com?subject=Hi">Mail</a>\n'
        )

    def test_render_obfuscated(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Obfuscated anchors do not contain the address."""
        message = tmp_path / "m.yaml"
        message.write_text("to: a@x.com\n")
        assert main(["render", str(message), "--obfuscate"]) == 0
        out = capsys.readouterr().out
        assert out == '<a href="#">Send Email</a>\n'
        assert "a@x.com" not in out

    def test_obfuscated_addresses_redacted_in_logs(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Debug logs of an obfuscated link hide raw and encoded addresses."""
        message = tmp_path / "m.yaml"
        message.write_text("to: a@x.com\ncc: c@x.com\nobfuscate: true\n")
        assert main(["--debug", "render", str(message)]) == 0
        err = capsys.readouterr().err
        assert "mailto:[ADDRESS]?cc=[ADDRESS]" in err
        assert "a@x.com" not in err
        assert "c%40x.com" not in err
        assert "c@x.com" not in err

    def test_direct_link_logged_unredacted(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Addresses are only redacted for obfuscated controls."""
        AddressFilter.clear_addresses()
        message = tmp_path / "m.yaml"
        message.write_text("to: a@x.com\ncc: c@x.com\n")
        assert main(["--debug", "render", str(message)]) == 0
        assert "mailto:a@x.com?cc=c%40x.com" in capsys.readouterr().err

    def test_link_only(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """--link-only prints the URI."""
        message = tmp_path / "m.yaml"
        message.write_text("to: a@x.com\nbody: Hi there\n")
        assert main(["render", str(message), "--link-only"]) == 0
        assert capsys.readouterr().out == "mailto:a@x.com?body=Hi%20there\n"

    def test_defaults_option(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """An explicit defaults file is applied."""
        defaults = tmp_path / "d.yaml"
        defaults.write_text("subject: Default\n")
        message = tmp_path / "m.yaml"
        message.write_text("to: a@x.com\n")
        code = main(
            [
                "render",
                str(message),
                "--defaults",
                str(defaults),
                "--link-only",
            ]
        )
        assert code == 0
        assert capsys.readouterr().out == "mailto:a@x.com?subject=Default\n"

    def test_config_error(self, tmp_path: Path) -> None:
        """Invalid message files exit with an error code."""
        message = tmp_path / "m.yaml"
        message.write_text("subject: no recipients\n")
        assert main(["render", str(message)]) == 1


def test_command_required() -> None:
    """A command must be given."""
    with pytest.raises(SystemExit):
        main([])
