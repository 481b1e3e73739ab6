"""Tests for CommandHost against real shell commands."""

import sys

import pytest

from culprit.core.candidate import Candidate
from culprit.core.config import HostConfig
from culprit.core.errors import HostError
from culprit.host.command import CommandHost

pytestmark = pytest.mark.skipif(
    sys.platform == "win32", reason="uses POSIX shell commands"
)


def _host(tmp_path=None, **commands):
    return CommandHost(HostConfig(workdir=tmp_path, timeout=10,
                                  commands=commands))


def test_list_parses_json_array():
    host = _host(list="""printf '["a/a.php","b.php"]'""")

    assert host.list_enabled() == ["a/a.php", "b.php"]


def test_list_parses_json_object_values():
    host = _host(list="""printf '{"0":"a/a.php","1":"b.php"}'""")

    assert host.list_enabled() == ["a/a.php", "b.php"]


def test_list_falls_back_to_lines():
    host = _host(list="printf 'a/a.php\\n\\nb.php\\n'")

    assert host.list_enabled() == ["a/a.php", "b.php"]


def test_list_rejects_non_string_json():
    host = _host(list="echo '[1, 2]'")

    with pytest.raises(HostError):
        host.list_enabled()


def test_failed_command_raises_host_error():
    host = _host(list="echo broken >&2; false")

    with pytest.raises(HostError, match="broken"):
        host.list_enabled()


def test_missing_template_raises_host_error():
    with pytest.raises(HostError, match="disable"):
        _host().set_enabled(Candidate(id="a.php"), False)


def test_toggle_substitutes_quoted_slug_and_unit(tmp_path):
    host = _host(
        tmp_path,
        disable="echo {slug} {unit} >> toggles.txt",
        enable="echo on {slug} >> toggles.txt",
    )
    candidate = Candidate(id="my plugin/main.php")

    host.set_enabled(candidate, False)
    host.set_enabled(candidate, True)

    lines = (tmp_path / "toggles.txt").read_text().splitlines()
    assert lines == ["my plugin my plugin/main.php", "on my plugin"]


def test_display_name():
    host = _host(name="echo 'Name of {slug}'")

    assert host.display_name(Candidate(id="akismet/akismet.php")) == (
        "Name of akismet"
    )


def test_display_name_without_template():
    assert _host().display_name(Candidate(id="a.php")) is None


def test_timeout_raises_host_error():
    host = CommandHost(HostConfig(timeout=1, commands={"list": "sleep 5"}))

    with pytest.raises(HostError, match="timed out"):
        host.list_enabled()


@pytest.mark.parametrize("template", [
    """wp plugin get {slug} --fields='{"title":1}'""",
    "wp plugin deactivate {0}",
])
def test_unusable_template_raises_host_error(template):
    host = _host(disable=template)

    with pytest.raises(HostError, match="Bad 'disable' command template"):
        host.set_enabled(Candidate(id="a/a.php"), False)


def test_doubled_braces_are_literal(tmp_path):
    host = _host(tmp_path, name="""printf '{{"s":"%s"}}' {slug}""")

    assert host.display_name(Candidate(id="a/a.php")) == '{"s":"a"}'
