"""Tests for candidate discovery."""

import pytest

from culprit.core.config import ProtectedConfig
from culprit.core.errors import EmptyPoolError
from culprit.host.discovery import Discovery

DROP_INS = ["advanced-cache.php", "db.php", "object-cache.php"]


@pytest.fixture
def protected():
    return ProtectedConfig(path_fragments=["mu-plugins/"], names=DROP_INS)


def test_protected_units_are_removed(make_host, protected):
    host = make_host([
        "akismet/akismet.php",
        "mu-plugins/loader.php",
        "object-cache.php",
        "hello.php",
    ])

    pool = Discovery(host, protected).candidates()

    assert [c.id for c in pool] == ["akismet/akismet.php", "hello.php"]


def test_order_kept_and_duplicates_dropped(make_host, protected):
    host = make_host(["b.php", "a.php", "b.php", "c/c.php"])

    pool = Discovery(host, protected).candidates()

    assert [c.id for c in pool] == ["b.php", "a.php", "c/c.php"]


def test_drop_in_names_match_file_name_only(protected):
    discovery = Discovery(None, protected)

    assert discovery.is_protected("db.php")
    assert discovery.is_protected("nested/db.php")
    assert not discovery.is_protected("db-tools/db-tools.php")


def test_nothing_left_is_an_error(make_host, protected):
    host = make_host(["mu-plugins/a.php", "db.php"])

    with pytest.raises(EmptyPoolError):
        Discovery(host, protected).candidates()
