"""Tests for plotwatch/utils.py."""

from __future__ import annotations

import pytest
from plotwatch.exceptions import UserError
from plotwatch.utils import natural_sort_key, normalize_host, parse_host_list


class TestParseHostList:
    """Tests for parse_host_list function."""

    def test_default_port_appended(self):
        assert parse_host_list("plotter1") == ["plotter1:8484"]

    def test_explicit_port_kept(self):
        assert parse_host_list("plotter1:9000") == ["plotter1:9000"]

    def test_whitespace_trimmed(self):
        assert parse_host_list(" plotter1 ,  plotter2:9000 ") == [
            "plotter1:8484",
            "plotter2:9000",
        ]

    def test_blank_entries_skipped(self):
        assert parse_host_list("plotter1,,  ,plotter2") == ["plotter1:8484", "plotter2:8484"]

    def test_duplicates_dropped_in_order(self):
        assert parse_host_list("b,a,b:8484,a") == ["b:8484", "a:8484"]

    def test_custom_default_port(self):
        assert parse_host_list("plotter1", default_port=1234) == ["plotter1:1234"]

    def test_empty_list_is_user_error(self):
        with pytest.raises(UserError):
            parse_host_list(" , ")


def test_normalize_host_empty():
    """Empty entries stay empty (no bare port)."""
    assert normalize_host("   ") == ""


def test_natural_sort_key_orders_numbers():
    hosts = ["host10", "host2", "host1"]
    assert sorted(hosts, key=natural_sort_key) == ["host1", "host2", "host10"]
