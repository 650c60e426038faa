from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from lib_includer.application.resolver import resolve
from lib_includer.domain.address import LocalPath, NetworkLocator
from lib_includer.domain.errors import InvalidReference

NAME = st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789_-", min_size=1, max_size=12).map(lambda s: f"{s}.txt")


def test_relative_reference_against_local_base() -> None:
    """A relative reference lands next to the local base."""

    assert resolve(LocalPath("/a/b/c.txt"), "d.txt") == LocalPath("/a/b/d.txt")


def test_network_reference_ignores_local_base() -> None:
    """A full URL wins over a local base."""

    assert resolve(LocalPath("/a/b/c.txt"), "http://host/x.conf") == NetworkLocator("http://host/x.conf")


def test_network_reference_ignores_network_base() -> None:
    """A full URL wins over another host's base."""

    resolved = resolve(NetworkLocator("https://other/a/b.conf"), "http://host/x.conf?v=1")
    assert resolved == NetworkLocator("http://host/x.conf?v=1")


def test_relative_reference_against_network_base() -> None:
    """A relative reference stays on the base host and port."""

    resolved = resolve(NetworkLocator("http://host:8080/cfg/main.conf"), "sub/extra.conf")
    assert resolved == NetworkLocator("http://host:8080/cfg/sub/extra.conf")


def test_file_uri_reference_becomes_local() -> None:
    """An absolute file: URI becomes a local path even inside a URL."""

    assert resolve(NetworkLocator("http://host/a.conf"), "file:///etc/x.conf") == LocalPath("/etc/x.conf")


def test_stream_base_resolves_against_working_directory() -> None:
    """The stream base leaves references relative to the cwd."""

    assert resolve(LocalPath("."), "sibling.txt") == LocalPath("sibling.txt")


@pytest.mark.parametrize(
    "reference",
    ["", "   ", "ftp://host/x.conf", "s3://bucket/key", "http:///nohost", "bad\x00name", "two\nlines"],
)
def test_invalid_references_raise(reference: str) -> None:
    """Empty, control-character and unsupported-scheme references are rejected."""

    with pytest.raises(InvalidReference):
        resolve(LocalPath("/a/b/c.txt"), reference)


@given(NAME)
def test_sibling_names_stay_in_base_directory(name: str) -> None:
    """Any plain file name resolves into the base directory for both kinds."""

    assert resolve(LocalPath("/a/b/c.txt"), name) == LocalPath(f"/a/b/{name}")
    assert resolve(NetworkLocator("http://host/a/b/c.txt"), name) == NetworkLocator(f"http://host/a/b/{name}")


def test_colon_in_relative_reference_is_kept_on_network_base() -> None:
    """A word: prefix is not mistaken for a scheme when joining onto a URL."""

    resolved = resolve(NetworkLocator("http://host/cfg/main.conf"), "v1:extra.conf")
    assert resolved == NetworkLocator("http://host/cfg/v1:extra.conf")
    assert resolve(LocalPath("/cfg/main.conf"), "v1:extra.conf") == LocalPath("/cfg/v1:extra.conf")


def test_relative_file_uri_joins_local_base() -> None:
    """A relative file: URI resolves against the including file's directory."""

    assert resolve(LocalPath("/a/b/c.txt"), "file:d.txt") == LocalPath("/a/b/d.txt")
    assert resolve(LocalPath("/a/b/c.txt"), "file:sub/d.txt") == LocalPath("/a/b/sub/d.txt")


def test_relative_file_uri_inside_network_resource_is_rejected() -> None:
    """A relative file: URI has no meaning inside a remote resource."""

    with pytest.raises(InvalidReference, match="file:d.txt"):
        resolve(NetworkLocator("http://host/a/b.conf"), "file:d.txt")
