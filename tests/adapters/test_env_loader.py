"""Environment loader adapter tests clarifying prefix handling and coercion."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from lib_includer.adapters.env.default import DefaultEnvLoader, default_env_prefix, settings_from_env
from lib_includer.domain.errors import ConfigurationError
from lib_includer.domain.settings import IncluderSettings


def test_default_env_prefix() -> None:
    """Slug values should become upper snake-case prefixes."""

    assert default_env_prefix("lib-includer") == "LIB_INCLUDER"


def test_env_loader_coerces_known_fields() -> None:
    """Known fields are coerced; unknown and foreign keys are ignored."""

    environ = {
        "LIB_INCLUDER_INCLUDE_PATTERN": r"^#include <(.+)>$",
        "LIB_INCLUDER_MAX_NESTING": "12",
        "LIB_INCLUDER_ENCODING": " latin-1 ",
        "LIB_INCLUDER_TIMEOUT": "0.5",
        "LIB_INCLUDER_LINE_TERMINATOR": "\\r\\n",
        "LIB_INCLUDER_UNRELATED": "ignored",
        "OTHER": "ignored",
    }
    assert DefaultEnvLoader(environ=environ).load() == {
        "include_pattern": r"^#include <(.+)>$",
        "max_nesting": 12,
        "encoding": "latin-1",
        "timeout": 0.5,
        "line_terminator": "\r\n",
    }


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("\n", "\n"), ("\\n", "\n"), ("LF", "\n"), ("crlf", "\r\n"), ("\r", "\r"), ("cr", "\r")],
)
def test_env_loader_terminator_aliases(raw: str, expected: str) -> None:
    """Terminators may be given literally, escaped or by name."""

    loaded = DefaultEnvLoader(environ={"X_LINE_TERMINATOR": raw}).load("X")
    assert loaded == {"line_terminator": expected}


@pytest.mark.parametrize(
    "environ",
    [
        {"LIB_INCLUDER_MAX_NESTING": "ten"},
        {"LIB_INCLUDER_TIMEOUT": "soon"},
        {"LIB_INCLUDER_LINE_TERMINATOR": "tab"},
    ],
)
def test_env_loader_rejects_malformed_values(environ: dict[str, str]) -> None:
    """Unparseable values raise ConfigurationError naming the variable."""

    with pytest.raises(ConfigurationError, match="Invalid value for LIB_INCLUDER_"):
        DefaultEnvLoader(environ=environ).load()


def test_settings_from_env_layers_over_base() -> None:
    """Environment overrides layer over explicit base settings."""

    base = IncluderSettings(encoding="latin-1")
    settings = settings_from_env({"LIB_INCLUDER_MAX_NESTING": "4"}, base=base)
    assert settings.max_nesting == 4
    assert settings.encoding == "latin-1"


def test_settings_from_env_validates_result() -> None:
    """Out-of-range environment values fail validation."""

    with pytest.raises(ConfigurationError):
        settings_from_env({"LIB_INCLUDER_MAX_NESTING": "0"})


@given(st.integers(min_value=1, max_value=10_000))
def test_env_nesting_round_trips_through_settings(limit: int) -> None:
    """Any positive nesting limit survives the environment round trip."""

    assert settings_from_env({"LIB_INCLUDER_MAX_NESTING": str(limit)}).max_nesting == limit
