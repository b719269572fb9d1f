"""Unit tests for /src/removal_chess/core/config.py"""

import pytest
from pydantic import ValidationError

from removal_chess.core.config import DEFAULT_DATABASE_URL, Settings, load_settings


def test_defaults() -> None:
    settings = load_settings({})
    assert settings.database_url == DEFAULT_DATABASE_URL
    assert settings.removals_per_player is None
    assert settings.time_limit_seconds is None
    assert settings.log_level == "INFO"


def test_load_from_environment() -> None:
    settings = load_settings(
        {
            "REMOVAL_CHESS_DATABASE_URL": "sqlite:///:memory:",
            "REMOVAL_CHESS_REMOVALS_PER_PLAYER": "5",
            "REMOVAL_CHESS_TIME_LIMIT_SECONDS": "600",
            "REMOVAL_CHESS_LOG_LEVEL": "debug",
            "UNRELATED": "ignored",
        }
    )
    assert settings.database_url == "sqlite:///:memory:"
    assert settings.removals_per_player == 5
    assert settings.time_limit_seconds == 600
    assert settings.log_level == "DEBUG"


def test_empty_values_count_as_unset() -> None:
    settings = load_settings({"REMOVAL_CHESS_REMOVALS_PER_PLAYER": " "})
    assert settings.removals_per_player is None


@pytest.mark.parametrize(
    "environ",
    [
        {"REMOVAL_CHESS_REMOVALS_PER_PLAYER": "-1"},
        {"REMOVAL_CHESS_REMOVALS_PER_PLAYER": "many"},
        {"REMOVAL_CHESS_TIME_LIMIT_SECONDS": "0"},
        {"REMOVAL_CHESS_LOG_LEVEL": "chatty"},
    ],
)
def test_invalid_settings(environ: dict[str, str]) -> None:
    with pytest.raises(ValidationError):
        load_settings(environ)


def test_zero_removals_allowed() -> None:
    assert Settings(removals_per_player=0).removals_per_player == 0
