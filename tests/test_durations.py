import pytest

from halolight.utils.durations import parse_duration


@pytest.mark.parametrize(
    "value, expected",
    [
        ("30s", 30),
        ("15m", 900),
        ("1h", 3600),
        ("7d", 604800),
    ],
)
def test_parse_duration_units(value, expected):
    assert parse_duration(value, 1) == expected


@pytest.mark.parametrize("value", ["", "15", "m15", "1w", "1.5h", "-5m", None])
def test_parse_duration_falls_back_to_default(value):
    assert parse_duration(value, 900) == 900


def test_settings_expose_token_lifetimes():
    from halolight.config import get_settings

    settings = get_settings()
    assert settings.access_token_ttl_seconds == 15 * 60
    assert settings.refresh_token_ttl_seconds == 7 * 24 * 60 * 60
