import pytest

from musicvenn.config import DEFAULT_COUNT, DEFAULT_COUNTRY, DEFAULT_KIND, load_settings
from musicvenn.errors import ConfigError


def test_defaults_from_empty_environment():
    settings = load_settings({})
    assert settings.country == DEFAULT_COUNTRY
    assert settings.count == DEFAULT_COUNT
    assert settings.kind == DEFAULT_KIND
    assert settings.lastfm_api_key is None
    assert settings.spotify_client_id is None
    assert (settings.fetch_limit, settings.fetch_page) == (20, 2)


def test_environment_values():
    settings = load_settings({
        "LASTFM_API_KEY": "lfm",
        "SPOTIFY_CLIENT_ID": "sp",
        "MUSICVENN_COUNTRY": "Japan",
        "MUSICVENN_COUNT": "15",
        "MUSICVENN_KIND": "tracks",
    })
    assert settings.lastfm_api_key == "lfm"
    assert settings.spotify_client_id == "sp"
    assert settings.country == "Japan"
    assert settings.count == 15
    assert settings.kind == "Tracks"


def test_overrides_win_and_none_is_ignored():
    settings = load_settings({"MUSICVENN_COUNT": "15"}, count=10, kind="ARTISTS", country=None)
    assert settings.count == 10
    assert settings.kind == "Artists"
    assert settings.country == DEFAULT_COUNTRY


@pytest.mark.parametrize("env", [
    {"MUSICVENN_COUNT": "many"},
    {"MUSICVENN_COUNT": "0"},
    {"MUSICVENN_KIND": "albums"},
])
def test_invalid_values(env):
    with pytest.raises(ConfigError):
        load_settings(env)
