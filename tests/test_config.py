from chordgrid.config import Settings


def test_defaults():
    settings = Settings.from_env({})
    assert settings.api_endpoint == ""
    assert settings.store == "."
    assert settings.measures_per_row == 4


def test_store_falls_back_to_api_endpoint():
    settings = Settings.from_env({"CHORDGRID_API_ENDPOINT": "https://api.example.com/songs"})
    assert settings.store == "https://api.example.com/songs"


def test_explicit_store_wins():
    settings = Settings.from_env({
        "CHORDGRID_API_ENDPOINT": "https://api.example.com/songs",
        "CHORDGRID_STORE": "/srv/songs",
    })
    assert settings.store == "/srv/songs"


def test_measures_per_row():
    assert Settings.from_env({"CHORDGRID_MEASURES_PER_ROW": "8"}).measures_per_row == 8


def test_invalid_measures_per_row_ignored(caplog):
    with caplog.at_level("WARNING", logger="chordgrid.config"):
        settings = Settings.from_env({"CHORDGRID_MEASURES_PER_ROW": "lots"})
    assert settings.measures_per_row == 4
    assert "CHORDGRID_MEASURES_PER_ROW" in caplog.text


def test_non_positive_measures_per_row_ignored():
    assert Settings.from_env({"CHORDGRID_MEASURES_PER_ROW": "0"}).measures_per_row == 4


def test_reads_process_environment(monkeypatch):
    monkeypatch.setenv("CHORDGRID_STORE", "songs")
    assert Settings.from_env().store == "songs"
