"""Sample settings and roaming configs used by the smith_testing tests."""

from pathlib import Path

FIXTURES_DIR = Path(__file__).parent


def get_fixture_path(*parts: str) -> Path:
    """Path of a file under tests/fixtures, e.g. ``get_fixture_path("settings-custom.yaml")``."""
    return FIXTURES_DIR.joinpath(*parts)


def load_fixture(*parts: str) -> str:
    """Read a fixture file as UTF-8 text."""
    return get_fixture_path(*parts).read_text(encoding="utf-8")
