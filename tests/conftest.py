"""Store fixtures: bins under tmp_path with a controllable clock."""
import pytest

from filecache.bins import construct, reset_stores
from filecache.settings import Settings


class FakeClock:
    """Stands in for time.time(); tests move it explicitly."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class AmbiguousTruth:
    """A value whose truth test raises, like a numpy array or a DataFrame."""

    def __init__(self, items) -> None:
        self.items = list(items)

    def __bool__(self):
        raise ValueError("The truth value of an array with more than one element is ambiguous")

    def __eq__(self, other):
        return isinstance(other, AmbiguousTruth) and self.items == other.items


def make_settings(tmp_path, **overrides) -> Settings:
    """Settings pinned to tmp_path, ignoring any .env or FILECACHE_* environment."""
    values = {
        "filecache_storage_dir": str(tmp_path / "filecache"),
        "file_private_path": "",
        "file_public_path": str(tmp_path / "files"),
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture(autouse=True)
def _clean_registry():
    reset_stores()
    yield
    reset_stores()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def store(settings, clock):
    """The "page" bin."""
    return construct("page", settings=settings, clock=clock)


@pytest.fixture
def json_store(tmp_path, clock):
    """The "menu" bin with the JSON codec."""
    return construct("menu", settings=make_settings(tmp_path, filecache_codec="json"), clock=clock)


@pytest.fixture
def settings_factory(tmp_path):
    """Builds Settings under tmp_path with the given overrides."""
    return lambda **overrides: make_settings(tmp_path, **overrides)


@pytest.fixture
def ambiguous_value():
    return AmbiguousTruth([1, 2, 3])
