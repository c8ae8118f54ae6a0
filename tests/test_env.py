import pytest
from trellis import env


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch):  # pyright: ignore[reportUnusedFunction]
	monkeypatch.delenv(env.ENV_TRELLIS_FRAME_INTERVAL, raising=False)
	monkeypatch.delenv(env.ENV_TRELLIS_STRICT_SYMBOLS, raising=False)


def test_frame_interval_default():
	assert env.frame_interval() == env.DEFAULT_FRAME_INTERVAL


@pytest.mark.parametrize(
	("raw", "expected"),
	[("0", 0.0), ("0.05", 0.05), (" 1 ", 1.0), ("", env.DEFAULT_FRAME_INTERVAL)],
)
def test_frame_interval_values(
	monkeypatch: pytest.MonkeyPatch, raw: str, expected: float
):
	monkeypatch.setenv(env.ENV_TRELLIS_FRAME_INTERVAL, raw)
	assert env.frame_interval() == expected


@pytest.mark.parametrize("raw", ["fast", "-1", "nan", "inf"])
def test_frame_interval_rejects(monkeypatch: pytest.MonkeyPatch, raw: str):
	monkeypatch.setenv(env.ENV_TRELLIS_FRAME_INTERVAL, raw)
	with pytest.raises(ValueError, match=env.ENV_TRELLIS_FRAME_INTERVAL):
		env.frame_interval()


def test_strict_symbols_default():
	assert env.strict_symbols() is False


@pytest.mark.parametrize(
	("raw", "expected"),
	[("1", True), ("TRUE", True), ("on", True), ("0", False), ("no", False), ("", False)],
)
def test_strict_symbols_values(monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool):
	monkeypatch.setenv(env.ENV_TRELLIS_STRICT_SYMBOLS, raw)
	assert env.strict_symbols() is expected


def test_strict_symbols_rejects(monkeypatch: pytest.MonkeyPatch):
	monkeypatch.setenv(env.ENV_TRELLIS_STRICT_SYMBOLS, "maybe")
	with pytest.raises(ValueError, match="boolean flag"):
		env.strict_symbols()
