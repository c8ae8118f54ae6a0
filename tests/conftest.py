import pytest
from trellis import scheduling
from trellis.scheduling import Scheduler
from trellis.testing import HeadlessRenderer, ManualFrameSource


@pytest.fixture(autouse=True)
def _reset_default_scheduler():  # pyright: ignore[reportUnusedFunction]
	scheduling._default_scheduler = None  # pyright: ignore[reportPrivateUsage]
	yield
	scheduling._default_scheduler = None  # pyright: ignore[reportPrivateUsage]


@pytest.fixture
def renderer() -> HeadlessRenderer:
	return HeadlessRenderer()


@pytest.fixture
def frames() -> ManualFrameSource:
	return ManualFrameSource()


@pytest.fixture
def scheduler(frames: ManualFrameSource) -> Scheduler:
	return Scheduler(frames)
