from conftest import FakeCamera
from core.bus import EventBus
from core.camera_session import CameraSession
from core.events import CameraStatusChanged
from utils.failures import CameraInitError, FailureManager


def make_session(camera):
    bus = EventBus()
    statuses = []
    bus.subscribe(CameraStatusChanged, statuses.append)
    frames = []
    session = CameraSession(camera, frames.append, bus=bus, failures=FailureManager())
    return session, statuses


def test_starts_requested_device():
    camera = FakeCamera(count=2)
    session, statuses = make_session(camera)

    assert session.start(0)
    assert session.index == 0
    assert camera.started == [0]
    assert statuses[-1].available and statuses[-1].index == 0 and statuses[-1].count == 2


def test_falls_back_to_next_device_in_order():
    camera = FakeCamera(count=3, broken=[0, 1])
    session, statuses = make_session(camera)

    assert session.start(0)
    assert camera.opened == [0, 1, 2]
    assert session.index == 2
    assert statuses[-1].name == "fake2"


def test_all_devices_failing_enters_exhausted_state():
    camera = FakeCamera(count=2, broken=[0, 1])
    session, statuses = make_session(camera)

    assert not session.start(0)
    assert session.exhausted
    assert not session.active
    assert camera.opened == [0, 1]
    assert len(statuses) == 1
    assert not statuses[0].available
    assert session.failures.count("CameraInitError") == 2


def test_no_devices_at_all():
    session, statuses = make_session(FakeCamera(count=0))

    assert not session.start()
    assert session.exhausted
    assert statuses[0].count == 0


def test_fallback_does_not_wrap_to_earlier_devices():
    camera = FakeCamera(count=3, broken=[2])
    session, _ = make_session(camera)

    assert not session.start(2)
    assert camera.opened == [2]


def test_switch_cycles_through_devices():
    camera = FakeCamera(count=2)
    session, statuses = make_session(camera)
    session.start(0)

    assert session.switch_camera()
    assert session.index == 1
    assert session.switch_camera()
    assert session.index == 0
    assert [s.index for s in statuses] == [0, 1, 0]
    assert camera.stops == 2


def test_switch_skips_broken_device():
    camera = FakeCamera(count=3, broken=[1])
    session, _ = make_session(camera)
    session.start(0)

    assert session.switch_camera()
    assert session.index == 2


def test_switch_with_single_device_is_a_noop():
    camera = FakeCamera(count=1)
    session, statuses = make_session(camera)
    session.start(0)

    assert not session.switch_camera()
    assert session.index == 0
    assert camera.stops == 0
    assert len(statuses) == 1


def test_successful_start_clears_exhausted_state():
    camera = FakeCamera(count=1, broken=[0])
    session, _ = make_session(camera)
    assert not session.start()

    camera.broken.clear()
    assert session.start()
    assert not session.exhausted


def test_lost_device_falls_back_to_next():
    camera = FakeCamera(count=3)
    session, statuses = make_session(camera)
    session.start(0)

    camera.on_failure(CameraInitError("fake0 stopped delivering frames"))

    assert session.index == 1
    assert camera.opened == [0, 1]
    assert statuses[-1].available and statuses[-1].index == 1
    assert session.failures.count("CameraInitError") == 1


def test_losing_last_device_publishes_no_camera():
    camera = FakeCamera(count=2, broken=[1])
    session, statuses = make_session(camera)
    session.start(0)

    camera.on_failure(CameraInitError("fake0 stopped delivering frames"))

    assert session.exhausted
    assert not session.active
    assert not statuses[-1].available
    assert camera.opened == [0, 1]


def test_loss_after_stop_is_ignored():
    camera = FakeCamera(count=2)
    session, statuses = make_session(camera)
    session.start(0)
    on_failure = camera.on_failure
    session.stop()

    on_failure(CameraInitError("late report"))

    assert not session.active
    assert len(statuses) == 1
