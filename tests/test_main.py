import json
import logging
import signal

import pytest

import main
from core.events import Recognition, ShutdownRequested
from main import LiveLensNode, parse_args


def test_defaults():
    args = parse_args([])
    assert args.camera is None and args.model is None and args.labels is None


def test_camera_and_paths():
    args = parse_args(["-c", "1", "--model", "m.pt", "--labels", "l.txt", "--configs", "cfg"])

    assert args.camera == 1
    assert (args.model, args.labels, args.configs) == ("m.pt", "l.txt", "cfg")


@pytest.fixture
def node(tmp_path, monkeypatch):
    for name in ("LIVELENS_MODEL_PATH", "LIVELENS_LABELS_PATH", "LIVELENS_CAMERA_INDEX", "LIVELENS_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    configs = tmp_path / "configs"
    configs.mkdir()
    (tmp_path / "labels.txt").write_text("background\ncat\n")
    (configs / "system.json").write_text(json.dumps({
        "logging": {"level": "INFO", "file": False},
        "labels": {"path": "labels.txt"},
        "model": {"path": "missing.pt"},
        "camera": {"max_devices": 0},
    }))

    handlers = {}
    monkeypatch.setattr(main.signal, "signal", lambda sig, handler: handlers.__setitem__(sig, handler))

    node = LiveLensNode(parse_args(["--configs", str(configs)]))
    node.signal_handlers = handlers
    yield node
    node.stop()


def test_node_loads_labels_relative_to_config_root(node):
    assert node.labels == ("background", "cat")


def test_termination_signal_publishes_shutdown_request(node):
    requests = []
    node.bus.subscribe(ShutdownRequested, requests.append)

    node.signal_handlers[signal.SIGTERM](signal.SIGTERM, None)

    assert node.stop_event.is_set()
    assert [event.reason for event in requests] == ["SIGTERM"]


def test_stop_reports_last_published_results(node, caplog):
    caplog.set_level(logging.INFO)
    node.store.publish((Recognition("cat", 0.9),))

    node.stop()
    node.stop()

    summaries = [r.getMessage() for r in caplog.records if "result set(s)" in r.getMessage()]
    assert summaries == ["Published 1 result set(s); last: cat 90%"]
