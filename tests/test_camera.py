import base64

import numpy as np

from client.capture.camera import CAMERA_ERROR_MESSAGE, CAPTURE_ERROR_MESSAGE, CameraCapture, FacingMode


class FakeDevice:
    def __init__(self, registry, index, opened=True, frame=None):
        self.registry = registry
        self.index = index
        self.opened = opened
        self.frame = frame
        self.settings = {}
        self.released = False
        if opened:
            registry.held.append(self)
            registry.max_held = max(registry.max_held, len(registry.held))

    def isOpened(self):
        return self.opened

    def set(self, prop, value):
        self.settings[prop] = value
        return True

    def read(self):
        return (self.frame is not None, self.frame)

    def release(self):
        self.released = True
        if self in self.registry.held:
            self.registry.held.remove(self)


class FakeOpener:
    """Stands in for cv2.VideoCapture and tracks how many devices are held."""

    def __init__(self, opened=True, frame=None):
        self.opened = opened
        self.frame = frame
        self.held = []
        self.max_held = 0
        self.opened_indices = []

    def __call__(self, index):
        self.opened_indices.append(index)
        return FakeDevice(self, index, opened=self.opened, frame=self.frame)


def test_start_failure_sets_error_message():
    opener = FakeOpener(opened=False)
    camera = CameraCapture(opener=opener)

    assert camera.start() is False
    assert camera.error == CAMERA_ERROR_MESSAGE
    assert camera.is_streaming is False
    assert opener.held == []


def test_restart_never_holds_two_devices():
    opener = FakeOpener()
    camera = CameraCapture(opener=opener)

    camera.start()
    camera.start()
    camera.switch_facing()

    assert opener.max_held == 1
    assert len(opener.held) == 1


def test_switch_facing_uses_user_device():
    opener = FakeOpener()
    camera = CameraCapture(opener=opener, device_indices={FacingMode.ENVIRONMENT: 2, FacingMode.USER: 5})

    camera.start()
    assert camera.switch_facing() is True
    assert camera.facing_mode is FacingMode.USER
    assert opener.opened_indices == [2, 5]


def test_switch_facing_while_stopped_does_not_open():
    opener = FakeOpener()
    camera = CameraCapture(opener=opener)

    assert camera.switch_facing() is False
    assert camera.facing_mode is FacingMode.USER
    assert opener.opened_indices == []


def test_capture_encodes_png():
    frame = np.zeros((4, 6, 3), dtype=np.uint8)
    camera = CameraCapture(opener=FakeOpener(frame=frame))
    camera.start()

    draft = camera.capture()

    assert draft.mime_type == "image/png"
    assert base64.b64decode(draft.payload).startswith(b"\x89PNG")


def test_capture_without_stream_or_frame_reports_error():
    camera = CameraCapture(opener=FakeOpener(frame=None))
    assert camera.capture() is None
    assert camera.error == CAPTURE_ERROR_MESSAGE

    camera.start()
    assert camera.error is None
    assert camera.capture() is None
    assert camera.error == CAPTURE_ERROR_MESSAGE


def test_successful_capture_clears_previous_error():
    opener = FakeOpener(frame=None)
    camera = CameraCapture(opener=opener)
    camera.start()
    camera.capture()

    camera.cap.frame = np.zeros((2, 2, 3), dtype=np.uint8)
    assert camera.capture() is not None
    assert camera.error is None


def test_context_exit_releases_device():
    opener = FakeOpener()
    with CameraCapture(opener=opener) as camera:
        camera.start()
        assert len(opener.held) == 1
    assert opener.held == []
    assert camera.is_streaming is False
