import os

# Pygame must not try to open a real window or audio device during tests.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import numpy as np
import pytest


class RecordingCanvas:
    """Canvas stand-in that records every drawing call."""

    def __init__(self, width, height, pixel_ratio=1.0):
        self.width = width
        self.height = height
        self.pixel_ratio = pixel_ratio
        self.attached = True
        self.transforms = []
        self.clears = 0
        self.circles = []
        self.lines = []

    def resize(self, width, height):
        self.width = width
        self.height = height

    def client_size(self):
        if not self.attached:
            return None
        return self.width, self.height

    def set_transform(self, ratio):
        self.transforms.append(ratio)

    def clear(self):
        self.clears += 1
        self.circles.clear()
        self.lines.clear()

    def fill_circle(self, x, y, radius, hsla):
        self.circles.append((x, y, radius, hsla))

    def stroke_line(self, x1, y1, x2, y2, width, hsla):
        self.lines.append((x1, y1, x2, y2, width, hsla))


class ManualFrames:
    """Frame scheduler whose frames only fire when the test says so."""

    def __init__(self):
        self.pending = {}
        self.cancelled = []
        self._next = 1

    def request_frame(self, callback):
        handle = self._next
        self._next += 1
        self.pending[handle] = callback
        return handle

    def cancel_frame(self, handle):
        self.cancelled.append(handle)
        self.pending.pop(handle, None)

    def fire(self, frames=1):
        for _ in range(frames):
            due = self.pending
            self.pending = {}
            for callback in due.values():
                callback()


class ResizeEvents:
    def __init__(self):
        self.listeners = []

    def subscribe(self, callback):
        self.listeners.append(callback)

    def unsubscribe(self, callback):
        self.listeners.remove(callback)

    def emit(self):
        for callback in list(self.listeners):
            callback()


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def canvas():
    return RecordingCanvas(800, 600)


@pytest.fixture
def frames():
    return ManualFrames()


@pytest.fixture
def resize_events():
    return ResizeEvents()
