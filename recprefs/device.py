# recprefs/device.py
# Display and platform queries used by derived settings.
from __future__ import annotations
from dataclasses import dataclass
from enum import IntEnum
from typing import Protocol


class Rotation(IntEnum):
    ROTATION_0 = 0
    ROTATION_90 = 90
    ROTATION_180 = 180
    ROTATION_270 = 270


@dataclass(frozen=True)
class DisplayMetrics:
    width: int   # px
    height: int  # px


class DeviceInfo(Protocol):
    def display_metrics(self) -> DisplayMetrics: ...

    def rotation(self) -> Rotation: ...

    def platform_version(self) -> int: ...


@dataclass
class StaticDevice:
    """Fixed device state. Fields may be reassigned to simulate rotation."""
    width: int
    height: int
    current_rotation: Rotation = Rotation.ROTATION_0
    version: int = 29

    def display_metrics(self) -> DisplayMetrics:
        return DisplayMetrics(self.width, self.height)

    def rotation(self) -> Rotation:
        return self.current_rotation

    def platform_version(self) -> int:
        return self.version


class QtDevice:
    """Reads the primary screen through Qt. A QGuiApplication must exist."""

    def __init__(self, version: int, screen=None):
        self._version = version
        self._screen = screen

    def _current_screen(self):
        if self._screen is not None:
            return self._screen
        from PyQt5.QtGui import QGuiApplication
        screen = QGuiApplication.primaryScreen()
        if screen is None:
            raise OSError("No screen available (is a QGuiApplication running?)")
        return screen

    def display_metrics(self) -> DisplayMetrics:
        s = self._current_screen()
        size = s.size()
        ratio = s.devicePixelRatio()
        return DisplayMetrics(int(round(size.width() * ratio)), int(round(size.height() * ratio)))

    def rotation(self) -> Rotation:
        s = self._current_screen()
        angle = s.angleBetween(s.nativeOrientation(), s.orientation()) % 360
        return _nearest_rotation(angle)

    def platform_version(self) -> int:
        return self._version


def _nearest_rotation(angle: int) -> Rotation:
    return min(Rotation, key=lambda r: min(abs(angle - r.value), 360 - abs(angle - r.value)))
