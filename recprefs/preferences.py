# recprefs/preferences.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Optional, Sequence, Tuple, Union

from .codecs import AudioEncoder, VideoEncoder, VERSION_Q, select_audio_encoder, select_video_encoder
from .derive import (
    aspect_ratio, format_date_pattern, normalize_prefix, orient, parse_int,
    pick_initial_width, video_height,
)
from .device import DeviceInfo
from .errors import UnrecognizedLocationKind
from .hub import PreferenceStream
from .keys import (
    DEFAULTS, KEY_FIRST_TIME, KEY_ORDER_BY, KEY_SORT_BY, RESOLUTION_WIDTHS,
    KeyResolver, SettingKey,
)
from .store import KeyValueStore

logger = logging.getLogger(__name__)

MEDIA_STORE_VIDEO_URI = "content://media/external/video/media"


class SortBy(Enum):
    NAME = "NAME"
    DATE = "DATE"
    DURATION = "DURATION"
    SIZE = "SIZE"


class OrderBy(Enum):
    ASCENDING = "ASCENDING"
    DESCENDING = "DESCENDING"


class UriType(Enum):
    MEDIA_STORE = "media_store"  # MediaStoreLocation
    SAF = "saf"                  # UserPickedLocation


@dataclass(frozen=True)
class SortOrderOptions:
    sort_by: SortBy
    order_by: OrderBy


@dataclass(frozen=True)
class SaveLocation:
    uri: str
    kind: UriType


class RecorderPreferences:
    """Typed view over a raw preference store for the screen recorder.

    Plain attributes read and write single settings and never raise on bad
    stored data: unparseable values read back as their defaults. Derived
    values (``resolution``, ``filename``...) are recomputed on every access
    from the store and the current device state.

    The two exceptions are the encoder getters, which raise
    :class:`~recprefs.errors.CapabilityError` after resetting an encoder
    the platform cannot use, and :attr:`save_location`, which raises
    :class:`~recprefs.errors.UnrecognizedLocationKind` on a corrupt kind.
    """

    def __init__(self, store: KeyValueStore, device: DeviceInfo,
                 keys: Optional[Callable[[SettingKey], str]] = None,
                 clock: Callable[[], datetime] = datetime.now,
                 resolution_widths: Sequence[int] = RESOLUTION_WIDTHS):
        self.store = store
        self.device = device
        self.keys = keys or KeyResolver()
        self.clock = clock
        self.resolution_widths = tuple(resolution_widths)

        self.save_location_stream: PreferenceStream[Optional[SaveLocation]] = PreferenceStream(
            store, lambda: self.save_location,
            keys=[self.keys(SettingKey.SAVE_LOCATION)], name="save_location",
        )
        self.sort_order_stream: PreferenceStream[SortOrderOptions] = PreferenceStream(
            store, self.sort_order_options, name="sort_order",
        )
        self.night_mode_stream: PreferenceStream[str] = self.key_stream(
            SettingKey.DARK_THEME, lambda: self.night_mode,
        )

    # ---- raw access ----
    def _get_str(self, key: SettingKey) -> Optional[str]:
        raw = self.store.get_raw(self.keys(key))
        return raw if isinstance(raw, str) else None

    def _put_str(self, key: SettingKey, value: Union[str, int, None]):
        self.store.set_raw(self.keys(key), None if value is None else str(value))

    def _get_int(self, key: SettingKey) -> int:
        return parse_int(self._get_str(key), DEFAULTS[key])  # type: ignore[arg-type]

    def _get_bool(self, key: str, default: bool) -> bool:
        raw = self.store.get_raw(key)
        return raw if isinstance(raw, bool) else default

    # ---- first run ----
    @property
    def is_first_time(self) -> bool:
        return self._get_bool(KEY_FIRST_TIME, True)

    @is_first_time.setter
    def is_first_time(self, value: bool):
        self.store.set_raw(KEY_FIRST_TIME, bool(value))

    def init_resolution(self):
        width = self.device.display_metrics().width
        self.video_width = pick_initial_width(self.resolution_widths, width)

    def init_if_first_time(self, also: Optional[Callable[[], None]] = None) -> bool:
        if not self.is_first_time:
            return False
        self.init_resolution()
        self.reset_save_location()
        if also is not None:
            also()
        self.is_first_time = False
        logger.info("First run preferences initialised")
        return True

    # ---- video ----
    @property
    def video_encoder(self) -> VideoEncoder:
        return select_video_encoder(
            self._get_str(SettingKey.VIDEO_ENCODER), self.device.platform_version(),
            lambda: self._put_str(SettingKey.VIDEO_ENCODER, "default"),
        )

    @video_encoder.setter
    def video_encoder(self, value: str):
        self._put_str(SettingKey.VIDEO_ENCODER, value)

    @property
    def video_bitrate(self) -> int:
        return self._get_int(SettingKey.VIDEO_BITRATE)

    @video_bitrate.setter
    def video_bitrate(self, value: int):
        self._put_str(SettingKey.VIDEO_BITRATE, int(value))

    @property
    def fps(self) -> int:
        return self._get_int(SettingKey.FPS)

    @fps.setter
    def fps(self, value: int):
        self._put_str(SettingKey.FPS, int(value))

    @property
    def video_width(self) -> int:
        return parse_int(self._get_str(SettingKey.RESOLUTION), self.device.display_metrics().width)

    @video_width.setter
    def video_width(self, value: int):
        self._put_str(SettingKey.RESOLUTION, int(value))

    @property
    def orientation(self) -> str:
        return self._get_str(SettingKey.ORIENTATION) or DEFAULTS[SettingKey.ORIENTATION]  # type: ignore[return-value]

    @orientation.setter
    def orientation(self, value: str):
        self._put_str(SettingKey.ORIENTATION, value)

    @property
    def aspect_ratio(self) -> float:
        return aspect_ratio(self.device.display_metrics())

    @property
    def resolution(self) -> Tuple[int, int]:
        metrics = self.device.display_metrics()
        width = parse_int(self._get_str(SettingKey.RESOLUTION), metrics.width)
        height = video_height(width, metrics)
        return orient(width, height, self.orientation, self.device.rotation())

    # ---- file naming ----
    @property
    def base_filename(self) -> str:
        value = self._get_str(SettingKey.FILENAME)
        return value if value is not None else DEFAULTS[SettingKey.FILENAME]  # type: ignore[return-value]

    @base_filename.setter
    def base_filename(self, value: str):
        self._put_str(SettingKey.FILENAME, value)

    @property
    def prefix_filename(self) -> str:
        value = self._get_str(SettingKey.FILE_PREFIX)
        return value if value is not None else DEFAULTS[SettingKey.FILE_PREFIX]  # type: ignore[return-value]

    @prefix_filename.setter
    def prefix_filename(self, value: str):
        self._put_str(SettingKey.FILE_PREFIX, value)

    @property
    def filename(self) -> str:
        return normalize_prefix(self.prefix_filename) + format_date_pattern(self.base_filename, self.clock())

    # ---- save location ----
    @property
    def save_location(self) -> Optional[SaveLocation]:
        uri = self._get_str(SettingKey.SAVE_LOCATION)
        if uri is None:
            return None
        kind = self._get_str(SettingKey.SAVE_LOCATION_TYPE)
        if kind is None:
            return None
        try:
            return SaveLocation(uri, UriType(kind))
        except ValueError:
            raise UnrecognizedLocationKind(kind) from None

    def set_save_location(self, uri: Optional[str], kind: Optional[UriType]):
        if (uri is None) != (kind is None):
            raise ValueError("uri and kind must both be given or both be None")
        # kind first: the location stream only wakes on the uri key
        self._put_str(SettingKey.SAVE_LOCATION_TYPE, kind.value if kind is not None else None)
        self._put_str(SettingKey.SAVE_LOCATION, uri)

    def reset_save_location(self):
        if self.device.platform_version() < VERSION_Q:
            self.set_save_location(None, None)
        else:
            self.set_save_location(MEDIA_STORE_VIDEO_URI, UriType.MEDIA_STORE)

    # ---- appearance / listing ----
    @property
    def night_mode(self) -> str:
        value = self._get_str(SettingKey.DARK_THEME)
        return value if value is not None else DEFAULTS[SettingKey.DARK_THEME]  # type: ignore[return-value]

    @night_mode.setter
    def night_mode(self, value: str):
        self._put_str(SettingKey.DARK_THEME, value)

    @property
    def sort_by(self) -> SortBy:
        raw = self.store.get_raw(KEY_SORT_BY)
        try:
            return SortBy(raw)
        except ValueError:
            return SortBy.DATE

    @sort_by.setter
    def sort_by(self, value: SortBy):
        self.store.set_raw(KEY_SORT_BY, SortBy(value).value)

    @property
    def order_by(self) -> OrderBy:
        raw = self.store.get_raw(KEY_ORDER_BY)
        try:
            return OrderBy(raw)
        except ValueError:
            return OrderBy.DESCENDING

    @order_by.setter
    def order_by(self, value: OrderBy):
        self.store.set_raw(KEY_ORDER_BY, OrderBy(value).value)

    def sort_order_options(self) -> SortOrderOptions:
        return SortOrderOptions(self.sort_by, self.order_by)

    # ---- audio ----
    @property
    def record_audio(self) -> bool:
        return self._get_bool(self.keys(SettingKey.AUDIO), DEFAULTS[SettingKey.AUDIO])  # type: ignore[arg-type]

    @record_audio.setter
    def record_audio(self, value: bool):
        self.store.set_raw(self.keys(SettingKey.AUDIO), bool(value))

    @property
    def audio_bitrate(self) -> int:
        return self._get_int(SettingKey.AUDIO_BIT_RATE)

    @audio_bitrate.setter
    def audio_bitrate(self, value: int):
        self._put_str(SettingKey.AUDIO_BIT_RATE, int(value))

    @property
    def audio_sampling_rate(self) -> int:
        return self._get_int(SettingKey.AUDIO_SAMPLING_RATE)

    @audio_sampling_rate.setter
    def audio_sampling_rate(self, value: int):
        self._put_str(SettingKey.AUDIO_SAMPLING_RATE, int(value))

    @property
    def audio_encoder(self) -> AudioEncoder:
        return select_audio_encoder(
            self._get_str(SettingKey.AUDIO_ENCODER), self.device.platform_version(),
            lambda: self._put_str(SettingKey.AUDIO_ENCODER, "default"),
        )

    @audio_encoder.setter
    def audio_encoder(self, value: str):
        self._put_str(SettingKey.AUDIO_ENCODER, value)

    # ---- streams ----
    def key_stream(self, key: Union[SettingKey, str], compute: Callable[[], object]) -> PreferenceStream:
        """Stream that recomputes ``compute`` whenever ``key`` changes."""
        store_key = self.keys(key) if isinstance(key, SettingKey) else key
        return PreferenceStream(self.store, compute, keys=[store_key], name=store_key)
