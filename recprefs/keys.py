# recprefs/keys.py
from __future__ import annotations
from enum import Enum
from typing import Dict, Mapping, Optional


class SettingKey(Enum):
    VIDEO_ENCODER = "video_encoder"
    VIDEO_BITRATE = "video_bitrate"
    FPS = "fps"
    RESOLUTION = "resolution"
    ORIENTATION = "orientation"
    FILENAME = "filename"
    FILE_PREFIX = "file_prefix"
    SAVE_LOCATION = "save_location"
    SAVE_LOCATION_TYPE = "save_location_type"
    DARK_THEME = "dark_theme"
    AUDIO = "audio"
    AUDIO_BIT_RATE = "audio_bit_rate"
    AUDIO_SAMPLING_RATE = "audio_sampling_rate"
    AUDIO_ENCODER = "audio_encoder"


# Keys that are not resolved through the resource table.
KEY_FIRST_TIME = "is_first_time"
KEY_SORT_BY = "sort_by"
KEY_ORDER_BY = "order_by"

DEFAULTS: Dict[SettingKey, object] = {
    SettingKey.VIDEO_ENCODER: "default",
    SettingKey.VIDEO_BITRATE: 8_388_608,
    SettingKey.FPS: 30,
    SettingKey.ORIENTATION: "auto",
    SettingKey.FILENAME: "yyyyMMdd_hhmmss",
    SettingKey.FILE_PREFIX: "REC",
    SettingKey.DARK_THEME: "system_default",
    SettingKey.AUDIO: False,
    SettingKey.AUDIO_BIT_RATE: 1_280_000,
    SettingKey.AUDIO_SAMPLING_RATE: 44_100,
    SettingKey.AUDIO_ENCODER: "default",
}

# Offered capture widths, ascending.
RESOLUTION_WIDTHS = (240, 360, 480, 540, 720, 1080, 1440, 2160)


class KeyResolver:
    """Maps symbolic keys to concrete store key strings.

    Every key resolves to ``pref_key_<name>`` unless ``overrides`` says
    otherwise. The mapping is fixed for the lifetime of the resolver.
    """

    def __init__(self, overrides: Optional[Mapping[SettingKey, str]] = None):
        self._table: Dict[SettingKey, str] = {k: f"pref_key_{k.value}" for k in SettingKey}
        if overrides:
            self._table.update(overrides)

    def __call__(self, key: SettingKey) -> str:
        return self._table[key]

    resolve = __call__
