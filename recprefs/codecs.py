# recprefs/codecs.py
from __future__ import annotations
import logging
from enum import IntEnum
from typing import Callable, Dict, Optional, Tuple, TypeVar

from .errors import CapabilityError

logger = logging.getLogger(__name__)

# Platform versions
VERSION_N = 24
VERSION_Q = 29


class VideoEncoder(IntEnum):
    DEFAULT = 0
    H264 = 2
    VP8 = 4
    HEVC = 5


class AudioEncoder(IntEnum):
    DEFAULT = 0
    AAC = 3
    VORBIS = 6
    OPUS = 7


E = TypeVar("E", VideoEncoder, AudioEncoder)

# stored value -> (encoder, minimum platform version or None)
VIDEO_CHOICES: Dict[str, Tuple[VideoEncoder, Optional[int]]] = {
    "default": (VideoEncoder.DEFAULT, None),
    "H264": (VideoEncoder.H264, None),
    "HEVC": (VideoEncoder.HEVC, VERSION_N),
    "VP8": (VideoEncoder.VP8, None),
}

AUDIO_CHOICES: Dict[str, Tuple[AudioEncoder, Optional[int]]] = {
    "default": (AudioEncoder.DEFAULT, None),
    "aac": (AudioEncoder.AAC, None),
    "opus": (AudioEncoder.OPUS, VERSION_Q),
    "vorbis": (AudioEncoder.VORBIS, None),
}


def _select(setting: str, choice: Optional[str], table: Dict[str, Tuple[E, Optional[int]]],
            fallback: E, platform_version: int, reset: Callable[[], None]) -> E:
    if choice is None:
        choice = "default"
    if choice not in table:
        return fallback
    encoder, required = table[choice]
    if required is not None and platform_version < required:
        # persist first so the next read is safe, then report
        reset()
        logger.warning(f"{setting}: {choice} unavailable on platform {platform_version}, reset to default")
        raise CapabilityError(setting, choice, required, platform_version)
    return encoder


def select_video_encoder(choice: Optional[str], platform_version: int,
                         reset: Callable[[], None]) -> VideoEncoder:
    """Map a stored video encoder name to its constant.

    Unknown names select H264. ``reset`` is called to store ``default``
    before :class:`CapabilityError` is raised for a gated choice.
    """
    return _select("video_encoder", choice, VIDEO_CHOICES, VideoEncoder.H264, platform_version, reset)


def select_audio_encoder(choice: Optional[str], platform_version: int,
                         reset: Callable[[], None]) -> AudioEncoder:
    """Audio counterpart of :func:`select_video_encoder`; unknown names select AAC."""
    return _select("audio_encoder", choice, AUDIO_CHOICES, AudioEncoder.AAC, platform_version, reset)
