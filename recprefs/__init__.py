from .codecs import AudioEncoder, VideoEncoder
from .device import DisplayMetrics, QtDevice, Rotation, StaticDevice
from .errors import CapabilityError, PreferenceError, UnrecognizedLocationKind
from .hub import PreferenceStream, Subscription
from .keys import KeyResolver, SettingKey
from .preferences import (
    OrderBy, RecorderPreferences, SaveLocation, SortBy, SortOrderOptions, UriType,
)
from .store import PreferenceStore

__version__ = "0.1.0"
