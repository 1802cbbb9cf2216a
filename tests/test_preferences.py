import pytest

from recprefs.codecs import AudioEncoder, VideoEncoder
from recprefs.device import Rotation, StaticDevice
from recprefs.errors import CapabilityError, UnrecognizedLocationKind
from recprefs.keys import KEY_FIRST_TIME, KeyResolver, SettingKey
from recprefs.preferences import (
    MEDIA_STORE_VIDEO_URI, OrderBy, RecorderPreferences, SaveLocation, SortBy, UriType,
)
from recprefs.store import PreferenceStore

from conftest import FIXED_NOW, FakeStore


def test_defaults(prefs, device):
    assert prefs.video_bitrate == 8_388_608
    assert prefs.fps == 30
    assert prefs.audio_bitrate == 1_280_000
    assert prefs.audio_sampling_rate == 44_100
    assert prefs.base_filename == "yyyyMMdd_hhmmss"
    assert prefs.prefix_filename == "REC"
    assert prefs.night_mode == "system_default"
    assert prefs.orientation == "auto"
    assert prefs.record_audio is False
    assert prefs.video_width == device.width
    assert prefs.video_encoder is VideoEncoder.DEFAULT
    assert prefs.audio_encoder is AudioEncoder.DEFAULT
    assert prefs.save_location is None


@pytest.mark.parametrize("garbage", ["", "lots", "8e6", "0x10"])
def test_numeric_garbage_reads_as_default(prefs, store, garbage):
    for key in (SettingKey.VIDEO_BITRATE, SettingKey.FPS,
                SettingKey.AUDIO_BIT_RATE, SettingKey.AUDIO_SAMPLING_RATE, SettingKey.RESOLUTION):
        store.set_raw(prefs.keys(key), garbage)
    assert prefs.video_bitrate == 8_388_608
    assert prefs.fps == 30
    assert prefs.audio_bitrate == 1_280_000
    assert prefs.audio_sampling_rate == 44_100
    assert prefs.video_width == 1080


def test_numeric_setters_store_text(prefs, store):
    prefs.fps = 60
    prefs.video_bitrate = 4_000_000
    prefs.audio_sampling_rate = 48_000
    assert store.data["pref_key_fps"] == "60"
    assert prefs.fps == 60
    assert prefs.video_bitrate == 4_000_000
    assert prefs.audio_sampling_rate == 48_000


def test_resolution_on_landscape_display(store):
    device = StaticDevice(width=1920, height=1080)
    prefs = RecorderPreferences(store, device)
    prefs.video_width = 1920
    assert prefs.resolution == (1920, 1080)
    device.current_rotation = Rotation.ROTATION_90
    assert prefs.resolution == (1080, 1920)


def test_resolution_follows_orientation_preference(prefs, device):
    prefs.video_width = 720
    assert prefs.resolution == (720, 1280)
    prefs.orientation = "landscape"
    assert prefs.resolution == (1280, 720)
    device.current_rotation = Rotation.ROTATION_270
    prefs.orientation = "portrait"
    assert prefs.resolution == (720, 1280)
    prefs.orientation = "diagonal"
    assert prefs.resolution == (1280, 720)


def test_resolution_defaults_to_display_width(prefs):
    assert prefs.resolution == (1080, 1920)


def test_repeated_reads_are_identical(prefs):
    prefs.video_width = 720
    assert prefs.resolution == prefs.resolution
    assert prefs.filename == prefs.filename
    assert prefs.aspect_ratio == prefs.aspect_ratio


def test_filename_prefix_rules(prefs):
    prefs.base_filename = "yyyyMMdd"
    prefs.prefix_filename = ""
    assert prefs.filename == "20261018"
    prefs.prefix_filename = "REC"
    assert prefs.filename == "REC_20261018"
    prefs.prefix_filename = "REC_"
    assert prefs.filename == "REC_20261018"


def test_default_filename(prefs):
    assert FIXED_NOW.hour == 15
    assert prefs.filename == "REC_20261018_030405"


def test_hevc_below_gate_fails_and_heals(store):
    prefs = RecorderPreferences(store, StaticDevice(1080, 1920, version=23))
    prefs.video_encoder = "HEVC"
    with pytest.raises(CapabilityError):
        prefs.video_encoder
    assert store.data["pref_key_video_encoder"] == "default"
    assert prefs.video_encoder is VideoEncoder.DEFAULT


def test_hevc_on_capable_platform(prefs):
    prefs.video_encoder = "HEVC"
    assert prefs.video_encoder is VideoEncoder.HEVC


def test_opus_below_gate_fails_and_heals(store):
    prefs = RecorderPreferences(store, StaticDevice(1080, 1920, version=28))
    prefs.audio_encoder = "opus"
    with pytest.raises(CapabilityError):
        prefs.audio_encoder
    assert prefs.audio_encoder is AudioEncoder.DEFAULT


def test_unknown_encoders_fall_back(prefs):
    prefs.video_encoder = "AV1"
    prefs.audio_encoder = "mp3"
    assert prefs.video_encoder is VideoEncoder.H264
    assert prefs.audio_encoder is AudioEncoder.AAC


def test_save_location_roundtrip(prefs, store):
    prefs.set_save_location("content://tree/primary%3AMovies", UriType.SAF)
    assert store.data["pref_key_save_location_type"] == "saf"
    assert prefs.save_location == SaveLocation("content://tree/primary%3AMovies", UriType.SAF)
    prefs.set_save_location(None, None)
    assert prefs.save_location is None


def test_save_location_without_kind_is_absent(prefs, store):
    store.set_raw("pref_key_save_location", "content://somewhere")
    assert prefs.save_location is None


def test_unknown_location_kind_is_fatal(prefs, store):
    store.set_raw("pref_key_save_location", "content://somewhere")
    store.set_raw("pref_key_save_location_type", "dropbox")
    with pytest.raises(UnrecognizedLocationKind) as info:
        prefs.save_location
    assert info.value.kind == "dropbox"


def test_half_location_is_rejected(prefs):
    with pytest.raises(ValueError):
        prefs.set_save_location("content://x", None)


def test_reset_save_location_by_platform(store):
    new = RecorderPreferences(store, StaticDevice(1080, 1920, version=29))
    new.reset_save_location()
    assert new.save_location == SaveLocation(MEDIA_STORE_VIDEO_URI, UriType.MEDIA_STORE)

    old = RecorderPreferences(store, StaticDevice(1080, 1920, version=28))
    old.reset_save_location()
    assert old.save_location is None


def test_first_run_initialisation_runs_once(store):
    prefs = RecorderPreferences(store, StaticDevice(1000, 2000), resolution_widths=(480, 720, 1080))
    extra = []
    assert prefs.init_if_first_time(lambda: extra.append(1)) is True
    assert store.data["pref_key_resolution"] == "720"
    assert store.data[KEY_FIRST_TIME] is False
    assert prefs.save_location is not None
    assert extra == [1]

    prefs.video_width = 480
    assert prefs.init_if_first_time(lambda: extra.append(2)) is False
    assert prefs.video_width == 480
    assert extra == [1]


def test_first_run_on_narrow_display_uses_display_width(store):
    prefs = RecorderPreferences(store, StaticDevice(200, 300), resolution_widths=(480, 720))
    prefs.init_if_first_time()
    assert prefs.video_width == 200


def test_sort_and_order(prefs, store):
    assert prefs.sort_by is SortBy.DATE
    assert prefs.order_by is OrderBy.DESCENDING
    prefs.sort_by = SortBy.SIZE
    prefs.order_by = OrderBy.ASCENDING
    assert store.data["sort_by"] == "SIZE"
    opts = prefs.sort_order_options()
    assert (opts.sort_by, opts.order_by) == (SortBy.SIZE, OrderBy.ASCENDING)

    store.set_raw("sort_by", "COLOUR")
    store.set_raw("order_by", "sideways")
    assert prefs.sort_by is SortBy.DATE
    assert prefs.order_by is OrderBy.DESCENDING


def test_booleans(prefs):
    assert prefs.is_first_time is True
    prefs.record_audio = True
    assert prefs.record_audio is True


def test_custom_key_names(device):
    store = FakeStore()
    keys = KeyResolver({SettingKey.FPS: "frames_per_second"})
    prefs = RecorderPreferences(store, device, keys=keys)
    prefs.fps = 24
    assert store.data == {"frames_per_second": "24"}


def test_works_over_json_store(tmp_path, device):
    path = tmp_path / "settings.json"
    prefs = RecorderPreferences(PreferenceStore(path), device)
    prefs.fps = 50
    prefs.sort_by = SortBy.NAME
    again = RecorderPreferences(PreferenceStore(path), device)
    assert again.fps == 50
    assert again.sort_by is SortBy.NAME
