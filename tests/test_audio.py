from unittest.mock import MagicMock

import numpy as np
import pytest

from lingospark import audio
from lingospark.audio import AudioPlaybackError, decode_pcm_base64, play_pcm_base64

from conftest import pcm_b64


def test_samples_are_normalized_to_unit_range():
    frames = decode_pcm_base64(pcm_b64(0, 16384, -32768, 32767))

    assert frames.dtype == np.float32
    assert frames.shape == (4, 1)
    np.testing.assert_allclose(frames[:, 0], [0.0, 0.5, -1.0, 32767 / 32768], rtol=1e-6)


def test_trailing_partial_sample_is_dropped():
    import base64
    import struct

    raw = struct.pack("<2h", 100, -100) + b"\x01"
    frames = decode_pcm_base64(base64.b64encode(raw).decode("ascii"))
    assert frames.shape == (2, 1)


def test_stereo_frames_are_interleaved():
    frames = decode_pcm_base64(pcm_b64(1, 2, 3, 4, 5), channels=2)
    assert frames.shape == (2, 2)


def test_invalid_base64_raises():
    with pytest.raises(AudioPlaybackError):
        decode_pcm_base64("not base64!!")


def test_playback_starts_at_24khz(monkeypatch):
    fake_sd = MagicMock()
    monkeypatch.setattr(audio, "sd", fake_sd)
    monkeypatch.setattr(audio, "PLAYBACK_AVAILABLE", True)

    handle = play_pcm_base64(pcm_b64(*([0] * 2400)))

    fake_sd.play.assert_called_once()
    args, kwargs = fake_sd.play.call_args
    assert kwargs["samplerate"] == 24000
    assert args[0].shape == (2400, 1)
    assert handle.frames == 2400
    assert handle.duration_seconds == pytest.approx(0.1)

    handle.stop()
    fake_sd.stop.assert_called_once()


def test_playback_unavailable_raises(monkeypatch):
    monkeypatch.setattr(audio, "PLAYBACK_AVAILABLE", False)
    monkeypatch.setattr(audio, "PLAYBACK_ERROR", "no device")

    with pytest.raises(AudioPlaybackError, match="no device"):
        play_pcm_base64(pcm_b64(1, 2))


def test_device_error_is_wrapped(monkeypatch):
    fake_sd = MagicMock()
    fake_sd.play.side_effect = RuntimeError("device busy")
    monkeypatch.setattr(audio, "sd", fake_sd)
    monkeypatch.setattr(audio, "PLAYBACK_AVAILABLE", True)

    with pytest.raises(AudioPlaybackError, match="device busy"):
        play_pcm_base64(pcm_b64(1, 2))
