"""
Playback of synthesized speech.

Speech arrives as base64 text wrapping signed 16-bit little-endian PCM.
It is decoded into float32 frames in [-1, 1] and handed to sounddevice,
which starts playing from offset zero and returns immediately.
"""

import base64
import binascii
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .logger import logger

PLAYBACK_AVAILABLE = False
PLAYBACK_ERROR: Optional[str] = None
try:
    import sounddevice as sd
    PLAYBACK_AVAILABLE = True
except ImportError as e:
    sd = None
    PLAYBACK_ERROR = f"Missing package: {e}. Install with: pip install sounddevice"
except OSError as e:
    # sounddevice imports but cannot load the PortAudio library
    sd = None
    PLAYBACK_ERROR = f"Audio device error: {e}. On macOS, try: brew install portaudio"

if PLAYBACK_ERROR:
    logger.warning(f"Speech playback disabled: {PLAYBACK_ERROR}")

DEFAULT_SAMPLE_RATE = 24000
DEFAULT_CHANNELS = 1
PCM_SCALE = 32768.0


class AudioPlaybackError(Exception):
    """Raised when speech data cannot be decoded or played."""


def decode_pcm_base64(b64_audio: str, channels: int = DEFAULT_CHANNELS) -> np.ndarray:
    """
    Decode base64 PCM into a (frames, channels) float32 array.

    A trailing partial sample or partial frame is dropped.
    """
    try:
        raw = base64.b64decode(b64_audio, validate=True)
    except (binascii.Error, ValueError) as e:
        raise AudioPlaybackError(f"Invalid base64 audio: {e}") from e

    usable = len(raw) - (len(raw) % (2 * channels))
    if usable != len(raw):
        logger.debug(f"Dropping {len(raw) - usable} trailing byte(s) of PCM")

    samples = np.frombuffer(raw[:usable], dtype="<i2")
    frames = samples.astype(np.float32) / PCM_SCALE
    return frames.reshape(-1, channels)


@dataclass
class PlaybackHandle:
    """Returned by play_pcm_base64 so a caller can cut playback short."""
    frames: int
    sample_rate: int

    @property
    def duration_seconds(self) -> float:
        return self.frames / self.sample_rate if self.sample_rate else 0.0

    def stop(self) -> None:
        if sd is not None:
            sd.stop()


def play_pcm_base64(
    b64_audio: str,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    channels: int = DEFAULT_CHANNELS,
) -> PlaybackHandle:
    """Decode and start playing immediately. Fire-and-forget."""
    frames = decode_pcm_base64(b64_audio, channels=channels)

    if not PLAYBACK_AVAILABLE:
        raise AudioPlaybackError(PLAYBACK_ERROR or "Audio playback not available")

    try:
        sd.play(frames, samplerate=sample_rate)
    except Exception as e:
        logger.audio_error(f"Audio playback error: {e}")
        raise AudioPlaybackError(str(e)) from e

    handle = PlaybackHandle(frames=len(frames), sample_rate=sample_rate)
    logger.audio(f"Playing {handle.duration_seconds:.1f}s of speech")
    return handle
