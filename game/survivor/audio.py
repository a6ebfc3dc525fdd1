"""
Audio mixer: volume levels, debounced cues and background music
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from .hosts import AudioSink, NullAudio, safe_call
from .utils import clamp

logger = logging.getLogger(__name__)

# Minimum gap between two plays of the same cue, in seconds
DEBOUNCE = {
    "bulletsound": 0.09,
    "explosion": 0.2,
}

AMBIENT_SOUNDS = ("zombie1", "zombie2", "zombie3")
MUSIC_TRACK = "spooky"


class AudioMixer:
    """Wraps an optional AudioSink. Volumes are stored in [0, 1]."""

    def __init__(self, sink: Optional[AudioSink] = None, now: Callable[[], float] = lambda: 0.0,
                 master: float = 1.0, music: float = 0.15, sfx: float = 0.5):
        self.sink = sink if sink is not None else NullAudio()
        self._now = now
        self.master_volume = clamp(master, 0.0, 1.0)
        self.music_volume = clamp(music, 0.0, 1.0)
        self.sfx_volume = clamp(sfx, 0.0, 1.0)
        self._last_play: Dict[str, float] = {}
        self._music: Any = None

    def set_master_volume(self, v: float):
        self.master_volume = clamp(v, 0.0, 1.0)

    def set_music_volume(self, v: float):
        self.music_volume = clamp(v, 0.0, 1.0)

    def set_sfx_volume(self, v: float):
        self.sfx_volume = clamp(v, 0.0, 1.0)

    def sfx(self, sound_id: str, volume: float = 1.0, min_gap: Optional[float] = None) -> bool:
        """Play a sound effect unless the same cue played too recently"""
        gap = DEBOUNCE.get(sound_id, 0.0) if min_gap is None else min_gap
        now = self._now()
        last = self._last_play.get(sound_id)
        if last is not None and now - last < gap:
            return False
        self._last_play[sound_id] = now
        safe_call(self.sink.play, sound_id, volume=volume * self.master_volume * self.sfx_volume, loop=False)
        return True

    def play_music(self, track: str = MUSIC_TRACK, volume: float = 1.0):
        self._music = safe_call(self.sink.play, track,
                                volume=volume * self.master_volume * self.music_volume, loop=True)
        return self._music

    def reset(self):
        self._last_play.clear()
