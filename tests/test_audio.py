import pytest

from game.survivor.audio import AudioMixer

from conftest import RecordingAudio


class Clock:
    def __init__(self):
        self.now = 0.0


@pytest.fixture
def clock():
    return Clock()


def test_repeated_cues_are_debounced(clock):
    sink = RecordingAudio()
    mixer = AudioMixer(sink, now=lambda: clock.now)

    assert mixer.sfx("bulletsound")
    assert not mixer.sfx("bulletsound")
    clock.now = 0.1
    assert mixer.sfx("bulletsound")
    assert len(sink.played) == 2


def test_undebounced_cues_always_play(clock):
    sink = RecordingAudio()
    mixer = AudioMixer(sink, now=lambda: clock.now)
    assert mixer.sfx("zombie1")
    assert mixer.sfx("zombie1")


def test_volume_is_scaled_and_clamped(clock):
    sink = RecordingAudio()
    mixer = AudioMixer(sink, now=lambda: clock.now, master=0.5, sfx=0.5)
    mixer.sfx("explosion", volume=0.8)
    assert sink.played[-1] == ("explosion", pytest.approx(0.2), False)

    mixer.set_master_volume(3)
    mixer.set_sfx_volume(-1)
    assert mixer.master_volume == 1.0
    assert mixer.sfx_volume == 0.0


def test_music_loops():
    sink = RecordingAudio()
    mixer = AudioMixer(sink, music=0.5)
    mixer.play_music()
    assert sink.played == [("spooky", 0.5, True)]


def test_missing_sink_is_silent():
    mixer = AudioMixer()
    assert mixer.sfx("explosion")


def test_failing_sink_does_not_raise():
    class Broken:
        def play(self, sound_id, volume=1.0, loop=False):
            raise OSError("no device")

    mixer = AudioMixer(Broken())
    assert mixer.sfx("explosion")
    assert mixer.play_music() is None
