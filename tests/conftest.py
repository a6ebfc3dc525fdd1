import pytest

from game.survivor.config import SessionConfig
from game.survivor.entities import Enemy
from game.survivor.hosts import Collaborators
from game.survivor.session import GameSession


class RecordingUI:
    """Level-up host that only remembers what it was offered"""

    def __init__(self):
        self.requests = []

    def request_skill_choice(self, candidates):
        self.requests.append(list(candidates))


class RecordingHud:
    def __init__(self):
        self.calls = []

    def score_changed(self, score):
        self.calls.append(("score", score))

    def health_changed(self, health, max_health):
        self.calls.append(("health", health, max_health))

    def bombs_changed(self, bombs):
        self.calls.append(("bombs", bombs))

    def xp_changed(self, xp, level, required):
        self.calls.append(("xp", xp, level, required))


class RecordingAudio:
    def __init__(self):
        self.played = []

    def play(self, sound_id, volume=1.0, loop=False):
        self.played.append((sound_id, volume, loop))


def make_session(seed=7, ui=None, hud=None, audio=None, **overrides):
    cfg = SessionConfig(**overrides)
    session = GameSession(cfg, Collaborators(audio=audio, hud=hud, level_up_ui=ui), seed=seed)
    session.start()
    return session


def place_enemy(session, x, y, hp=1):
    e = Enemy(x=x, y=y, hp=hp)
    e.handle = session.entities.create("enemy", e.pos, {"radius": e.radius})
    session.enemies.append(e)
    return e


@pytest.fixture
def quiet_session():
    """A started session with no enemies and no wave timers"""
    s = make_session(initial_enemy_count=0, powerups_per_kind=0)
    s.waves.stop()
    return s
