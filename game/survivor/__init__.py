"""Survivor - top-down wave survival simulation"""

from .config import SessionConfig
from .session import GameSession, SessionState
from .survivor_env import SurvivorEnv, run_random_episode

__all__ = ['SessionConfig', 'GameSession', 'SessionState', 'SurvivorEnv', 'run_random_episode']
