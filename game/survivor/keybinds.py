"""
Runtime key bindings: logical action -> key name
"""

from typing import Dict, Optional

DEFAULT_BINDS = {
    "move_left": "a",
    "move_right": "d",
    "move_up": "w",
    "move_down": "s",
    "bomb": "b",
    "pause": "escape",
}


class KeyBindings:
    def __init__(self, overrides: Optional[Dict[str, str]] = None):
        self._binds = dict(DEFAULT_BINDS)
        for action, key in (overrides or {}).items():
            self.set(action, key)

    def get(self, action: str) -> Optional[str]:
        return self._binds.get(action)

    def set(self, action: str, key: str):
        if action not in DEFAULT_BINDS:
            raise KeyError(f"unknown action: {action}")
        self._binds[action] = key.lower()

    def reset(self):
        self._binds = dict(DEFAULT_BINDS)

    def action_for(self, key: str) -> Optional[str]:
        """Reverse lookup used by input adapters"""
        key = key.lower()
        for action, bound in self._binds.items():
            if bound == key:
                return action
        return None

    def all(self) -> Dict[str, str]:
        return dict(self._binds)
