import pytest

from game.survivor.keybinds import DEFAULT_BINDS, KeyBindings


def test_defaults_and_reverse_lookup():
    kb = KeyBindings()
    assert kb.get("bomb") == "b"
    assert kb.action_for("W") == "move_up"
    assert kb.action_for("q") is None


def test_rebinding_and_reset():
    kb = KeyBindings({"bomb": "Space"})
    assert kb.get("bomb") == "space"
    assert kb.action_for("b") is None
    kb.reset()
    assert kb.all() == DEFAULT_BINDS


def test_unknown_action_is_rejected():
    with pytest.raises(KeyError):
        KeyBindings().set("jump", "j")
