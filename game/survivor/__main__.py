"""
Play the survival game in an arcade window.

    python -m game.survivor --health 7 --bombs 5 --seed 1
"""

import argparse
import logging

from .config import SessionConfig


def main(argv=None):
    parser = argparse.ArgumentParser(description="Top-down wave survival game")
    parser.add_argument("--health", type=int, default=5, help="Starting hearts (default: 5)")
    parser.add_argument("--bombs", type=int, default=3, help="Starting bombs (default: 3)")
    parser.add_argument("--enemies", type=int, default=5, help="Initial enemy count (default: 5)")
    parser.add_argument("--max-enemies", type=int, default=25, help="Absolute enemy cap (default: 25)")
    parser.add_argument("--padding", type=float, default=64.0, help="Enemy spawn padding in px (default: 64)")
    parser.add_argument("--width", type=float, default=1280.0)
    parser.add_argument("--height", type=float, default=720.0)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    config = SessionConfig(
        initial_health=args.health,
        initial_bombs=args.bombs,
        initial_enemy_count=args.enemies,
        enemy_spawn_padding=args.padding,
        max_enemy_cap=args.max_enemies,
        world_width=args.width,
        world_height=args.height,
    )

    # Imported late so headless tooling never loads a windowing stack
    from .window import run_window
    run_window(config, seed=args.seed)


if __name__ == "__main__":
    main()
