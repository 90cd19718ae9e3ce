"""
Main entry point for the battle engine.

This script loads the skill and character content, builds the player and
the enemy roster, then runs an interactive battle in the console.

The console battle supports:
- Choosing the enemy roster from the loaded character templates
- Attacking the selected enemy or casting one of the player's skills
- Seeding the crit rolls for reproducible battles
- Printing the battle log as it grows
"""

import argparse
import logging
from collections import Counter
from pathlib import Path

from battle_engine.character.main import Character
from battle_engine.combat.battle import Battle
from battle_engine.core.constants import ActionKind
from battle_engine.core.content import ContentRepository
from battle_engine.core.logging import get_logger, setup_logging
from battle_engine.core.utils import cprint, crule
from battle_engine.ui.cli_interface import PlayerInterface
from battle_engine.ui.display import get_battle_header, get_battle_status

logger = get_logger(__name__)

DEFAULT_PLAYER = "Hero A"
DEFAULT_ENEMIES = ["Goblin", "Orc"]


def make_names_unique(in_list: list[Character]) -> None:
    """
    Ensure all character names in a list are unique by appending numbers.

    Modifies character names in-place by appending (1), (2), etc. to duplicate
    names. Single instances keep their original names.

    Args:
        in_list (list[Character]): List of characters to make names unique for.

    Example:
        Input: ["Goblin", "Goblin", "Orc"]
        Output: ["Goblin (1)", "Goblin (2)", "Orc"]

    """
    name_counts = Counter(c.name for c in in_list)
    seen: Counter[str] = Counter()
    for character in in_list:
        base = character.name
        if name_counts[base] > 1:
            seen[base] += 1
            character.name = f"{base} ({seen[base]})"


def build_battle(
    repo: ContentRepository,
    player_name: str,
    enemy_names: list[str],
    seed: int | None = None,
) -> Battle:
    """
    Builds a fresh battle from the content repository.

    Args:
        repo (ContentRepository): The loaded content.
        player_name (str): Template name of the player.
        enemy_names (list[str]): Template names of the enemies, in acting order.
        seed (int | None): Seed for the crit rolls of the battle.

    Returns:
        Battle: A battle at its first player turn.

    Raises:
        ValueError: If a template is missing or the roster is empty.

    """
    player = repo.build_character(player_name)
    enemies = [repo.build_character(name) for name in enemy_names]
    make_names_unique(enemies)
    return Battle(player, enemies, seed=seed)


def run_battle(battle: Battle, ui: PlayerInterface) -> None:
    """Drives the battle from the console until it ends or the player quits."""
    # Entries logged before the subscription, such as the battle start.
    for entry in battle.log.entries:
        cprint(entry, markup=False)
    unsubscribe = battle.log.subscribe(lambda entry: cprint(entry, markup=False))
    try:
        while not battle.is_over():
            # Keep the selection on a living enemy.
            selected = battle.get_selected_enemy()
            if selected is None or selected.is_dead():
                alive = battle.get_alive_enemies()
                battle.select_target(battle.enemies.index(alive[0]))

            snapshot = battle.snapshot()
            crule(get_battle_header(snapshot), style="bold green")
            for line in get_battle_status(snapshot):
                cprint(line)

            choice = ui.choose_action(list(battle.player.skills))
            if choice == "q":
                cprint("You flee from the battle.", style="bold yellow")
                return
            if choice == "target":
                target = ui.choose_target(snapshot.enemies)
                if isinstance(target, int):
                    battle.select_target(target)
                continue
            if choice == ActionKind.SKILL:
                skill = ui.choose_skill(list(battle.player.skills), battle.player.mp)
                if not isinstance(skill, int):
                    continue
                battle.select_skill(skill)
            battle.submit_player_action(choice)
    finally:
        unsubscribe()

    crule("Battle Over", style="bold green")
    for line in get_battle_status(battle.snapshot()):
        cprint(line)
    if battle.rewards is not None:
        cprint(
            f"Rewards: {battle.rewards.experience} EXP, {battle.rewards.coins} coins",
            style="bold green",
        )


def main() -> None:
    parser = argparse.ArgumentParser(description="Turn-based battle in the console.")
    parser.add_argument(
        "--enemies",
        nargs="+",
        default=DEFAULT_ENEMIES,
        help="Enemy template names, in acting order.",
    )
    parser.add_argument(
        "--player",
        default=DEFAULT_PLAYER,
        help="Player template name.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for reproducible crit rolls.",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory containing skills.json and characters.json.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    args = parser.parse_args()

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    crule("Battle Engine", style="bold green")
    cprint("Loading content...", style="bold green")
    repo = ContentRepository(args.data_dir)

    try:
        battle = build_battle(repo, args.player, args.enemies, seed=args.seed)
    except ValueError as e:
        parser.error(str(e))

    logger.info(
        "Starting battle: %s vs %s (seed=%s)", args.player, args.enemies, args.seed
    )
    run_battle(battle, PlayerInterface())


if __name__ == "__main__":
    main()
