"""
Display module for the battle engine.

Provides the console rendering of battle state: status lines with health,
mana and shield bars, buff summaries and the battle header.
"""

from battle_engine.character.character_serialization import CharacterSnapshot
from battle_engine.combat.battle import BattleSnapshot
from battle_engine.core.utils import make_bar


def format_buffs(snapshot: CharacterSnapshot, max_shown: int = 3) -> str:
    """
    Formats the active buffs of a character.

    Args:
        snapshot (CharacterSnapshot): The character to describe.
        max_shown (int): How many buffs to list before summarizing the rest.

    Returns:
        str: The buffs with their remaining turns, empty if there are none.

    """
    buffs_list = [
        f"[yellow]{buff.kind.emoji} {buff.display_name}({buff.turns})[/]"
        for buff in snapshot.buffs
    ]
    if len(buffs_list) <= max_shown:
        return " ".join(buffs_list)
    # Show the first buffs plus the count of the remaining ones.
    remaining_count = len(buffs_list) - (max_shown - 1)
    return f"{' '.join(buffs_list[: max_shown - 1])} [dim]+{remaining_count} more[/]"


def get_status_line(
    snapshot: CharacterSnapshot,
    show_numbers: bool = True,
    show_bars: bool = False,
) -> str:
    """
    Get a formatted status line for a character.

    Args:
        snapshot (CharacterSnapshot): The character to describe.
        show_numbers (bool): Whether to show numerical values. Defaults to True.
        show_bars (bool): Whether to show bar representations. Defaults to False.

    Returns:
        str: A formatted rich markup line.

    """
    name_width = min(max(len(snapshot.name), 8), 16)
    name_style = "bold" if snapshot.is_alive else "dim strike"
    status = (
        f"{snapshot.char_type.emoji} [{name_style}]{snapshot.name:<{name_width}}[/] "
    )

    def _pool(label: str, color: str, current: int, maximum: int) -> str:
        bar = make_bar(current, maximum, length=8, color=color) if show_bars else ""
        numbers = f"{current:>3}/{maximum:<3}" if show_numbers or not show_bars else ""
        return f"| [{color}]{label}:{numbers}[/]{bar} "

    status += _pool("HP", "green", snapshot.hp, snapshot.max_hp)
    if snapshot.max_mp > 0:
        status += _pool("MP", "blue", snapshot.mp, snapshot.max_mp)
    if snapshot.shield > 0:
        status += _pool("SH", "cyan", snapshot.shield, snapshot.max_shield)

    status += f"| [yellow]ATK:{snapshot.attack:>3} DEF:{snapshot.defense:>3}[/] "

    buffs = format_buffs(snapshot)
    if buffs:
        status += f"| {buffs}"
    return status


def get_battle_header(snapshot: BattleSnapshot) -> str:
    """Returns the turn counter and phase of the battle."""
    return f"Turn {snapshot.turn_number} - {snapshot.phase.colored_name}"


def get_battle_status(snapshot: BattleSnapshot) -> list[str]:
    """
    Builds the status lines of every participant.

    The player comes first, followed by the enemies in roster order; the
    selected enemy is marked with an arrow.

    Args:
        snapshot (BattleSnapshot): The battle to describe.

    Returns:
        list[str]: One rich markup line per participant.

    """
    lines = [get_status_line(snapshot.player, show_bars=True)]
    for index, enemy in enumerate(snapshot.enemies):
        marker = "➤" if index == snapshot.selected_target else " "
        lines.append(f"{marker} {get_status_line(enemy, show_bars=True)}")
    return lines
