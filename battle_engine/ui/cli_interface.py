"""
User interface module for the battle engine.

Provides console-based menus for driving a battle, including action, skill
and target selection with rich tables and prompt_toolkit input.
"""

from typing import Any

from battle_engine.character.character_serialization import CharacterSnapshot
from battle_engine.core.constants import ActionKind
from battle_engine.core.utils import ccapture
from battle_engine.effects.skill import BuffSkill, DamageSkill, HealSkill, Skill
from prompt_toolkit import ANSI, PromptSession
from rich.table import Table


def describe_skill(skill: Skill) -> str:
    """
    Summarizes the effect of a skill for the skill menu.

    Args:
        skill (Skill): The skill to describe.

    Returns:
        str: A short description such as "40 x1.2 dmg" or "+30 HP".

    """
    if isinstance(skill, DamageSkill):
        return f"{skill.power:g} x{skill.multiplier:g} dmg"
    if isinstance(skill, HealSkill):
        return f"+{skill.amount} HP"
    if isinstance(skill, BuffSkill):
        suffix = "%" if skill.buff_kind.is_percent else ""
        return (
            f"+{skill.magnitude:g}{suffix} {skill.buff_kind.label} "
            f"for {skill.duration} turns"
        )
    return skill.description


class PlayerInterface:
    """
    Command-line interface for the player side of a battle.

    Provides Rich table-based menus for action selection, target selection
    and skill selection. Uses prompt_toolkit for interactive input with
    numeric and alphabetic shortcuts.
    """

    def __init__(self) -> None:
        # Created on first prompt, one session keeps history.
        self._session: PromptSession | None = None

    @property
    def session(self) -> PromptSession:
        if self._session is None:
            self._session = PromptSession(erase_when_done=True)
        return self._session

    def choose_action(self, skills: list[Skill]) -> ActionKind | str:
        """Choose what to do this turn.

        Args:
            skills (list[Skill]): The skills of the player, to know if the
                skill entry is available.

        Returns:
            ActionKind | str: The action, "target" to change the selected
                enemy, or "q" to quit.

        """
        entries: list[tuple[str, Any]] = [("Attack", ActionKind.ATTACK)]
        if skills:
            entries.append(("Use skill", ActionKind.SKILL))
        # Create a table of actions.
        table = Table(title="Actions", pad_edge=False)
        table.add_column("#", style="cyan")
        table.add_column("Name", style="bold")
        for i, (label, _) in enumerate(entries, 1):
            table.add_row(str(i), label)
        table.add_row()
        table.add_row("a", "Change target")
        table.add_row("q", "Quit")
        prompt = "\n" + ccapture(table) + "\nAction > "
        while True:
            answer = self.session.prompt(ANSI(prompt))
            if not answer:
                continue
            index = self.get_digit_choice(answer) - 1
            if 0 <= index < len(entries):
                return entries[index][1]
            if self.get_alpha_choice(answer) == 0:
                return "target"
            if answer.lower() == "q":
                return "q"

    def choose_skill(self, skills: list[Skill], mp: int) -> int | str | None:
        """Choose a skill from the skills of the player.

        Args:
            skills (list[Skill]): The skills to choose from.
            mp (int): The current mana of the player, to mark unaffordable
                skills.

        Returns:
            int | str | None: The index of the selected skill, "q" to go
                back, or None if there are no skills.

        """
        if not skills:
            return None
        table = Table(title="Skills", pad_edge=False)
        table.add_column("#", style="cyan")
        table.add_column("Name", style="bold")
        table.add_column("Effect", style="magenta")
        table.add_column("MP", justify="right")
        for i, skill in enumerate(skills, 1):
            cost_style = "blue" if skill.mp_cost <= mp else "dim red"
            table.add_row(
                str(i),
                skill.colored_name,
                describe_skill(skill),
                f"[{cost_style}]{skill.mp_cost}[/]",
            )
        table.add_row()
        table.add_row("q", "Back", "", "")
        prompt = "\n" + ccapture(table) + "\nSkill > "
        while True:
            answer = self.session.prompt(ANSI(prompt))
            if not answer:
                continue
            index = self.get_digit_choice(answer) - 1
            if 0 <= index < len(skills):
                return index
            if answer.lower() == "q":
                return "q"

    def choose_target(self, enemies: list[CharacterSnapshot]) -> int | str | None:
        """Choose an enemy from the roster.

        Args:
            enemies (list[CharacterSnapshot]): The roster, in battle order.
                Defeated enemies are listed but cannot be picked.

        Returns:
            int | str | None: The roster index of the selected enemy, "q" to
                go back, or None if every enemy is defeated.

        """
        alive = [i for i, enemy in enumerate(enemies) if enemy.is_alive]
        if not alive:
            return None
        table = Table(title="Targets", pad_edge=False)
        table.add_column("#", style="cyan", no_wrap=True)
        table.add_column("Name", style="bold")
        table.add_column("HP", justify="right")
        table.add_column("DEF", justify="right")
        for i, roster_index in enumerate(alive, 1):
            enemy = enemies[roster_index]
            table.add_row(
                str(i),
                enemy.name,
                f"{enemy.hp:>3}/{enemy.max_hp:<3}",
                str(enemy.defense),
            )
        table.add_row()
        table.add_row("q", "Back", "", "")
        prompt = "\n" + ccapture(table) + "\nTarget > "
        while True:
            answer = self.session.prompt(ANSI(prompt))
            if not answer:
                continue
            index = self.get_digit_choice(answer) - 1
            if 0 <= index < len(alive):
                return alive[index]
            if answer.lower() == "q":
                return "q"

    @staticmethod
    def get_digit_choice(answer: str) -> int:
        """Returns the value of a one-digit answer, -1 for anything else."""
        if isinstance(answer, str) and len(answer) == 1 and answer.isdigit():
            return int(answer)
        return -1

    @staticmethod
    def get_alpha_choice(answer: Any) -> int:
        """
        Returns the alphabet position of a one-letter answer, case-insensitive.

        "a" maps to 0, "b" to 1 and so on; anything else maps to -1.
        """
        if isinstance(answer, str) and len(answer) == 1 and answer.isalpha():
            return ord(answer.lower()) - ord("a")
        return -1
