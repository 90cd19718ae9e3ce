"""
Character effects module for the battle engine.

Manages the buffs owned by a character: application, end-of-turn decay and
expiry.
"""

from typing import Any

from battle_engine.core.constants import BuffKind
from battle_engine.effects.buff import Buff, sum_buffs
from catchery import log_debug


class CharacterEffects:
    """
    Manages the active buffs of a character.

    The buff list is ordered by application. Mutating it does not update the
    owner's derived stats: the owner recomputes them after every mutation.

    Attributes:
        _owner (Any):
            The character that owns this effects module.
        active_buffs (list[Buff]):
            List of currently active buffs on the character.

    """

    _owner: Any
    active_buffs: list[Buff]

    def __init__(self, owner: Any) -> None:
        """
        Initialize the CharacterEffects module.

        Args:
            owner (Any):
                The character that owns this effects module.

        """
        self._owner = owner
        self.active_buffs: list[Buff] = []

    def add_buff(self, buff: Buff) -> None:
        """
        Appends a buff to the active list.

        Args:
            buff (Buff):
                The buff to add, owned exclusively by this character.

        """
        self.active_buffs.append(buff)
        log_debug(
            f"{self._owner.name} gains {buff}",
            {"character": self._owner.name, "buff": buff.kind.value},
        )

    def tick_buffs(self) -> list[Buff]:
        """
        Consumes one end-of-turn tick on every buff and drops the expired ones.

        Returns:
            list[Buff]:
                The buffs that expired on this tick.

        """
        expired: list[Buff] = []
        remaining: list[Buff] = []
        for buff in self.active_buffs:
            if buff.tick():
                expired.append(buff)
            else:
                remaining.append(buff)
        self.active_buffs = remaining
        for buff in expired:
            log_debug(
                f"{buff.display_name} has expired on {self._owner.name}",
                {"character": self._owner.name, "buff": buff.kind.value},
            )
        return expired

    def totals(self) -> dict[BuffKind, float]:
        """Returns the summed magnitudes of the active buffs, per kind."""
        return sum_buffs(self.active_buffs)
