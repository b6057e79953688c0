"""
Round Advance Policies

Decide when a finished round rolls over to the next one. A room asks its
policy after every change that could end a round.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, Type

from ..models.room import Player, PlayerStatus


def round_finished(players: Iterable[Player]) -> bool:
    """True once every connected player has finished the round."""
    connected = [player for player in players if player.is_connected]
    return bool(connected) and all(player.status == PlayerStatus.FINISHED for player in connected)


class AdvancePolicy(ABC):
    name = ""

    @abstractmethod
    def should_advance(self, players: Iterable[Player]) -> bool:
        """Whether the room should leave the current round now."""


class AutoAdvancePolicy(AdvancePolicy):
    """Advance as soon as everyone connected has finished."""
    name = "auto"

    def should_advance(self, players: Iterable[Player]) -> bool:
        return round_finished(players)


class ReadyGatePolicy(AdvancePolicy):
    """Advance only after everyone connected has finished and said they are ready."""
    name = "ready"

    def should_advance(self, players: Iterable[Player]) -> bool:
        players = list(players)
        return round_finished(players) and all(
            player.ready_for_next_round for player in players if player.is_connected
        )


ADVANCE_POLICIES: Dict[str, Type[AdvancePolicy]] = {
    AutoAdvancePolicy.name: AutoAdvancePolicy,
    ReadyGatePolicy.name: ReadyGatePolicy,
}


def get_advance_policy(name: str) -> AdvancePolicy:
    try:
        return ADVANCE_POLICIES[name]()
    except KeyError:
        raise ValueError(f"Unknown round advance policy: {name}")
