# Models for the board and factions of Strategia

from dataclasses import dataclass, field
from enum import Enum


class Owner(Enum):
    NONE = "NONE"
    PLAYER = "PLAYER"
    AI = "AI"


class ActionType(Enum):
    RECRUIT = "RECRUIT"  # Spend gold for soldiers
    ATTACK = "ATTACK"    # Send soldiers to take a tile
    HARVEST = "HARVEST"  # Gain extra gold immediately
    PASS = "PASS"        # Skip turn


class TileType(Enum):
    CAPITAL = "CAPITAL"
    MINE = "MINE"          # Rich, weak
    FORTRESS = "FORTRESS"  # Poor, strong
    VILLAGE = "VILLAGE"    # Balanced


ACTOR_NAMES = {Owner.PLAYER: "Player", Owner.AI: "AI"}


def opponent_of(owner: Owner) -> Owner:
    """Return the other faction. Unclaimed land has no opponent."""
    if owner == Owner.PLAYER:
        return Owner.AI
    if owner == Owner.AI:
        return Owner.PLAYER
    raise ValueError("Unclaimed tiles have no opposing faction")


@dataclass
class Tile:
    """One territory on the square grid. Row and column derive from the id."""
    id: int
    row: int
    col: int
    owner: Owner = Owner.NONE
    defense: int = 1  # Fortification a conqueror must overcome
    resource_value: int = 2  # Gold yielded to the owner each round
    type: TileType = TileType.VILLAGE

    def copy(self) -> 'Tile':
        return Tile(self.id, self.row, self.col, self.owner, self.defense,
                    self.resource_value, self.type)


@dataclass
class FactionState:
    """
    Economy and military of one side.

    Gold never stays negative after a resolution step: a deficit is paid
    for with deserting soldiers instead.
    """
    gold: int = 25
    army: int = 10
    tiles_controlled: int = 1

    def copy(self) -> 'FactionState':
        return FactionState(self.gold, self.army, self.tiles_controlled)

    def update_gold(self, amount: int) -> None:
        self.gold += amount

    def update_army(self, amount: int) -> None:
        """Update army size, ensuring it doesn't go below 0."""
        self.army = max(0, self.army + amount)


@dataclass
class UpkeepReport:
    """Income, upkeep and desertion figures for one faction in one round."""
    owner: Owner
    income: int
    upkeep: int
    gold_before: int
    gold_after: int
    deserters: int = 0
    reinforced_fortresses: list = field(default_factory=list)

    @property
    def bankrupt(self) -> bool:
        return self.gold_before + self.income - self.upkeep < 0

    @property
    def deficit(self) -> int:
        """Gold the treasury fell short by; deserters can be fewer if the army runs out."""
        return max(0, self.upkeep - self.gold_before - self.income)
