from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ..errors import TeamFullError
from .pokemon import PokemonSummary

TEAM_SIZE = 6


@dataclass
class Team:
    slots: List[Optional[PokemonSummary]] = field(default_factory=lambda: [None] * TEAM_SIZE)

    def __post_init__(self):
        if len(self.slots) != TEAM_SIZE:
            raise ValueError(f"A team has exactly {TEAM_SIZE} slots, got {len(self.slots)}")

    def members(self) -> List[PokemonSummary]:
        return [p for p in self.slots if p is not None]

    def first_empty_slot(self) -> Optional[int]:
        for i, p in enumerate(self.slots):
            if p is None:
                return i
        return None

    @property
    def is_full(self) -> bool:
        return self.first_empty_slot() is None

    @property
    def is_empty(self) -> bool:
        return not self.members()

    def add(self, pokemon: PokemonSummary) -> int:
        idx = self.first_empty_slot()
        if idx is None:
            raise TeamFullError("Your team is full! Remove a Pokemon first.")
        self.slots[idx] = pokemon
        return idx

    @staticmethod
    def _check_index(index: int) -> int:
        # sin índices negativos: -1 vaciaría el último slot
        if not 0 <= index < TEAM_SIZE:
            raise IndexError(f"Slot must be between 1 and {TEAM_SIZE}, got {index + 1}")
        return index

    def put(self, index: int, pokemon: Optional[PokemonSummary]) -> None:
        self.slots[self._check_index(index)] = pokemon

    def remove(self, index: int) -> Optional[PokemonSummary]:
        old = self.slots[self._check_index(index)]
        self.slots[index] = None
        return old

    def clear(self) -> None:
        self.slots = [None] * TEAM_SIZE

    def to_list(self) -> List[Optional[dict]]:
        return [p.to_dict() if p else None for p in self.slots]

    @classmethod
    def from_list(cls, data: List[Optional[dict]]) -> "Team":
        slots: List[Optional[PokemonSummary]] = [None] * TEAM_SIZE
        for i, node in enumerate((data or [])[:TEAM_SIZE]):
            slots[i] = PokemonSummary.from_dict(node) if node else None
        return cls(slots=slots)


@dataclass
class CoverageMember:
    pokemon: PokemonSummary
    level: str
    reasons: List[str] = field(default_factory=list)


@dataclass
class CoverageEntry:
    type: str
    effectiveness: str = "none"
    label: str = "None"
    members: List[CoverageMember] = field(default_factory=list)

    @property
    def pokemon(self) -> List[PokemonSummary]:
        return [m.pokemon for m in self.members]


@dataclass
class MatchupScore:
    pokemon: PokemonSummary
    slot: int
    score: int = 0
    reasons: List[str] = field(default_factory=list)

    @property
    def rating(self) -> str:
        if self.score > 0:
            return "Good"
        if self.score < 0:
            return "Poor"
        return "Neutral"
