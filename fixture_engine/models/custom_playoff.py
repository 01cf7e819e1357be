from dataclasses import dataclass, field
from typing import Any, Dict, List

from fixture_engine.models.bracket import BracketMatch


@dataclass
class CustomPlayoffRound:
    id: str
    name: str
    round: int  # template round, 1..6; 0 is the 9 team play-in
    matches: List[BracketMatch] = field(default_factory=list)
    is_elimination: bool = True
    description: str = ""
    re_seed: bool = False  # pair survivors by original table position

    def match_is_elimination(self, match: BracketMatch) -> bool:
        if match.is_elimination is not None:
            return match.is_elimination
        return self.is_elimination

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "round": self.round,
            "is_elimination": self.is_elimination,
            "description": self.description,
            "re_seed": self.re_seed,
            "matches": [
                {**m.to_dict(), "is_elimination": self.match_is_elimination(m)}
                for m in self.matches
            ],
        }
