from dataclasses import dataclass
from typing import Any, Dict, List

from .modes import rules_for
from .state import GameType, RoundConfig, RoundState, ScoreEntry, ScoreKey, StrokeEntry


def total_points(player_id: str, mode: GameType, scores: Dict[ScoreKey, ScoreEntry], config: RoundConfig) -> int:
    """Points (or strokes relative to par, for standard play) for one player.

    Holes without an entry contribute nothing.
    """
    return rules_for(mode).total_points(player_id, scores, config)


def total_strokes(player_id: str, mode: GameType, scores: Dict[ScoreKey, ScoreEntry]) -> int:
    if not rules_for(mode).strokes_matter:
        return 0
    return sum(
        entry.strokes
        for (_, pid), entry in scores.items()
        if pid == player_id and isinstance(entry, StrokeEntry)
    )


@dataclass(frozen=True)
class Standing:
    player_id: str
    name: str
    points: int
    strokes: int
    display: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'player_id': self.player_id,
            'name': self.name,
            'points': self.points,
            'strokes': self.strokes,
            'display': self.display,
        }


def standings(state: RoundState) -> List[Standing]:
    """Every player ordered best first; ties keep player list order."""
    rules = rules_for(state.game_type)
    rows = []
    for player in state.players:
        points = rules.total_points(player.id, state.scores, state.config)
        rows.append(Standing(
            player_id=player.id,
            name=player.name,
            points=points,
            strokes=total_strokes(player.id, state.game_type, state.scores),
            display=rules.format_total(points),
        ))
    return sorted(rows, key=lambda s: s.points, reverse=not rules.lower_is_better)


def round_summary(state: RoundState) -> Dict[str, Any]:
    table = standings(state)
    winners = [s for s in table if table and s.points == table[0].points]
    return {
        'game_type': state.game_type.value,
        'is_finished': state.is_finished,
        'standings': [s.to_dict() for s in table],
        'winners': [s.to_dict() for s in winners],
        'is_draw': len(winners) > 1,
    }
