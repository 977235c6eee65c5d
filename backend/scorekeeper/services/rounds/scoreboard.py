"""Full-round scoreboard grid.

``build_scoreboard`` lays out every player against every hole with a
display string and a category for each cell, plus each player's running
total. The category is what a client colours by; the grid itself carries
no layout. Match play groups rows by pairing so a client can separate
the matches; modes where par means nothing get a single header row.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .match_play import MatchStatus, match_status
from .modes import rules_for
from .scoring import total_strokes
from .state import GameType, MatchPair, Player, RoundConfig, ScoreEntry, ScoreKey


@dataclass(frozen=True)
class ScoreboardCell:
    hole: int
    display: str
    category: str

    def to_dict(self) -> Dict[str, Any]:
        return {'hole': self.hole, 'display': self.display, 'category': self.category}


@dataclass(frozen=True)
class ScoreboardRow:
    player_id: str
    name: str
    cells: List[ScoreboardCell]
    total: int
    total_display: str
    strokes: Optional[int] = None
    removed_at_hole: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'player_id': self.player_id,
            'name': self.name,
            'cells': [c.to_dict() for c in self.cells],
            'total': self.total,
            'total_display': self.total_display,
            'strokes': self.strokes,
            'removed_at_hole': self.removed_at_hole,
        }


@dataclass(frozen=True)
class ScoreboardGroup:
    rows: List[ScoreboardRow]
    pair: Optional[MatchPair] = None
    status: Optional[MatchStatus] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'pair': self.pair.to_dict() if self.pair else None,
            'status': self.status.to_dict() if self.status else None,
            'rows': [r.to_dict() for r in self.rows],
        }


@dataclass(frozen=True)
class Scoreboard:
    game_type: GameType
    holes: List[int]
    header_rows: int
    pars: Optional[List[int]] = None
    groups: List[ScoreboardGroup] = field(default_factory=list)

    @property
    def rows(self) -> List[ScoreboardRow]:
        return [row for group in self.groups for row in group.rows]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'game_type': self.game_type.value,
            'holes': list(self.holes),
            'header_rows': self.header_rows,
            'pars': list(self.pars) if self.pars is not None else None,
            'groups': [g.to_dict() for g in self.groups],
        }


def _row(player: Player, mode: GameType, scores: Dict[ScoreKey, ScoreEntry], config: RoundConfig) -> ScoreboardRow:
    rules = rules_for(mode)
    cells = []
    for hole in range(1, config.hole_count + 1):
        display, category = rules.describe_cell(hole, player.id, scores, config)
        cells.append(ScoreboardCell(hole=hole, display=display, category=category.value))
    total = rules.total_points(player.id, scores, config)
    return ScoreboardRow(
        player_id=player.id,
        name=player.name,
        cells=cells,
        total=total,
        total_display=rules.format_total(total),
        strokes=total_strokes(player.id, mode, scores) if rules.strokes_matter else None,
        removed_at_hole=player.removed_at_hole,
    )


def build_scoreboard(players: List[Player], config: RoundConfig, scores: Dict[ScoreKey, ScoreEntry],
                     mode: GameType, current_hole: Optional[int] = None) -> Scoreboard:
    mode = GameType(mode)
    rules = rules_for(mode)
    holes = list(range(1, config.hole_count + 1))
    rows = {p.id: _row(p, mode, scores, config) for p in players}

    groups: List[ScoreboardGroup] = []
    if mode == GameType.MATCH_PLAY and config.match_play_data:
        placed = set()
        for pair in config.match_play_data.pairs:
            pair_rows = [rows[pid] for pid in pair.player_ids if pid in rows]
            if not pair_rows:
                continue
            placed.update(pair.player_ids)
            groups.append(ScoreboardGroup(
                rows=pair_rows,
                pair=pair,
                status=match_status(pair, scores, config.hole_count, current_hole),
            ))
        # Players added after pairing sit outside every match.
        unpaired = [rows[p.id] for p in players if p.id not in placed]
        if unpaired:
            groups.append(ScoreboardGroup(rows=unpaired))
    else:
        groups.append(ScoreboardGroup(rows=[rows[p.id] for p in players]))

    return Scoreboard(
        game_type=mode,
        holes=holes,
        header_rows=2 if rules.strokes_matter else 1,
        pars=[config.par_for(h) for h in holes] if rules.strokes_matter else None,
        groups=groups,
    )
