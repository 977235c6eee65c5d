"""Per-game-type rules.

Each GameType maps to one rules object exposing the same small surface:
how a recorded entry turns into points, whether strokes and pars mean
anything, which direction wins, and how a scoreboard cell reads. Callers
look the rules up with ``rules_for`` instead of branching on the type.
"""

from enum import Enum
from typing import Dict, Optional, Tuple, Type

from .match_play import HALVED, hole_winner, holes_won, pair_for_player
from .state import (
    BbbEntry,
    GameType,
    RoundConfig,
    ScoreEntry,
    ScoreKey,
    StrokeEntry,
    WolfPointsEntry,
    WolfTeam,
)


class CellCategory(str, Enum):
    UNDER_PAR = 'under-par'
    OVER_PAR = 'over-par'
    EVEN = 'even'
    UNSET = 'unset'
    WIN = 'win'
    LOSS = 'loss'
    TIE = 'tie'


UNSET_DISPLAY = '-'

Cell = Tuple[str, CellCategory]


def par_category(strokes: int, par: int) -> CellCategory:
    if strokes < par:
        return CellCategory.UNDER_PAR
    if strokes > par:
        return CellCategory.OVER_PAR
    return CellCategory.EVEN


class GameRules:
    game_type: GameType
    entry_type: Type = StrokeEntry
    strokes_matter = True
    lower_is_better = False

    def accepts(self, entry: Optional[ScoreEntry]) -> bool:
        return isinstance(entry, self.entry_type)

    def points_for_hole(self, entry: ScoreEntry, par: int) -> int:
        raise NotImplementedError

    def total_points(self, player_id: str, scores: Dict[ScoreKey, ScoreEntry], config: RoundConfig) -> int:
        total = 0
        for (hole, pid), entry in scores.items():
            if pid == player_id and self.accepts(entry):
                total += self.points_for_hole(entry, config.par_for(hole))
        return total

    def describe_cell(self, hole: int, player_id: str, scores: Dict[ScoreKey, ScoreEntry], config: RoundConfig) -> Cell:
        entry = scores.get((hole, player_id))
        if not self.accepts(entry):
            return UNSET_DISPLAY, CellCategory.UNSET
        return str(entry.strokes), par_category(entry.strokes, config.par_for(hole))

    def format_total(self, total: int) -> str:
        return str(total)


class StandardRules(GameRules):
    game_type = GameType.STANDARD
    lower_is_better = True

    def points_for_hole(self, entry: StrokeEntry, par: int) -> int:
        return entry.strokes - par

    def format_total(self, total: int) -> str:
        if total == 0:
            return 'E'
        return f"+{total}" if total > 0 else str(total)


class BirdieOrDieRules(GameRules):
    game_type = GameType.BIRDIE_OR_DIE

    def points_for_hole(self, entry: StrokeEntry, par: int) -> int:
        under_par = par - entry.strokes
        # An ace under par always takes the top award.
        if under_par >= 3 or (entry.strokes == 1 and under_par > 0):
            return 5
        if under_par == 2:
            return 3
        if under_par == 1:
            return 1
        return 0


class WolfRules(GameRules):
    game_type = GameType.WOLF
    entry_type = WolfPointsEntry
    strokes_matter = False

    def points_for_hole(self, entry: WolfPointsEntry, par: int) -> int:
        return entry.points

    def describe_cell(self, hole: int, player_id: str, scores: Dict[ScoreKey, ScoreEntry], config: RoundConfig) -> Cell:
        entry = scores.get((hole, player_id))
        if not self.accepts(entry):
            return UNSET_DISPLAY, CellCategory.UNSET
        display = f"+{entry.points}" if entry.points > 0 else str(entry.points)
        wolf_data = config.wolf_data
        decision = wolf_data.history.get(hole) if wolf_data else None
        if decision is not None and decision.winning_team == WolfTeam.TIE:
            return display, CellCategory.TIE
        if entry.points > 0:
            return display, CellCategory.WIN
        return display, CellCategory.LOSS


class BingoBangoBongoRules(GameRules):
    game_type = GameType.BINGO_BANGO_BONGO
    entry_type = BbbEntry
    strokes_matter = False

    def points_for_hole(self, entry: BbbEntry, par: int) -> int:
        return entry.count

    def describe_cell(self, hole: int, player_id: str, scores: Dict[ScoreKey, ScoreEntry], config: RoundConfig) -> Cell:
        entry = scores.get((hole, player_id))
        if not self.accepts(entry):
            return UNSET_DISPLAY, CellCategory.UNSET
        if entry.count:
            return str(entry.count), CellCategory.WIN
        return '0', CellCategory.EVEN


class MatchPlayRules(GameRules):
    game_type = GameType.MATCH_PLAY

    def points_for_hole(self, entry: StrokeEntry, par: int) -> int:
        # A single hole means nothing without the opponent; see total_points.
        return 0

    def total_points(self, player_id: str, scores: Dict[ScoreKey, ScoreEntry], config: RoundConfig) -> int:
        return holes_won(player_id, scores, config)

    def describe_cell(self, hole: int, player_id: str, scores: Dict[ScoreKey, ScoreEntry], config: RoundConfig) -> Cell:
        display, category = super().describe_cell(hole, player_id, scores, config)
        if category == CellCategory.UNSET:
            return display, category
        pair = pair_for_player(config, player_id)
        if pair is None or pair.is_bye:
            return display, category
        winner = hole_winner(pair, hole, scores)
        if winner is None:
            return display, category
        if winner == HALVED:
            return display, CellCategory.TIE
        return display, CellCategory.WIN if winner == player_id else CellCategory.LOSS


RULES: Dict[GameType, GameRules] = {
    rules.game_type: rules
    for rules in (
        StandardRules(),
        WolfRules(),
        BirdieOrDieRules(),
        BingoBangoBongoRules(),
        MatchPlayRules(),
    )
}


def rules_for(game_type: GameType) -> GameRules:
    return RULES[GameType(game_type)]
