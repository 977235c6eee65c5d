"""Round domain services: state, scoring, Wolf, match play, scoreboard.

Pure logic only. HTTP routes and the persistence model import from here;
nothing in this package knows about Flask or the database.
"""

from .errors import (
    InvalidHole,
    InvalidRoundConfig,
    InvalidScore,
    InvalidWolfDecision,
    RoundError,
    UnknownPlayer,
    WolfEditError,
)
from .match_play import build_pairs, hole_winner, match_status
from .modes import CellCategory, rules_for
from .rounds import (
    add_player,
    award_bbb_point,
    begin_wolf_edit,
    cancel_wolf_edit,
    clear_stroke,
    create_initial_round,
    finish_round,
    go_to_hole,
    next_hole,
    previous_hole,
    record_stroke,
    record_wolf_decision,
    record_wolf_strokes,
    remove_player,
    reopen_round,
    resolve_wolf_hole,
    set_par,
    set_pars,
    set_wolf_override,
    soft_remove_player,
    step_stroke,
)
from .scoreboard import build_scoreboard
from .scoring import round_summary, standings, total_points, total_strokes
from .state import (
    GAME_TYPE_DETAILS,
    BbbPoint,
    BetType,
    GameType,
    MatchPair,
    Player,
    RoundConfig,
    RoundState,
    WolfTeam,
    active_players,
)
from .wolf import calculate_points, get_wolf

__all__ = [
    'RoundError',
    'InvalidHole',
    'InvalidRoundConfig',
    'InvalidScore',
    'InvalidWolfDecision',
    'UnknownPlayer',
    'WolfEditError',
    'GAME_TYPE_DETAILS',
    'BbbPoint',
    'BetType',
    'CellCategory',
    'GameType',
    'MatchPair',
    'Player',
    'RoundConfig',
    'RoundState',
    'WolfTeam',
    'build_pairs',
    'build_scoreboard',
    'calculate_points',
    'get_wolf',
    'hole_winner',
    'match_status',
    'round_summary',
    'rules_for',
    'standings',
    'total_points',
    'total_strokes',
    'active_players',
    'add_player',
    'award_bbb_point',
    'begin_wolf_edit',
    'cancel_wolf_edit',
    'clear_stroke',
    'create_initial_round',
    'finish_round',
    'go_to_hole',
    'next_hole',
    'previous_hole',
    'record_stroke',
    'record_wolf_decision',
    'record_wolf_strokes',
    'remove_player',
    'reopen_round',
    'resolve_wolf_hole',
    'set_par',
    'set_pars',
    'set_wolf_override',
    'soft_remove_player',
    'step_stroke',
]
