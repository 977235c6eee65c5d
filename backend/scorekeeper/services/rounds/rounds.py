"""State transitions for a round.

Every function takes a ``RoundState`` and returns a new one; the input
is never modified. Invalid requests raise a ``RoundError`` subclass and
leave nothing half-applied.
"""

import copy
import logging
import random
import uuid
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .errors import (
    InvalidHole,
    InvalidRoundConfig,
    InvalidScore,
    InvalidWolfDecision,
    UnknownPlayer,
    WolfEditError,
)
from .match_play import build_pairs
from .modes import rules_for
from .state import (
    BbbEntry,
    BbbPoint,
    BetType,
    GameType,
    MatchPair,
    MatchPlaySideData,
    Player,
    RoundConfig,
    RoundState,
    StrokeEntry,
    WolfHoleDecision,
    WolfHoleEdit,
    WolfPointsEntry,
    WolfSideData,
    WolfStrokes,
    WolfTeam,
)
from .wolf import replay_wolf_ledger, winning_team_for

logger = logging.getLogger(__name__)

PlayerSpec = Union[str, Player]
PairSpec = Union[MatchPair, Tuple[str, Optional[str]], Sequence[Optional[str]]]


def new_player_id() -> str:
    return str(uuid.uuid4())


def _copy(state: RoundState) -> RoundState:
    return copy.deepcopy(state)


def _require_hole(state: RoundState, hole: int) -> int:
    if not isinstance(hole, int) or isinstance(hole, bool) or not 1 <= hole <= state.config.hole_count:
        raise InvalidHole(f"Hole must be between 1 and {state.config.hole_count}")
    return hole


def _require_player(state: RoundState, player_id: str) -> Player:
    player = state.player(player_id)
    if player is None:
        raise UnknownPlayer(f"Unknown player: {player_id}")
    return player


def _require_active(state: RoundState, player_id: str, hole: int) -> Player:
    player = _require_player(state, player_id)
    if not player.is_active_at(hole):
        raise UnknownPlayer(f"{player.name} left the round before hole {hole}")
    return player


def _require_par(par: int) -> int:
    if not isinstance(par, int) or isinstance(par, bool) or par < 1:
        raise InvalidRoundConfig("Par must be a positive integer")
    return par


def _require_mode(state: RoundState, *game_types: GameType) -> None:
    if state.game_type not in game_types:
        allowed = ', '.join(g.value for g in game_types)
        raise InvalidScore(f"Not available in {state.game_type.value} rounds (only {allowed})")


def _wolf_data(state: RoundState) -> WolfSideData:
    _require_mode(state, GameType.WOLF)
    if state.config.wolf_data is None:
        state.config.wolf_data = WolfSideData()
    return state.config.wolf_data


# ---- Round lifecycle ----

def create_initial_round(game_type: Union[GameType, str], hole_count: int, players: Iterable[PlayerSpec],
                         pars: Optional[Dict[int, int]] = None, default_par: int = 3,
                         starting_wolf_index: Optional[int] = None,
                         pairs: Optional[Iterable[PairSpec]] = None,
                         rng: Optional[random.Random] = None) -> RoundState:
    """Start a round on hole 1 with no scores.

    ``players`` may be names (ids are generated) or ready-made Player
    values. Wolf rounds get a random starting wolf unless one is given;
    match play pairs players in order unless ``pairs`` is given.
    """
    try:
        game_type = GameType(game_type)
    except ValueError:
        raise InvalidRoundConfig(f"Unknown game type: {game_type}")
    if not isinstance(hole_count, int) or isinstance(hole_count, bool) or hole_count < 1:
        raise InvalidRoundConfig("Hole count must be at least 1")
    _require_par(default_par)

    par_overrides = {}
    for hole, par in (pars or {}).items():
        hole = int(hole)
        if not 1 <= hole <= hole_count:
            raise InvalidRoundConfig(f"Par given for hole {hole} outside a {hole_count}-hole round")
        par_overrides[hole] = _require_par(par)

    roster: List[Player] = []
    for spec in players:
        if isinstance(spec, Player):
            roster.append(copy.copy(spec))
        else:
            name = str(spec or '').strip()
            if not name:
                raise InvalidRoundConfig("Player names cannot be blank")
            roster.append(Player(id=new_player_id(), name=name))
    if not roster:
        raise InvalidRoundConfig("A round needs at least one player")
    if len({p.id for p in roster}) != len(roster):
        raise InvalidRoundConfig("Player ids must be unique")

    config = RoundConfig(hole_count=hole_count, default_par=default_par, pars=par_overrides)

    if game_type == GameType.WOLF:
        if starting_wolf_index is None:
            starting_wolf_index = (rng or random).randrange(len(roster))
        config.wolf_data = WolfSideData(starting_wolf_index=int(starting_wolf_index))

    if game_type == GameType.MATCH_PLAY:
        ids = [p.id for p in roster]
        config.match_play_data = MatchPlaySideData(
            pairs=_validate_pairs(pairs, ids) if pairs is not None else build_pairs(ids)
        )

    return RoundState(game_type=game_type, players=roster, config=config)


def _validate_pairs(pairs: Iterable[PairSpec], player_ids: List[str]) -> List[MatchPair]:
    result = []
    seen = set()
    for spec in pairs:
        if isinstance(spec, MatchPair):
            pair = spec
        else:
            first, second = (list(spec) + [None])[:2]
            pair = MatchPair(player1_id=first, player2_id=second)
        for pid in pair.player_ids:
            if pid not in player_ids:
                raise InvalidRoundConfig(f"Pair references unknown player: {pid}")
            if pid in seen:
                raise InvalidRoundConfig(f"Player {pid} appears in more than one pair")
            seen.add(pid)
        result.append(pair)
    return result


def finish_round(state: RoundState) -> RoundState:
    new_state = _copy(state)
    new_state.is_finished = True
    return new_state


def reopen_round(state: RoundState) -> RoundState:
    new_state = _copy(state)
    new_state.is_finished = False
    return new_state


# ---- Navigation and pars ----

def go_to_hole(state: RoundState, hole: int) -> RoundState:
    _require_hole(state, hole)
    new_state = _copy(state)
    new_state.current_hole = hole
    return new_state


def next_hole(state: RoundState) -> RoundState:
    return go_to_hole(state, min(state.current_hole + 1, state.config.hole_count))


def previous_hole(state: RoundState) -> RoundState:
    return go_to_hole(state, max(state.current_hole - 1, 1))


def set_par(state: RoundState, hole: int, par: int) -> RoundState:
    _require_hole(state, hole)
    _require_par(par)
    new_state = _copy(state)
    new_state.config.pars[hole] = par
    return new_state


def set_pars(state: RoundState, pars: Dict[int, int]) -> RoundState:
    """Replace every par override; an empty mapping resets all holes to the default."""
    overrides = {}
    for hole, par in pars.items():
        overrides[_require_hole(state, hole)] = _require_par(par)
    new_state = _copy(state)
    new_state.config.pars = overrides
    return new_state


# ---- Players ----

def add_player(state: RoundState, name: str, player_id: Optional[str] = None) -> RoundState:
    name = str(name or '').strip()
    if not name:
        raise InvalidRoundConfig("Player names cannot be blank")
    player_id = player_id or new_player_id()
    if state.player(player_id) is not None:
        raise InvalidRoundConfig(f"Player id already used: {player_id}")
    new_state = _copy(state)
    new_state.players.append(Player(id=player_id, name=name))
    return new_state


def remove_player(state: RoundState, player_id: str) -> RoundState:
    """Drop a player and every score they recorded.

    Removing the last player ends the round (``is_active`` goes false).
    """
    _require_player(state, player_id)
    new_state = _copy(state)
    new_state.players = [p for p in new_state.players if p.id != player_id]
    new_state.scores = {k: e for k, e in new_state.scores.items() if k[1] != player_id}
    wolf_data = new_state.config.wolf_data
    if wolf_data is not None:
        wolf_data.wolf_overrides = {h: pid for h, pid in wolf_data.wolf_overrides.items() if pid != player_id}
        replay_wolf_ledger(new_state)
    match_data = new_state.config.match_play_data
    if match_data is not None:
        match_data.pairs = _without_player(match_data.pairs, player_id)
    if not new_state.players:
        new_state.is_active = False
    return new_state


def _without_player(pairs: List[MatchPair], player_id: str) -> List[MatchPair]:
    """Drop ``player_id`` from its pairing; the opponent left behind plays a bye."""
    result = []
    for pair in pairs:
        if player_id not in pair.player_ids:
            result.append(pair)
            continue
        survivors = [pid for pid in pair.player_ids if pid != player_id]
        if survivors:
            result.append(MatchPair(player1_id=survivors[0], player2_id=None))
    return result


def soft_remove_player(state: RoundState, player_id: str, at_hole: int) -> RoundState:
    """Take a player out from ``at_hole`` on, keeping everything they scored before it."""
    _require_hole(state, at_hole)
    _require_player(state, player_id)
    new_state = _copy(state)
    new_state.player(player_id).removed_at_hole = at_hole
    if new_state.config.wolf_data is not None:
        replay_wolf_ledger(new_state)
    return new_state


# ---- Stroke entry ----

def record_stroke(state: RoundState, hole: int, player_id: str, value: int) -> RoundState:
    _require_hole(state, hole)
    _require_active(state, player_id, hole)
    if rules_for(state.game_type).entry_type is not StrokeEntry:
        raise InvalidScore(f"{state.game_type.value} rounds do not record strokes")
    if not isinstance(value, int) or isinstance(value, bool) or value < 1:
        raise InvalidScore("Strokes must be a whole number of at least 1")
    new_state = _copy(state)
    new_state.scores[(hole, player_id)] = StrokeEntry(strokes=value)
    return new_state


def step_stroke(state: RoundState, hole: int, player_id: str, direction: int) -> RoundState:
    """Apply one +/- tap.

    The first tap on an unplayed hole lands on par (+) or one under (-);
    later taps move by one. Never goes below 1.
    """
    if direction not in (1, -1) or isinstance(direction, bool):
        raise InvalidScore("Direction must be 1 or -1")
    current = state.entry(hole, player_id)
    par = state.config.par_for(hole)
    if not isinstance(current, StrokeEntry):
        value = par if direction > 0 else par - 1
    else:
        value = current.strokes + (1 if direction > 0 else -1)
    return record_stroke(state, hole, player_id, max(1, value))


def clear_stroke(state: RoundState, hole: int, player_id: str) -> RoundState:
    _require_hole(state, hole)
    _require_player(state, player_id)
    new_state = _copy(state)
    entry = new_state.scores.get((hole, player_id))
    if entry is not None and not isinstance(entry, WolfPointsEntry):
        del new_state.scores[(hole, player_id)]
    return new_state


# ---- Bingo Bango Bongo ----

def award_bbb_point(state: RoundState, hole: int, player_id: str, point: Union[BbbPoint, str]) -> RoundState:
    """Give ``point`` on ``hole`` to one player, taking it from anyone else.

    If the player already holds it, it is cleared instead.
    """
    _require_mode(state, GameType.BINGO_BANGO_BONGO)
    _require_hole(state, hole)
    _require_active(state, player_id, hole)
    try:
        point = BbbPoint(point)
    except ValueError:
        raise InvalidScore(f"Unknown point type: {point}")

    new_state = _copy(state)
    current = new_state.scores.get((hole, player_id))
    current = current if isinstance(current, BbbEntry) else BbbEntry()
    if current.has(point):
        new_state.scores[(hole, player_id)] = current.with_point(point, False)
        return new_state

    for (h, pid), entry in list(new_state.scores.items()):
        if h == hole and pid != player_id and isinstance(entry, BbbEntry) and entry.has(point):
            new_state.scores[(h, pid)] = entry.with_point(point, False)
    new_state.scores[(hole, player_id)] = current.with_point(point, True)
    return new_state


# ---- Wolf ----

def record_wolf_decision(state: RoundState, hole: int, wolf_id: str, partner_id: Optional[str],
                         bet_type: Union[BetType, str]) -> RoundState:
    """Record the Wolf's pick for a hole, replacing any earlier pick and its result."""
    _require_hole(state, hole)
    try:
        bet_type = BetType(bet_type)
    except ValueError:
        raise InvalidWolfDecision(f"Unknown bet type: {bet_type}")
    _require_active(state, wolf_id, hole)
    if bet_type == BetType.PARTNER:
        if not partner_id:
            raise InvalidWolfDecision("A partnered Wolf needs a partner")
        if partner_id == wolf_id:
            raise InvalidWolfDecision("The Wolf cannot partner with themselves")
        _require_active(state, partner_id, hole)
    elif partner_id:
        raise InvalidWolfDecision(f"A {bet_type.value} Wolf plays without a partner")

    new_state = _copy(state)
    wolf_data = _wolf_data(new_state)
    wolf_data.history[hole] = WolfHoleDecision(wolf_id=wolf_id, partner_id=partner_id or None, bet_type=bet_type)
    return replay_wolf_ledger(new_state)


def record_wolf_strokes(state: RoundState, hole: int, wolf_strokes: int, pack_strokes: int) -> RoundState:
    _require_hole(state, hole)
    for value in (wolf_strokes, pack_strokes):
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise InvalidScore("Team strokes must be non-negative whole numbers")
    new_state = _copy(state)
    decision = _wolf_data(new_state).history.get(hole)
    if decision is None:
        raise InvalidWolfDecision(f"No Wolf decision recorded for hole {hole}")
    decision.strokes = WolfStrokes(wolf=wolf_strokes, pack=pack_strokes)
    return new_state


def resolve_wolf_hole(state: RoundState, hole: int,
                      winning_team: Optional[Union[WolfTeam, str]] = None) -> RoundState:
    """Settle a hole and pay it out, carrying the pot through later holes.

    Without an explicit ``winning_team`` the result comes from the recorded
    team strokes; with neither, the hole simply stays open. Resolving the
    hole that is being edited closes the edit.
    """
    _require_hole(state, hole)
    new_state = _copy(state)
    wolf_data = _wolf_data(new_state)
    decision = wolf_data.history.get(hole)
    if decision is None:
        raise InvalidWolfDecision(f"No Wolf decision recorded for hole {hole}")

    if winning_team is not None:
        try:
            winning_team = WolfTeam(winning_team)
        except ValueError:
            raise InvalidWolfDecision(f"Unknown winning team: {winning_team}")
    elif decision.strokes is not None:
        winning_team = winning_team_for(decision.strokes)
    else:
        return new_state

    decision.winning_team = winning_team
    if wolf_data.editing_hole == hole:
        wolf_data.edit = None
    return replay_wolf_ledger(new_state)


def set_wolf_override(state: RoundState, hole: int, player_id: Optional[str]) -> RoundState:
    _require_hole(state, hole)
    if player_id is not None:
        _require_player(state, player_id)
    new_state = _copy(state)
    wolf_data = _wolf_data(new_state)
    if player_id is None:
        wolf_data.wolf_overrides.pop(hole, None)
    else:
        wolf_data.wolf_overrides[hole] = player_id
    return new_state


def _wolf_ledger(state: RoundState) -> Dict[int, Dict[str, int]]:
    ledger: Dict[int, Dict[str, int]] = {}
    for (hole, pid), entry in state.scores.items():
        if isinstance(entry, WolfPointsEntry):
            ledger.setdefault(hole, {})[pid] = entry.points
    return ledger


def begin_wolf_edit(state: RoundState, hole: int) -> RoundState:
    """Re-open a decided hole, keeping a snapshot to restore on cancel."""
    _require_hole(state, hole)
    new_state = _copy(state)
    wolf_data = _wolf_data(new_state)
    if wolf_data.edit is not None:
        raise WolfEditError(f"Hole {wolf_data.edit.hole} is already being edited")
    decision = wolf_data.history.get(hole)
    if decision is None:
        raise WolfEditError(f"Hole {hole} has no Wolf decision to edit")

    wolf_data.edit = WolfHoleEdit(
        hole=hole,
        decision=copy.deepcopy(decision),
        entries=_wolf_ledger(new_state),
        pot=wolf_data.pot,
    )
    del wolf_data.history[hole]
    return replay_wolf_ledger(new_state)


def cancel_wolf_edit(state: RoundState) -> RoundState:
    """Put back the decision ``begin_wolf_edit`` took out and close the edit.

    Points and pot are replayed from the restored history, so anything
    decided or removed while the edit was open is kept. When nothing else
    changed the result matches the snapshot exactly.
    """
    new_state = _copy(state)
    wolf_data = _wolf_data(new_state)
    edit = wolf_data.edit
    if edit is None:
        raise WolfEditError("No Wolf hole is being edited")

    if edit.decision is not None:
        wolf_data.history[edit.hole] = edit.decision
    else:
        wolf_data.history.pop(edit.hole, None)
    wolf_data.edit = None
    replay_wolf_ledger(new_state)

    if _wolf_ledger(new_state) != edit.entries or wolf_data.pot != edit.pot:
        logger.debug("[wolf-edit-cancel] hole=%s ledger changed during edit, replayed", edit.hole)
    return new_state
