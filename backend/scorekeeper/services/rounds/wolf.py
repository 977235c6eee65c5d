"""Wolf: who is the Wolf on a hole, and what a finished hole pays.

The per-hole point entries in a Wolf round are never typed in directly.
They are rebuilt from the decision history by ``replay_wolf_ledger``,
which walks the resolved holes in order and carries the pot forward.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from .state import (
    BetType,
    Player,
    RoundConfig,
    RoundState,
    ScoreEntry,
    ScoreKey,
    WolfPointsEntry,
    WolfStrokes,
    WolfTeam,
    active_players,
)

logger = logging.getLogger(__name__)

CATCH_UP_HOLES = 2

# What the Wolf side is paid per player when it wins; a tie adds the same to the pot.
WOLF_STAKES = {
    BetType.PARTNER: 2,
    BetType.LONE: 4,
    BetType.BLIND: 6,  # lone stake plus the blind bonus
}

# What each pack member is paid when the pack wins.
PACK_STAKES = {
    BetType.PARTNER: 3,
    BetType.LONE: 1,
    BetType.BLIND: 1,
}


@dataclass(frozen=True)
class HolePayout:
    points: Dict[str, int]
    new_pot: int


def wolf_points_before(player_id: str, scores: Dict[ScoreKey, ScoreEntry], hole: int) -> int:
    return sum(
        entry.points
        for (h, pid), entry in scores.items()
        if pid == player_id and h < hole and isinstance(entry, WolfPointsEntry)
    )


def rotation_index(hole: int, starting_wolf_index: int, player_count: int) -> int:
    return (hole - 1 + starting_wolf_index) % player_count


def last_place_player(players: List[Player], scores: Dict[ScoreKey, ScoreEntry], hole: int,
                      starting_wolf_index: int = 0) -> Optional[str]:
    """The player with the fewest Wolf points before ``hole``.

    Ties go to whoever comes first in rotation order, starting from the
    player the normal rotation would have made Wolf on this hole.
    """
    if not players:
        return None
    start = rotation_index(hole, starting_wolf_index, len(players))
    ordered = players[start:] + players[:start]
    totals = {p.id: wolf_points_before(p.id, scores, hole) for p in ordered}
    lowest = min(totals.values())
    return next(p.id for p in ordered if totals[p.id] == lowest)


def get_wolf(hole: int, players: List[Player], scores: Dict[ScoreKey, ScoreEntry],
             config: RoundConfig) -> Optional[str]:
    wolf_data = config.wolf_data
    starting_index = wolf_data.starting_wolf_index if wolf_data else 0

    override = wolf_data.wolf_overrides.get(hole) if wolf_data else None
    if override:
        player = next((p for p in players if p.id == override), None)
        if player is not None and player.is_active_at(hole):
            return override
        logger.debug("[wolf-override-ignored] hole=%s player=%s", hole, override)

    active = active_players(players, hole)
    if not active:
        return None

    if hole > config.hole_count - CATCH_UP_HOLES and len(active) > 1:
        return last_place_player(active, scores, hole, starting_index)

    return active[rotation_index(hole, starting_index, len(active))].id


def calculate_points(winner: WolfTeam, bet_type: BetType, current_pot: int, players: List[Player],
                     wolf_id: str, partner_id: Optional[str]) -> HolePayout:
    """Point deltas for every player on one hole, and the pot afterwards.

    A tie pays nobody and grows the pot by the Wolf's stake. Any decisive
    result pays the whole pot to each winner on top of their stake and
    empties it.
    """
    points = {p.id: 0 for p in players}

    if winner == WolfTeam.TIE:
        return HolePayout(points=points, new_pot=current_pot + WOLF_STAKES[bet_type])

    payout = current_pot
    if winner == WolfTeam.WOLF:
        # Only players still on the hole get paid; a removed Wolf forfeits.
        winners = [wolf_id, partner_id] if bet_type == BetType.PARTNER else [wolf_id]
        for player_id in winners:
            if player_id in points:
                points[player_id] = WOLF_STAKES[bet_type] + payout
    elif winner == WolfTeam.PACK:
        for p in players:
            if p.id not in (wolf_id, partner_id):
                points[p.id] = PACK_STAKES[bet_type] + payout
    return HolePayout(points=points, new_pot=0)


def winning_team_for(strokes: WolfStrokes) -> WolfTeam:
    if strokes.wolf < strokes.pack:
        return WolfTeam.WOLF
    if strokes.pack < strokes.wolf:
        return WolfTeam.PACK
    return WolfTeam.TIE


def replay_wolf_ledger(state: RoundState) -> RoundState:
    """Rebuild every Wolf point entry and the pot on ``state`` in place.

    Only called on a state the caller already owns (a fresh copy).
    """
    wolf_data = state.config.wolf_data
    state.scores = {k: e for k, e in state.scores.items() if not isinstance(e, WolfPointsEntry)}
    if wolf_data is None:
        return state

    pot = 0
    for hole in sorted(wolf_data.history):
        decision = wolf_data.history[hole]
        if not decision.is_resolved:
            continue
        payout = calculate_points(
            decision.winning_team,
            decision.bet_type,
            pot,
            active_players(state.players, hole),
            decision.wolf_id,
            decision.partner_id,
        )
        for player_id, delta in payout.points.items():
            state.scores[(hole, player_id)] = WolfPointsEntry(points=delta)
        pot = payout.new_pot
    wolf_data.pot = pot
    return state
