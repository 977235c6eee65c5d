from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from .state import MatchPair, RoundConfig, ScoreEntry, ScoreKey, StrokeEntry

HALVED = 'halved'
ALL_SQUARE = 'All Square'

HoleResult = Optional[str]


@dataclass(frozen=True)
class MatchStatus:
    status: str
    leader_id: Optional[str]
    up: int
    holes_remaining: int

    @property
    def clinched(self) -> bool:
        return self.leader_id is not None and self.up > self.holes_remaining

    def to_dict(self) -> Dict[str, Union[str, int, bool, None]]:
        return {
            'status': self.status,
            'leader_id': self.leader_id,
            'up': self.up,
            'holes_remaining': self.holes_remaining,
            'clinched': self.clinched,
        }


def build_pairs(player_ids: List[str]) -> List[MatchPair]:
    """Pair players in list order; an odd player out gets a bye."""
    pairs = []
    for i in range(0, len(player_ids), 2):
        second = player_ids[i + 1] if i + 1 < len(player_ids) else None
        pairs.append(MatchPair(player1_id=player_ids[i], player2_id=second))
    return pairs


def _strokes(scores: Dict[ScoreKey, ScoreEntry], hole: int, player_id: str) -> Optional[int]:
    entry = scores.get((hole, player_id))
    if isinstance(entry, StrokeEntry):
        return entry.strokes
    return None


def hole_winner(pair: MatchPair, hole: int, scores: Dict[ScoreKey, ScoreEntry]) -> HoleResult:
    """Winner of one hole for a pairing.

    Returns the winning player id, ``'halved'`` on equal strokes, or None
    while either side has not recorded the hole. A bye always "wins".
    """
    if pair.is_bye:
        return pair.player1_id
    s1 = _strokes(scores, hole, pair.player1_id)
    s2 = _strokes(scores, hole, pair.player2_id)
    if s1 is None or s2 is None:
        return None
    if s1 < s2:
        return pair.player1_id
    if s2 < s1:
        return pair.player2_id
    return HALVED


def match_status(pair: MatchPair, scores: Dict[ScoreKey, ScoreEntry], hole_count: int,
                 current_hole: Optional[int] = None) -> MatchStatus:
    """Replay every hole of the match and report who is up.

    ``current_hole`` only feeds the holes-remaining count used for the
    clinched flag; it defaults to the last hole.
    """
    if current_hole is None:
        current_hole = hole_count
    holes_remaining = max(0, hole_count - current_hole + 1)

    p1_wins = 0
    p2_wins = 0
    if not pair.is_bye:
        for hole in range(1, hole_count + 1):
            winner = hole_winner(pair, hole, scores)
            if winner == pair.player1_id:
                p1_wins += 1
            elif winner == pair.player2_id:
                p2_wins += 1

    diff = p1_wins - p2_wins
    if diff == 0:
        return MatchStatus(status=ALL_SQUARE, leader_id=None, up=0, holes_remaining=holes_remaining)
    leader = pair.player1_id if diff > 0 else pair.player2_id
    return MatchStatus(status=f"{abs(diff)} UP", leader_id=leader, up=abs(diff), holes_remaining=holes_remaining)


def pair_for_player(config: RoundConfig, player_id: str) -> Optional[MatchPair]:
    data = config.match_play_data
    if not data:
        return None
    for pair in data.pairs:
        if player_id in pair.player_ids:
            return pair
    return None


def holes_won(player_id: str, scores: Dict[ScoreKey, ScoreEntry], config: RoundConfig) -> int:
    """Holes this player has won outright; byes never count toward standings."""
    pair = pair_for_player(config, player_id)
    if pair is None or pair.is_bye:
        return 0
    return sum(1 for hole in range(1, config.hole_count + 1) if hole_winner(pair, hole, scores) == player_id)
