"""Round state value types.

Everything here is plain data. Operations that change a round live in
``rounds.py`` and always hand back a new ``RoundState``; derived values
(totals, wolf, match status, scoreboard) are computed on demand by the
other service modules.

``to_dict``/``from_dict`` round-trip through JSON-safe primitives only
(str, int, bool, None, lists and string-keyed dicts).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


class GameType(str, Enum):
    STANDARD = 'standard'
    WOLF = 'wolf'
    BIRDIE_OR_DIE = 'birdie_or_die'
    BINGO_BANGO_BONGO = 'bingo_bango_bongo'
    MATCH_PLAY = 'match_play'


GAME_TYPE_DETAILS: Dict[GameType, Dict[str, str]] = {
    GameType.STANDARD: {'label': 'Standard', 'description': 'Classic stroke play'},
    GameType.WOLF: {'label': 'Wolf', 'description': 'Choose partners each hole'},
    GameType.BIRDIE_OR_DIE: {'label': 'Birdie or Die', 'description': 'Birdie or lose a life'},
    GameType.BINGO_BANGO_BONGO: {'label': 'Bingo Bango Bongo', 'description': '3 points per hole'},
    GameType.MATCH_PLAY: {'label': 'Match Play', 'description': 'Win holes, not strokes'},
}


class BetType(str, Enum):
    PARTNER = 'partner'
    LONE = 'lone'
    BLIND = 'blind'


class WolfTeam(str, Enum):
    WOLF = 'wolf'
    PACK = 'pack'
    TIE = 'tie'


class BbbPoint(str, Enum):
    BINGO = 'bingo'   # longest drive
    BANGO = 'bango'   # closest approach
    BONGO = 'bongo'   # first in


@dataclass
class Player:
    id: str
    name: str
    removed_at_hole: Optional[int] = None

    def is_active_at(self, hole: int) -> bool:
        return self.removed_at_hole is None or self.removed_at_hole > hole

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'removed_at_hole': self.removed_at_hole,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Player':
        return cls(
            id=str(data['id']),
            name=data.get('name') or '',
            removed_at_hole=data.get('removed_at_hole'),
        )


# ---- Score entries: one variant per interpretation of a hole result ----

@dataclass(frozen=True)
class StrokeEntry:
    strokes: int
    kind = 'strokes'

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind, 'strokes': self.strokes}


@dataclass(frozen=True)
class WolfPointsEntry:
    points: int
    kind = 'wolf_points'

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind, 'points': self.points}


@dataclass(frozen=True)
class BbbEntry:
    bingo: bool = False
    bango: bool = False
    bongo: bool = False
    kind = 'bbb'

    @property
    def count(self) -> int:
        return int(self.bingo) + int(self.bango) + int(self.bongo)

    @property
    def mask(self) -> int:
        # bit0 bingo, bit1 bango, bit2 bongo
        return int(self.bingo) | (int(self.bango) << 1) | (int(self.bongo) << 2)

    @classmethod
    def from_mask(cls, mask: int) -> 'BbbEntry':
        return cls(bingo=bool(mask & 1), bango=bool(mask & 2), bongo=bool(mask & 4))

    def has(self, point: BbbPoint) -> bool:
        return bool(getattr(self, point.value))

    def with_point(self, point: BbbPoint, value: bool) -> 'BbbEntry':
        flags = {'bingo': self.bingo, 'bango': self.bango, 'bongo': self.bongo}
        flags[point.value] = value
        return BbbEntry(**flags)

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind, 'bingo': self.bingo, 'bango': self.bango, 'bongo': self.bongo}


ScoreEntry = Union[StrokeEntry, WolfPointsEntry, BbbEntry]
ScoreKey = Tuple[int, str]


def score_entry_from_dict(data: Dict[str, Any]) -> ScoreEntry:
    kind = data.get('kind')
    if kind == StrokeEntry.kind:
        return StrokeEntry(strokes=int(data['strokes']))
    if kind == WolfPointsEntry.kind:
        return WolfPointsEntry(points=int(data['points']))
    if kind == BbbEntry.kind:
        return BbbEntry(
            bingo=bool(data.get('bingo')),
            bango=bool(data.get('bango')),
            bongo=bool(data.get('bongo')),
        )
    raise ValueError(f"Unknown score entry kind: {kind!r}")


# ---- Wolf side data ----

@dataclass
class WolfStrokes:
    wolf: int
    pack: int

    def to_dict(self) -> Dict[str, int]:
        return {'wolf': self.wolf, 'pack': self.pack}


@dataclass
class WolfHoleDecision:
    wolf_id: str
    bet_type: BetType
    partner_id: Optional[str] = None
    strokes: Optional[WolfStrokes] = None
    winning_team: Optional[WolfTeam] = None

    @property
    def is_resolved(self) -> bool:
        return self.winning_team is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'wolf_id': self.wolf_id,
            'partner_id': self.partner_id,
            'bet_type': self.bet_type.value,
            'strokes': self.strokes.to_dict() if self.strokes else None,
            'winning_team': self.winning_team.value if self.winning_team else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WolfHoleDecision':
        strokes = data.get('strokes')
        winning_team = data.get('winning_team')
        return cls(
            wolf_id=str(data['wolf_id']),
            partner_id=data.get('partner_id'),
            bet_type=BetType(data['bet_type']),
            strokes=WolfStrokes(wolf=int(strokes['wolf']), pack=int(strokes['pack'])) if strokes else None,
            winning_team=WolfTeam(winning_team) if winning_team else None,
        )


@dataclass
class WolfHoleEdit:
    """Snapshot taken when a past Wolf hole is re-opened for editing."""

    hole: int
    decision: Optional[WolfHoleDecision]
    # every Wolf point entry in the round, hole -> player -> points
    entries: Dict[int, Dict[str, int]]
    pot: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'hole': self.hole,
            'decision': self.decision.to_dict() if self.decision else None,
            'entries': {str(h): dict(points) for h, points in sorted(self.entries.items())},
            'pot': self.pot,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WolfHoleEdit':
        decision = data.get('decision')
        return cls(
            hole=int(data['hole']),
            decision=WolfHoleDecision.from_dict(decision) if decision else None,
            entries={
                int(h): {str(pid): int(v) for pid, v in points.items()}
                for h, points in (data.get('entries') or {}).items()
            },
            pot=int(data.get('pot') or 0),
        )


@dataclass
class WolfSideData:
    starting_wolf_index: int = 0
    pot: int = 0
    history: Dict[int, WolfHoleDecision] = field(default_factory=dict)
    wolf_overrides: Dict[int, str] = field(default_factory=dict)
    edit: Optional[WolfHoleEdit] = None

    @property
    def editing_hole(self) -> Optional[int]:
        return self.edit.hole if self.edit else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'starting_wolf_index': self.starting_wolf_index,
            'pot': self.pot,
            'history': {str(h): d.to_dict() for h, d in sorted(self.history.items())},
            'wolf_overrides': {str(h): pid for h, pid in sorted(self.wolf_overrides.items())},
            'editing_hole': self.editing_hole,
            'edit': self.edit.to_dict() if self.edit else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WolfSideData':
        edit = data.get('edit')
        return cls(
            starting_wolf_index=int(data.get('starting_wolf_index') or 0),
            pot=int(data.get('pot') or 0),
            history={int(h): WolfHoleDecision.from_dict(d) for h, d in (data.get('history') or {}).items()},
            wolf_overrides={int(h): str(pid) for h, pid in (data.get('wolf_overrides') or {}).items()},
            edit=WolfHoleEdit.from_dict(edit) if edit else None,
        )


# ---- Match play side data ----

@dataclass(frozen=True)
class MatchPair:
    player1_id: str
    player2_id: Optional[str] = None

    @property
    def is_bye(self) -> bool:
        return self.player2_id is None

    @property
    def player_ids(self) -> List[str]:
        return [self.player1_id] if self.is_bye else [self.player1_id, self.player2_id]

    def to_dict(self) -> Dict[str, Any]:
        return {'player1_id': self.player1_id, 'player2_id': self.player2_id}


@dataclass
class MatchPlaySideData:
    pairs: List[MatchPair] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {'pairs': [p.to_dict() for p in self.pairs]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MatchPlaySideData':
        return cls(pairs=[
            MatchPair(player1_id=str(p['player1_id']), player2_id=p.get('player2_id'))
            for p in (data.get('pairs') or [])
        ])


@dataclass
class RoundConfig:
    hole_count: int = 18
    default_par: int = 3
    pars: Dict[int, int] = field(default_factory=dict)
    wolf_data: Optional[WolfSideData] = None
    match_play_data: Optional[MatchPlaySideData] = None

    def par_for(self, hole: int) -> int:
        return self.pars.get(hole) or self.default_par

    def to_dict(self) -> Dict[str, Any]:
        return {
            'hole_count': self.hole_count,
            'default_par': self.default_par,
            'pars': {str(h): p for h, p in sorted(self.pars.items())},
            'wolf_data': self.wolf_data.to_dict() if self.wolf_data else None,
            'match_play_data': self.match_play_data.to_dict() if self.match_play_data else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RoundConfig':
        wolf_data = data.get('wolf_data')
        match_play_data = data.get('match_play_data')
        return cls(
            hole_count=int(data['hole_count']),
            default_par=int(data['default_par']),
            pars={int(h): int(p) for h, p in (data.get('pars') or {}).items()},
            wolf_data=WolfSideData.from_dict(wolf_data) if wolf_data else None,
            match_play_data=MatchPlaySideData.from_dict(match_play_data) if match_play_data else None,
        )


@dataclass
class RoundState:
    game_type: GameType
    players: List[Player]
    config: RoundConfig
    scores: Dict[ScoreKey, ScoreEntry] = field(default_factory=dict)
    current_hole: int = 1
    is_active: bool = True
    is_finished: bool = False

    @property
    def holes(self) -> range:
        return range(1, self.config.hole_count + 1)

    def player(self, player_id: str) -> Optional[Player]:
        return next((p for p in self.players if p.id == player_id), None)

    def entry(self, hole: int, player_id: str) -> Optional[ScoreEntry]:
        return self.scores.get((hole, player_id))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'game_type': self.game_type.value,
            'players': [p.to_dict() for p in self.players],
            'config': self.config.to_dict(),
            'scores': [
                dict(hole=hole, player_id=pid, **entry.to_dict())
                for (hole, pid), entry in sorted(self.scores.items())
            ],
            'current_hole': self.current_hole,
            'is_active': self.is_active,
            'is_finished': self.is_finished,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RoundState':
        scores = {}
        for item in data.get('scores') or []:
            scores[(int(item['hole']), str(item['player_id']))] = score_entry_from_dict(item)
        return cls(
            game_type=GameType(data['game_type']),
            players=[Player.from_dict(p) for p in data.get('players') or []],
            config=RoundConfig.from_dict(data['config']),
            scores=scores,
            current_hole=int(data.get('current_hole') or 1),
            is_active=bool(data.get('is_active', True)),
            is_finished=bool(data.get('is_finished', False)),
        )


def active_players(players: List[Player], at_hole: int) -> List[Player]:
    """Players still in the round at ``at_hole`` (soft-removed ones drop out from their removal hole on)."""
    return [p for p in players if p.is_active_at(at_hole)]
