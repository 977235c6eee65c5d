import json
import random

import pytest

from scorekeeper.services.rounds import (
    GameType,
    InvalidHole,
    InvalidRoundConfig,
    InvalidScore,
    MatchPair,
    Player,
    RoundState,
    UnknownPlayer,
    active_players,
    add_player,
    award_bbb_point,
    build_scoreboard,
    clear_stroke,
    create_initial_round,
    finish_round,
    go_to_hole,
    next_hole,
    previous_hole,
    record_stroke,
    record_wolf_decision,
    remove_player,
    reopen_round,
    resolve_wolf_hole,
    round_summary,
    set_par,
    set_pars,
    soft_remove_player,
    step_stroke,
    total_points,
)
from scorekeeper.services.rounds.state import BbbEntry, StrokeEntry


def _players(*ids):
    return [Player(id=pid, name=pid.title()) for pid in ids]


def _standard(holes=9, *ids):
    return create_initial_round(GameType.STANDARD, holes, _players(*(ids or ('ann', 'bob'))))


def test_create_round_defaults():
    state = create_initial_round('standard', 18, ['Ann', ' Bob '])
    assert state.game_type == GameType.STANDARD
    assert [p.name for p in state.players] == ['Ann', 'Bob']
    assert len({p.id for p in state.players}) == 2
    assert state.current_hole == 1
    assert state.is_active and not state.is_finished
    assert state.scores == {}
    assert state.config.par_for(7) == 3
    assert state.config.wolf_data is None


@pytest.mark.parametrize('kwargs', [
    {'game_type': 'disc-dice'},
    {'hole_count': 0},
    {'players': []},
    {'players': ['Ann', '   ']},
    {'default_par': 0},
    {'pars': {10: 3}},
    {'pars': {2: -1}},
])
def test_create_round_rejects_bad_config(kwargs):
    args = {'game_type': 'standard', 'hole_count': 9, 'players': ['Ann']}
    args.update(kwargs)
    with pytest.raises(InvalidRoundConfig):
        create_initial_round(**args)


def test_create_round_rejects_bad_pairs():
    with pytest.raises(InvalidRoundConfig):
        create_initial_round(GameType.MATCH_PLAY, 9, _players('a', 'b'), pairs=[('a', 'zed')])
    with pytest.raises(InvalidRoundConfig):
        create_initial_round(GameType.MATCH_PLAY, 9, _players('a', 'b', 'c'), pairs=[('a', 'b'), ('b', 'c')])


def test_wolf_start_uses_given_rng():
    state = create_initial_round(GameType.WOLF, 9, _players('a', 'b', 'c'), rng=random.Random(7))
    expected = random.Random(7).randrange(3)
    assert state.config.wolf_data.starting_wolf_index == expected


def test_record_stroke_returns_new_state():
    state = _standard()
    updated = record_stroke(state, 2, 'ann', 4)
    assert updated.entry(2, 'ann') == StrokeEntry(strokes=4)
    assert state.scores == {}


def test_record_stroke_validation():
    state = _standard()
    with pytest.raises(InvalidScore):
        record_stroke(state, 1, 'ann', 0)
    with pytest.raises(InvalidHole):
        record_stroke(state, 10, 'ann', 3)
    with pytest.raises(UnknownPlayer):
        record_stroke(state, 1, 'zed', 3)
    bbb = create_initial_round(GameType.BINGO_BANGO_BONGO, 9, _players('ann'))
    with pytest.raises(InvalidScore):
        record_stroke(bbb, 1, 'ann', 3)


def test_step_stroke_starts_at_par_and_never_drops_below_one():
    state = create_initial_round(GameType.STANDARD, 3, _players('ann'), pars={1: 2})
    state = step_stroke(state, 2, 'ann', 1)
    assert state.entry(2, 'ann').strokes == 3
    state = step_stroke(state, 2, 'ann', 1)
    assert state.entry(2, 'ann').strokes == 4

    state = step_stroke(state, 1, 'ann', -1)
    assert state.entry(1, 'ann').strokes == 1
    state = step_stroke(state, 1, 'ann', -1)
    assert state.entry(1, 'ann').strokes == 1


def test_step_stroke_rejects_other_directions():
    state = _standard()
    for direction in (0, 2, -3):
        with pytest.raises(InvalidScore):
            step_stroke(state, 1, 'ann', direction)


def test_clear_stroke():
    state = record_stroke(_standard(), 1, 'ann', 5)
    state = clear_stroke(state, 1, 'ann')
    assert state.entry(1, 'ann') is None
    # Clearing an empty cell is harmless
    assert clear_stroke(state, 1, 'ann').scores == {}


def test_soft_removed_player_keeps_earlier_scores():
    state = _standard(9, 'ann', 'bob', 'cal')
    for hole in range(1, 5):
        state = record_stroke(state, hole, 'bob', 3)
    state = soft_remove_player(state, 'bob', 5)

    assert 'bob' in [p.id for p in active_players(state.players, 4)]
    assert 'bob' not in [p.id for p in active_players(state.players, 5)]
    assert len([k for k in state.scores if k[1] == 'bob']) == 4
    with pytest.raises(UnknownPlayer):
        record_stroke(state, 5, 'bob', 3)
    assert [r.player_id for r in build_scoreboard(state.players, state.config, state.scores, state.game_type).rows] \
        == ['ann', 'bob', 'cal']


def test_remove_player_drops_scores():
    state = record_stroke(_standard(), 1, 'bob', 3)
    state = remove_player(state, 'bob')
    assert [p.id for p in state.players] == ['ann']
    assert state.scores == {}
    assert state.is_active


def test_removing_last_player_ends_round():
    state = remove_player(_standard(9, 'ann'), 'ann')
    assert state.players == []
    assert not state.is_active


def test_removing_match_opponent_leaves_a_bye():
    state = create_initial_round(GameType.MATCH_PLAY, 9, _players('a', 'b', 'c', 'd'))
    state = remove_player(state, 'b')
    assert state.config.match_play_data.pairs == [MatchPair('a', None), MatchPair('c', 'd')]

    state = record_stroke(state, 1, 'a', 3)
    board = build_scoreboard(state.players, state.config, state.scores, state.game_type)
    first = board.groups[0]
    assert first.pair.is_bye
    assert [r.player_id for r in first.rows] == ['a']
    assert all('b' not in g.pair.player_ids for g in board.groups)


def test_removing_a_bye_player_drops_the_pair():
    state = create_initial_round(GameType.MATCH_PLAY, 9, _players('a', 'b', 'c'))
    state = remove_player(state, 'c')
    assert state.config.match_play_data.pairs == [MatchPair('a', 'b')]


def test_remove_unknown_player():
    with pytest.raises(UnknownPlayer):
        remove_player(_standard(), 'zed')


def test_remove_wolf_player_replays_ledger():
    state = create_initial_round(GameType.WOLF, 9, _players('a', 'b', 'c'), starting_wolf_index=0)
    state = record_wolf_decision(state, 1, 'a', None, 'lone')
    state = resolve_wolf_hole(state, 1, 'pack')
    state = remove_player(state, 'b')
    assert state.entry(1, 'b') is None
    assert total_points('c', GameType.WOLF, state.scores, state.config) == 1


def test_add_player_mid_round():
    state = add_player(next_hole(_standard()), 'Dee', player_id='dee')
    assert state.player('dee').name == 'Dee'
    with pytest.raises(InvalidRoundConfig):
        add_player(state, 'Dee again', player_id='dee')
    with pytest.raises(InvalidRoundConfig):
        add_player(state, '')


def test_bbb_points_are_exclusive_per_hole():
    state = create_initial_round(GameType.BINGO_BANGO_BONGO, 9, _players('ann', 'bob'))
    state = award_bbb_point(state, 1, 'ann', 'bingo')
    state = award_bbb_point(state, 1, 'bob', 'bingo')
    assert state.entry(1, 'ann') == BbbEntry()
    assert state.entry(1, 'bob') == BbbEntry(bingo=True)

    # Awarding a point the player already holds takes it back
    state = award_bbb_point(state, 1, 'bob', 'bingo')
    assert state.entry(1, 'bob').count == 0


def test_bbb_rejects_unknown_point_and_other_modes():
    state = create_initial_round(GameType.BINGO_BANGO_BONGO, 9, _players('ann'))
    with pytest.raises(InvalidScore):
        award_bbb_point(state, 1, 'ann', 'bungo')
    with pytest.raises(InvalidScore):
        award_bbb_point(_standard(), 1, 'ann', 'bingo')


def test_navigation_clamps_at_the_ends():
    state = _standard(3)
    assert previous_hole(state).current_hole == 1
    state = next_hole(next_hole(next_hole(state)))
    assert state.current_hole == 3
    assert previous_hole(state).current_hole == 2
    assert go_to_hole(state, 1).current_hole == 1
    with pytest.raises(InvalidHole):
        go_to_hole(state, 4)


def test_par_changes():
    state = set_par(_standard(3), 2, 4)
    assert state.config.par_for(2) == 4
    state = set_pars(state, {1: 5, 3: 2})
    assert [state.config.par_for(h) for h in state.holes] == [5, 3, 2]
    with pytest.raises(InvalidRoundConfig):
        set_par(state, 1, 0)
    with pytest.raises(InvalidHole):
        set_pars(state, {4: 3})


def test_finish_and_reopen():
    state = finish_round(_standard())
    assert state.is_finished
    assert not reopen_round(state).is_finished


def test_state_survives_json_round_trip():
    state = create_initial_round(GameType.WOLF, 9, _players('a', 'b', 'c', 'd'), starting_wolf_index=1)
    state = record_wolf_decision(state, 1, 'b', 'c', 'partner')
    state = resolve_wolf_hole(state, 1, 'tie')
    state = record_wolf_decision(state, 2, 'c', None, 'blind')
    state = resolve_wolf_hole(state, 2, 'wolf')
    state = soft_remove_player(state, 'd', 3)

    restored = RoundState.from_dict(json.loads(json.dumps(state.to_dict())))

    assert restored == state
    assert round_summary(restored) == round_summary(state)
    board = build_scoreboard(state.players, state.config, state.scores, state.game_type)
    restored_board = build_scoreboard(restored.players, restored.config, restored.scores, restored.game_type)
    assert restored_board.to_dict() == board.to_dict()
