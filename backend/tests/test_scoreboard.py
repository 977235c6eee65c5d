import copy

from scorekeeper.services.rounds import (
    CellCategory,
    GameType,
    Player,
    add_player,
    award_bbb_point,
    build_scoreboard,
    create_initial_round,
    record_stroke,
    record_wolf_decision,
    resolve_wolf_hole,
    soft_remove_player,
)


def _players(*ids):
    return [Player(id=pid, name=pid.title()) for pid in ids]


def _board(state):
    return build_scoreboard(state.players, state.config, state.scores, state.game_type, state.current_hole)


def _categories(row):
    return [c.category for c in row.cells]


def test_standard_cells_coloured_against_par():
    state = create_initial_round(GameType.STANDARD, 4, _players('ann'), pars={3: 4})
    for hole, value in ((1, 2), (2, 3), (3, 5)):
        state = record_stroke(state, hole, 'ann', value)
    board = _board(state)
    row = board.rows[0]
    assert [c.display for c in row.cells] == ['2', '3', '5', '-']
    assert _categories(row) == [
        CellCategory.UNDER_PAR.value,
        CellCategory.EVEN.value,
        CellCategory.OVER_PAR.value,
        CellCategory.UNSET.value,
    ]
    assert row.total == 0
    assert row.total_display == 'E'
    assert row.strokes == 10


def test_header_rows_follow_whether_strokes_matter():
    standard = _board(create_initial_round(GameType.STANDARD, 3, _players('ann'), pars={2: 4}))
    wolf = _board(create_initial_round(GameType.WOLF, 3, _players('ann', 'bob'), starting_wolf_index=0))
    bbb = _board(create_initial_round(GameType.BINGO_BANGO_BONGO, 3, _players('ann')))

    assert standard.header_rows == 2
    assert standard.pars == [3, 4, 3]
    assert wolf.header_rows == 1
    assert wolf.pars is None
    assert bbb.header_rows == 1
    assert bbb.rows[0].strokes is None


def test_wolf_cells_show_result():
    state = create_initial_round(GameType.WOLF, 3, _players('ann', 'bob', 'cal'), starting_wolf_index=0)
    state = record_wolf_decision(state, 1, 'ann', None, 'lone')
    state = resolve_wolf_hole(state, 1, 'tie')
    state = record_wolf_decision(state, 2, 'bob', None, 'lone')
    state = resolve_wolf_hole(state, 2, 'wolf')
    rows = {r.player_id: r for r in _board(state).rows}

    assert _categories(rows['ann'])[:2] == ['tie', 'loss']
    assert [c.display for c in rows['bob'].cells] == ['0', '+8', '-']
    assert _categories(rows['bob']) == ['tie', 'win', 'unset']
    assert rows['bob'].total == 8


def test_bbb_cells_count_points():
    state = create_initial_round(GameType.BINGO_BANGO_BONGO, 2, _players('ann', 'bob'))
    state = award_bbb_point(state, 1, 'ann', 'bingo')
    state = award_bbb_point(state, 1, 'ann', 'bongo')
    state = award_bbb_point(state, 1, 'bob', 'bango')
    rows = {r.player_id: r for r in _board(state).rows}
    assert rows['ann'].cells[0].display == '2'
    assert rows['ann'].cells[0].category == 'win'
    assert rows['ann'].total == 2
    assert rows['bob'].total == 1
    assert rows['bob'].cells[1].category == 'unset'


def test_match_play_groups_rows_by_pair():
    state = create_initial_round(GameType.MATCH_PLAY, 2, _players('ann', 'bob', 'cal'))
    state = record_stroke(state, 1, 'ann', 3)
    state = record_stroke(state, 1, 'bob', 4)
    state = record_stroke(state, 1, 'cal', 2)
    state = add_player(state, 'Dee', player_id='dee')
    board = _board(state)

    assert [[r.player_id for r in g.rows] for g in board.groups] == [['ann', 'bob'], ['cal'], ['dee']]
    first = board.groups[0]
    assert first.status.status == '1 UP'
    assert first.status.leader_id == 'ann'
    assert _categories(first.rows[0])[0] == 'win'
    assert _categories(first.rows[1])[0] == 'loss'
    # A bye has no opponent, so its cells fall back to par colouring
    assert board.groups[1].rows[0].cells[0].category == 'under-par'
    assert board.groups[2].pair is None


def test_removed_players_keep_their_row():
    state = create_initial_round(GameType.STANDARD, 3, _players('ann', 'bob'))
    state = record_stroke(state, 1, 'bob', 4)
    state = soft_remove_player(state, 'bob', 2)
    row = next(r for r in _board(state).rows if r.player_id == 'bob')
    assert row.removed_at_hole == 2
    assert row.cells[0].display == '4'


def test_building_twice_gives_the_same_grid_and_leaves_inputs_alone():
    state = create_initial_round(GameType.STANDARD, 3, _players('ann', 'bob'))
    state = record_stroke(state, 1, 'ann', 4)
    before = copy.deepcopy(state)

    first = _board(state).to_dict()
    second = _board(state).to_dict()
    assert first == second
    assert state == before
    assert first['groups'][0]['rows'][0]['cells'][0] == {'hole': 1, 'display': '4', 'category': 'over-par'}
