from flask import Blueprint, jsonify, request, current_app
from scorekeeper import db
from scorekeeper.models import Round
from scorekeeper.services.rounds import (
    GAME_TYPE_DETAILS,
    GameType,
    Player,
    RoundError,
    RoundState,
    add_player,
    award_bbb_point,
    begin_wolf_edit,
    build_scoreboard,
    cancel_wolf_edit,
    clear_stroke,
    create_initial_round,
    finish_round,
    get_wolf,
    go_to_hole,
    match_status,
    next_hole,
    previous_hole,
    record_stroke,
    record_wolf_decision,
    record_wolf_strokes,
    remove_player,
    reopen_round,
    resolve_wolf_hole,
    round_summary,
    rules_for,
    set_par,
    set_pars,
    set_wolf_override,
    soft_remove_player,
    standings,
    step_stroke,
)
from scorekeeper.services.rounds.rounds import new_player_id


rounds = Blueprint('rounds', __name__)


def _as_int(value):
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _player_at(players, index):
    position = int(index)
    if position < 0:
        raise IndexError(index)
    return players[position]


def _get_round(code: str) -> Round:
    return Round.query.filter_by(code=code.upper()).first_or_404()


def _wolf_summary(state: RoundState, hole: int) -> dict:
    wolf_data = state.config.wolf_data
    decision = wolf_data.history.get(hole) if wolf_data else None
    return {
        'hole': hole,
        'wolf_id': get_wolf(hole, state.players, state.scores, state.config),
        'decision': decision.to_dict() if decision else None,
        'needs_decision': decision is None,
        'pot': wolf_data.pot if wolf_data else 0,
        'editing_hole': wolf_data.editing_hole if wolf_data else None,
    }


def _payload(round_row: Round, state: RoundState) -> dict:
    payload = {
        'code': round_row.code,
        'status': round_row.status,
        'state': state.to_dict(),
        'standings': [s.to_dict() for s in standings(state)],
    }
    if state.game_type == GameType.WOLF:
        payload['wolf'] = _wolf_summary(state, state.current_hole)
    return payload


def _apply(round_row: Round, event: str, operation, *args, **kwargs):
    """Run one engine operation against the stored round and persist the result."""
    state = round_row.load_state()
    try:
        new_state = operation(state, *args, **kwargs)
    except RoundError as exc:
        current_app.logger.info(f"[{event}-rejected] code={round_row.code} error={exc}")
        return jsonify({'error': str(exc)}), 400
    round_row.save_state(new_state)
    db.session.add(round_row)
    db.session.commit()
    current_app.logger.info(f"[{event}] code={round_row.code} hole={new_state.current_hole}")
    return jsonify(_payload(round_row, new_state))


def _par_in_bounds(par) -> bool:
    cfg = current_app.config
    return isinstance(par, int) and int(cfg.get('MIN_PAR', 1)) <= par <= int(cfg.get('MAX_PAR', 9))


@rounds.route('/types', methods=['GET'])
def list_game_types():
    return jsonify([
        {'game_type': game_type.value, **details, 'strokes_matter': rules_for(game_type).strokes_matter}
        for game_type, details in GAME_TYPE_DETAILS.items()
    ])


@rounds.route('/create', methods=['POST'])
def create_round():
    data = request.get_json(silent=True) or {}
    cfg = current_app.config
    hole_count = _as_int(data.get('hole_count', cfg.get('DEFAULT_HOLE_COUNT', 18)))
    default_par = _as_int(data.get('default_par', cfg.get('DEFAULT_PAR', 3)))
    names = data.get('players') or []
    if not isinstance(names, list):
        return jsonify({'error': 'players must be a list of names'}), 400

    min_players = int(cfg.get('MIN_PLAYERS', 1))
    if len(names) < min_players:
        return jsonify({'error': f'At least {min_players} players are required to start'}), 400
    max_holes = int(cfg.get('MAX_HOLE_COUNT', 99))
    if hole_count is not None and hole_count > max_holes:
        return jsonify({'error': f'Rounds are limited to {max_holes} holes'}), 400

    raw_pars = data.get('pars') or {}
    if not isinstance(raw_pars, dict):
        return jsonify({'error': 'pars must be an object of hole: par'}), 400
    pars = {}
    for hole, par in raw_pars.items():
        par = _as_int(par)
        if not _par_in_bounds(par):
            return jsonify({'error': f'Par for hole {hole} is out of range'}), 400
        pars[_as_int(hole) or 0] = par

    # Ids are assigned up front so pairs can be given as player positions.
    players = [Player(id=new_player_id(), name=str(name or '').strip()) for name in names]
    if any(not p.name for p in players):
        return jsonify({'error': 'Player names cannot be blank'}), 400
    pairs = None
    if data.get('pairs') is not None:
        try:
            pairs = [
                (_player_at(players, first).id, _player_at(players, second).id if second is not None else None)
                for first, second in data['pairs']
            ]
        except (TypeError, ValueError, IndexError):
            return jsonify({'error': 'pairs must be [index, index|null] entries'}), 400

    try:
        state = create_initial_round(
            data.get('game_type') or GameType.STANDARD.value,
            hole_count,
            players,
            pars=pars,
            default_par=default_par,
            starting_wolf_index=_as_int(data.get('starting_wolf_index')),
            pairs=pairs,
        )
    except RoundError as exc:
        return jsonify({'error': str(exc)}), 400

    new_round = Round(game_type=state.game_type.value)
    new_round.save_state(state)
    db.session.add(new_round)
    db.session.commit()
    current_app.logger.info(
        f"[round-create] code={new_round.code} type={state.game_type.value} holes={state.config.hole_count} players={len(players)}"
    )
    return jsonify(_payload(new_round, state)), 201


@rounds.route('/<string:code>', methods=['GET'])
def get_round(code):
    round_row = _get_round(code)
    return jsonify(_payload(round_row, round_row.load_state()))


@rounds.route('/<string:code>', methods=['DELETE'])
def discard_round(code):
    round_row = _get_round(code)
    db.session.delete(round_row)
    db.session.commit()
    current_app.logger.info(f"[round-discard] code={round_row.code}")
    return jsonify({'message': 'Round discarded'})


@rounds.route('/<string:code>/strokes', methods=['POST'])
def record_strokes(code):
    data = request.get_json(silent=True) or {}
    round_row = _get_round(code)
    state = round_row.load_state()
    hole = _as_int(data.get('hole', state.current_hole))
    player_id = data.get('player_id')

    if data.get('clear'):
        return _apply(round_row, 'stroke-clear', clear_stroke, hole, player_id)
    if data.get('direction') is not None:
        direction = _as_int(data.get('direction'))
        if direction not in (-1, 1):
            return jsonify({'error': 'direction must be 1 or -1'}), 400
        return _apply(round_row, 'stroke-step', step_stroke, hole, player_id, direction)
    return _apply(round_row, 'stroke-record', record_stroke, hole, player_id, _as_int(data.get('strokes')))


@rounds.route('/<string:code>/pars', methods=['PUT'])
def update_pars(code):
    data = request.get_json(silent=True) or {}
    round_row = _get_round(code)

    if 'pars' in data:
        raw_pars = data.get('pars') or {}
        if not isinstance(raw_pars, dict):
            return jsonify({'error': 'pars must be an object of hole: par'}), 400
        pars = {}
        for hole, par in raw_pars.items():
            par = _as_int(par)
            if not _par_in_bounds(par):
                return jsonify({'error': f'Par for hole {hole} is out of range'}), 400
            pars[_as_int(hole)] = par
        return _apply(round_row, 'pars-replace', set_pars, pars)

    par = _as_int(data.get('par'))
    if not _par_in_bounds(par):
        return jsonify({'error': 'Par is out of range'}), 400
    hole = _as_int(data.get('hole', round_row.load_state().current_hole))
    return _apply(round_row, 'par-set', set_par, hole, par)


@rounds.route('/<string:code>/navigate', methods=['POST'])
def navigate(code):
    data = request.get_json(silent=True) or {}
    round_row = _get_round(code)
    direction = data.get('direction')
    if direction == 'next':
        return _apply(round_row, 'hole-next', next_hole)
    if direction in ('prev', 'previous'):
        return _apply(round_row, 'hole-prev', previous_hole)
    return _apply(round_row, 'hole-goto', go_to_hole, _as_int(data.get('hole')))


@rounds.route('/<string:code>/finish', methods=['POST'])
def finish(code):
    return _apply(_get_round(code), 'round-finish', finish_round)


@rounds.route('/<string:code>/reopen', methods=['POST'])
def reopen(code):
    return _apply(_get_round(code), 'round-reopen', reopen_round)


@rounds.route('/<string:code>/players', methods=['POST'])
def join_round(code):
    data = request.get_json(silent=True) or {}
    return _apply(_get_round(code), 'player-add', add_player, data.get('name'))


@rounds.route('/<string:code>/players/<string:player_id>', methods=['DELETE'])
def leave_round(code, player_id):
    round_row = _get_round(code)
    state = round_row.load_state()
    try:
        new_state = remove_player(state, player_id)
    except RoundError as exc:
        return jsonify({'error': str(exc)}), 400

    # Removing the last player ends the round entirely.
    if not new_state.is_active:
        db.session.delete(round_row)
        db.session.commit()
        current_app.logger.info(f"[round-end] code={round_row.code} last player removed")
        return jsonify({'message': 'Round ended', 'ended': True})

    round_row.save_state(new_state)
    db.session.add(round_row)
    db.session.commit()
    current_app.logger.info(f"[player-remove] code={round_row.code} player={player_id}")
    return jsonify(_payload(round_row, new_state))


@rounds.route('/<string:code>/players/<string:player_id>/soft-remove', methods=['POST'])
def soft_remove(code, player_id):
    data = request.get_json(silent=True) or {}
    round_row = _get_round(code)
    hole = _as_int(data.get('hole', round_row.load_state().current_hole))
    return _apply(round_row, 'player-soft-remove', soft_remove_player, player_id, hole)


@rounds.route('/<string:code>/wolf/<int:hole>', methods=['GET'])
def wolf_for_hole(code, hole):
    round_row = _get_round(code)
    state = round_row.load_state()
    if state.game_type != GameType.WOLF:
        return jsonify({'error': 'Not a Wolf round'}), 400
    if not 1 <= hole <= state.config.hole_count:
        return jsonify({'error': 'Hole out of range'}), 400
    return jsonify(_wolf_summary(state, hole))


@rounds.route('/<string:code>/wolf/<int:hole>/decision', methods=['POST'])
def wolf_decision(code, hole):
    data = request.get_json(silent=True) or {}
    round_row = _get_round(code)
    wolf_id = data.get('wolf_id')
    if not wolf_id:
        state = round_row.load_state()
        wolf_id = get_wolf(hole, state.players, state.scores, state.config)
    return _apply(
        round_row, 'wolf-decision', record_wolf_decision,
        hole, wolf_id, data.get('partner_id'), data.get('bet_type'),
    )


@rounds.route('/<string:code>/wolf/<int:hole>/strokes', methods=['POST'])
def wolf_strokes(code, hole):
    data = request.get_json(silent=True) or {}
    return _apply(
        _get_round(code), 'wolf-strokes', record_wolf_strokes,
        hole, _as_int(data.get('wolf')), _as_int(data.get('pack')),
    )


@rounds.route('/<string:code>/wolf/<int:hole>/resolve', methods=['POST'])
def wolf_resolve(code, hole):
    data = request.get_json(silent=True) or {}
    return _apply(_get_round(code), 'wolf-resolve', resolve_wolf_hole, hole, data.get('winning_team'))


@rounds.route('/<string:code>/wolf/<int:hole>/override', methods=['POST'])
def wolf_override(code, hole):
    data = request.get_json(silent=True) or {}
    return _apply(_get_round(code), 'wolf-override', set_wolf_override, hole, data.get('player_id'))


@rounds.route('/<string:code>/wolf/<int:hole>/edit', methods=['POST'])
def wolf_edit(code, hole):
    return _apply(_get_round(code), 'wolf-edit', begin_wolf_edit, hole)


@rounds.route('/<string:code>/wolf/edit/cancel', methods=['POST'])
def wolf_edit_cancel(code):
    return _apply(_get_round(code), 'wolf-edit-cancel', cancel_wolf_edit)


@rounds.route('/<string:code>/bbb', methods=['POST'])
def bbb_award(code):
    data = request.get_json(silent=True) or {}
    round_row = _get_round(code)
    hole = _as_int(data.get('hole', round_row.load_state().current_hole))
    return _apply(round_row, 'bbb-award', award_bbb_point, hole, data.get('player_id'), data.get('point'))


@rounds.route('/<string:code>/match', methods=['GET'])
def match_overview(code):
    round_row = _get_round(code)
    state = round_row.load_state()
    if state.game_type != GameType.MATCH_PLAY:
        return jsonify({'error': 'Not a match play round'}), 400
    pairs = state.config.match_play_data.pairs if state.config.match_play_data else []
    return jsonify([
        {
            'pair': pair.to_dict(),
            **match_status(pair, state.scores, state.config.hole_count, state.current_hole).to_dict(),
        }
        for pair in pairs
    ])


@rounds.route('/<string:code>/scoreboard', methods=['GET'])
def scoreboard(code):
    state = _get_round(code).load_state()
    board = build_scoreboard(state.players, state.config, state.scores, state.game_type, state.current_hole)
    return jsonify(board.to_dict())


@rounds.route('/<string:code>/summary', methods=['GET'])
def summary(code):
    state = _get_round(code).load_state()
    return jsonify(round_summary(state))
