from scorekeeper import db
from scorekeeper.services.rounds import RoundState
import json
import string
import random

def generate_round_code(length=4):
    """Generate a unique, short round code."""
    while True:
        code = ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))
        if not Round.query.filter_by(code=code).first():
            return code

class Round(db.Model):
    __tablename__ = 'round'
    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(4), unique=True, index=True)
    game_type = db.Column(db.String(32), nullable=False)
    status = db.Column(db.String(32), default='active')  # active, finished
    state = db.Column(db.Text, nullable=False)  # JSON-encoded RoundState

    def __init__(self, **kwargs):
        super(Round, self).__init__(**kwargs)
        if not self.code:
            self.code = generate_round_code()

    def load_state(self) -> RoundState:
        return RoundState.from_dict(json.loads(self.state))

    def save_state(self, state: RoundState) -> None:
        self.state = json.dumps(state.to_dict())
        self.game_type = state.game_type.value
        self.status = 'finished' if state.is_finished else 'active'

    def to_dict(self):
        return {
            'id': self.id,
            'code': self.code,
            'game_type': self.game_type,
            'status': self.status,
            'state': json.loads(self.state) if self.state else None,
        }
