from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(str(flask_app.config.get('LOG_LEVEL', 'INFO')).upper())

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)

    from scorekeeper.main import main
    flask_app.register_blueprint(main)

    from scorekeeper.api.rounds import rounds
    # Mount round routes under /api to match frontend API client
    flask_app.register_blueprint(rounds, url_prefix='/api/rounds')

    @click.command('db-reset')
    @click.option('--seed/--no-seed', default=True, help='Create a demo standard round.')
    def db_reset_command(seed):
        """Drops, recreates, and optionally seeds the database."""
        from scorekeeper.models import Round
        from scorekeeper.services.rounds import GameType, create_initial_round
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            if seed:
                state = create_initial_round(GameType.STANDARD, 9, ['Ava', 'Ben', 'Cam'])
                demo = Round(game_type=state.game_type.value)
                demo.save_state(state)
                db.session.add(demo)
                db.session.commit()
                click.echo(f'Seeded demo round {demo.code}')

            click.echo('Database has been reset!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
