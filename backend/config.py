import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///' + os.path.join(BASE_DIR, 'scorekeeper.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # New round defaults
    DEFAULT_HOLE_COUNT = int(os.environ.get('DEFAULT_HOLE_COUNT', '18'))
    DEFAULT_PAR = int(os.environ.get('DEFAULT_PAR', '3'))
    # Editor bounds enforced at the HTTP layer
    MAX_HOLE_COUNT = int(os.environ.get('MAX_HOLE_COUNT', '99'))
    MIN_PAR = int(os.environ.get('MIN_PAR', '1'))
    MAX_PAR = int(os.environ.get('MAX_PAR', '9'))
    MIN_PLAYERS = int(os.environ.get('MIN_PLAYERS', '1'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
