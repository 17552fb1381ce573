import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Allowed browser origins for HTTP and Socket.IO (comma separated)
    CORS_ORIGINS = [o.strip() for o in os.environ.get(
        'CORS_ORIGINS',
        'http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000'
    ).split(',') if o.strip()]
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    # Turn timer (seconds). A game mode may override the duration.
    TURN_DURATION_SEC = int(os.environ.get('TURN_DURATION_SEC', '30'))
    TIMER_TICK_SEC = float(os.environ.get('TIMER_TICK_SEC', '1'))
    POINTS_PER_CORRECT = int(os.environ.get('POINTS_PER_CORRECT', '10'))
    MIN_PLAYERS = int(os.environ.get('MIN_PLAYERS', '2'))
    MAX_PLAYERS = int(os.environ.get('MAX_PLAYERS', '10'))
    # 0 disables the turn limit
    MAX_TURNS = int(os.environ.get('MAX_TURNS', '0'))
    DEFAULT_GAME_MODE = os.environ.get('DEFAULT_GAME_MODE', 'europe')
