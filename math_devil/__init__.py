from .config import GameConfig
from .engine import GameEngine, Intent
from .entities import Question, Snapshot, Status
