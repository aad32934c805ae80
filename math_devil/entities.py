"""
Data model of the game: the player, questions, platforms and coins of a level,
the session aggregate and the read-only snapshot handed to presentation.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union


@dataclass
class Player:
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    is_jumping: bool = False
    facing_right: bool = True


@dataclass(frozen=True)
class Question:
    display_text: str
    troll_answer: int
    correct_math_answer: int
    wrong_answer: int

    @property
    def answers(self):
        return (self.troll_answer, self.correct_math_answer, self.wrong_answer)


# --- Platform kinds ---
# Each platform carries exactly one of these. Only Disappearing has mutable
# progress; everything else is fixed for the life of the level.

@dataclass(frozen=True)
class Ground:
    pass


@dataclass(frozen=True)
class SafeStart:
    pass


@dataclass(frozen=True)
class Transit:
    pass


@dataclass(frozen=True)
class MathAnswer:
    value: int
    is_correct: bool


@dataclass(frozen=True)
class Spike:
    pass


@dataclass(frozen=True)
class Fake:
    # A faded Disappearing platform stays invisible after it turns into a trap.
    alpha: float = 1.0


@dataclass
class Disappearing:
    triggered: bool = False
    alpha: float = 1.0


@dataclass(frozen=True)
class Exit:
    pass


PlatformKind = Union[Ground, SafeStart, Transit, MathAnswer, Spike, Fake, Disappearing, Exit]


@dataclass
class Moving:
    """Horizontal slide of a platform, started by the first landing on it."""
    original_x: float
    target_x: float
    triggered: bool = False


@dataclass(eq=False)
class Platform:
    x: float
    y: float
    width: float
    height: float
    kind: PlatformKind
    motion: Optional[Moving] = None

    @property
    def top(self):
        return self.y

    @property
    def right(self):
        return self.x + self.width

    @property
    def bottom(self):
        return self.y + self.height

    @property
    def kind_name(self):
        return type(self.kind).__name__

    @property
    def alpha(self):
        if isinstance(self.kind, (Disappearing, Fake)):
            return self.kind.alpha
        return 1.0

    @property
    def answer_value(self):
        if isinstance(self.kind, MathAnswer):
            return self.kind.value
        return None


@dataclass(eq=False)
class Coin:
    x: float
    y: float
    collected: bool = False
    phase: float = 0.0


class Status(Enum):
    ACTIVE = "active"
    GAME_OVER = "game_over"


@dataclass
class TransientMessage:
    text: str
    expiry_tick: int


@dataclass
class GameSession:
    level: int = 1
    score: int = 0
    coins: int = 0
    lives: int = 3
    status: Status = Status.ACTIVE
    # ScoringGuard: set once the correct answer has paid out this level.
    scored_this_level: bool = False
    generation: int = 0
    tick: int = 0
    question: Optional[Question] = None
    message: Optional[TransientMessage] = None

    @property
    def is_over(self):
        return self.status is Status.GAME_OVER


# --- Snapshot views ---

@dataclass(frozen=True)
class PlayerView:
    x: float
    y: float
    vx: float
    vy: float
    is_jumping: bool
    facing_right: bool


@dataclass(frozen=True)
class PlatformView:
    x: float
    y: float
    width: float
    height: float
    kind: str
    alpha: float = 1.0
    value: Optional[int] = None
    is_correct: bool = False
    moving: bool = False


@dataclass(frozen=True)
class CoinView:
    x: float
    y: float
    collected: bool
    phase: float


@dataclass(frozen=True)
class Snapshot:
    tick: int
    level: int
    score: int
    coins: int
    lives: int
    status: Status
    player: PlayerView
    platforms: Tuple[PlatformView, ...] = field(default_factory=tuple)
    coin_list: Tuple[CoinView, ...] = field(default_factory=tuple)
    question_text: str = ""
    message: Optional[str] = None

    @property
    def game_over(self):
        return self.status is Status.GAME_OVER


def platform_view(platform):
    kind = platform.kind
    return PlatformView(
        x=platform.x,
        y=platform.y,
        width=platform.width,
        height=platform.height,
        kind=platform.kind_name,
        alpha=platform.alpha,
        value=platform.answer_value,
        is_correct=isinstance(kind, MathAnswer) and kind.is_correct,
        moving=platform.motion is not None and platform.motion.triggered,
    )


def coin_view(coin):
    return CoinView(x=coin.x, y=coin.y, collected=coin.collected, phase=coin.phase)
