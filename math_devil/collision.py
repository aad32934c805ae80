"""
Collision resolution for one tick.

Platforms are one-way: they only stop a player coming down onto them from
above. The resolver does not mutate the level; it reports what happened and
the engine applies it.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from .entities import Coin, Disappearing, Exit, Fake, MathAnswer, Platform, Spike

HAZARD_SPIKE = "spike"
HAZARD_WRONG_ANSWER = "wrong_answer"
HAZARD_FALL = "fall"


@dataclass
class ResolvedEvents:
    x: float
    y: float
    vy: float
    supported: bool = False
    landed_on: Optional[Platform] = None
    hazard: Optional[str] = None
    trap: Optional[Platform] = None
    correct_landing: bool = False
    moving_trigger: Optional[Platform] = None
    disappearing_trigger: Optional[Platform] = None
    coins: List[Coin] = field(default_factory=list)
    exit_reached: bool = False


def lands_on(platform, prev_bottom, x, bottom, config):
    """One-way landing test: the player's feet crossed the top edge this tick."""
    if not (x < platform.right and x + config.player_size > platform.x):
        return False
    if prev_bottom > platform.top:
        return False
    return platform.top <= bottom <= platform.bottom + config.landing_tolerance


def resolve(prev_y, x, y, vy, platforms, coins, config):
    size = config.player_size
    events = ResolvedEvents(x=x, y=y, vy=vy)
    prev_bottom = prev_y + size
    bottom = y + size

    candidates = [
        p for p in platforms
        if not isinstance(p.kind, Exit) and lands_on(p, prev_bottom, x, bottom, config)
    ]
    # Coming down, the highest top is crossed first.
    candidates.sort(key=lambda p: p.top)

    for plat in candidates:
        kind = plat.kind
        if isinstance(kind, Fake):
            # Looks solid, isn't: the player keeps falling.
            if events.trap is None:
                events.trap = plat
            continue

        events.landed_on = plat
        if isinstance(kind, Spike):
            events.hazard = HAZARD_SPIKE
        elif isinstance(kind, MathAnswer) and not kind.is_correct:
            events.hazard = HAZARD_WRONG_ANSWER
        else:
            events.supported = True
            events.y = plat.top - size
            events.vy = 0.0
            if isinstance(kind, MathAnswer):
                events.correct_landing = True
            if plat.motion is not None and not plat.motion.triggered:
                events.moving_trigger = plat
            if isinstance(kind, Disappearing) and not kind.triggered:
                events.disappearing_trigger = plat
        break

    # Collectibles use the resolved position
    cx = events.x + size / 2
    cy = events.y + size / 2
    reach = config.coin_pickup_distance
    for coin in coins:
        if coin.collected:
            continue
        if abs(cx - coin.x) <= reach and abs(cy - coin.y) <= reach:
            events.coins.append(coin)

    if platforms and isinstance(platforms[-1].kind, Exit):
        exit_platform = platforms[-1]
        events.exit_reached = (
            events.x < exit_platform.right
            and events.x + size > exit_platform.x
            and events.y < exit_platform.bottom
            and events.y + size > exit_platform.y
        )

    if events.hazard is None and events.y > config.canvas_height:
        events.hazard = HAZARD_FALL

    return events
