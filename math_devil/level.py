"""
Procedural level layout.

A level is a fixed skeleton (start area, three answer slots, an exit step and
the exit door) with the answer values shuffled across the slots and hazards
unlocked as the level number grows. The exit is always the last platform of
the batch.
"""
import logging
import math

from .entities import (
    Coin,
    Disappearing,
    Exit,
    Fake,
    Ground,
    MathAnswer,
    Moving,
    Platform,
    SafeStart,
    Spike,
    Transit,
)

logger = logging.getLogger(__name__)

PLATFORM_HEIGHT = 15
MATH_WIDTH = 80
MATH_SLOTS = (0.36, 0.55, 0.74)  # fractions of the canvas width
MOVE_DISTANCE = 60
MAX_BONUS_COINS = 5


def spawn_point(config):
    """Top of the SafeStart platform, where the player starts and respawns."""
    return 50.0, float(config.canvas_height - 100 - config.player_size)


def build_level(level, question, config, rng):
    W, H = config.canvas_width, config.canvas_height
    platforms = []

    # Start area
    platforms.append(Platform(0, H - 20, W * 0.25, 20, Ground()))
    platforms.append(Platform(20, H - 100, 100, PLATFORM_HEIGHT, SafeStart()))
    first_transit = Platform(W * 0.22, H - 150, 70, PLATFORM_HEIGHT, Transit())
    platforms.append(first_transit)

    # Answer platforms, values shuffled across the fixed slots
    values = [
        (question.troll_answer, True),
        (question.correct_math_answer, False),
        (question.wrong_answer, False),
    ]
    order = rng.permutation(len(values))
    math_platforms = []
    for slot, idx in zip(MATH_SLOTS, order):
        value, is_correct = values[int(idx)]
        y = H - 210 - int(rng.integers(0, 50))
        plat = Platform(W * slot, y, MATH_WIDTH, PLATFORM_HEIGHT, MathAnswer(value, is_correct))
        math_platforms.append(plat)
    platforms.extend(math_platforms)

    if level > 3 and rng.random() < 0.5:
        correct = next(p for p in math_platforms if p.kind.is_correct)
        direction = 1 if rng.random() < 0.5 else -1
        target = correct.x + direction * MOVE_DISTANCE
        target = min(max(target, 0.0), W - correct.width)
        correct.motion = Moving(original_x=correct.x, target_x=target)

    # Lower route and the step under the exit
    platforms.append(Platform(W * 0.46, H - 110, 50, PLATFORM_HEIGHT, Transit()))
    platforms.append(Platform(W * 0.65, H - 110, 50, PLATFORM_HEIGHT, Transit()))
    exit_step = Platform(W - 110, H - 170, 90, PLATFORM_HEIGHT, Transit())
    platforms.append(exit_step)

    # Level-gated hazards
    if level > 2:
        platforms.append(Platform(rng.uniform(W * 0.3, W * 0.6), H - 280, 80, PLATFORM_HEIGHT, Fake()))
        platforms.append(Platform(W / 2 - 20, H - 130, 40, 20, Spike()))
    if level > 4:
        gap_centre = (W * MATH_SLOTS[1] + MATH_WIDTH + W * MATH_SLOTS[2]) / 2
        platforms.append(Platform(gap_centre - 20, H - 150, 40, 20, Spike()))
        platforms.append(Platform(W * 0.08, H - 200, 60, PLATFORM_HEIGHT, Disappearing()))

    platforms.append(Platform(W - 80, H - 300, 60, 80, Exit()))

    coins = []
    for plat in (first_transit, exit_step):
        coins.append(_coin(rng, plat.x + plat.width / 2, plat.y - 30))
    for plat in math_platforms:
        coins.append(_coin(rng, plat.x + plat.width / 2, plat.y - 40))
    for _ in range(min(level, MAX_BONUS_COINS)):
        coins.append(_coin(rng, rng.uniform(20, W - 20), rng.uniform(60, H - 120)))

    logger.debug("built level %d: %d platforms, %d coins", level, len(platforms), len(coins))
    return platforms, coins


def _coin(rng, x, y):
    return Coin(float(x), float(y), phase=float(rng.uniform(0, 2 * math.pi)))
