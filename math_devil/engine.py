"""
The game engine: owns the session and the current level, advances one fixed
timestep per tick and publishes an immutable snapshot after every tick.
"""
import logging
import math
from enum import Enum

import numpy as np

from .collision import HAZARD_FALL, HAZARD_SPIKE, HAZARD_WRONG_ANSWER, resolve
from .config import DEFAULT_CONFIG
from .effects import EffectScheduler, FadeOut, MoveTween
from .entities import (
    GameSession,
    Player,
    PlayerView,
    Snapshot,
    Status,
    TransientMessage,
    coin_view,
    platform_view,
)
from .level import build_level, spawn_point
from .physics import integrate
from .questions import generate_question

logger = logging.getLogger(__name__)

COIN_SPIN = 0.1

HAZARD_MESSAGES = {
    HAZARD_SPIKE: "OUCH! That's a spike!",
    HAZARD_WRONG_ANSWER: "Wrong answer! -1 life",
    HAZARD_FALL: "You fell!",
}


class Intent(Enum):
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    STOP_HORIZONTAL = "stop_horizontal"
    JUMP = "jump"


class GameEngine:
    """
    Single owner of the game session.

    Input intents replace the current intent (last writer wins) and are
    applied at the start of the next tick; nothing is queued. `tick()` runs
    physics, collision and scoring to completion and returns a Snapshot.
    `on_game_end(level, score, coins)` is called exactly once, when the last
    life is lost.
    """

    def __init__(self, config=None, on_game_end=None, rng=None):
        self.config = config or DEFAULT_CONFIG
        self.on_game_end = on_game_end
        self.effects = EffectScheduler()
        self.rng = rng if rng is not None else np.random.default_rng()

        self.session = None
        self.player = None
        self.platforms = []
        self.coins = []
        self.running = False
        self._completion_fired = False
        self._move_intent = Intent.STOP_HORIZONTAL
        self._jump_requested = False

        self.reset()

    # --- Lifecycle ---

    def reset(self, rng=None):
        if rng is not None:
            self.rng = rng
        self.session = GameSession(lives=self.config.starting_lives)
        self._completion_fired = False
        self._move_intent = Intent.STOP_HORIZONTAL
        self._jump_requested = False
        self._start_level(1)
        self.running = True
        logger.info("new game started")
        return self.snapshot()

    def stop(self):
        """Tear down: no further ticks run and every pending effect is dropped."""
        self.running = False
        self.session.generation = self.effects.cancel_all()
        logger.debug("engine stopped at tick %d", self.session.tick)

    def _start_level(self, level):
        s = self.session
        s.generation = self.effects.cancel_all()
        s.level = level
        s.question = generate_question(level, self.rng)
        s.scored_this_level = False
        self.platforms, self.coins = build_level(level, s.question, self.config, self.rng)
        self._respawn()
        logger.info("level %d: %s", level, s.question.display_text)

    def _respawn(self):
        x, y = spawn_point(self.config)
        facing = self.player.facing_right if self.player is not None else True
        self.player = Player(x=x, y=y, facing_right=facing)

    # --- Input ---

    def handle_intent(self, intent):
        """Record one input intent for the next tick. Returns False when it is rejected.

        Intents are not queued: the latest horizontal intent replaces the
        previous one, and a jump is refused while the player is airborne or a
        jump is already pending.
        """
        if isinstance(intent, str) and intent in Intent.__members__:
            intent = Intent[intent]
        intent = Intent(intent)
        if not self.running or self.session.is_over:
            return False

        if intent is Intent.JUMP:
            if self.player.is_jumping or self._jump_requested:
                return False
            self._jump_requested = True
        else:
            self._move_intent = intent
        return True

    def _apply_intents(self):
        player = self.player
        if self._move_intent is Intent.MOVE_LEFT:
            player.vx = -self.config.move_speed
            player.facing_right = False
        elif self._move_intent is Intent.MOVE_RIGHT:
            player.vx = self.config.move_speed
            player.facing_right = True
        else:
            player.vx = 0.0
        if self._jump_requested:
            self._jump_requested = False
            if not player.is_jumping:
                player.vy = self.config.jump_force
                player.is_jumping = True

    # --- Simulation ---

    def tick(self):
        s = self.session
        if not self.running or s.is_over:
            return self.snapshot()

        s.tick += 1
        self.effects.run_due(s.tick)
        if s.message is not None and s.tick >= s.message.expiry_tick:
            s.message = None
        for coin in self.coins:
            coin.phase = (coin.phase + COIN_SPIN) % (2 * math.pi)

        self._apply_intents()
        player = self.player
        prev_y = player.y
        x, y, vy = integrate(player, self.config)
        events = resolve(prev_y, x, y, vy, self.platforms, self.coins, self.config)
        player.x, player.y, player.vy = events.x, events.y, events.vy
        player.is_jumping = not events.supported

        self._apply(events)
        return self.snapshot()

    def _apply(self, events):
        s = self.session
        cfg = self.config

        for coin in events.coins:
            coin.collected = True
            s.score += cfg.coin_points
            s.coins += cfg.coin_value

        if events.correct_landing and not s.scored_this_level:
            points = cfg.correct_answer_points * s.level
            s.score += points
            s.scored_this_level = True
            self._say(f"Correct! +{points} points!")

        if events.moving_trigger is not None:
            plat = events.moving_trigger
            plat.motion.triggered = True
            self.effects.schedule(s.tick, 1, MoveTween(plat, cfg.move_tween_factor))
        if events.disappearing_trigger is not None:
            plat = events.disappearing_trigger
            plat.kind.triggered = True
            self.effects.schedule(s.tick, cfg.disappear_delay_ticks, FadeOut(plat, cfg.fade_ticks))

        if events.trap is not None:
            self._say("FAKE PLATFORM! Gotcha!")

        if events.hazard is not None:
            self._lose_life(events.hazard)
        elif events.exit_reached:
            self._advance_level()

    def _lose_life(self, cause):
        s = self.session
        s.lives = max(0, s.lives - 1)
        logger.info("life lost (%s) on level %d, %d left", cause, s.level, s.lives)
        self._say(HAZARD_MESSAGES[cause])
        if s.lives <= 0:
            s.status = Status.GAME_OVER
            s.generation = self.effects.cancel_all()
            self._finish()
        else:
            self._respawn()

    def _advance_level(self):
        s = self.session
        bonus = self.config.level_clear_points * s.level
        s.score += bonus
        logger.info("level %d cleared, +%d", s.level, bonus)
        self._start_level(s.level + 1)
        self._say(f"Level {s.level}! +{bonus} points")

    def _finish(self):
        if self._completion_fired:
            return
        self._completion_fired = True
        s = self.session
        logger.info("game over: level=%d score=%d coins=%d", s.level, s.score, s.coins)
        if self.on_game_end is not None:
            self.on_game_end(s.level, s.score, s.coins)

    def _say(self, text):
        s = self.session
        s.message = TransientMessage(text, s.tick + self.config.message_ticks)

    # --- Presentation ---

    def snapshot(self):
        s = self.session
        p = self.player
        return Snapshot(
            tick=s.tick,
            level=s.level,
            score=s.score,
            coins=s.coins,
            lives=s.lives,
            status=s.status,
            player=PlayerView(p.x, p.y, p.vx, p.vy, p.is_jumping, p.facing_right),
            platforms=tuple(platform_view(plat) for plat in self.platforms),
            coin_list=tuple(coin_view(coin) for coin in self.coins),
            question_text=s.question.display_text if s.question else "",
            message=s.message.text if s.message else None,
        )
