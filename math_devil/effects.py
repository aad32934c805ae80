"""
Scheduled platform effects.

Effects are keyed by (generation, effect_id). The engine bumps the generation
whenever the platform batch is replaced, which drops every pending effect of
the old batch in one go.
"""
import heapq
import itertools
import logging

from .entities import Disappearing, Fake

logger = logging.getLogger(__name__)


class EffectScheduler:
    def __init__(self):
        self.generation = 0
        self._queue = []
        self._ids = itertools.count()

    def __len__(self):
        return sum(1 for entry in self._queue if entry[2][0] == self.generation)

    def schedule(self, now, delay, effect):
        """Run `effect(tick)` at `now + delay`.

        The effect returns None when it is finished, or a number of ticks after
        which it wants to run again.
        """
        key = (self.generation, next(self._ids))
        heapq.heappush(self._queue, (now + delay, key[1], key, effect))
        logger.debug("scheduled %r as %s at tick %d", effect, key, now + delay)
        return key

    def run_due(self, tick):
        while self._queue and self._queue[0][0] <= tick:
            _, order, key, effect = heapq.heappop(self._queue)
            if key[0] != self.generation:
                continue
            again = effect(tick)
            if again is not None:
                heapq.heappush(self._queue, (tick + max(1, again), order, key, effect))

    def cancel_all(self):
        pending = len(self)
        self._queue.clear()
        self.generation += 1
        if pending:
            logger.debug("cancelled %d pending effects", pending)
        return self.generation


class MoveTween:
    """Exponential approach of a platform towards its motion target."""

    SNAP_DISTANCE = 0.5

    def __init__(self, platform, factor):
        self.platform = platform
        self.factor = factor

    def __call__(self, tick):
        motion = self.platform.motion
        delta = motion.target_x - self.platform.x
        if abs(delta) <= self.SNAP_DISTANCE:
            self.platform.x = motion.target_x
            return None
        self.platform.x += delta * self.factor
        return 1

    def __repr__(self):
        return f"MoveTween(x={self.platform.x:.1f}->{self.platform.motion.target_x:.1f})"


class FadeOut:
    """Fade a disappearing platform to nothing, then turn it into a trap."""

    def __init__(self, platform, fade_ticks):
        self.platform = platform
        self.fade_ticks = max(1, fade_ticks)
        self.remaining = self.fade_ticks

    def __call__(self, tick):
        kind = self.platform.kind
        if not isinstance(kind, Disappearing):
            return None
        self.remaining -= 1
        kind.alpha = self.remaining / self.fade_ticks
        if self.remaining <= 0:
            self.platform.kind = Fake(alpha=0.0)
            return None
        return 1

    def __repr__(self):
        return f"FadeOut(x={self.platform.x:.1f}, y={self.platform.y:.1f})"
