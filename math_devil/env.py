import os

import gymnasium as gym
import numpy as np
import pygame
from gymnasium.spaces import MultiDiscrete

from .config import GameConfig
from .engine import GameEngine, Intent
from .render import Renderer

# Set Pygame to run in a headless mode, which is required for Gymnasium environments
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")


class GameEnv(gym.Env):
    """
    A troll math platformer. Every level shows an arithmetic expression and
    three answer platforms; only the left-to-right ("troll") reading of the
    expression is safe to land on.
    """
    metadata = {"render_modes": ["rgb_array"]}

    # Must be a short, user-facing control string:
    user_guide = (
        "Controls: ← and → to move, ↑ or SPACE to jump. Land on the troll answer, then reach the EXIT."
    )

    # Must be a short, user-facing description of the game:
    game_description = (
        "Adversarial math platformer: the mathematically correct answer is a trap. "
        "Read the expression left to right, jump on that answer and escape through the door."
    )

    # Frames auto-advance for real-time physics.
    auto_advance = True

    LIFE_LOST_PENALTY = 10

    def __init__(self, render_mode="rgb_array", config=None, on_game_end=None):
        super().__init__()
        self.render_mode = render_mode
        self.config = config or GameConfig()
        self.FPS = self.config.fps
        self.MAX_STEPS = 10000

        # --- Gymnasium Spaces ---
        self.observation_space = gym.spaces.Box(
            low=0, high=255, shape=(self.config.canvas_height, self.config.canvas_width, 3), dtype=np.uint8
        )
        self.action_space = MultiDiscrete([5, 2, 2])

        self.renderer = Renderer(self.config)
        self.on_game_end = on_game_end
        self.final_result = None

        # --- State Variables (initialized in reset) ---
        self.engine = None
        self.snapshot = None
        self.steps = 0

    def reset(self, seed=None, options=None):
        super().reset(seed=seed)
        self.steps = 0
        self.final_result = None
        if self.engine is not None:
            self.engine.stop()
        self.engine = GameEngine(self.config, on_game_end=self._on_game_end, rng=self.np_random)
        self.snapshot = self.engine.snapshot()
        return self._get_observation(), self._get_info()

    def _on_game_end(self, level, score, coins):
        self.final_result = (level, score, coins)
        if self.on_game_end is not None:
            self.on_game_end(level, score, coins)

    def step(self, action):
        if self.snapshot.game_over:
            return self._get_observation(), 0, True, False, self._get_info()

        movement, space_held = action[0], action[1] == 1
        # shift (action[2]) has no use in this game

        # --- Handle Input ---
        if movement == 3:  # Left
            self.engine.handle_intent(Intent.MOVE_LEFT)
        elif movement == 4:  # Right
            self.engine.handle_intent(Intent.MOVE_RIGHT)
        else:
            self.engine.handle_intent(Intent.STOP_HORIZONTAL)
        if movement == 1 or space_held:  # Jump
            self.engine.handle_intent(Intent.JUMP)

        # --- Update Game Logic ---
        before = self.snapshot
        self.snapshot = self.engine.tick()
        self.steps += 1

        reward = self.snapshot.score - before.score
        reward -= self.LIFE_LOST_PENALTY * (before.lives - self.snapshot.lives)

        terminated = self.snapshot.game_over
        truncated = not terminated and self.steps >= self.MAX_STEPS
        if terminated or truncated:
            self.engine.stop()

        return self._get_observation(), reward, terminated, truncated, self._get_info()

    def _get_observation(self):
        return self.renderer.render(self.snapshot)

    def _get_info(self):
        return {
            "score": self.snapshot.score,
            "coins": self.snapshot.coins,
            "lives": self.snapshot.lives,
            "level": self.snapshot.level,
            "steps": self.steps,
        }

    def render(self):
        return self._get_observation()

    def close(self):
        if self.engine is not None:
            self.engine.stop()
        self.renderer.close()

    def validate_implementation(self):
        '''
        Call this after construction to verify the environment contract:
        '''
        # Test action space
        assert self.action_space.shape == (3,)
        assert self.action_space.nvec.tolist() == [5, 2, 2]

        # Test reset
        obs, info = self.reset()
        assert obs.shape == (self.config.canvas_height, self.config.canvas_width, 3)
        assert obs.dtype == np.uint8
        assert isinstance(info, dict)

        # Test step
        test_action = self.action_space.sample()
        obs, reward, term, trunc, info = self.step(test_action)
        assert obs.shape == (self.config.canvas_height, self.config.canvas_width, 3)
        assert isinstance(reward, (int, float))
        assert isinstance(term, bool)
        assert trunc == False
        assert isinstance(info, dict)

        print("✓ Implementation validated successfully")


# Example usage to run and play the environment
if __name__ == "__main__":
    # To visualize, we need to re-initialize pygame with a display.
    os.environ["SDL_VIDEODRIVER"] = "x11"  # or "windows", "macOS", etc.

    env = GameEnv(on_game_end=lambda level, score, coins: print(
        f"Game over! Level: {level}, Score: {score}, Coins: {coins}"
    ))
    obs, info = env.reset()
    done = False

    pygame.display.init()
    screen = pygame.display.set_mode((env.config.canvas_width, env.config.canvas_height))
    pygame.display.set_caption("Math Devil")
    clock = pygame.time.Clock()

    print(env.user_guide)

    running = True
    while running:
        # --- Action Mapping for Human Play ---
        keys = pygame.key.get_pressed()

        movement = 0  # no-op
        if keys[pygame.K_UP] or keys[pygame.K_w]:
            movement = 1
        if keys[pygame.K_LEFT] or keys[pygame.K_a]:
            movement = 3
        elif keys[pygame.K_RIGHT] or keys[pygame.K_d]:
            movement = 4

        space_held = 1 if keys[pygame.K_SPACE] else 0
        shift_held = 1 if keys[pygame.K_LSHIFT] or keys[pygame.K_RSHIFT] else 0

        action = [movement, space_held, shift_held]

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_r:
                print("Resetting environment.")
                obs, info = env.reset()
                done = False

        if not done:
            obs, reward, terminated, truncated, info = env.step(action)
            done = terminated or truncated

        surf = pygame.surfarray.make_surface(np.transpose(obs, (1, 0, 2)))
        screen.blit(surf, (0, 0))
        pygame.display.flip()

        clock.tick(env.FPS)

    env.close()
