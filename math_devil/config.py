from dataclasses import dataclass


@dataclass(frozen=True)
class GameConfig:
    """Canvas bounds plus the physics, timing and scoring constants of the game."""

    canvas_width: int = 640
    canvas_height: int = 400
    fps: int = 60

    # --- Physics ---
    player_size: int = 20
    gravity: float = 0.5
    jump_force: float = -12.0
    move_speed: float = 5.0
    landing_tolerance: float = 12.0

    # --- Scoring ---
    correct_answer_points: int = 300  # multiplied by level
    level_clear_points: int = 150  # multiplied by the level just cleared
    coin_points: int = 50
    coin_value: int = 10
    starting_lives: int = 3

    # --- Pickup ---
    coin_radius: int = 8

    # --- Scheduled effects (in ticks) ---
    message_ticks: int = 90
    disappear_delay_ticks: int = 30
    fade_ticks: int = 30
    move_tween_factor: float = 0.1

    def __post_init__(self):
        if self.canvas_width <= 0 or self.canvas_height <= 0:
            raise ValueError(
                f"canvas must be positive, got {self.canvas_width}x{self.canvas_height}"
            )
        # The level layout needs room for the start area, three answer slots and the exit.
        if self.canvas_width < 320 or self.canvas_height < 320:
            raise ValueError(
                f"canvas {self.canvas_width}x{self.canvas_height} is too small for a level, "
                "need at least 320x320"
            )
        if self.player_size <= 0:
            raise ValueError("player_size must be positive")
        if not 0 < self.move_tween_factor <= 1:
            raise ValueError("move_tween_factor must be in (0, 1]")

    @property
    def coin_pickup_distance(self):
        return self.player_size / 2 + self.coin_radius


DEFAULT_CONFIG = GameConfig()
