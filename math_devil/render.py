import math
import os

import numpy as np
import pygame
import pygame.gfxdraw

# Set Pygame to run in a headless mode, which is required for Gymnasium environments
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")


class Renderer:
    """Draws engine snapshots onto an off-screen surface."""

    # --- Colors ---
    COLOR_BG = (26, 26, 46)
    COLOR_GROUND = (46, 204, 113)
    COLOR_PLATFORM = (46, 204, 113)
    COLOR_MATH = (78, 205, 196)
    COLOR_FAKE = (149, 165, 166)
    COLOR_DISAPPEARING = (243, 156, 18)
    COLOR_SPIKE = (255, 68, 68)
    COLOR_EXIT = (255, 215, 0)
    COLOR_COIN = (255, 223, 0)
    COLOR_COIN_OUTLINE = (200, 160, 0)
    COLOR_PLAYER = (231, 76, 60)
    COLOR_HORNS = (192, 57, 43)
    COLOR_EYES = (255, 255, 255)
    COLOR_TEXT = (255, 255, 255)
    COLOR_TEXT_SHADOW = (0, 0, 0)
    COLOR_MESSAGE = (255, 107, 107)

    PLATFORM_COLORS = {
        "Ground": COLOR_GROUND,
        "SafeStart": COLOR_PLATFORM,
        "Transit": COLOR_PLATFORM,
        "MathAnswer": COLOR_MATH,
        "Fake": COLOR_FAKE,
        "Disappearing": COLOR_DISAPPEARING,
    }

    def __init__(self, config):
        pygame.init()
        pygame.font.init()
        self.config = config
        self.width = config.canvas_width
        self.height = config.canvas_height
        self.screen = pygame.Surface((self.width, self.height))
        self.font_ui = pygame.font.Font(None, 24)
        self.font_value = pygame.font.Font(None, 26)
        self.font_message = pygame.font.Font(None, 34)
        self.font_title = pygame.font.Font(None, 56)

    def render(self, snapshot):
        self.screen.fill(self.COLOR_BG)

        for plat in snapshot.platforms:
            self._draw_platform(plat)
        for coin in snapshot.coin_list:
            if not coin.collected:
                self._draw_coin(coin)
        self._draw_player(snapshot.player)
        self._render_ui(snapshot)

        arr = pygame.surfarray.array3d(self.screen)
        return np.transpose(arr, (1, 0, 2)).astype(np.uint8)

    def _draw_platform(self, plat):
        rect = pygame.Rect(int(plat.x), int(plat.y), int(plat.width), int(plat.height))
        if plat.kind == "Spike":
            # Row of triangles
            for i in range(0, rect.width, 20):
                points = [
                    (rect.x + i, rect.bottom),
                    (rect.x + i + 10, rect.top),
                    (rect.x + min(i + 20, rect.width), rect.bottom),
                ]
                pygame.gfxdraw.aapolygon(self.screen, points, self.COLOR_SPIKE)
                pygame.gfxdraw.filled_polygon(self.screen, points, self.COLOR_SPIKE)
            return

        if plat.kind == "Exit":
            pygame.draw.rect(self.screen, self.COLOR_EXIT, rect)
            self._draw_text("EXIT", self.font_ui, rect.center, color=(0, 0, 0), shadow=False)
            return

        color = self.PLATFORM_COLORS.get(plat.kind, self.COLOR_PLATFORM)
        if plat.alpha < 1.0:
            surf = pygame.Surface(rect.size, pygame.SRCALPHA)
            surf.fill((*color, int(255 * plat.alpha)))
            self.screen.blit(surf, rect.topleft)
        else:
            pygame.draw.rect(self.screen, color, rect)

        if plat.value is not None:
            self._draw_text(str(plat.value), self.font_value, (rect.centerx, rect.top - 12))

    def _draw_coin(self, coin):
        # Spinning animation
        scale = abs(math.cos(coin.phase))
        radius = self.config.coin_radius
        width = max(2, int(2 * radius * scale))
        rect = pygame.Rect(int(coin.x - width / 2), int(coin.y - radius), width, 2 * radius)
        pygame.draw.ellipse(self.screen, self.COLOR_COIN_OUTLINE, rect)
        if width > 4:
            pygame.draw.ellipse(self.screen, self.COLOR_COIN, rect.inflate(-2, -2))

    def _draw_player(self, player):
        size = self.config.player_size
        x, y = int(player.x), int(player.y)
        pygame.draw.rect(self.screen, self.COLOR_PLAYER, (x, y, size, size))
        # Horns
        pygame.draw.rect(self.screen, self.COLOR_HORNS, (x + 2, y - 5, 5, 6))
        pygame.draw.rect(self.screen, self.COLOR_HORNS, (x + size - 7, y - 5, 5, 6))
        # Eyes, shifted towards the facing direction
        shift = 2 if player.facing_right else -2
        pygame.draw.rect(self.screen, self.COLOR_EYES, (x + 4 + shift, y + 6, 4, 4))
        pygame.draw.rect(self.screen, self.COLOR_EYES, (x + size - 8 + shift, y + 6, 4, 4))

    def _render_ui(self, snapshot):
        self._draw_text(f"LEVEL: {snapshot.level}", self.font_ui, (10, 10), align="topleft")
        self._draw_text(f"SCORE: {snapshot.score}", self.font_ui, (10, 32), align="topleft")
        self._draw_text(f"LIVES: {snapshot.lives}", self.font_ui, (10, 54), align="topleft")
        self._draw_text(f"COINS: {snapshot.coins}", self.font_ui, (10, 76), align="topleft")
        self._draw_text(snapshot.question_text, self.font_ui, (self.width // 2, 18))

        if snapshot.game_over:
            self._draw_text("GAME OVER", self.font_title, (self.width // 2, self.height // 2 - 20))
        elif snapshot.message:
            self._draw_text(snapshot.message, self.font_message, (self.width // 2, 60), color=self.COLOR_MESSAGE)

    def _draw_text(self, text, font, pos, color=None, align="center", shadow=True):
        if color is None:
            color = self.COLOR_TEXT
        text_surf = font.render(text, True, color)
        text_rect = text_surf.get_rect()
        if align == "center":
            text_rect.center = pos
        else:
            text_rect.topleft = pos

        if shadow:
            shadow_surf = font.render(text, True, self.COLOR_TEXT_SHADOW)
            self.screen.blit(shadow_surf, (text_rect.left + 2, text_rect.top + 2))
        self.screen.blit(text_surf, text_rect)

    def close(self):
        pygame.quit()
