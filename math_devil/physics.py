def integrate(player, config):
    """Advance one tick under gravity. Returns the tentative (x, y, vy)."""
    vy = player.vy + config.gravity
    x = player.x + player.vx
    y = player.y + vy

    # Keep player on screen horizontally
    x = min(max(x, 0.0), float(config.canvas_width - config.player_size))
    return x, y, vy
