def policy(env):
    # Strategy: head for the troll-answer platform until it has paid out this level,
    # then head for the exit door. Walk until roughly centred under the target and
    # jump whenever standing below it. Greedy, so it happily walks into traps.
    snap = env.snapshot
    player = snap.player
    size = env.config.player_size

    if env.engine.session.scored_this_level:
        target = snap.platforms[-1]
    else:
        target = next(p for p in snap.platforms if p.is_correct)

    dx = (target.x + target.width / 2) - (player.x + size / 2)
    if dx > 4:
        movement = 4  # Move right
    elif dx < -4:
        movement = 3  # Move left
    else:
        movement = 0  # No movement (under the target)

    wants_up = target.y < player.y + size
    space = 1 if wants_up and not player.is_jumping else 0
    return [movement, space, 0]
