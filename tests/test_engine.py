import dataclasses

import numpy as np
import pytest

from math_devil.engine import GameEngine, Intent
from math_devil.entities import Coin, Disappearing, Exit, Fake, MathAnswer, Status
from math_devil.level import spawn_point


def answer_platform(engine, value):
    return next(
        p for p in engine.platforms
        if isinstance(p.kind, MathAnswer) and p.kind.value == value
    )


def place_above(engine, plat):
    """Put the player just above `plat` so the next tick lands on it."""
    player = engine.player
    player.x = plat.x + 10
    player.y = plat.top - engine.config.player_size - 0.2
    player.vx = 0.0
    player.vy = 0.0


def place_in_exit(engine):
    door = engine.platforms[-1]
    assert isinstance(door.kind, Exit)
    engine.player.x = door.x + 10
    engine.player.y = door.y + 10
    engine.player.vy = 0.0


def test_reset_state(engine, config):
    snap = engine.snapshot()
    assert (snap.level, snap.score, snap.coins, snap.lives) == (1, 0, 0, 3)
    assert snap.status is Status.ACTIVE
    assert (snap.player.x, snap.player.y) == spawn_point(config)
    assert snap.question_text.endswith("= ?")


def test_standing_still_on_spawn(engine):
    start = engine.snapshot().player
    for _ in range(30):
        snap = engine.tick()
    assert snap.player.y == start.y
    assert not snap.player.is_jumping
    assert snap.lives == 3


def test_scenario_troll_answer_scores_once(engine):
    engine.coins = []
    troll = answer_platform(engine, engine.session.question.troll_answer)
    place_above(engine, troll)

    snap = engine.tick()
    assert snap.score == 300
    assert snap.lives == 3
    assert engine.session.scored_this_level
    assert snap.message.startswith("Correct!")

    # standing on it keeps landing on it every tick, without paying again
    for _ in range(20):
        snap = engine.tick()
    assert snap.score == 300


def test_scenario_correct_math_after_troll_costs_a_life(engine, config):
    engine.coins = []
    question = engine.session.question
    place_above(engine, answer_platform(engine, question.troll_answer))
    engine.tick()

    place_above(engine, answer_platform(engine, question.correct_math_answer))
    snap = engine.tick()
    assert snap.lives == 2
    assert snap.score == 300
    assert snap.status is Status.ACTIVE
    assert snap.message == "Wrong answer! -1 life"
    # respawned with zero velocity
    assert (snap.player.x, snap.player.y) == spawn_point(config)
    assert (snap.player.vx, snap.player.vy) == (0.0, 0.0)


def test_wrong_answer_is_also_a_hazard(engine):
    engine.coins = []
    place_above(engine, answer_platform(engine, engine.session.question.wrong_answer))
    snap = engine.tick()
    assert snap.lives == 2
    assert snap.score == 0


def test_scenario_last_life_fall_ends_the_game(engine, results, config):
    engine.session.lives = 1
    engine.session.score = 300
    engine.player.y = config.canvas_height + 1

    snap = engine.tick()
    assert snap.lives == 0
    assert snap.status is Status.GAME_OVER
    assert results == [(1, 300, 0)]

    # terminal: further ticks and intents change nothing, no second callback
    for _ in range(10):
        later = engine.tick()
    assert later.tick == snap.tick
    assert engine.handle_intent(Intent.JUMP) is False
    assert results == [(1, 300, 0)]
    assert len(engine.effects) == 0


def test_fall_with_lives_left_respawns(engine, config, results):
    engine.player.x = 300.0
    engine.player.y = config.canvas_height - 1
    engine.player.vy = 5.0
    snap = engine.tick()
    assert snap.lives == 2
    assert snap.message == "You fell!"
    assert (snap.player.x, snap.player.y) == spawn_point(config)
    assert results == []


def test_scenario_exit_advances_level(engine, config):
    engine.session.level = 3
    engine.session.score = 1000
    engine.session.scored_this_level = True
    engine.coins = []
    old_platforms = list(engine.platforms)
    old_coins = list(engine.coins)
    old_question = engine.session.question

    place_in_exit(engine)
    snap = engine.tick()

    assert snap.level == 4
    assert snap.score == 1000 + 150 * 3
    assert not engine.session.scored_this_level
    assert engine.session.question is not old_question
    assert (snap.player.x, snap.player.y) == spawn_point(config)
    assert all(p not in old_platforms for p in engine.platforms)
    assert all(c not in old_coins for c in engine.coins)
    assert len(engine.coins) == 2 + 3 + 4
    assert snap.message == "Level 4! +450 points"


def test_scenario_coin_collected_once(engine):
    x, y = spawn_point(engine.config)
    size = engine.config.player_size
    coin = Coin(x + size / 2, y + size / 2)
    engine.coins = [coin]

    engine.tick()
    snap = engine.tick()
    assert coin.collected
    assert snap.coins == 10
    assert snap.score == 50
    assert snap.coin_list[0].collected


def test_jump_rejected_while_airborne(engine):
    assert engine.handle_intent(Intent.JUMP) is True
    # a pending jump counts as airborne
    assert engine.handle_intent(Intent.JUMP) is False
    snap = engine.tick()
    assert snap.player.is_jumping
    assert snap.player.vy < 0
    assert engine.handle_intent("jump") is False


def test_intents_do_not_touch_the_player_between_ticks(engine, config):
    start = engine.snapshot().player
    engine.handle_intent(Intent.MOVE_LEFT)
    engine.handle_intent(Intent.JUMP)
    assert (engine.player.vx, engine.player.vy) == (start.vx, start.vy)
    assert not engine.player.is_jumping
    assert engine.player.facing_right

    snap = engine.tick()
    assert snap.player.vx == -config.move_speed
    assert snap.player.vy == pytest.approx(config.jump_force + config.gravity)
    assert not snap.player.facing_right


def test_move_intents_last_writer_wins(engine, config):
    x0 = spawn_point(config)[0]
    engine.handle_intent(Intent.MOVE_RIGHT)
    engine.handle_intent("move_left")
    snap = engine.tick()
    assert snap.player.vx == -config.move_speed
    assert not snap.player.facing_right
    assert snap.player.x == x0 - config.move_speed

    # the current intent holds until replaced
    snap = engine.tick()
    assert snap.player.x == x0 - 2 * config.move_speed

    engine.handle_intent(Intent.STOP_HORIZONTAL)
    snap = engine.tick()
    assert snap.player.vx == 0.0
    assert snap.player.x == x0 - 2 * config.move_speed

    engine.handle_intent(Intent.MOVE_RIGHT)
    snap = engine.tick()
    assert snap.player.facing_right
    assert snap.player.x == x0 - config.move_speed


def test_intent_names_and_values_are_accepted(engine, config):
    assert engine.handle_intent("MOVE_LEFT") is True
    assert engine.tick().player.vx == -config.move_speed
    assert engine.handle_intent("stop_horizontal") is True
    assert engine.tick().player.vx == 0.0
    assert engine.handle_intent("JUMP") is True
    assert engine.tick().player.is_jumping


def test_unknown_intent_is_rejected(engine):
    with pytest.raises(ValueError):
        engine.handle_intent("teleport")


def test_snapshot_is_read_only_copy(engine):
    snap = engine.snapshot()
    with pytest.raises(dataclasses.FrozenInstanceError):
        snap.score = 10
    with pytest.raises(dataclasses.FrozenInstanceError):
        snap.player.x = 0
    assert isinstance(snap.platforms, tuple)

    engine.handle_intent(Intent.MOVE_RIGHT)
    for _ in range(5):
        engine.tick()
    assert snap.tick == 0
    assert snap.player.x == spawn_point(engine.config)[0]


def test_message_expires_declaratively(engine, config):
    engine._say("hello")
    assert engine.snapshot().message == "hello"
    for _ in range(config.message_ticks - 1):
        snap = engine.tick()
    assert snap.message == "hello"
    assert engine.tick().message is None


def _level_with_disappearing(engine):
    engine._start_level(5)
    return next(p for p in engine.platforms if isinstance(p.kind, Disappearing))


def test_disappearing_platform_fades_into_a_trap(engine, config):
    engine.coins = []
    plat = _level_with_disappearing(engine)
    place_above(engine, plat)
    engine.tick()
    assert plat.kind.triggered
    assert len(engine.effects) == 1

    for _ in range(config.disappear_delay_ticks - 1):
        engine.tick()
    assert plat.alpha == 1.0

    for _ in range(config.fade_ticks + 1):
        engine.tick()
    assert isinstance(plat.kind, Fake)
    assert len(engine.effects) == 0
    view = engine.snapshot().platforms[engine.platforms.index(plat)]
    assert view.kind == "Fake"
    assert view.alpha == 0.0
    # the player dropped through to the start area unharmed
    assert engine.session.lives == 3


def test_level_transition_cancels_pending_effects(engine):
    engine.coins = []
    plat = _level_with_disappearing(engine)
    place_above(engine, plat)
    engine.tick()
    assert len(engine.effects) == 1
    generation = engine.session.generation

    place_in_exit(engine)
    engine.tick()
    assert engine.session.generation > generation
    assert len(engine.effects) == 0
    for _ in range(100):
        engine.tick()
    assert isinstance(plat.kind, Disappearing)
    assert plat.kind.alpha == 1.0


def test_reset_cancels_pending_effects(engine):
    engine.coins = []
    plat = _level_with_disappearing(engine)
    place_above(engine, plat)
    engine.tick()

    snap = engine.reset()
    assert snap.level == 1
    assert (snap.score, snap.coins, snap.lives) == (0, 0, 3)
    assert len(engine.effects) == 0
    for _ in range(100):
        engine.tick()
    assert isinstance(plat.kind, Disappearing)


def test_moving_platform_slides_to_target(config):
    for seed in range(50):
        engine = GameEngine(config, rng=np.random.default_rng(seed))
        engine._start_level(4)
        moving = [p for p in engine.platforms if p.motion is not None]
        if moving:
            break
    plat = moving[0]
    engine.coins = []
    place_above(engine, plat)
    engine.tick()
    assert plat.motion.triggered
    assert engine.snapshot().platforms[engine.platforms.index(plat)].moving

    # step off so the slide is observed on its own
    engine.player.x, engine.player.y = spawn_point(config)
    engine.tick()
    assert plat.x == pytest.approx(plat.motion.original_x + 0.1 * (plat.motion.target_x - plat.motion.original_x))
    for _ in range(200):
        engine.tick()
    assert plat.x == plat.motion.target_x


def test_stop_tears_down(engine):
    engine.coins = []
    plat = _level_with_disappearing(engine)
    place_above(engine, plat)
    engine.tick()

    engine.stop()
    before = engine.snapshot()
    after = engine.tick()
    assert after == before
    assert len(engine.effects) == 0
    assert engine.handle_intent(Intent.MOVE_LEFT) is False


def test_session_invariants_under_random_play(config):
    rng = np.random.default_rng(2024)
    calls = []
    engine = GameEngine(config, on_game_end=lambda *args: calls.append(args), rng=np.random.default_rng(5))
    intents = list(Intent)
    prev = engine.snapshot()
    for _ in range(5000):
        if rng.random() < 0.2:
            engine.handle_intent(intents[int(rng.integers(len(intents)))])
        snap = engine.tick()
        assert snap.score >= prev.score
        assert snap.coins >= prev.coins
        assert prev.lives - snap.lives in (0, 1)
        assert snap.level >= prev.level
        if prev.status is Status.GAME_OVER:
            assert snap.status is Status.GAME_OVER
        prev = snap
    assert len(calls) <= 1
    if prev.status is Status.GAME_OVER:
        assert calls == [(prev.level, prev.score, prev.coins)]
