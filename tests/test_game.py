import math
import random

import pytest

from flappy_kiro.config import (
    GRAVITY,
    HIGH_SCORE_KEY,
    JUMP_POWER,
    PIPE_GAP,
    PIPE_MIN_HEIGHT,
    PIPE_SPAWN_INTERVAL,
    PLAYER_START_Y,
    PLAYER_X,
    WINDOW_HEIGHT,
    WINDOW_WIDTH,
)
from flappy_kiro.entities import ParticleKind, Pipe
from flappy_kiro.game import Game, Phase
from flappy_kiro.storage import MemoryStore


def make_game(high_score: int | None = None, seed: int = 0) -> Game:
    store = MemoryStore({HIGH_SCORE_KEY: str(high_score)} if high_score is not None else None)
    return Game(WINDOW_WIDTH, WINDOW_HEIGHT, store=store, rng=random.Random(seed))


def playing_game(**kwargs) -> Game:
    g = make_game(**kwargs)
    g.activate()
    return g


def test_start_activate_begins_fresh_session() -> None:
    g = make_game()
    g.session.score = 9
    g.session.pipes.append(Pipe(200, 100))
    g.session.player.y = 10
    g.activate()
    assert g.phase is Phase.PLAYING
    assert g.session.score == 0
    assert g.pipes == []
    assert g.session.frame_count == 0
    assert g.session.confetti_triggered is False
    assert (g.player.x, g.player.y, g.player.velocity, g.player.rotation) == (PLAYER_X, PLAYER_START_Y, 0.0, 0.0)


def test_playing_activate_jumps() -> None:
    g = playing_game()
    g.tick()
    g.activate()
    assert g.phase is Phase.PLAYING
    assert g.player.velocity == JUMP_POWER


def test_ticks_outside_playing_are_noops() -> None:
    g = make_game()
    for _ in range(10):
        g.tick()
    assert g.player.y == PLAYER_START_Y
    assert g.session.frame_count == 0
    assert len(g.particles) == 0


def test_gravity_integration_while_playing() -> None:
    g = playing_game()
    for n in range(1, 31):
        g.tick()
        assert math.isclose(g.player.velocity, GRAVITY * n)
        assert math.isclose(g.player.y, PLAYER_START_Y + GRAVITY * n * (n + 1) / 2)
    assert g.session.frame_count == 30


def test_trail_every_third_tick() -> None:
    g = playing_game()
    for _ in range(9):
        g.tick()
    # Emitted on frame counts 0, 3 and 6
    assert len(g.particles.of_kind(ParticleKind.TRAIL)) == 3


def test_falling_to_floor_ends_game() -> None:
    g = playing_game()
    ticks = 0
    while g.phase is Phase.PLAYING and ticks < 1000:
        g.tick()
        ticks += 1
    assert g.phase is Phase.GAME_OVER
    assert ticks == 59
    assert 15 <= len(g.particles.of_kind(ParticleKind.EXPLOSION)) <= 20


def test_boundary_crash_reconciles_final_score() -> None:
    g = playing_game(high_score=2)
    g.session.score = 5
    g.player.y = -10
    g.tick()
    assert g.phase is Phase.GAME_OVER
    assert g.high_score == 5
    assert g.scores.store.get(HIGH_SCORE_KEY) == "5"
    assert 30 <= len(g.particles.of_kind(ParticleKind.CONFETTI)) <= 40


def test_first_ever_score_never_celebrates() -> None:
    g = playing_game()
    g.session.score = 3
    g.trigger_game_over()
    assert g.high_score == 3
    assert g.particles.of_kind(ParticleKind.CONFETTI) == []
    assert g.session.confetti_triggered is False


def test_celebration_fires_once_per_session() -> None:
    g = playing_game(high_score=1)
    g.session.score = 2
    g.reconcile_high_score()
    burst = len(g.particles.of_kind(ParticleKind.CONFETTI))
    assert burst > 0
    g.session.score = 3
    g.reconcile_high_score()
    assert len(g.particles.of_kind(ParticleKind.CONFETTI)) == burst
    assert g.high_score == 3
    # Next session may celebrate again
    g.trigger_game_over()
    g.activate()
    g.activate()
    assert g.session.confetti_triggered is False
    g.session.score = 4
    g.reconcile_high_score()
    assert len(g.particles.of_kind(ParticleKind.CONFETTI)) > burst


def test_game_over_activate_returns_to_start_without_reset() -> None:
    g = playing_game()
    g.session.pipes.append(Pipe(300, 100))
    g.session.score = 4
    g.player.y = 700
    g.tick()
    assert g.phase is Phase.GAME_OVER
    y, frames = g.player.y, g.session.frame_count
    g.activate()
    assert g.phase is Phase.START
    assert g.session.score == 4
    assert len(g.pipes) == 1
    assert (g.player.y, g.session.frame_count) == (y, frames)
    g.activate()
    assert g.phase is Phase.PLAYING
    assert g.session.score == 0
    assert g.pipes == []


def test_pipe_spawns_on_interval() -> None:
    g = playing_game(seed=11)
    for _ in range(PIPE_SPAWN_INTERVAL - 1):
        g.update_pipes()
    assert g.pipes == []
    g.update_pipes()
    (pipe,) = g.pipes
    assert math.isclose(pipe.x, WINDOW_WIDTH - 1.5)
    assert PIPE_MIN_HEIGHT <= pipe.top_height <= WINDOW_HEIGHT - PIPE_GAP - PIPE_MIN_HEIGHT
    assert math.isclose(pipe.bottom_y - pipe.top_height, PIPE_GAP)
    assert pipe.scored is False


def test_spawn_is_deterministic_with_seed() -> None:
    a = make_game(seed=7).spawn_pipe()
    b = make_game(seed=7).spawn_pipe()
    assert a.top_height == b.top_height


def test_scoring_once_per_pipe() -> None:
    g = playing_game()
    pipe = Pipe(PLAYER_X - 60 + 0.5, 200)  # right edge crosses this tick
    g.session.pipes.append(pipe)
    g.update_pipes()
    assert pipe.scored
    assert g.session.score == 1
    assert 8 <= len(g.particles.of_kind(ParticleKind.SPARKLE)) <= 12
    for _ in range(5):
        g.update_pipes()
    assert g.session.score == 1


def test_offscreen_pipes_are_culled() -> None:
    g = playing_game()
    g.session.pipes.extend([Pipe(-59, 200), Pipe(200, 200)])
    g.update_pipes()
    assert len(g.pipes) == 1
    assert g.pipes[0].x == 198.5


def test_collision_ends_game_with_single_burst() -> None:
    g = playing_game()
    # Player sits at y=300, below both gaps
    g.session.pipes.extend([Pipe(PLAYER_X, 50), Pipe(PLAYER_X + 10, 50)])
    g.check_collisions()
    assert g.phase is Phase.GAME_OVER
    assert 15 <= len(g.particles.of_kind(ParticleKind.EXPLOSION)) <= 20


def test_player_inside_gap_does_not_collide() -> None:
    g = playing_game()
    g.session.pipes.append(Pipe(PLAYER_X, 50))  # gap [50, 230]
    for y in (50, 120, 190):
        g.player.y = y
        g.check_collisions()
        assert g.phase is Phase.PLAYING


def test_trigger_game_over_is_idempotent() -> None:
    g = playing_game(high_score=1)
    g.session.score = 2
    g.trigger_game_over()
    count = len(g.particles)
    g.trigger_game_over()
    assert len(g.particles) == count
    assert g.phase is Phase.GAME_OVER


@pytest.mark.parametrize("scores", [[3, 1, 5], [0, 0, 2], [4, 4, 4]])
def test_high_score_is_running_max(scores: list[int]) -> None:
    g = make_game(high_score=2)
    best = [2]
    for s in scores:
        g.activate()
        g.session.score = s
        g.trigger_game_over()
        g.activate()
        best.append(max(best[-1], s))
        assert g.high_score == best[-1]


def test_score_text() -> None:
    g = make_game(high_score=12)
    g.activate()
    g.session.score = 3
    assert g.score_text() == "Score: 3 | High Score: 12"


def test_passing_pipe_beats_stored_best_with_one_burst() -> None:
    g = playing_game(high_score=1)
    # Gap [200, 380] keeps the player clear while the pipes overlap it.
    g.session.pipes.extend([
        Pipe(PLAYER_X - 60 + 0.5, 200),  # passes on tick 1, ties the best
        Pipe(PLAYER_X - 60 + 2.0, 200),  # passes on tick 2, new best
        Pipe(PLAYER_X - 60 + 5.0, 200),  # passes on tick 4, still better
    ])
    g.tick()
    assert g.session.score == 1
    assert g.particles.of_kind(ParticleKind.CONFETTI) == []
    g.tick()
    g.tick()
    assert g.session.score == 2
    burst = len(g.particles.of_kind(ParticleKind.CONFETTI))
    assert 30 <= burst <= 40
    assert g.session.confetti_triggered
    for _ in range(3):
        g.tick()
    assert g.phase is Phase.PLAYING
    assert g.session.score == 3
    assert g.high_score == 3
    assert len(g.particles.of_kind(ParticleKind.CONFETTI)) == burst
