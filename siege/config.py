"""Siege configuration: every tunable constant with its default."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SiegeConfig:
    """Immutable configuration for one siege."""

    # World
    seed: int = 42
    grid_size: int = 26
    base_x: int = 12
    base_y: int = 12

    # Starting values
    initial_wood: int = 40
    base_max_health: int = 3

    # Acts & turns
    max_turns: int = 30
    intermission_turns: tuple = (8, 16)
    # act -> ((turn, wave_size), ...)
    spawn_schedule: tuple = (
        (1, ((1, 2), (3, 2), (5, 1), (7, 1))),
        (2, ((9, 3), (11, 3), (13, 3), (15, 3))),
        (3, ((17, 2), (18, 2), (19, 3), (20, 3), (21, 2), (22, 3), (23, 3),
             (24, 3), (25, 3), (26, 2), (27, 3), (28, 3), (29, 3), (30, 3))),
    )
    spawn_min_x: int = 5
    spawn_max_x: int = 20

    # Combat
    tower_range: float = 2.0
    farm_yield: int = 2
    decoy_distraction_chance: float = 0.5

    # Build plans
    initial_plan_actions: int = 10
    act_plan_actions: int = 3

    # Act bonuses
    act1_kill_threshold: int = 4
    act1_bonus_wood: int = 10
    act2_bonus_wood: int = 15

    # Pacing (seconds), presentation only
    turn_interval: float = 1.0
    attacker_step_delay: float = 0.1
    build_step_delay: float = 0.5

    # Command interpretation service
    interpreter_url: str = "https://generativelanguage.googleapis.com/v1beta/models"
    interpreter_model: str = "gemini-2.0-flash-lite"
    interpreter_timeout: float = 10.0
    interpreter_concurrency: int = 3

    # Logging
    log_level: str = "INFO"
    replay_file: str = "siege_log.json"

    def waves_for_act(self, act: int) -> dict[int, int]:
        """Return ``{turn: wave_size}`` for *act* (empty when unknown)."""
        for sched_act, waves in self.spawn_schedule:
            if sched_act == act:
                return dict(waves)
        return {}
