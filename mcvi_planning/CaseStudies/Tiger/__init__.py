"""Tiger case study."""

from .tiger import (
    tiger_states,
    tiger_actions,
    tiger_observations,
    tiger_dynamics,
    tiger_perception,
    tiger_rewards,
    build_tiger_pomdp,
    build_tiger_problem,
    TIGER_LEFT,
    TIGER_RIGHT,
    LISTEN,
    OPEN_LEFT,
    OPEN_RIGHT,
    HEAR_LEFT,
    HEAR_RIGHT,
)

__all__ = [
    'tiger_states',
    'tiger_actions',
    'tiger_observations',
    'tiger_dynamics',
    'tiger_perception',
    'tiger_rewards',
    'build_tiger_pomdp',
    'build_tiger_problem',
    'TIGER_LEFT',
    'TIGER_RIGHT',
    'LISTEN',
    'OPEN_LEFT',
    'OPEN_RIGHT',
    'HEAR_LEFT',
    'HEAR_RIGHT',
]
