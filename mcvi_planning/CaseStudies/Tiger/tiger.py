"""Tiger case study (Kaelbling, Littman & Cassandra, 1998).

A tiger is behind one of two doors. Listening costs 1 and reports the
tiger's side correctly with probability 0.85. Opening the tiger's door
costs 100, opening the other door pays 10. Opening either door ends the
episode.
"""

from typing import Dict, List, Tuple, Hashable

from ...Models import DiscretePOMDP, MDPUpperBound, BlindPolicyLowerBound

State = Hashable

TIGER_LEFT = "tiger-left"
TIGER_RIGHT = "tiger-right"
LISTEN = "listen"
OPEN_LEFT = "open-left"
OPEN_RIGHT = "open-right"
HEAR_LEFT = "hear-left"
HEAR_RIGHT = "hear-right"


def tiger_states() -> List[State]:
    """Return the two tiger positions."""
    return [TIGER_LEFT, TIGER_RIGHT]


def tiger_actions() -> List[str]:
    """Return actions in enumeration order."""
    return [LISTEN, OPEN_LEFT, OPEN_RIGHT]


def tiger_observations() -> List[str]:
    return [HEAR_LEFT, HEAR_RIGHT]


def tiger_dynamics() -> Dict[Tuple[State, str], Dict[State, float]]:
    """Listening keeps the tiger in place; opening a door resets the problem."""
    T = {}
    for s in tiger_states():
        T[(s, LISTEN)] = {s: 1.0}
        T[(s, OPEN_LEFT)] = {TIGER_LEFT: 0.5, TIGER_RIGHT: 0.5}
        T[(s, OPEN_RIGHT)] = {TIGER_LEFT: 0.5, TIGER_RIGHT: 0.5}
    return T


def tiger_perception(accuracy: float = 0.85) -> Dict[State, Dict[str, float]]:
    """Observation model: hear the tiger's side with probability `accuracy`."""
    return {
        TIGER_LEFT: {HEAR_LEFT: accuracy, HEAR_RIGHT: 1.0 - accuracy},
        TIGER_RIGHT: {HEAR_LEFT: 1.0 - accuracy, HEAR_RIGHT: accuracy},
    }


def tiger_rewards(
    listen_cost: float = 1.0, treasure: float = 10.0, penalty: float = 100.0
) -> Dict[Tuple[State, str], float]:
    return {
        (TIGER_LEFT, LISTEN): -listen_cost,
        (TIGER_RIGHT, LISTEN): -listen_cost,
        (TIGER_LEFT, OPEN_LEFT): -penalty,
        (TIGER_LEFT, OPEN_RIGHT): treasure,
        (TIGER_RIGHT, OPEN_LEFT): treasure,
        (TIGER_RIGHT, OPEN_RIGHT): -penalty,
    }


def build_tiger_pomdp(discount: float = 0.95, accuracy: float = 0.85) -> DiscretePOMDP:
    """Build the Tiger POMDP with a uniform initial belief."""
    return DiscretePOMDP(
        states=tiger_states(),
        observations=tiger_observations(),
        actions=tiger_actions(),
        T=tiger_dynamics(),
        P=tiger_perception(accuracy),
        R=tiger_rewards(),
        discount=discount,
        terminal_actions=[OPEN_LEFT, OPEN_RIGHT],
        initial={TIGER_LEFT: 0.5, TIGER_RIGHT: 0.5},
    )


def build_tiger_problem(discount: float = 0.95, accuracy: float = 0.85):
    """Return (pomdp, lower_bound, upper_bound) ready for the solver."""
    pomdp = build_tiger_pomdp(discount=discount, accuracy=accuracy)
    return pomdp, BlindPolicyLowerBound(), MDPUpperBound()
