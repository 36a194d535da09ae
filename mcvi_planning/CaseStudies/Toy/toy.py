"""Stop-or-wait toy problem.

One hidden state, one observation, two actions:

- `stop` ends the episode with reward R;
- `wait` keeps the agent where it is with reward 0.

The optimal value is discount * R (stop immediately), which makes it easy
to check the solver's bounds by hand.
"""

from ...Models import DiscretePOMDP, ConstantBound

STATE = "s"
OBS = "o"
STOP = "stop"
WAIT = "wait"


def build_stop_or_wait_pomdp(discount: float = 0.5, stop_reward: float = 10.0) -> DiscretePOMDP:
    """Build the toy with actions enumerated as [stop, wait]."""
    return DiscretePOMDP(
        states=[STATE],
        observations=[OBS],
        actions=[STOP, WAIT],
        T={(STATE, STOP): {STATE: 1.0}, (STATE, WAIT): {STATE: 1.0}},
        P={STATE: {OBS: 1.0}},
        R={(STATE, STOP): stop_reward, (STATE, WAIT): 0.0},
        discount=discount,
        terminal_actions=[STOP],
        initial={STATE: 1.0},
    )


def optimal_value(discount: float = 0.5, stop_reward: float = 10.0) -> float:
    return discount * stop_reward


def build_stop_or_wait_problem(
    discount: float = 0.5,
    stop_reward: float = 10.0,
    lower: float = -100.0,
    upper: float = 100.0,
):
    """Return (pomdp, lower_bound, upper_bound) with constant, loose bounds."""
    pomdp = build_stop_or_wait_pomdp(discount=discount, stop_reward=stop_reward)
    return pomdp, ConstantBound(lower), ConstantBound(upper)
