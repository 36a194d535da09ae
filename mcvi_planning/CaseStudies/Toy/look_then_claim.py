"""Look-then-claim toy problem.

A prize sits in one of `num_boxes` boxes, chosen uniformly at random.

- `look` reveals the box exactly, keeps the state and pays nothing;
- `claim_i` ends the episode, paying `prize` if the prize is in box i and
  `-penalty` otherwise.

Looking once and then claiming the revealed box is optimal, worth
discount**2 * prize. Each box needs its own claim node in the policy graph,
so the lower bound is assembled over several search iterations.
"""

from typing import List

from ...Models import DiscretePOMDP, ConstantBound

LOOK = "look"


def claim_action(box: int) -> str:
    return f"claim_{box}"


def seen_observation(box: int) -> str:
    return f"seen_{box}"


def build_look_then_claim_pomdp(
    num_boxes: int = 3,
    discount: float = 0.5,
    prize: float = 10.0,
    penalty: float = 100.0,
) -> DiscretePOMDP:
    """Build the toy with actions enumerated as [look, claim_0, ..., claim_{n-1}]."""
    if num_boxes < 1:
        raise ValueError(f"num_boxes must be positive, got {num_boxes}")
    boxes: List[int] = list(range(num_boxes))
    claims = [claim_action(b) for b in boxes]
    actions = [LOOK] + claims

    T = {(s, a): {s: 1.0} for s in boxes for a in actions}
    P = {s: {seen_observation(s): 1.0} for s in boxes}
    R = {(s, LOOK): 0.0 for s in boxes}
    for s in boxes:
        for b in boxes:
            R[(s, claim_action(b))] = prize if b == s else -penalty

    return DiscretePOMDP(
        states=boxes,
        observations=[seen_observation(b) for b in boxes],
        actions=actions,
        T=T,
        P=P,
        R=R,
        discount=discount,
        terminal_actions=claims,
        initial={s: 1.0 / num_boxes for s in boxes},
    )


def look_then_claim_value(discount: float = 0.5, prize: float = 10.0) -> float:
    return discount ** 2 * prize


def build_look_then_claim_problem(
    num_boxes: int = 3,
    discount: float = 0.5,
    prize: float = 10.0,
    penalty: float = 100.0,
):
    """Return (pomdp, lower_bound, upper_bound) with bounds -penalty and prize."""
    pomdp = build_look_then_claim_pomdp(num_boxes, discount, prize, penalty)
    return pomdp, ConstantBound(-penalty), ConstantBound(prize)
