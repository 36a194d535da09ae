"""Toy problems with values that can be checked by hand."""

from .toy import (
    build_stop_or_wait_pomdp,
    build_stop_or_wait_problem,
    optimal_value,
    STATE,
    OBS,
    STOP,
    WAIT,
)
from .look_then_claim import (
    build_look_then_claim_pomdp,
    build_look_then_claim_problem,
    look_then_claim_value,
    claim_action,
    seen_observation,
    LOOK,
)

__all__ = [
    'build_stop_or_wait_pomdp',
    'build_stop_or_wait_problem',
    'optimal_value',
    'STATE',
    'OBS',
    'STOP',
    'WAIT',
    'build_look_then_claim_pomdp',
    'build_look_then_claim_problem',
    'look_then_claim_value',
    'claim_action',
    'seen_observation',
    'LOOK',
]
