"""Decision-process models and value bound estimators."""

from .base import POMDPModel
from .pomdp import DiscretePOMDP
from .bounds import BoundEstimator, ConstantBound, MDPUpperBound, BlindPolicyLowerBound

__all__ = [
    'POMDPModel',
    'DiscretePOMDP',
    'BoundEstimator', 'ConstantBound', 'MDPUpperBound', 'BlindPolicyLowerBound',
]
