"""Policy graph construction and Monte Carlo backups."""

from .graph import ControllerNode, PolicyGraph, MCVIPolicy
from .scratch import Scratch
from .simulation import simulate_controller, evaluate_controller
from .backup import MonteCarloBackup

__all__ = [
    'ControllerNode',
    'PolicyGraph',
    'MCVIPolicy',
    'Scratch',
    'simulate_controller',
    'evaluate_controller',
    'MonteCarloBackup',
]
