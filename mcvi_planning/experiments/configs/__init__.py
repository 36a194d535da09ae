"""Experiment configurations. Each module exposes a module-level `config`."""

from .base_config import SolverExperimentConfig

__all__ = ['SolverExperimentConfig']
