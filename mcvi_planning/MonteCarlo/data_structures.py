"""Data structures for Monte Carlo policy evaluation."""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple


@dataclass
class PolicyTrialResult:
    """Result from a single policy execution.

    Attributes
    ----------
    trial_id : int
        Trial identifier
    outcome : str
        One of: "terminal" (a terminal action was taken), "no_controller"
        (the policy graph had no node for the observed history), or
        "horizon" (max_steps reached)
    discounted_return : float
        Sum over steps t of discount^(t+1) * r_t
    steps_completed : int
        Number of actions executed
    trajectory : list of (state, action, reward, obs) tuples
        Complete trajectory history
    """
    trial_id: int
    outcome: str
    discounted_return: float
    steps_completed: int
    trajectory: List[Tuple[Any, Any, float, Any]] = field(default_factory=list)


@dataclass
class PolicyEvaluationMetrics:
    """Aggregated metrics from Monte Carlo policy evaluation.

    Attributes
    ----------
    num_trials : int
        Total number of trials executed
    mean_return : float
        Average discounted return
    std_return : float
        Sample standard deviation of the discounted return
    ci_low, ci_high : float
        Student-t confidence interval for the mean return
    terminal_rate : float
        Fraction of trials ending with a terminal action
    no_controller_rate : float
        Fraction of trials where the controller ran out of edges
    mean_steps : float
        Average trajectory length
    returns : list of float
        Per-trial discounted returns (for histograms)
    """
    num_trials: int
    mean_return: float
    std_return: float
    ci_low: float
    ci_high: float
    terminal_rate: float
    no_controller_rate: float
    mean_steps: float
    returns: List[float] = field(default_factory=list)
    confidence: Optional[float] = 0.95

    def __str__(self) -> str:
        """Format metrics for display."""
        lines = [
            "Policy Evaluation Metrics",
            "=" * 40,
            f"Trials: {self.num_trials}",
            f"Mean Return: {self.mean_return:.4f} ± {self.std_return:.4f}",
            f"{self.confidence:.0%} CI: [{self.ci_low:.4f}, {self.ci_high:.4f}]",
            f"Terminal Rate: {self.terminal_rate:.2%}",
            f"No-Controller Rate: {self.no_controller_rate:.2%}",
            f"Mean Steps: {self.mean_steps:.2f}",
        ]
        return "\n".join(lines)
