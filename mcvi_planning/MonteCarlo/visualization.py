"""Visualization functions for solver convergence and policy evaluation."""

from typing import List, Optional
import numpy as np
import matplotlib.pyplot as plt

from .data_structures import PolicyEvaluationMetrics


def plot_convergence(
    history: List,
    save_path: Optional[str] = None,
    show: bool = True,
    title: str = "MCVI Root Bounds",
):
    """Plot root upper/lower bounds and gap per solver iteration.

    Parameters
    ----------
    history : list of IterationRecord
        `MCVISolver.history`
    save_path : str, optional
        Path to save figure (e.g., "images/tiger_convergence.png")
    show : bool
        Whether to display the figure
    title : str
        Figure title
    """
    if not history:
        print("No iterations to plot")
        return

    iterations = [r.iteration for r in history]
    upper = [r.upper for r in history]
    lower = [r.lower for r in history]
    gap = [r.gap for r in history]

    fig, axes = plt.subplots(1, 2, figsize=(12, 5))

    ax = axes[0]
    ax.fill_between(iterations, lower, upper, alpha=0.2, color="steelblue")
    ax.plot(iterations, upper, "o-", color="steelblue", label="Upper bound")
    ax.plot(iterations, lower, "s-", color="darkorange", label="Lower bound")
    ax.set_xlabel("Iteration")
    ax.set_ylabel("Value")
    ax.set_title(title)
    ax.legend()
    ax.grid(True, alpha=0.3)

    ax = axes[1]
    ax.semilogy(iterations, np.maximum(gap, 1e-12), "o-", color="purple")
    ax.set_xlabel("Iteration")
    ax.set_ylabel("Upper - lower")
    ax.set_title("Root Gap")
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150)
        print(f"Saved plot to {save_path}")
    if show:
        plt.show()
    else:
        plt.close(fig)


def plot_return_distribution(
    metrics: PolicyEvaluationMetrics,
    bounds: Optional[tuple] = None,
    save_path: Optional[str] = None,
    show: bool = True,
):
    """Histogram of discounted returns with the mean and, optionally, root bounds.

    Parameters
    ----------
    metrics : PolicyEvaluationMetrics
        Evaluation result with per-trial returns
    bounds : (lower, upper), optional
        Solver root bounds to overlay
    save_path : str, optional
        Path to save figure
    show : bool
        Whether to display the figure
    """
    if not metrics.returns:
        print("No returns to plot")
        return

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.hist(metrics.returns, bins=30, alpha=0.7, color="steelblue")
    ax.axvline(metrics.mean_return, color="black", linestyle="-", label="Mean return")
    ax.axvspan(metrics.ci_low, metrics.ci_high, color="gray", alpha=0.2, label="CI")
    if bounds is not None:
        ax.axvline(bounds[0], color="darkorange", linestyle="--", label="Root lower bound")
        ax.axvline(bounds[1], color="green", linestyle="--", label="Root upper bound")
    ax.set_xlabel("Discounted return")
    ax.set_ylabel("Trials")
    ax.set_title(f"Policy Returns (n={metrics.num_trials})")
    ax.legend()
    ax.grid(axis="y", alpha=0.3)

    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150)
        print(f"Saved plot to {save_path}")
    if show:
        plt.show()
    else:
        plt.close(fig)
