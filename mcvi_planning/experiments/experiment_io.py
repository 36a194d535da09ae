"""Result files for solver experiments.

A run produces one JSON document with two top-level keys:

- "metadata": when and where the run happened (UTC timestamp, git commit,
  interpreter and library versions) plus the experiment config;
- "results": the run summary from the experiment runner.

The per-iteration root bounds are also written as a flat CSV next to the
JSON, which is easier to load into a spreadsheet or pandas.
"""

import csv
import json
import os
import platform
import subprocess
from dataclasses import asdict, fields, is_dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import scipy


def git_commit() -> Optional[str]:
    """HEAD of the enclosing git checkout, or None outside one."""
    try:
        out = subprocess.run(["git", "rev-parse", "HEAD"], capture_output=True, text=True, timeout=5)
    except (OSError, subprocess.SubprocessError):
        return None
    return out.stdout.strip() if out.returncode == 0 else None


def environment_info() -> Dict[str, str]:
    return {
        "platform": platform.platform(),
        "python": platform.python_version(),
        "numpy": np.__version__,
        "scipy": scipy.__version__,
    }


def build_metadata(config: Any, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Describe a run: timestamp, commit, environment and the config.

    Parameters
    ----------
    config : SolverExperimentConfig or SolverConfig
        Stored through config_to_dict(), so the problem builder and bound
        estimators are recorded by name.
    extra : dict, optional
        Merged in last (e.g. solve time).
    """
    meta = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "git_commit": git_commit(),
        "environment": environment_info(),
        "config": config_to_dict(config),
    }
    meta.update(extra or {})
    return meta


def config_to_dict(config: Any) -> Dict[str, Any]:
    """JSON-compatible view of a config dataclass (or any plain object)."""
    if is_dataclass(config) and not isinstance(config, type):
        items = [(f.name, getattr(config, f.name)) for f in fields(config)]
    else:
        items = list(vars(config).items())
    return {name: _jsonable(value) for name, value in items}


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if is_dataclass(value) and not isinstance(value, type):
        # Bound estimators such as ConstantBound(value=...)
        return {"type": type(value).__name__, **config_to_dict(value)}
    if callable(value) and hasattr(value, "__qualname__"):
        return f"{value.__module__}.{value.__qualname__}"
    # Stateful estimators (MDPUpperBound, ...) are identified by class only
    return type(value).__name__


def history_rows(history: Sequence) -> List[Dict[str, Any]]:
    """One flat dict per IterationRecord."""
    return [asdict(record) for record in history]


def save_experiment_results(
    path: str,
    results: Dict[str, Any],
    metadata: Dict[str, Any],
    history: Optional[Sequence] = None,
) -> None:
    """Write `{"metadata": ..., "results": ...}` to `path`.

    If `history` (solver iteration records) is given, it is also written to
    `<path stem>_history.csv`.
    """
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w") as f:
        json.dump({"metadata": metadata, "results": results}, f, indent=2, default=str)

    if history:
        rows = history_rows(history)
        with open(history_path(path), "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
            writer.writeheader()
            writer.writerows(rows)


def history_path(path: str) -> str:
    stem, _ = os.path.splitext(path)
    return f"{stem}_history.csv"


def load_experiment_results(path: str) -> Dict[str, Any]:
    with open(path) as f:
        return json.load(f)


def load_history(path: str) -> List[Dict[str, float]]:
    """Read the iteration CSV written alongside `path` back as numbers."""
    with open(history_path(path), newline="") as f:
        rows = list(csv.DictReader(f))
    parsed = []
    for row in rows:
        parsed.append({
            "iteration": int(row["iteration"]),
            "upper": float(row["upper"]),
            "lower": float(row["lower"]),
            "gap": float(row["gap"]),
            "tree_size": int(row["tree_size"]),
            "graph_size": int(row["graph_size"]),
            "elapsed": float(row["elapsed"]),
            "timed_out": row["timed_out"] == "True",
        })
    return parsed
