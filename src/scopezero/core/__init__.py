"""
Core package façade.

Submodules:
  - utils: numeric coercion and half-up rounding
  - models: input/output records (frozen dataclasses)
  - jobs: job-mix expansion
  - activities: activity records from parameters and job mix
  - factors: emission factor join
  - summary: totals and scope split
  - scope2: multi-method electricity estimate
  - confidence: Scope 2 confidence score
  - runner: end-to-end entry points for both pipelines
  - io: YAML dataset loaders
"""

from . import utils, models, jobs, activities, factors, summary  # activity-based model
from . import scope2, confidence, runner, io

__all__ = [
    "utils",
    "models",
    "jobs",
    "activities",
    "factors",
    "summary",
    "scope2",
    "confidence",
    "runner",
    "io",
]
