"""Diagnostics: rules checklist and whole-game simulation."""

from .checklist import ChecklistIssue, run_checklist
from .simulator import GameSimulator, SimulationResult

__all__ = ["ChecklistIssue", "GameSimulator", "SimulationResult", "run_checklist"]
