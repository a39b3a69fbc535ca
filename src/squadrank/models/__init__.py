"""Shared data models."""

from .evaluation import EvaluationInfo, EvaluationSnapshot, RosterPlayer

__all__ = ["EvaluationInfo", "EvaluationSnapshot", "RosterPlayer"]
