"""Team leaderboards and evaluation-cycle comparisons for youth athlete check-ins."""

__version__ = "0.1.0"
