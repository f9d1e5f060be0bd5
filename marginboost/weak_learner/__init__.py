"""Weak learners producing one hypothesis per boosting round."""

from .stump import DecisionStump, StumpClassifier

__all__ = ["DecisionStump", "StumpClassifier"]
