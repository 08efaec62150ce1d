"""
pullsafe Core Module

Value types, ABI codec, contract readers, the authorization evaluator, and
the configuration, logging and metrics they run with.
"""

__all__ = []
