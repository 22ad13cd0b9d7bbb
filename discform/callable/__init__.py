"""Callable protocol for discform."""

from discform.callable.execute import execute
from discform.callable.result import SCHEMA_VERSION, CallableResult, ExecuteStats

__all__ = ["SCHEMA_VERSION", "CallableResult", "ExecuteStats", "execute"]
