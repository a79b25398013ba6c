"""
deeptrace Tracing - recording listeners for traced graphs.
"""

from deeptrace.tracing.recorder import MutationRecorder

__all__ = ["MutationRecorder"]
