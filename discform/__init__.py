"""discform: Questionnaire progression and scoring engine for DISC assessments."""

__version__ = "0.1.0"

# Import callable protocol - these imports must come after __version__ to avoid circular import
from discform.callable import CallableResult, execute

__all__ = ["__version__", "CallableResult", "execute"]
