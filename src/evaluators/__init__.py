"""Per-play pp evaluators"""

from src.evaluators.reported import ReportedPPEvaluator
from src.evaluators.loader import load_evaluator, EvaluatorLoadError

__all__ = ['ReportedPPEvaluator', 'load_evaluator', 'EvaluatorLoadError']
