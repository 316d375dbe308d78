"""Resolve score evaluators from 'module:attribute' references"""
import importlib
import logging
from typing import Union

from src.base import BaseScoreEvaluator

logger = logging.getLogger(__name__)


class EvaluatorLoadError(ImportError):
    """An evaluator reference cannot be resolved"""


def load_evaluator(reference: Union[str, BaseScoreEvaluator]) -> BaseScoreEvaluator:
    """
    Load an evaluator from 'package.module:Name'.

    ``Name`` may be a BaseScoreEvaluator subclass (instantiated without
    arguments) or an instance.

    Example:
        >>> load_evaluator("src.evaluators:ReportedPPEvaluator")
    """
    if isinstance(reference, BaseScoreEvaluator):
        return reference

    module_name, sep, attr = str(reference).partition(":")
    if not sep or not module_name or not attr:
        raise EvaluatorLoadError(f"Evaluator must look like 'module:Name', got {reference!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise EvaluatorLoadError(f"Cannot import evaluator module {module_name!r}: {e}") from e

    try:
        target = getattr(module, attr)
    except AttributeError as e:
        raise EvaluatorLoadError(f"{module_name!r} has no attribute {attr!r}") from e

    if isinstance(target, type) and issubclass(target, BaseScoreEvaluator):
        target = target()

    if not isinstance(target, BaseScoreEvaluator):
        raise EvaluatorLoadError(f"{reference!r} is not a BaseScoreEvaluator")

    logger.debug(f"Loaded evaluator {type(target).__name__} from {reference}")
    return target
