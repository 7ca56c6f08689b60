"""
Utility functions for lazy sequences

Helpers for building sequence chains from declarative step lists and for
measuring how long draining them takes and how much memory it needs.
"""

import gc
import logging
import time
import tracemalloc
from typing import Any, Callable, Dict, Iterable, List, Tuple, Union

from lazy import Sequence
from models import ChainRequest, ChainResult, ChainStep, PerformanceReport, StepType

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# Global performance tracking
_performance_metrics: Dict[str, Any] = {
    "operations": [],
    "total_time_ms": 0.0,
    "total_memory_mb": 0.0,
    "operation_count": 0
}


def _record(report: PerformanceReport) -> None:
    _performance_metrics["operations"].append(report)
    _performance_metrics["total_time_ms"] += report.execution_time_ms
    _performance_metrics["total_memory_mb"] += report.memory_usage_mb
    _performance_metrics["operation_count"] += 1


def measure_performance(operation_name: str, func: Callable, *args,
                        track_memory: bool = True, **kwargs) -> Tuple[Any, PerformanceReport]:
    """Call func, timing it and tracing peak memory. Failures are recorded, then re-raised."""

    # Leave an outer trace session alone
    owns_trace = track_memory and not tracemalloc.is_tracing()
    if owns_trace:
        tracemalloc.start()
        gc.collect()

    start_time = time.perf_counter()
    report = PerformanceReport(operation=operation_name)

    try:
        result = func(*args, **kwargs)
        report.result_size = len(result) if hasattr(result, "__len__") else None
        return result, report

    except Exception as e:
        report.success = False
        report.error = str(e)
        logger.error(f"Operation {operation_name} failed: {e}")
        raise

    finally:
        report.execution_time_ms = (time.perf_counter() - start_time) * 1000
        if track_memory and tracemalloc.is_tracing():
            _, peak = tracemalloc.get_traced_memory()
            report.memory_usage_mb = peak / 1024 / 1024
        if owns_trace:
            tracemalloc.stop()
        _record(report)


def get_performance_summary() -> Dict[str, Any]:
    """Get summary of all performance metrics"""
    count = _performance_metrics["operation_count"]
    if count == 0:
        return {
            "total_operations": 0,
            "failed_operations": 0,
            "total_time_ms": 0.0,
            "total_memory_mb": 0.0,
            "avg_time_ms": 0.0,
            "avg_memory_mb": 0.0
        }

    return {
        "total_operations": count,
        "failed_operations": sum(1 for r in _performance_metrics["operations"] if not r.success),
        "total_time_ms": _performance_metrics["total_time_ms"],
        "total_memory_mb": _performance_metrics["total_memory_mb"],
        "avg_time_ms": _performance_metrics["total_time_ms"] / count,
        "avg_memory_mb": _performance_metrics["total_memory_mb"] / count
    }


def clear_performance_metrics():
    """Clear all performance metrics"""
    global _performance_metrics
    _performance_metrics = {
        "operations": [],
        "total_time_ms": 0.0,
        "total_memory_mb": 0.0,
        "operation_count": 0
    }


def is_lazy(obj: Any) -> bool:
    """True for a Sequence, which never holds evaluated results."""
    return isinstance(obj, Sequence)


def apply_step(sequence: Sequence, step: ChainStep) -> Sequence:
    """Apply a single validated step to a sequence."""
    kind = step.type

    if kind == StepType.FILTER:
        return sequence.filter(step.function)
    elif kind == StepType.MAP:
        return sequence.map(step.function)
    elif kind == StepType.FLAT_MAP:
        return sequence.flat_map(step.function)
    elif kind == StepType.DISTINCT:
        return sequence.distinct()
    elif kind == StepType.TAKE:
        return sequence.take(step.count)
    elif kind == StepType.SKIP:
        return sequence.skip(step.count)
    elif kind == StepType.CONCAT:
        return sequence.concat(step.other)
    elif kind == StepType.WITHOUT:
        return sequence.without(step.other)
    elif kind == StepType.OF_CLASS:
        return sequence.of_class(step.target)
    elif kind == StepType.SORT:
        if step.descending:
            comparator = step.function
            if comparator is None:
                return sequence.sort_by_descending(lambda element: element)
            return sequence.sort(lambda left, right: comparator(right, left))
        return sequence.sort(step.function)
    elif kind == StepType.SORT_BY:
        if step.descending:
            return sequence.sort_by_descending(step.function)
        return sequence.sort_by(step.function)
    elif kind == StepType.SORT_BY_DESCENDING:
        return sequence.sort_by_descending(step.function)

    raise ValueError(f"Unknown step: {kind}")


def build_chain(source: Iterable[Any], steps: List[Union[ChainStep, Dict[str, Any]]]) -> Sequence:
    """Build (but do not evaluate) a chain from a source and a list of steps."""
    request = ChainRequest(steps=steps)
    sequence = source if isinstance(source, Sequence) else Sequence.create(source)
    for step in request.steps:
        sequence = apply_step(sequence, step)
    return sequence


def process_lazy_operations(source_data: Iterable[Any],
                            request: Union[ChainRequest, List[Any]]) -> ChainResult:
    """Build the requested chain over source_data, drain it and report on it."""

    if not isinstance(request, ChainRequest):
        request = ChainRequest(steps=request)

    sequence = build_chain(source_data, request.steps)
    if request.max_results is not None:
        sequence = sequence.take(request.max_results)

    operations_applied = [step.type.value for step in request.steps]
    logger.info(f"Draining chain: {' -> '.join(operations_applied) or '(no steps)'}")

    result, report = measure_performance(
        "lazy_chain", sequence.to_list, track_memory=request.track_memory
    )
    logger.info(
        f"Chain produced {len(result)} elements in {report.execution_time_ms:.2f}ms"
    )

    return ChainResult(
        result=result,
        operations_applied=operations_applied,
        performance=report
    )
