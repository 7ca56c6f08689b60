"""
Pydantic models for declaratively described sequence chains.

A ChainRequest is a list of ChainStep entries, each one mirroring a single
chain method on lazy.Sequence. utils.process_lazy_operations builds and
drains the chain and answers with a ChainResult.
"""

import time
from enum import Enum
from typing import Any, Callable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class StepType(str, Enum):
    """Chain step enumeration"""
    FILTER = "filter"
    MAP = "map"
    FLAT_MAP = "flat_map"
    DISTINCT = "distinct"
    TAKE = "take"
    SKIP = "skip"
    CONCAT = "concat"
    WITHOUT = "without"
    OF_CLASS = "of_class"
    SORT = "sort"
    SORT_BY = "sort_by"
    SORT_BY_DESCENDING = "sort_by_descending"


FUNCTION_STEPS = {
    StepType.FILTER,
    StepType.MAP,
    StepType.FLAT_MAP,
    StepType.SORT_BY,
    StepType.SORT_BY_DESCENDING,
}
COUNT_STEPS = {StepType.TAKE, StepType.SKIP}
OTHER_STEPS = {StepType.CONCAT, StepType.WITHOUT}


class ChainStep(BaseModel):
    """One chain method call"""
    model_config = ConfigDict(extra="forbid")

    type: StepType = Field(
        ...,
        description="Chain method to apply"
    )
    function: Optional[Callable[..., Any]] = Field(
        None,
        description="Predicate, mapper, key function or comparator for the step"
    )
    count: Optional[int] = Field(
        None,
        ge=0,
        description="Element count for take/skip"
    )
    other: Optional[Any] = Field(
        None,
        description="Second sequence or iterable for concat/without"
    )
    target: Optional[Any] = Field(
        None,
        description="Class to keep for of_class"
    )
    descending: bool = Field(
        False,
        description="Reverse the order of sort and sort_by steps"
    )

    @field_validator('target')
    @classmethod
    def validate_target(cls, v):
        """Validate of_class target is a class"""
        if v is not None and not isinstance(v, type):
            raise ValueError(f"target must be a class, got {type(v).__name__}")
        return v

    @model_validator(mode='after')
    def validate_step_params(self):
        """Enforce the parameters each step type needs."""
        if self.type in FUNCTION_STEPS and self.function is None:
            raise ValueError(f"{self.type.value} step requires a function")
        if self.type in COUNT_STEPS and self.count is None:
            raise ValueError(f"{self.type.value} step requires a count")
        if self.type in OTHER_STEPS and self.other is None:
            raise ValueError(f"{self.type.value} step requires another sequence")
        if self.type == StepType.OF_CLASS and self.target is None:
            raise ValueError("of_class step requires a target class")
        if self.descending and self.type not in (StepType.SORT, StepType.SORT_BY):
            raise ValueError(f"{self.type.value} step does not support descending")
        return self


class ChainRequest(BaseModel):
    """A full chain to apply to a source"""
    model_config = ConfigDict(extra="forbid")

    steps: List[ChainStep] = Field(
        default_factory=list,
        description="Steps applied in order"
    )
    max_results: Optional[int] = Field(
        None,
        ge=0,
        description="Upper bound on drained elements, applied as a final take"
    )
    track_memory: bool = Field(
        True,
        description="Whether to trace peak memory while draining"
    )


class PerformanceReport(BaseModel):
    """Timing and memory figures for one measured operation"""
    operation: str
    execution_time_ms: float = 0.0
    memory_usage_mb: float = 0.0
    success: bool = True
    result_size: Optional[int] = None
    error: Optional[str] = None
    timestamp: float = Field(default_factory=time.time)


class ChainResult(BaseModel):
    """Drained chain output"""
    result: List[Any] = Field(default_factory=list)
    operations_applied: List[str] = Field(default_factory=list)
    performance: PerformanceReport
