#!/usr/bin/env python3

"""
Performance monitoring for the operon finder pipeline.

Tracks wall-clock time, operation counts and resident memory per pipeline
stage, and enforces a memory ceiling.
"""

import time
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional

import psutil

from ..core.exceptions import MemoryError as PipelineMemoryError


@dataclass
class StageMetrics:
    """Container for the metrics of one pipeline stage."""
    start_time: float
    end_time: Optional[float] = None
    peak_memory_mb: float = 0.0
    current_memory_mb: float = 0.0
    operations_count: int = 0
    stage_name: str = ""

    @property
    def elapsed_time(self) -> float:
        """Get elapsed time in seconds."""
        if self.end_time is None:
            return time.time() - self.start_time
        return self.end_time - self.start_time

    @property
    def operations_per_second(self) -> float:
        elapsed = self.elapsed_time
        if elapsed > 0 and self.operations_count > 0:
            return self.operations_count / elapsed
        return 0.0


class PerformanceMonitor:
    """Stage timing and memory monitoring backed by psutil."""

    def __init__(self, memory_limit_mb: int = 4096, enabled: bool = True):
        self.memory_limit_mb = memory_limit_mb
        self.enabled = enabled
        self.start_time = time.time()
        self.stage_metrics: Dict[str, StageMetrics] = {}
        self.current_stage: Optional[str] = None
        self.process = psutil.Process()

    def get_memory_usage(self) -> float:
        """Get current resident memory in MB."""
        memory_mb = self.process.memory_info().rss / 1024 / 1024

        if self.current_stage:
            metrics = self.stage_metrics[self.current_stage]
            metrics.current_memory_mb = memory_mb
            metrics.peak_memory_mb = max(metrics.peak_memory_mb, memory_mb)

        return memory_mb

    def check_memory_limit(self) -> bool:
        """Raise if memory usage exceeds the configured limit."""
        if not self.enabled:
            return True

        current_memory = self.get_memory_usage()
        if current_memory > self.memory_limit_mb:
            error_msg = "Memory usage exceeded limit"
            logging.warning(f"{error_msg}: {current_memory:.1f}MB > {self.memory_limit_mb}MB")
            raise PipelineMemoryError(error_msg, current_memory, self.memory_limit_mb)

        return True

    def start_stage(self, stage_name: str) -> None:
        if self.current_stage:
            self.end_stage()

        self.current_stage = stage_name
        self.stage_metrics[stage_name] = StageMetrics(start_time=time.time(), stage_name=stage_name)
        self.get_memory_usage()

        logging.debug(f"Started stage: {stage_name}")

    def end_stage(self) -> Optional[StageMetrics]:
        if not self.current_stage:
            return None

        metrics = self.stage_metrics[self.current_stage]
        self.get_memory_usage()
        metrics.end_time = time.time()

        logging.info(f"Completed stage {self.current_stage} in {metrics.elapsed_time:.2f}s "
                     f"(peak memory: {metrics.peak_memory_mb:.1f}MB)")

        self.current_stage = None
        return metrics

    def record_operations(self, count: int) -> None:
        if self.current_stage:
            self.stage_metrics[self.current_stage].operations_count += count

    @contextmanager
    def stage_context(self, stage_name: str) -> Iterator[StageMetrics]:
        """Context manager for monitoring a stage."""
        self.start_stage(stage_name)
        try:
            yield self.stage_metrics[stage_name]
        finally:
            self.end_stage()

    def get_total_elapsed_time(self) -> float:
        return time.time() - self.start_time

    def get_peak_memory(self) -> float:
        if not self.stage_metrics:
            return self.get_memory_usage()
        return max(metrics.peak_memory_mb for metrics in self.stage_metrics.values())

    def get_performance_summary(self) -> Dict[str, Any]:
        summary = {
            "total_elapsed_time": self.get_total_elapsed_time(),
            "peak_memory_mb": self.get_peak_memory(),
            "memory_limit_mb": self.memory_limit_mb,
            "stages": {}
        }

        for stage_name, metrics in self.stage_metrics.items():
            summary["stages"][stage_name] = {
                "elapsed_time": metrics.elapsed_time,
                "operations_count": metrics.operations_count,
                "operations_per_second": metrics.operations_per_second,
                "peak_memory_mb": metrics.peak_memory_mb
            }

        return summary

    def log_performance_report(self) -> None:
        summary = self.get_performance_summary()

        logging.info("=" * 50)
        logging.info("PERFORMANCE REPORT")
        logging.info("=" * 50)
        logging.info(f"Total time: {summary['total_elapsed_time']:.2f} seconds")
        logging.info(f"Peak memory: {summary['peak_memory_mb']:.1f} MB "
                     f"(limit {summary['memory_limit_mb']} MB)")

        for stage_name, stage in summary['stages'].items():
            logging.info(f"  {stage_name}: {stage['elapsed_time']:.2f}s "
                         f"({stage['operations_count']} ops, "
                         f"{stage['operations_per_second']:.1f} ops/s, "
                         f"{stage['peak_memory_mb']:.1f}MB)")
