#!/usr/bin/env python3

"""Utility helpers for the operon finder pipeline."""

from .performance_monitor import PerformanceMonitor, StageMetrics

__all__ = ['PerformanceMonitor', 'StageMetrics']
