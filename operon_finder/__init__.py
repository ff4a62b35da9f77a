#!/usr/bin/env python3

"""
Operon Finder

Infers candidate operons from assembled transcripts: long, weakly expressed
container transcripts that span several shorter, more strongly expressed
transcripts on the same strand.

Modules:
- core: Data structures, exceptions, configuration and the processing stages
- utils: Performance monitoring
- tests: Unit test suite
"""

__version__ = "1.0.0"
__author__ = "Operon Finder Team"

# Import main components for easy access
from .core.data_structures import (
    AnnotationRecord, Transcript, ContainmentCandidate, OperonCluster,
    OperonMembership, OperonSummary, OperonResult
)
from .core.exceptions import (
    PipelineError, ParseError, ConfigurationError, InvariantError, MemoryError
)
from .core.config import PipelineConfig, load_config
from .core.index import TranscriptIndex
from .core.pipeline import OperonFinderPipeline

__all__ = [
    # Main pipeline
    'OperonFinderPipeline', 'TranscriptIndex',
    # Data structures
    'AnnotationRecord', 'Transcript', 'ContainmentCandidate', 'OperonCluster',
    'OperonMembership', 'OperonSummary', 'OperonResult',
    # Exceptions
    'PipelineError', 'ParseError', 'ConfigurationError', 'InvariantError', 'MemoryError',
    # Configuration
    'PipelineConfig', 'load_config'
]
