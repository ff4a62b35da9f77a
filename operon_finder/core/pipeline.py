#!/usr/bin/env python3

"""
Main pipeline class for operon detection.

Integrates all processing stages with the modular architecture.
"""

import logging
from pathlib import Path
from typing import List, Optional

from .config import PipelineConfig
from .data_structures import OperonResult
from .exceptions import PipelineError
from .index import TranscriptIndex
from ..utils.performance_monitor import PerformanceMonitor

# Import processing classes
from .parsers import GtfParser
from .processors import ContainmentClassifier, OperonCandidateBuilder
from .clustering import OperonClusterer, OperonRefiner
from .reporting import SummaryReporter
from .generators import OutputGenerator


def default_output_prefix(gtf_file: str) -> str:
    """Output prefix used when none is given: the input file name without extension."""
    return Path(gtf_file).stem


class OperonFinderPipeline:
    """Main pipeline class that coordinates all processing stages."""

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config or PipelineConfig()
        self.monitor = PerformanceMonitor(memory_limit_mb=self.config.memory_limit_mb,
                                          enabled=self.config.enable_memory_monitoring)
        self.index: Optional[TranscriptIndex] = None
        self.result: Optional[OperonResult] = None
        self.output_files: List[str] = []

        self.classifier = ContainmentClassifier(threshold=self.config.threshold)
        self.builder = OperonCandidateBuilder(self.classifier)
        self.clusterer = OperonClusterer()
        self.refiner = OperonRefiner()
        self.reporter = SummaryReporter()

    def run(self, gtf_file: str, output_prefix: Optional[str] = None,
            log_file: Optional[str] = None) -> bool:
        """
        Run the complete operon detection pipeline.

        Args:
            gtf_file: Path to the assembled transcript GTF file
            output_prefix: Prefix for every output file (default: input file stem)
            log_file: Path of the run log (default: <prefix>_operon_finder.log)

        Returns:
            True if pipeline completed successfully
        """
        output_prefix = output_prefix or default_output_prefix(gtf_file)
        log_file = log_file or f"{output_prefix}_operon_finder.log"
        file_handler = None
        root_logger = logging.getLogger()
        previous_level = root_logger.level

        try:
            file_handler = self._setup_pipeline_logging(log_file)

            logging.info("Starting Operon Finder Pipeline")
            logging.info(f"Configuration: {self.config}")
            logging.info(f"Input file: {gtf_file}")
            logging.info(f"Output prefix: {output_prefix}")

            self.index = self.load_index(gtf_file)
            self.result = self.find_operons(self.index)
            self._generate_outputs(output_prefix)

            logging.info("Pipeline completed successfully")
            self.monitor.log_performance_report()
            return True

        except Exception as e:
            logging.error(f"Pipeline failed: {e}")
            logging.debug("Full traceback:", exc_info=True)
            return False

        finally:
            root_logger.setLevel(previous_level)
            if file_handler is not None:
                root_logger.removeHandler(file_handler)
                file_handler.close()

    def _setup_pipeline_logging(self, log_file: str) -> logging.Handler:
        """Attach a run-specific file handler to the root logger."""
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))

        file_handler.setLevel(logging.DEBUG if self.config.debug_mode else logging.INFO)

        root_logger = logging.getLogger()
        root_logger.addHandler(file_handler)

        # Records below the root level never reach any handler
        if root_logger.getEffectiveLevel() > file_handler.level:
            root_logger.setLevel(file_handler.level)

        return file_handler

    def load_index(self, gtf_file: str) -> TranscriptIndex:
        """Parse the input file and build the transcript index."""
        with self.monitor.stage_context("input_parsing") as metrics:
            parser = GtfParser(gtf_file)
            index = TranscriptIndex.from_records(parser.iter_records())
            metrics.operations_count = sum(parser.feature_counts.values())
            return index

    def find_operons(self, index: TranscriptIndex) -> OperonResult:
        """Run the classification, clustering, refinement and summary stages."""
        result = OperonResult()

        with self.monitor.stage_context("candidate_building"):
            for chrom, transcripts in index.items():
                result.candidates.extend(self.builder.build_for_chromosome(chrom, transcripts))
                self.monitor.record_operations(len(transcripts))
                self.monitor.check_memory_limit()

        with self.monitor.stage_context("operon_clustering") as metrics:
            result.clusters = self.clusterer.cluster(result.candidates)
            metrics.operations_count = len(result.candidates)

        with self.monitor.stage_context("operon_refinement") as metrics:
            result.memberships = self.refiner.refine(result.clusters)
            metrics.operations_count = len(result.clusters)

        result.summary = self.reporter.summarize(result.memberships,
                                                 self.clusterer.putative_operons)
        self.reporter.log_summary(result.summary)
        return result

    def _generate_outputs(self, output_prefix: str) -> None:
        if self.result is None or self.index is None:
            raise PipelineError("No results to write; run find_operons first")

        generator = OutputGenerator(
            output_prefix,
            self.config.threshold,
            write_annotation_files=self.config.write_annotation_files,
            generate_reports=False,
        )
        with self.monitor.stage_context("output_generation") as metrics:
            self.output_files = generator.generate_outputs(self.index, self.result)
            metrics.operations_count = len(self.output_files)

        # Report after the output stage has closed
        if self.config.generate_reports:
            self.output_files.append(generator.write_report(
                self.index,
                self.result,
                config=self.config.to_dict(),
                performance=self.monitor.get_performance_summary(),
            ))

        for file_path in self.output_files:
            logging.info(f"Created: {file_path}")
