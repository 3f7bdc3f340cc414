"""Run coordination: resolve targets, extract each one, render and report."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import sys
from typing import Sequence, TextIO

from rika.formatters import OutputFormat
from rika.ingestion.assembler import assemble_result
from rika.ingestion.extractor import DocumentExtractor, ExtractionFailure, input_type_of
from rika.ingestion.issues import IssueCategory, IssueLog
from rika.ingestion.language_detection import TextLanguageDetector
from rika.ingestion.models import ExtractionResult
from rika.ingestion.targets import resolve_targets

logger = logging.getLogger(__name__)

NO_TARGETS_MESSAGE = "No valid targets specified. Run with '-h' option for help."


@dataclass(frozen=True, slots=True)
class RunOptions:
    """Output and extraction choices fixed before any target is processed."""

    metadata_format: OutputFormat = OutputFormat.AWESOME_PRINT
    text_format: OutputFormat = OutputFormat.TO_S
    metadata: bool = True
    text: bool = True
    source: bool = True
    key_sort: bool = True
    as_array: bool = False
    max_content_length: int = -1

    @property
    def composite_records(self) -> bool:
        return (
            self.metadata
            and self.text
            and self.metadata_format is self.text_format
            and self.metadata_format.renders_records
        )


@dataclass(slots=True)
class RunReport:
    """Per-invocation state: resolved targets, successful results and issues."""

    targets: list[str] = field(default_factory=list)
    results: list[ExtractionResult] = field(default_factory=list)
    issues: IssueLog = field(default_factory=IssueLog)

    @property
    def exit_code(self) -> int:
        return 1 if self.issues else 0


def format_issue_report(issues: IssueLog) -> str:
    lines = ["Issues:"]
    for category, targets in issues.items():
        lines.append(f"  {category.value} ({len(targets)}):")
        lines.extend(f"    {target}" for target in targets)
    return "\n".join(lines)


class ExtractionRunner:
    """Drive one run over a list of raw target arguments."""

    def __init__(
        self,
        options: RunOptions,
        *,
        extractor: DocumentExtractor,
        detector: TextLanguageDetector,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        self._options = options
        self._extractor = extractor
        self._detector = detector
        self._out = out or sys.stdout
        self._err = err or sys.stderr

    @property
    def options(self) -> RunOptions:
        return self._options

    def run(self, args: Sequence[str]) -> RunReport:
        resolution = resolve_targets(args)
        report = RunReport(targets=list(resolution.targets))
        report.issues.merge(resolution.issues)

        if not report.targets:
            if report.issues:
                print(format_issue_report(report.issues), file=self._err)
            print(NO_TARGETS_MESSAGE, file=self._err)
            return report

        if self._options.as_array:
            for target in report.targets:
                self._process(target, report)
            self._emit(self.render_array(report.results))
        else:
            for target in report.targets:
                result = self._process(target, report)
                if result is not None:
                    self._emit(self.render_document(result))

        if report.issues:
            print(format_issue_report(report.issues), file=self._err)
        logger.info(
            "Processed %d target(s): %d succeeded, %d issue(s)",
            len(report.targets),
            len(report.results),
            report.issues.total,
        )
        return report

    def extract_result(self, target: str) -> ExtractionResult | ExtractionFailure:
        """Extract and assemble a single resolved target."""

        outcome = self._extractor.extract(target, self._options.max_content_length)
        if isinstance(outcome, ExtractionFailure):
            return outcome

        input_type = input_type_of(target)
        if input_type is None:
            return ExtractionFailure(target, IssueCategory.INVALID_INPUT, "Target type changed during extraction")
        return assemble_result(
            target,
            input_type,
            outcome,
            self._options.max_content_length,
            detector=self._detector,
            key_sort=self._options.key_sort,
        )

    def record(self, result: ExtractionResult) -> dict[str, object]:
        """Selected pieces of *result* as a plain mapping for serialization."""

        record: dict[str, object] = {}
        if self._options.source:
            record["source"] = result.data_source
        if self._options.metadata:
            record["metadata"] = result.metadata
        if self._options.text:
            record["text"] = result.content
        return record

    def render_document(self, result: ExtractionResult) -> str:
        options = self._options
        if options.composite_records:
            return options.metadata_format.render(self.record(result))

        parts: list[str] = []
        if options.source:
            parts.append(f"Source: {result.data_source}")
        if options.metadata:
            parts.append(options.metadata_format.render(result.metadata))
        if options.text:
            parts.append(options.text_format.render(result.content))
        return "\n".join(parts)

    def render_array(self, results: Sequence[ExtractionResult]) -> str:
        # One serializer must cover the whole array, so the metadata format wins.
        return self._options.metadata_format.render([self.record(result) for result in results])

    def _process(self, target: str, report: RunReport) -> ExtractionResult | None:
        result = self.extract_result(target)
        if isinstance(result, ExtractionFailure):
            report.issues.add(result.category, target)
            return None
        report.results.append(result)
        return result

    def _emit(self, text: str) -> None:
        print(text, file=self._out)
