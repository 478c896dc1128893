"""Log Analyzer - Core analysis engine"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Tuple

from rich.progress import Progress, SpinnerColumn, TextColumn

from .config import DEFAULT_RISK_LEVEL, IP_RISK_THRESHOLD, MAX_DIAGNOSTICS, RISK_LEVELS
from .cvss import aggregate_score, findings_from_counts
from .detector import ThreatDetector
from .ip_analysis import IpFrequencyAnalyzer
from .models import BatchResult, RawLine
from .parser import LogParser, ParseOutcome

logger = logging.getLogger(__name__)


def risk_level(total_threats: int) -> Tuple[str, str]:
    for above, level, description in RISK_LEVELS:
        if total_threats > above:
            return level, description
    return DEFAULT_RISK_LEVEL


@dataclass
class BatchContext:
    """Mutable state for one analysis call; discarded once the result is built"""
    parsing: ParseOutcome = field(default_factory=ParseOutcome)
    threat_counts: Counter = field(default_factory=Counter)
    ip_counts: Counter = field(default_factory=Counter)


class LogAnalyzer:
    """Main log analyzer class"""

    def __init__(self, ip_threshold: int = IP_RISK_THRESHOLD,
                 max_diagnostics: int = MAX_DIAGNOSTICS, console=None):
        self.console = console
        self.parser = LogParser(max_diagnostics=max_diagnostics)
        self.detector = ThreatDetector()
        self.ip_analyzer = IpFrequencyAnalyzer(threshold=ip_threshold)

    def analyze_file(self, filepath: str) -> BatchResult:
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Log file not found: {filepath}")

        with open(path, 'r', encoding='utf-8', errors='ignore') as f:
            text = f.read()

        logger.info("Analyzing %s", path)
        return self.analyze_text(text)

    def analyze_text(self, text: str) -> BatchResult:
        return self.analyze_lines(text.splitlines())

    def analyze_lines(self, lines: Iterable[str]) -> BatchResult:
        lines = list(lines)
        context = BatchContext()

        if self.console is not None:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=self.console
            ) as progress:
                task = progress.add_task("Analyzing logs...", total=len(lines))

                for i, line in enumerate(lines, 1):
                    self._process_line(context, RawLine(i, line))
                    progress.update(task, advance=1)
        else:
            for i, line in enumerate(lines, 1):
                self._process_line(context, RawLine(i, line))

        return self.generate_result(context)

    def _process_line(self, context: BatchContext, raw: RawLine):
        record = self.parser.feed(context.parsing, raw)
        if record is None:
            return

        threat_type = self.detector.detect(record)
        if threat_type is not None:
            context.threat_counts[threat_type] += 1
        if record.source_ip:
            context.ip_counts[record.source_ip] += 1

    def generate_result(self, context: BatchContext) -> BatchResult:
        parsing = context.parsing
        findings = findings_from_counts(context.threat_counts)
        aggregate = aggregate_score(context.threat_counts)
        level, description = risk_level(sum(context.threat_counts.values()))

        logger.info(
            "Analyzed %d lines: %d threats, %d addresses, CVSS %.1f (%s)",
            parsing.total_lines, aggregate.total_count, len(context.ip_counts),
            aggregate.base_score, aggregate.severity.value,
        )

        return BatchResult(
            records=parsing.records,
            total_lines=parsing.total_lines,
            successfully_parsed=parsing.successfully_parsed,
            failed_to_parse=parsing.failed_to_parse,
            diagnostics=parsing.diagnostics,
            format_quality=parsing.format_quality,
            findings=findings,
            ip_infos=self.ip_analyzer.summarize(context.ip_counts),
            aggregate=aggregate,
            risk_level=level,
            risk_description=description,
            threat_counts=dict(context.threat_counts),
        )
