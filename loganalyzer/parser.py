"""Log Analyzer - Batch line parsing

Every non-blank line becomes exactly one ParsedRecord. Lines that only got
fallback extraction are counted as failed_to_parse and, up to a cap, get an
advisory diagnostic explaining what the stricter layouts expected.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from .config import EXCERPT_LENGTH, MAX_DIAGNOSTICS
from .errors import ParserInvariantError
from .extractor import REFERENCE_LAYOUT, extract_fields
from .models import FormatQuality, ParseDiagnostic, ParsedRecord, RawLine
from .patterns import (
    DATE_HINT,
    LEVEL_HINT,
    TIME_HINT,
    TIMESTAMP_HINT,
    UNSUPPORTED_DATE_HINT,
)

logger = logging.getLogger(__name__)

_TIMESTAMP_HINT_RE = re.compile(TIMESTAMP_HINT)
_UNSUPPORTED_DATE_RE = re.compile(UNSUPPORTED_DATE_HINT)
_DATE_HINT_RE = re.compile(DATE_HINT)
_TIME_HINT_RE = re.compile(TIME_HINT)
_LEVEL_HINT_RE = re.compile(LEVEL_HINT, re.IGNORECASE)

EXAMPLE_LINE = '2024-01-15 10:30:45 [ERROR] message'


def diagnose(line: str) -> Tuple[str, str]:
    """(reason, suggested fix) for a line no layout recognized"""
    if not any(c.isalnum() for c in line):
        return ('Invalid content',
                'Line contains only special characters or whitespace')

    if _UNSUPPORTED_DATE_RE.search(line):
        return ('Unsupported date format',
                f'Use YYYY-MM-DD HH:MM:SS dates, e.g. {EXAMPLE_LINE}')

    if _TIMESTAMP_HINT_RE.search(line):
        if _LEVEL_HINT_RE.search(line):
            return ('Level not bracketed',
                    f'Put the level in brackets after the timestamp, e.g. {EXAMPLE_LINE}')
        return ('Unrecognized layout',
                f'Use the TIMESTAMP [LEVEL] message layout, e.g. {EXAMPLE_LINE}')

    has_date = bool(_DATE_HINT_RE.search(line))
    has_time = bool(_TIME_HINT_RE.search(line))
    if has_date and not has_time:
        return ('Missing time',
                'Add a HH:MM:SS time after the date, e.g. 2024-01-15 10:30:45')
    if has_time and not has_date:
        return ('Missing date',
                'Add a YYYY-MM-DD date before the time, e.g. 2024-01-15 10:30:45')

    return ('Missing timestamp',
            'Start the line with a timestamp such as 2024-01-15 10:30:45. '
            'Threats are still detected in this line.')


def excerpt(line: str, length: int = EXCERPT_LENGTH) -> str:
    if len(line) > length:
        return line[:length] + '...'
    return line


@dataclass
class ParseOutcome:
    """Records and statistics accumulated for one batch"""
    records: List[ParsedRecord] = field(default_factory=list)
    diagnostics: List[ParseDiagnostic] = field(default_factory=list)
    format_quality: FormatQuality = field(default_factory=FormatQuality)

    @property
    def total_lines(self) -> int:
        return len(self.records)

    @property
    def successfully_parsed(self) -> int:
        return self.format_quality.perfect_format + self.format_quality.alternative_format

    @property
    def failed_to_parse(self) -> int:
        return self.format_quality.fallback_format


class LogParser:
    """Drives field extraction over the lines of one batch"""

    def __init__(self, max_diagnostics: int = MAX_DIAGNOSTICS,
                 excerpt_length: int = EXCERPT_LENGTH):
        self.max_diagnostics = max_diagnostics
        self.excerpt_length = excerpt_length

    def feed(self, outcome: ParseOutcome, raw: RawLine) -> Optional[ParsedRecord]:
        """Parse one line into outcome; blank lines return None and count nowhere"""
        line = raw.text.rstrip('\r\n')
        if not line.strip():
            return None

        record = extract_fields(line, raw.number)
        if record is None:
            raise ParserInvariantError(raw.number)
        outcome.records.append(record)

        quality = outcome.format_quality
        if record.layout == REFERENCE_LAYOUT:
            quality.perfect_format += 1
        elif record.is_structured:
            quality.alternative_format += 1
        else:
            quality.fallback_format += 1
            if len(outcome.diagnostics) < self.max_diagnostics:
                outcome.diagnostics.append(self.diagnostic_for(raw.number, line.strip()))
        return record

    def diagnostic_for(self, line_number: int, line: str) -> ParseDiagnostic:
        reason, fix = diagnose(line)
        return ParseDiagnostic(
            line_number=line_number,
            raw_excerpt=excerpt(line, self.excerpt_length),
            reason=reason,
            suggested_fix=fix,
        )

    def parse_lines(self, lines: Iterable[str]) -> ParseOutcome:
        outcome = ParseOutcome()
        for number, text in enumerate(lines, 1):
            self.feed(outcome, RawLine(number, text))
        logger.debug("Parsed %d lines (%d structured, %d fallback)",
                     outcome.total_lines, outcome.successfully_parsed,
                     outcome.failed_to_parse)
        return outcome

    def parse_text(self, text: str) -> ParseOutcome:
        return self.parse_lines(text.splitlines())
