"""Log Analyzer package"""

from .patterns import VERSION, THREAT_PATTERNS, LOG_PATTERNS
from .models import (
    AggregateScore,
    BatchResult,
    CvssScore,
    IpInfo,
    ParseDiagnostic,
    ParsedRecord,
    Severity,
    ThreatFinding,
    ThreatType,
)
from .errors import CvssTableError, LogAnalyzerError, ParserInvariantError
from .extractor import extract_fields
from .parser import LogParser
from .detector import ThreatDetector
from .cvss import CVSS_TABLE, aggregate_score, score_for
from .ip_analysis import IpFrequencyAnalyzer
from .analyzer import LogAnalyzer
from .output import print_report

__all__ = [
    'VERSION', 'LogAnalyzer', 'LogParser', 'ThreatDetector', 'IpFrequencyAnalyzer',
    'ParsedRecord', 'ParseDiagnostic', 'ThreatType', 'ThreatFinding', 'Severity',
    'CvssScore', 'AggregateScore', 'IpInfo', 'BatchResult', 'CVSS_TABLE',
    'aggregate_score', 'score_for', 'extract_fields', 'print_report',
    'LogAnalyzerError', 'CvssTableError', 'ParserInvariantError',
]
