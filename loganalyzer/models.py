"""Log Analyzer - Data models"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class Severity(Enum):
    """CVSS 3.1 qualitative severity rating"""
    NONE = 'None'
    LOW = 'Low'
    MEDIUM = 'Medium'
    HIGH = 'High'
    CRITICAL = 'Critical'

    @classmethod
    def from_score(cls, score: float) -> 'Severity':
        if score <= 0.0:
            return cls.NONE
        if score < 4.0:
            return cls.LOW
        if score < 7.0:
            return cls.MEDIUM
        if score < 9.0:
            return cls.HIGH
        return cls.CRITICAL


class ThreatType(Enum):
    """Closed catalogue of recognised attack patterns"""
    SQL_INJECTION = 'sql_injection'
    COMMAND_INJECTION = 'command_injection'
    MALWARE = 'malware'
    ROOT_ACCESS = 'root_access'
    CRITICAL_ALERT = 'critical_alert'
    PATH_TRAVERSAL = 'path_traversal'
    SUSPICIOUS_FILE_ACCESS = 'suspicious_file_access'
    XSS = 'xss'
    FAILED_LOGIN = 'failed_login'
    PORT_SCANNING = 'port_scanning'

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def stat_key(self) -> str:
        """Key of this type's counter in the threat_statistics block"""
        return _STAT_KEYS[self]

    @classmethod
    def from_name(cls, name: str) -> Optional['ThreatType']:
        """Resolve 'sql_injection', 'SQL Injection', 'xss', ... to a member"""
        return _NAME_LOOKUP.get(_normalize_name(name))


_DISPLAY_NAMES = {
    ThreatType.SQL_INJECTION: 'SQL Injection',
    ThreatType.COMMAND_INJECTION: 'Command Injection',
    ThreatType.MALWARE: 'Malware',
    ThreatType.ROOT_ACCESS: 'Root Access Attempt',
    ThreatType.CRITICAL_ALERT: 'Critical Alert',
    ThreatType.PATH_TRAVERSAL: 'Path Traversal',
    ThreatType.SUSPICIOUS_FILE_ACCESS: 'Suspicious File Access',
    ThreatType.XSS: 'Cross-Site Scripting',
    ThreatType.FAILED_LOGIN: 'Failed Login',
    ThreatType.PORT_SCANNING: 'Port Scanning',
}

_STAT_KEYS = {
    ThreatType.SQL_INJECTION: 'sql_injection_attempts',
    ThreatType.COMMAND_INJECTION: 'command_injection_attempts',
    ThreatType.MALWARE: 'malware_detections',
    ThreatType.ROOT_ACCESS: 'root_attempts',
    ThreatType.CRITICAL_ALERT: 'critical_alerts',
    ThreatType.PATH_TRAVERSAL: 'path_traversal_attempts',
    ThreatType.SUSPICIOUS_FILE_ACCESS: 'suspicious_file_access',
    ThreatType.XSS: 'xss_attempts',
    ThreatType.FAILED_LOGIN: 'failed_logins',
    ThreatType.PORT_SCANNING: 'port_scanning_attempts',
}


def _normalize_name(name: str) -> str:
    return '_'.join(name.strip().lower().replace('-', ' ').split())


_NAME_LOOKUP = {member.value: member for member in ThreatType}
_NAME_LOOKUP.update(
    {_normalize_name(member.display_name): member for member in ThreatType}
)


@dataclass(frozen=True)
class RawLine:
    """One input line and its 1-based position"""
    number: int
    text: str


@dataclass(frozen=True)
class ParsedRecord:
    """Structured view of one log line; message is always set"""
    message: str
    timestamp: Optional[str] = None
    source_ip: Optional[str] = None
    identity: Optional[str] = None
    level: Optional[str] = None
    method: Optional[str] = None
    path: Optional[str] = None
    status: Optional[int] = None
    size: Optional[int] = None
    referrer: Optional[str] = None
    user_agent: Optional[str] = None
    host: Optional[str] = None
    program: Optional[str] = None
    line_number: int = 0
    layout: str = 'fallback'

    @property
    def is_structured(self) -> bool:
        return self.layout != 'fallback'


@dataclass(frozen=True)
class ParseDiagnostic:
    """Advisory note on why a line only got fallback extraction"""
    line_number: int
    raw_excerpt: str
    reason: str
    suggested_fix: str


@dataclass
class FormatQuality:
    perfect_format: int = 0
    alternative_format: int = 0
    fallback_format: int = 0


@dataclass(frozen=True)
class CvssScore:
    """CVSS 3.1 base score for one threat type"""
    base_score: float
    severity: Severity
    vector_string: str
    explanation: str


@dataclass(frozen=True)
class ThreatFinding:
    threat_type: ThreatType
    count: int
    score: CvssScore

    def to_dict(self) -> Dict:
        return {
            'threat_type': self.threat_type.display_name,
            'count': self.count,
            'cvss_score': self.score.base_score,
            'severity': self.score.severity.value,
            'vector_string': self.score.vector_string,
            'explanation': self.score.explanation,
        }


@dataclass(frozen=True)
class AggregateScore:
    """Batch-level score combining every finding"""
    base_score: float
    severity: Severity
    total_count: int = 0
    multiplier: float = 1.0
    explanation: str = 'No threats detected'


@dataclass(frozen=True)
class IpInfo:
    address: str
    occurrence_count: int
    risk_level: str


@dataclass
class BatchResult:
    """Everything one analysis request produces"""
    records: List[ParsedRecord]
    total_lines: int
    successfully_parsed: int
    failed_to_parse: int
    diagnostics: List[ParseDiagnostic]
    format_quality: FormatQuality
    findings: List[ThreatFinding]
    ip_infos: List[IpInfo]
    aggregate: AggregateScore
    risk_level: str
    risk_description: str
    threat_counts: Dict[ThreatType, int] = field(default_factory=dict)

    @property
    def total_threats(self) -> int:
        return sum(f.count for f in self.findings)

    @property
    def high_risk_ips(self) -> List[IpInfo]:
        return [info for info in self.ip_infos if info.risk_level == 'high']

    def to_dict(self) -> Dict:
        statistics: Dict = {
            t.stat_key: self.threat_counts.get(t, 0) for t in ThreatType
        }
        statistics['cvss_scores'] = [f.to_dict() for f in self.findings]

        return {
            'threat_statistics': statistics,
            'ip_analysis': {
                'high_risk_ips': [asdict(i) for i in self.high_risk_ips],
                'all_ips': [asdict(i) for i in self.ip_infos],
            },
            'risk_assessment': {
                'level': self.risk_level,
                'total_threats': self.total_threats,
                'description': self.risk_description,
                'cvss_aggregate_score': round(self.aggregate.base_score, 2),
                'cvss_severity': self.aggregate.severity.value,
                'cvss_explanation': self.aggregate.explanation,
            },
            'parsing_info': {
                'total_lines': self.total_lines,
                'successfully_parsed': self.successfully_parsed,
                'failed_to_parse': self.failed_to_parse,
                'errors': [asdict(d) for d in self.diagnostics],
                'format_quality': asdict(self.format_quality),
            },
        }
