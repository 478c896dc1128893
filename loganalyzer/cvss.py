"""Log Analyzer - CVSS 3.1 scoring

Each threat type has a fixed, hand-assigned CVSS 3.1 base score and vector.
A batch is scored as the count-weighted average of its threat scores,
scaled up for high threat volume and capped at 10.0.

Score ranges:
    None      0.0
    Low       0.1 - 3.9
    Medium    4.0 - 6.9
    High      7.0 - 8.9
    Critical  9.0 - 10.0
"""

import logging
import re
from fractions import Fraction
from types import MappingProxyType
from typing import List, Mapping

from .config import CVSS_CEILING, VOLUME_MULTIPLIERS
from .errors import CvssTableError
from .models import AggregateScore, CvssScore, Severity, ThreatFinding, ThreatType

logger = logging.getLogger(__name__)

VECTOR_PATTERN = re.compile(
    r'^CVSS:3\.1/AV:[NALP]/AC:[LH]/PR:[NLH]/UI:[NR]/S:[UC]/C:[NLH]/I:[NLH]/A:[NLH]$'
)


def _score(base_score: float, vector_string: str, explanation: str) -> CvssScore:
    return CvssScore(
        base_score=base_score,
        severity=Severity.from_score(base_score),
        vector_string=vector_string,
        explanation=explanation,
    )


CVSS_TABLE = MappingProxyType({
    ThreatType.SQL_INJECTION: _score(
        9.8,
        'CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:H/I:H/A:H',
        'Network-accessible SQL injection with no authentication required. '
        'High impact on confidentiality, integrity, and availability. '
        'Attacker can read, modify, or delete database contents.',
    ),
    ThreatType.XSS: _score(
        6.1,
        'CVSS:3.1/AV:N/AC:L/PR:N/UI:R/S:C/C:L/I:L/A:N',
        'Network-accessible cross-site scripting requiring user interaction. '
        'Can steal session cookies, redirect users, or deface pages. '
        'Scope changed as attack affects other users.',
    ),
    ThreatType.PATH_TRAVERSAL: _score(
        7.5,
        'CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:H/I:N/A:N',
        'Network-accessible path traversal allowing unauthorized file access. '
        'High confidentiality impact as attacker can read sensitive files '
        'like /etc/passwd or application configs.',
    ),
    ThreatType.COMMAND_INJECTION: _score(
        9.8,
        'CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:H/I:H/A:H',
        'Network-accessible command injection with no authentication. '
        'Attacker can execute arbitrary system commands, leading to '
        'complete system compromise.',
    ),
    ThreatType.FAILED_LOGIN: _score(
        5.3,
        'CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:N/I:N/A:L',
        'Failed login attempts indicate potential brute force attack. '
        'Low availability impact from resource consumption. '
        'Becomes critical if successful or repeated from same IP.',
    ),
    ThreatType.ROOT_ACCESS: _score(
        8.8,
        'CVSS:3.1/AV:N/AC:L/PR:L/UI:N/S:U/C:H/I:H/A:H',
        'Attempt to access root/admin account. If successful, '
        'grants complete system control with high impact on all '
        'security properties.',
    ),
    ThreatType.SUSPICIOUS_FILE_ACCESS: _score(
        7.5,
        'CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:H/I:N/A:N',
        'Access to sensitive system files (/etc/passwd, /etc/shadow). '
        'High confidentiality impact as these files contain user '
        'credentials and system information.',
    ),
    ThreatType.PORT_SCANNING: _score(
        5.3,
        'CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:L/I:N/A:N',
        'Port scanning indicates reconnaissance activity. '
        'Low confidentiality impact from service discovery. '
        'Often precedes more serious attacks.',
    ),
    ThreatType.MALWARE: _score(
        9.8,
        'CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:H/I:H/A:H',
        'Malware detection indicates system compromise. '
        'High impact on all security properties. '
        'Can lead to data theft, system damage, or ransomware.',
    ),
    ThreatType.CRITICAL_ALERT: _score(
        8.0,
        'CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:H/I:H/A:N',
        'Critical severity event requiring immediate attention. '
        'Specific impact depends on alert type but generally '
        'indicates serious security incident.',
    ),
})


def validate_table(table: Mapping[ThreatType, CvssScore]) -> None:
    """Raise CvssTableError unless every threat type has a well-formed entry"""
    missing = [t.value for t in ThreatType if t not in table]
    if missing:
        raise CvssTableError(f"No CVSS entry for: {', '.join(missing)}")
    for threat_type, score in table.items():
        if not 0.0 <= score.base_score <= 10.0:
            raise CvssTableError(
                f"{threat_type.value}: base score {score.base_score} outside 0.0-10.0")
        if not VECTOR_PATTERN.match(score.vector_string):
            raise CvssTableError(
                f"{threat_type.value}: malformed vector {score.vector_string!r}")


validate_table(CVSS_TABLE)


def score_for(threat_type: ThreatType) -> CvssScore:
    return CVSS_TABLE[threat_type]


def volume_multiplier(total_count: int) -> float:
    for above, multiplier in VOLUME_MULTIPLIERS:
        if total_count > above:
            return multiplier
    return 1.0


def findings_from_counts(counts: Mapping[ThreatType, int]) -> List[ThreatFinding]:
    """One finding per observed type, in detection priority order"""
    return [
        ThreatFinding(threat_type=t, count=counts[t], score=score_for(t))
        for t in ThreatType
        if counts.get(t, 0) > 0
    ]


def aggregate_score(counts: Mapping[ThreatType, int]) -> AggregateScore:
    """Count-weighted average score times the volume multiplier, capped at 10.0"""
    observed = {t: c for t, c in counts.items() if c > 0}
    total_count = sum(observed.values())
    if total_count == 0:
        return AggregateScore(base_score=0.0, severity=Severity.NONE)

    # Exact arithmetic keeps the result monotonic in the counts
    weighted_sum = sum(
        Fraction(str(score_for(t).base_score)) * c for t, c in observed.items()
    )
    raw_average = weighted_sum / total_count
    multiplier = volume_multiplier(total_count)
    scaled = raw_average * Fraction(str(multiplier))
    base_score = float(min(scaled, Fraction(str(CVSS_CEILING))))

    explanation = (
        f"Aggregate score based on {len(observed)} threat type(s) with "
        f"{total_count} total instance(s). Weighted average score: "
        f"{float(raw_average):.2f}. Volume multiplier: {multiplier:.2f}x"
    )
    logger.debug(explanation)
    return AggregateScore(
        base_score=base_score,
        severity=Severity.from_score(base_score),
        total_count=total_count,
        multiplier=multiplier,
        explanation=explanation,
    )
