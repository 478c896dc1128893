"""Log Analyzer - Source address frequency"""

from collections import Counter
from typing import Iterable, List, Mapping

from .config import IP_RISK_THRESHOLD
from .models import IpInfo, ParsedRecord


class IpFrequencyAnalyzer:
    """Counts source addresses within one batch and flags repeat offenders"""

    def __init__(self, threshold: int = IP_RISK_THRESHOLD):
        self.threshold = threshold

    def count(self, records: Iterable[ParsedRecord]) -> Counter:
        return Counter(r.source_ip for r in records if r.source_ip)

    def risk_level(self, occurrences: int) -> str:
        return 'high' if occurrences >= self.threshold else 'low'

    def summarize(self, ip_counts: Mapping[str, int]) -> List[IpInfo]:
        """IpInfo per address, most frequent first, ties by address"""
        ordered = sorted(ip_counts.items(), key=lambda item: (-item[1], item[0]))
        return [
            IpInfo(address=ip, occurrence_count=count, risk_level=self.risk_level(count))
            for ip, count in ordered
        ]

    def analyze(self, records: Iterable[ParsedRecord]) -> List[IpInfo]:
        return self.summarize(self.count(records))
