"""Log Analyzer - Tunable constants

Defaults used by the analyzer; LogAnalyzer and the CLI can override the
per-batch ones.
"""

# An address seen this many times in one batch is high risk
IP_RISK_THRESHOLD = 3

# Parse diagnostics kept per batch, and how much of the line each one quotes
MAX_DIAGNOSTICS = 10
EXCERPT_LENGTH = 100

# CVSS aggregate: (total threat count strictly above, multiplier), checked in order
VOLUME_MULTIPLIERS = (
    (50, 1.25),
    (20, 1.15),
    (10, 1.10),
)
CVSS_CEILING = 10.0

# Qualitative risk level: (total threats strictly above, level, description)
RISK_LEVELS = (
    (20, 'CRITICAL', 'Immediate action required'),
    (10, 'HIGH', 'Urgent attention needed'),
    (5, 'MEDIUM', 'Review recommended'),
)
DEFAULT_RISK_LEVEL = ('LOW', 'Normal activity')
