"""Log Analyzer - Exceptions"""


class LogAnalyzerError(Exception):
    """Base class for analyzer errors"""


class CvssTableError(LogAnalyzerError):
    """The static CVSS table is incomplete or malformed"""


class ParserInvariantError(LogAnalyzerError):
    """A non-blank line produced no record"""

    def __init__(self, line_number: int):
        super().__init__(f"Line {line_number} produced no parsed record")
        self.line_number = line_number
