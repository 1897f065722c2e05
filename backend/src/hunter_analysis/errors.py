class AnalysisError(Exception):
    pass


class AnalyzerConfigurationError(AnalysisError):
    """Analyzers were wired up in a way that can't be replayed, e.g. a cycle"""


class ThresholdConfigurationError(AnalysisError):
    pass
