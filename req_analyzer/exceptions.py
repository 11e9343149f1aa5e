"""
Error taxonomy for the requirements pipeline.

Every error raised below is caught at the action boundary and converted into
a ``{"success": False, "error": str(exc)}`` result.
"""


class RequirementsAnalyzerError(Exception):
    """Base class for pipeline errors"""
    pass


class ConfigError(RequirementsAnalyzerError):
    """Required credential or setting is missing"""
    pass


class FormatError(RequirementsAnalyzerError):
    """Input does not have the expected shape"""
    pass


class FetchError(RequirementsAnalyzerError):
    """Remote call failed or returned no usable content"""
    pass


class EmptyResultError(RequirementsAnalyzerError):
    """Pipeline produced nothing usable"""
    pass
