class TemplightError(Exception):
    """Base exception for templight errors."""
    pass

class MissingDependency(TemplightError):
    """Raised when a grammar required for composition is not available."""

    def __init__(self, name, detail=None):
        self.name = name
        message = f"Missing required grammar: '{name}'"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)

class ConfigError(TemplightError):
    """Raised for invalid configuration files or values."""
    pass
