class StarfieldError(Exception):
    """Base class for starfield errors."""


class ConfigurationError(StarfieldError, ValueError):
    """An option is out of range or malformed. Nothing was applied."""


class ResourceUnavailable(StarfieldError, RuntimeError):
    """The drawing surface is missing or unusable."""


class PersistenceUnavailable(StarfieldError, OSError):
    """The count cache could not be read or written."""
