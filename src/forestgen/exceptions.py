"""Forest generator exception hierarchy."""


class ForestGenError(Exception):
    """Root of all forest generator exceptions."""


class InvalidTopologyError(ForestGenError):
    """A branch graph is malformed (empty, self-loop, cycle, disconnected...)."""


class ConfigurationError(ForestGenError):
    """Invalid or missing configuration."""
