from .builder import ConfigurationBuilder
from .configuration import Configuration, ConfigurationSection
from .source import ConfigurationProvider, ConfigurationSource
from .types import ConfigurationSnapshot

__all__ = [
    "ConfigurationBuilder",
    "Configuration",
    "ConfigurationSection",
    "ConfigurationProvider",
    "ConfigurationSource",
    "ConfigurationSnapshot",
]
