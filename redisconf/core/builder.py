"""Ordered list of configuration sources."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

from .config_loader import find_config_file, parse_source, read_declarations
from .configuration import Configuration
from .source import ConfigurationProvider, ConfigurationSource

logger = logging.getLogger(__name__)


class ConfigurationBuilder:
    """Collect configuration sources and build them into a Configuration.

    Sources added later take precedence over sources added earlier.
    Descriptors are only validated when ``build`` is called, so a builder can
    be assembled piecemeal.
    """

    def __init__(self) -> None:
        self.sources: List[ConfigurationSource] = []

    def add(self, source: ConfigurationSource) -> "ConfigurationBuilder":
        self.sources.append(source)
        return self

    def add_sources_from_file(
        self,
        environment: str,
        config_path: Optional[Union[str, Path]] = None,
    ) -> "ConfigurationBuilder":
        """Register the sources declared for ``environment`` in redisconf.yaml.

        Args:
            environment: Environment name (e.g., 'development', 'production').
            config_path: Optional explicit path; searched for when omitted.

        Raises:
            ValueError: If the file is invalid or declares an unknown type.
        """
        path = find_config_file(config_path)
        if path is None:
            return self
        declared = read_declarations(path, environment)
        for source_config in declared:
            self.add(parse_source(source_config))
        logger.debug(
            "Registered %d source(s) for %r from %s", len(declared), environment, path
        )
        return self

    def build(self) -> Configuration:
        """Build and load every source in order.

        Returns:
            Configuration reading from all loaded providers.

        Raises:
            ConfigurationValidationError: If a source descriptor is invalid.
            ConfigurationLoadError: If a non-optional source fails to load.
        """
        providers: List[ConfigurationProvider] = []
        try:
            for source in self.sources:
                provider = source.build(self)
                providers.append(provider)
                provider.load()
        except BaseException:
            for provider in providers:
                provider.close()
            raise
        return Configuration(providers)
