"""Shared fixtures for the test suite."""

import copy

from gettext_replacer.config import DEFAULT_CONFIG
from gettext_replacer.models import ReplacementRegistry
from gettext_replacer.walker import MessageCollector


def make_collector(**overrides):
    config = copy.deepcopy(DEFAULT_CONFIG)
    config.update(overrides)
    return MessageCollector.from_config(config)


def collect(source, file_name='app.js', collector=None):
    """Returns (messages, registry) for a source text."""
    collector = collector or make_collector()
    registry = ReplacementRegistry()
    _, messages = collector.parse_source_file(source, registry, file_name=file_name)
    return messages, registry
