# typedcoll/core/config.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Generator

from typedcoll.runtime.concurrency import get_lock, with_lock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TypedCollConfig:
    """
    Process-wide settings for the library.

    Attributes:
        render_limit: Maximum length of a value rendering inside error messages.
        render_depth: Maximum nesting depth rendered for structured values.
    """

    render_limit: int = 120
    render_depth: int = 3

    def __post_init__(self) -> None:
        if self.render_limit < 8:
            raise ValueError(f"render_limit must be at least 8, got {self.render_limit}")
        if self.render_depth < 0:
            raise ValueError(f"render_depth must be non-negative, got {self.render_depth}")


_config_lock = get_lock()
_config = TypedCollConfig()


def get_config() -> TypedCollConfig:
    """Return the active configuration."""
    with with_lock(_config_lock):
        return _config


def set_config(config: TypedCollConfig) -> TypedCollConfig:
    """
    Install a new configuration and return the previous one.

    :param config: The configuration to activate.
    :raises TypeError: If config is not a TypedCollConfig.
    """
    global _config

    if not isinstance(config, TypedCollConfig):
        raise TypeError(f"config must be a TypedCollConfig, got {type(config)}")

    with with_lock(_config_lock):
        previous, _config = _config, config
    logger.debug("Configuration changed from %s to %s", previous, config)
    return previous


@contextmanager
def configured(**changes) -> Generator[TypedCollConfig, None, None]:
    """
    Temporarily apply configuration changes, restoring the previous
    configuration on exit.

    Example:
        with configured(render_limit=40):
            Type.int().validate("a very long string ...")
    """
    previous = set_config(replace(get_config(), **changes))
    try:
        yield get_config()
    finally:
        set_config(previous)
