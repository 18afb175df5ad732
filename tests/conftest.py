# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from typedcoll.core.config import TypedCollConfig, set_config


def pytest_configure(config):
    """Register custom marks."""
    config.addinivalue_line("markers", "property: mark test as a property-based test")
    config.addinivalue_line("markers", "stress: mark test as a stress test")


class Token:
    """A plain object without value identity."""

    def __init__(self, label):
        self.label = label

    def __repr__(self):
        return f"Token({self.label!r})"


class Money:
    """An object opting into value identity through __value_hash__."""

    def __init__(self, amount, currency):
        self.amount = amount
        self.currency = currency

    def __value_hash__(self):
        return f"{self.amount}:{self.currency}"


@pytest.fixture
def token_class():
    """A class whose instances are identified by reference."""
    return Token


@pytest.fixture
def money_class():
    """A class whose instances are identified by value."""
    return Money


@pytest.fixture
def recorder():
    """A list collecting (tag, value) pairs, with a factory for recording callbacks."""
    calls = []

    def record(tag):
        def action(value):
            calls.append((tag, value))

        return action

    record.calls = calls
    return record


@pytest.fixture
def restore_config():
    """Restore the default configuration after each test."""
    yield
    set_config(TypedCollConfig())
