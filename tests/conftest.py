"""Shared fixtures: deterministic series collections and event sequences."""

import numpy as np
import pytest

from ts2net.config import reset_config


@pytest.fixture(autouse=True)
def _fresh_config(monkeypatch):
    """Every test starts from the packaged defaults."""
    monkeypatch.delenv('TS2NET_CONFIG', raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def sincos():
    """Five scaled sines followed by five scaled cosines (no noise)."""
    t = np.linspace(0, 8 * np.pi, 200)
    sines = [np.sin(t) * (1.0 + 0.1 * k) for k in range(5)]
    cosines = [np.cos(t) * (1.0 + 0.1 * k) for k in range(5)]
    return sines + cosines


@pytest.fixture
def sincos_named(sincos):
    names = [f"sin_{k}" for k in range(5)] + [f"cos_{k}" for k in range(5)]
    return dict(zip(names, sincos))


@pytest.fixture
def event_pair():
    """Two sequences of length 50 with events 7 steps apart."""
    a = np.zeros(50)
    b = np.zeros(50)
    a[[5, 20, 35]] = 1
    b[[12, 27, 42]] = 1
    return a, b
