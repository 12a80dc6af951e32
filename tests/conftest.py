"""Pytest configuration for test isolation.

Decoder settings and the log level can be overridden through
``BOOKING_DECODER_*`` environment variables (also via a local ``.env`` read
by the console app). A developer shell exporting one of them would change
alignment periods under the tests, so an autouse fixture removes them for
every test.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import pytest

# Make sure the workspace `packages/` dir is on sys.path so `booking_decoder`
# is importable from a plain checkout.
_ROOT = Path(__file__).resolve().parents[1]
_PKG_DIR = _ROOT / "packages"
if str(_PKG_DIR) not in sys.path:
    sys.path.insert(0, str(_PKG_DIR))


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop any ``BOOKING_DECODER_*`` override inherited from the shell."""

    for name in list(os.environ):
        if name.startswith("BOOKING_DECODER_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _reset_logging(monkeypatch: pytest.MonkeyPatch):
    """Undo handlers installed by ``configure_logging`` (e.g. via the CLI)."""

    from booking_decoder import logging_setup

    pkg_logger = logging.getLogger("booking_decoder")
    handlers = list(pkg_logger.handlers)
    level = pkg_logger.level
    propagate = pkg_logger.propagate
    monkeypatch.setattr(logging_setup, "_CONFIGURED", False)
    yield
    pkg_logger.handlers[:] = handlers
    pkg_logger.setLevel(level)
    pkg_logger.propagate = propagate
