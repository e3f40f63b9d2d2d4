"""Type aliases used across the async proxy."""

from __future__ import annotations

from typing import Any

LambdaEvent = dict[str, Any]
