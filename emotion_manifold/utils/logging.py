"""Package logger and metric lines for emotion_manifold.

Library modules log through ``logging.getLogger(__name__)``. Every such
logger sits below ``emotion_manifold``, so a single `get_logger()` call
(made by the harness) routes the whole package through one stream handler.

Metric lines are plain text for grepping run output:

    metric transport_norm=1.000213 step=40
    metrics energy=1.37 height=0.0921

Keys are sorted; values and steps must be finite numbers.
"""
from __future__ import annotations

import logging
import math
from typing import Iterable, Mapping, Optional, Tuple

LOGGER_NAME = "emotion_manifold"

_HANDLER_MARK = "_emotion_manifold_handler"
_FORMAT = "%(asctime)s %(name)s %(levelname)s: %(message)s"


def get_logger(name: str = LOGGER_NAME, level: Optional[int] = None) -> logging.Logger:
    """
    Logger `name` with one marked stream handler; repeat calls add nothing.

    The package logger does not propagate to root. `level` overrides the
    logger level; without it a freshly configured logger starts at INFO.
    """
    logger = logging.getLogger(name)
    logger.propagate = False

    if not any(getattr(h, _HANDLER_MARK, False) for h in logger.handlers):
        handler = logging.StreamHandler()
        setattr(handler, _HANDLER_MARK, True)
        handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt="%H:%M:%S"))
        logger.addHandler(handler)
        if level is None and logger.level == logging.NOTSET:
            logger.setLevel(logging.INFO)
    if level is not None:
        logger.setLevel(int(level))
    return logger


def _finite(value: object, label: str) -> float:
    try:
        out = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as e:
        raise TypeError(f"{label} is not a real number: {value!r}") from e
    if not math.isfinite(out):
        raise ValueError(f"{label} must be finite, got {out}")
    return out


def _line(prefix: str, pairs: Iterable[Tuple[str, object]], step: Optional[int]) -> str:
    fields = []
    for key, value in pairs:
        if not isinstance(key, str) or not key:
            raise ValueError("metric names must be non-empty strings")
        fields.append(f"{key}={_finite(value, key):.10g}")
    if step is not None:
        fields.append(f"step={int(_finite(step, 'step'))}")
    return prefix + " " + " ".join(fields)


def log_metric(
    name: str,
    value: float,
    step: Optional[int] = None,
    logger: Optional[logging.Logger] = None,
) -> None:
    """Emit ``metric name=value [step=n]``."""
    msg = _line("metric", [(name, value)], step)
    (logger or get_logger()).info(msg)


def log_metrics(
    metrics: Mapping[str, float],
    step: Optional[int] = None,
    logger: Optional[logging.Logger] = None,
) -> None:
    """Emit ``metrics k1=v1 k2=v2 ... [step=n]`` with keys in sorted order."""
    if not isinstance(metrics, Mapping) or not metrics:
        raise ValueError("metrics must be a non-empty mapping")
    msg = _line("metrics", sorted(metrics.items()), step)
    (logger or get_logger()).info(msg)


__all__ = ["LOGGER_NAME", "get_logger", "log_metric", "log_metrics"]
