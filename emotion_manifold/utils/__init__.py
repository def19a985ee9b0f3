from .logging import get_logger, log_metric, log_metrics

__all__ = ["get_logger", "log_metric", "log_metrics"]
