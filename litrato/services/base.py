# litrato/services/base.py
"""
Base class for the scheduling services.

Every service gets the session it works in, the scheduling constants it
applies, a named logger, a ``transaction()`` block that owns commit and
rollback, and the ``measure_operation`` decorator feeding both the
in-process timing table and Prometheus.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from functools import wraps
import logging
from threading import Lock
import time
from typing import Any, Callable, Dict, Iterator, Optional, TypeVar, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.config import SchedulingSettings, settings
from ..core.exceptions import ServiceException
from ..monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)

SLOW_OPERATION_SECONDS = 1.0

F = TypeVar("F", bound=Callable[..., Any])


@dataclass
class OperationStats:
    count: int = 0
    failures: int = 0
    total_time: float = 0.0
    min_time: float = float("inf")
    max_time: float = 0.0

    def add(self, elapsed: float, success: bool) -> None:
        self.count += 1
        self.total_time += elapsed
        self.min_time = min(self.min_time, elapsed)
        self.max_time = max(self.max_time, elapsed)
        if not success:
            self.failures += 1

    def summary(self) -> Dict[str, Any]:
        successes = self.count - self.failures
        return {
            "count": self.count,
            "avg_time": self.total_time / self.count,
            "min_time": self.min_time,
            "max_time": self.max_time,
            "total_time": self.total_time,
            "success_rate": successes / self.count,
            "success_count": successes,
            "failure_count": self.failures,
        }


class BaseService:
    # service class name -> operation -> stats
    _stats: Dict[str, Dict[str, OperationStats]] = {}
    _stats_lock = Lock()

    def __init__(self, db: Session, config: Optional[SchedulingSettings] = None):
        """
        Args:
            db: Session shared with the repositories the service creates
            config: Scheduling constants; defaults to ``settings.scheduling``
        """
        self.db = db
        self.config = config or settings.scheduling
        self.logger = logging.getLogger(self.__class__.__name__)

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """
        Commit on normal exit, roll back on any error.

        Database errors surface as ServiceException; domain exceptions raised
        inside the block propagate unchanged after the rollback.
        """
        try:
            yield self.db
            self.db.commit()
        except SQLAlchemyError as e:
            self.logger.error(f"Transaction failed: {str(e)}")
            self.db.rollback()
            raise ServiceException(f"Database operation failed: {str(e)}") from e
        except Exception as e:
            self.logger.error(f"Transaction rolled back: {type(e).__name__}: {str(e)}")
            self.db.rollback()
            raise

    @staticmethod
    def measure_operation(operation_name: str) -> Callable[[F], F]:
        """
        Time a service method and record the outcome.

        Usage:
            @BaseService.measure_operation("accept_request")
            def accept_request(self, request_id): ...
        """

        def decorator(func: F) -> F:
            @wraps(func)
            def wrapper(self, *args, **kwargs):
                started = time.perf_counter()
                error_type: Optional[str] = None
                try:
                    return func(self, *args, **kwargs)
                except Exception as e:
                    error_type = type(e).__name__
                    raise
                finally:
                    elapsed = time.perf_counter() - started
                    self._record_metric(operation_name, elapsed, error_type is None)
                    if elapsed > SLOW_OPERATION_SECONDS:
                        self.logger.warning(
                            f"Slow operation detected: {operation_name} took {elapsed:.2f}s"
                        )
                    try:
                        prometheus_metrics.record_service_operation(
                            service=self.__class__.__name__,
                            operation=operation_name,
                            duration=elapsed,
                            status="error" if error_type else "success",
                            error_type=error_type,
                        )
                    except Exception as metrics_error:
                        logger.debug(f"Failed to record metrics: {metrics_error}")

            wrapper._operation_name = operation_name  # type: ignore[attr-defined]
            wrapper._is_measured = True  # type: ignore[attr-defined]
            return cast(F, wrapper)

        return decorator

    def log_operation(self, operation: str, **context) -> None:
        self.logger.info(f"Operation: {operation}", extra={"operation": operation, **context})

    def _record_metric(self, operation: str, elapsed: float, success: bool) -> None:
        with BaseService._stats_lock:
            per_service = BaseService._stats.setdefault(self.__class__.__name__, {})
            per_service.setdefault(operation, OperationStats()).add(elapsed, success)

    def get_metrics(self) -> Dict[str, Any]:
        """Timing summary per measured operation of this service class."""
        with BaseService._stats_lock:
            per_service = dict(BaseService._stats.get(self.__class__.__name__, {}))
        return {name: stats.summary() for name, stats in per_service.items() if stats.count}

    def reset_metrics(self) -> None:
        with BaseService._stats_lock:
            BaseService._stats.pop(self.__class__.__name__, None)
