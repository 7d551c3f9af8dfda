"""OpenTelemetry tracing decorators."""

import asyncio
import functools
import inspect
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Span

F = TypeVar("F", bound=Callable[..., Any])


def _bound_attributes(
    func: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any], names: tuple[str, ...]
) -> dict[str, Any]:
    """Pick the named call arguments that can be stored as span attributes."""
    if not names:
        return {}

    bound = inspect.signature(func).bind_partial(*args, **kwargs)
    return {
        f"booking.{name}": value
        for name, value in bound.arguments.items()
        if name in names and isinstance(value, (str, bool, int, float))
    }


def traced(
    span_name: str | None = None,
    service_name: str = "booking-svc",
    record_args: tuple[str, ...] = (),
) -> Callable[[F], F]:
    """Decorator to add OpenTelemetry tracing to a function.

    Creates a span around the call, marks it successful or failed, and records
    the listed call arguments as ``booking.<name>`` attributes. Both sync and
    async functions are supported.

    Args:
        span_name: Name for the span (defaults to the function name)
        service_name: Service name for span attributes
        record_args: Names of arguments to copy onto the span

    Returns:
        Decorated function with tracing

    Example:
        @traced("create_booking", record_args=("dish_id", "quantity"))
        async def create_booking(self, dish_id: int, quantity: int) -> BookingResult:
            ...
    """

    def decorator(func: F) -> F:
        name = span_name or func.__name__
        tracer = trace.get_tracer(service_name)

        @contextmanager
        def span_for(args: tuple[Any, ...], kwargs: dict[str, Any]) -> Iterator[Span]:
            with tracer.start_as_current_span(name) as span:
                span.set_attribute("service.name", service_name)
                if span_name:
                    span.set_attribute("function.name", func.__name__)
                for key, value in _bound_attributes(func, args, kwargs, record_args).items():
                    span.set_attribute(key, value)

                try:
                    yield span
                    span.set_attribute("success", True)
                except Exception as e:
                    span.set_attribute("success", False)
                    span.set_attribute("error.type", type(e).__name__)
                    span.set_attribute("error.message", str(e))
                    span.record_exception(e)
                    raise

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            with span_for(args, kwargs):
                return await func(*args, **kwargs)

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with span_for(args, kwargs):
                return func(*args, **kwargs)

        if asyncio.iscoroutinefunction(func):
            return async_wrapper  # type: ignore
        return sync_wrapper  # type: ignore

    return decorator
