"""Configuration management for loan-calendar."""

import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

from .exceptions import ConfigurationError


@dataclass(frozen=True)
class EngineConfig:
    """Tunables for the schedule generator and metrics calculator.

    ``installment_count`` is the contractual number of daily installments used
    by the metrics calculator. ``max_schedule_iterations`` bounds the schedule
    generator. The two are independent: the generated schedule length is
    driven by the loan's total and daily amount, not by the installment count.
    """

    installment_count: int = 22
    max_schedule_iterations: int = 365
    epsilon: Decimal = Decimal("0.01")
    default_holiday_reason: str = "Public Holiday"


DEFAULT_ENGINE_CONFIG = EngineConfig()


@dataclass
class AppConfig:
    """Main configuration for the CLI and JSON API."""

    engine: EngineConfig = field(default_factory=EngineConfig)
    log_level: str = "INFO"
    log_format: str = "standard"
    currency: str = "NGN"

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create config from environment variables."""
        defaults = EngineConfig()
        engine = EngineConfig(
            installment_count=_int_env(
                "LOAN_INSTALLMENT_COUNT", defaults.installment_count
            ),
            max_schedule_iterations=_int_env(
                "LOAN_SCHEDULE_MAX_ITERATIONS", defaults.max_schedule_iterations
            ),
            epsilon=_decimal_env("LOAN_EPSILON", defaults.epsilon),
            default_holiday_reason=os.getenv(
                "LOAN_HOLIDAY_REASON", defaults.default_holiday_reason
            ),
        )

        return cls(
            engine=engine,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
            currency=os.getenv("CURRENCY", "NGN"),
        )


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer; got {raw!r}") from exc
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive; got {value}")
    return value


def _decimal_env(name: str, default: Decimal) -> Decimal:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = Decimal(raw)
    except InvalidOperation as exc:
        raise ConfigurationError(f"{name} must be a number; got {raw!r}") from exc
    if not value.is_finite() or value < 0:
        raise ConfigurationError(f"{name} must be a non-negative number; got {raw!r}")
    return value
