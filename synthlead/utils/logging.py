"""Structured logging for generation cycles and the scheduler."""
import json
import logging
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Correlates every line logged during one generation cycle
_cycle_id: ContextVar[Optional[str]] = ContextVar("cycle_id", default=None)


def get_cycle_id() -> Optional[str]:
    return _cycle_id.get()


def set_cycle_id(cycle_id: Optional[str] = None) -> str:
    """Set the current cycle ID, generating one if not provided."""
    if cycle_id is None:
        cycle_id = str(uuid.uuid4())[:8]
    _cycle_id.set(cycle_id)
    return cycle_id


class StructuredFormatter(logging.Formatter):
    """JSON log lines for deployed schedulers."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        cycle_id = get_cycle_id()
        if cycle_id:
            log_data["cycle_id"] = cycle_id

        if hasattr(record, "extra_data"):
            log_data.update(record.extra_data)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class HumanFormatter(logging.Formatter):
    """Readable console output."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        cycle_id = get_cycle_id()
        cycle_str = f"[{cycle_id}] " if cycle_id else ""

        color = self.COLORS.get(record.levelname, "")
        level = f"{color}{record.levelname:8}{self.RESET}"
        stamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        extra_str = ""
        if hasattr(record, "extra_data") and record.extra_data:
            extra_items = [f"{k}={v}" for k, v in record.extra_data.items()]
            extra_str = f" | {', '.join(extra_items)}"

        text = f"{stamp} {level} {cycle_str}{record.name}: {record.getMessage()}{extra_str}"
        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        return text


class ContextLogger(logging.LoggerAdapter):
    """Logger adapter that accepts an ``extra_data`` dict per call."""

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        extra_data = {**self.extra, **kwargs.pop("extra_data", {})}

        extra = kwargs.get("extra", {})
        extra["extra_data"] = extra_data
        kwargs["extra"] = extra

        return msg, kwargs


def get_logger(name: str) -> ContextLogger:
    return ContextLogger(logging.getLogger(name), {})


def setup_logging(
    level: str = "INFO",
    json_format: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """Set up logging configuration.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: If True, use JSON format; otherwise human-readable
        log_file: Optional file path; file output is always JSON
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    formatter = StructuredFormatter() if json_format else HumanFormatter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(StructuredFormatter())
        root_logger.addHandler(file_handler)

    # SDK clients are chatty at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("anthropic").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def log_llm_call(
    logger: ContextLogger,
    provider: str,
    model: str,
    temperature: float,
    max_tokens: Optional[int],
    duration_ms: int,
    success: bool = True,
    error: Optional[str] = None,
) -> None:
    """Log a provider call with structured data."""
    extra = {
        "provider": provider,
        "model": model,
        "temperature": temperature,
        "max_tokens": max_tokens,
        "duration_ms": duration_ms,
        "success": success,
    }
    if error:
        extra["error"] = error

    if success:
        logger.info(f"LLM call completed in {duration_ms}ms", extra_data=extra)
    else:
        logger.error(f"LLM call failed: {error}", extra_data=extra)


def log_cycle_outcome(
    logger: ContextLogger,
    outcome: str,
    attempts: int,
    last_similarity: Optional[float] = None,
    record_id: Optional[int] = None,
) -> None:
    """Log how a generation cycle ended; exhaustion is a warning, not an error."""
    extra = {"outcome": outcome, "attempts": attempts}
    if last_similarity is not None:
        extra["similarity"] = round(last_similarity, 1)
    if record_id is not None:
        extra["lead_id"] = record_id

    if outcome == "accepted":
        lead = f"lead #{record_id}" if record_id is not None else "lead (not saved)"
        logger.info(f"Generated {lead} after {attempts} attempt(s)", extra_data=extra)
    else:
        logger.warning(f"No unique comment after {attempts} attempt(s)", extra_data=extra)
