"""
Logging for the student wellbeing summary
All module loggers hang off one 'student_wellbeing' logger configured from the YAML logging section
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Dict, Any, Optional

ROOT_LOGGER_NAME = 'student_wellbeing'
DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
STEP_BANNER = "=" * 50


def _build_handler(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _rotating_file_handler(settings: Dict[str, Any]) -> logging.Handler:
    """Rotating log file, creating its directory first"""
    log_path = Path(settings.get('log_file_path', 'student_wellbeing.log'))
    log_path.parent.mkdir(parents=True, exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        str(log_path),
        maxBytes=settings.get('max_file_size_mb', 10) * 1024 * 1024,
        backupCount=settings.get('backup_count', 5)
    )


def setup_logging(settings: Dict[str, Any]) -> logging.Logger:
    """
    Configure the package logger from the logging section

    Handlers are replaced on every call, so a pipeline can be re-created
    in one process without doubling its output. Records do not reach the
    root logger.

    Args:
        settings: level, format, log_to_file, log_file_path,
            max_file_size_mb and backup_count (all optional)

    Returns:
        The package logger
    """
    level = getattr(logging, str(settings.get('level', 'INFO')).upper())
    formatter = logging.Formatter(settings.get('format', DEFAULT_FORMAT))

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False
    logger.addHandler(_build_handler(logging.StreamHandler(), level, formatter))

    if settings.get('log_to_file', False):
        try:
            file_handler = _rotating_file_handler(settings)
        except OSError as e:
            logger.warning(f"File logging disabled, console only: {e}")
        else:
            logger.addHandler(_build_handler(file_handler, level, formatter))
            logger.info(f"Logging to file: {file_handler.baseFilename}")

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Package logger, or its child for one module (e.g. 'aggregation')"""
    return logging.getLogger(f'{ROOT_LOGGER_NAME}.{name}' if name else ROOT_LOGGER_NAME)


def log_dataframe_summary(logger: logging.Logger, df, name: str) -> None:
    """Log the size of a source frame and the columns holding nulls"""
    if df is None or df.empty:
        logger.warning(f"Source frame '{name}' has no rows")
        return

    rows, columns = df.shape
    logger.info(f"Source frame '{name}': {rows:,} rows x {columns} columns {list(df.columns)}")

    null_counts = df.isnull().sum()
    nulls = {column: int(count) for column, count in null_counts.items() if count > 0}
    if nulls:
        logger.info(f"  Nulls per column: {nulls}")


def log_processing_step(logger: logging.Logger, step_name: str, details: str = None) -> None:
    """Banner marking the start of a pipeline step"""
    logger.info(STEP_BANNER)
    logger.info(f"PROCESSING STEP: {step_name.upper()}")
    if details:
        logger.info(f"Details: {details}")
    logger.info(STEP_BANNER)


def log_validation_result(logger: logging.Logger, validation_name: str,
                          passed: bool, details: str = None) -> None:
    """
    Log the outcome of one data quality check

    A failed check is a WARNING: it flags the data but never stops the summary.
    """
    message = f"Validation '{validation_name}': {'PASSED' if passed else 'FAILED'}"
    if details:
        message = f"{message} - {details}"
    logger.log(logging.INFO if passed else logging.WARNING, message)


def log_performance_metric(logger: logging.Logger, operation: str,
                           duration_seconds: float, records_processed: int = None) -> None:
    """Log how long an operation took and, given a record count, its throughput"""
    message = f"Performance - {operation}: {duration_seconds:.2f}s"
    if records_processed is not None:
        rate = records_processed / duration_seconds if duration_seconds > 0 else 0
        message = f"{message} ({records_processed:,} records, {rate:.0f} records/sec)"
    logger.info(message)
