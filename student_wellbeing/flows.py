"""
Prefect orchestration wrapper for the student wellbeing summary
Provides workflow management, retry logic and monitoring around the summary pipeline
Compatible with Prefect 3.x
"""

import time
from typing import Any, Dict, List

from prefect import flow, task, get_run_logger
from prefect.cache_policies import NONE

from .aggregation.aggregator import Aggregator
from .models import StudentRecord
from .pipeline import SummaryPipeline
from .utils.exceptions import StudentWellbeingError
from .utils.logging_config import get_logger

logger = get_logger('flows')


# ===================================================================
# PREFECT TASKS - Individual pipeline steps wrapped as Prefect tasks
# ===================================================================

@task(
    name="load_student_records",
    description="Read student records from the pre-existing DuckDB table",
    retries=2,
    retry_delay_seconds=10
)
def load_records_task(config_path: str) -> List[StudentRecord]:
    """Prefect task for reading student records"""
    task_start_time = time.time()

    records = SummaryPipeline(config_path).load_records()

    logger.info(f"Loaded {len(records):,} student records in {time.time() - task_start_time:.2f}s")
    return records


@task(
    name="check_data_quality",
    description="Null counts and instrument range checks over the filtered population",
    cache_policy=NONE,
    retries=0
)
def data_quality_task(config_path: str, records: List[StudentRecord]) -> Dict[str, Any]:
    """Prefect task for data quality checks"""
    report = SummaryPipeline(config_path).check_data_quality(records)

    if not report['is_clean']:
        logger.warning(f"Data quality checks found {report['violation_count']} violations")
    return report


@task(
    name="aggregate_summary",
    description="Grouped summary statistics by length of stay",
    cache_policy=NONE,
    retries=0
)
def aggregate_task(config_path: str, records: List[StudentRecord]) -> Dict[str, Any]:
    """
    Prefect task for the aggregation

    Returns:
        Rows as plain dictionaries plus aggregation diagnostics
    """
    pipeline = SummaryPipeline(config_path)
    result = Aggregator(pipeline.aggregation_config).run(records)

    return {
        'rows': [row.to_dict() for row in result.rows],
        'diagnostics': result.get_diagnostics()
    }


# ===================================================================
# PREFECT FLOW
# ===================================================================

@flow(
    name="student-wellbeing-summary",
    description="Load student records, check data quality and summarise by length of stay",
    version="1.0.0",
    timeout_seconds=600
)
def student_summary_flow(config_path: str) -> Dict[str, Any]:
    """
    Main Prefect flow

    Args:
        config_path: Path to configuration file

    Returns:
        Summary rows, diagnostics and the data quality report
    """
    run_logger = get_run_logger()
    run_logger.info(f"Starting student wellbeing summary with configuration: {config_path}")

    try:
        records = load_records_task(config_path)
        quality_report = data_quality_task(config_path, records)
        summary = aggregate_task(config_path, records)

    except StudentWellbeingError as e:
        run_logger.error(f"Summary flow failed: {e}")
        raise

    run_logger.info(f"Summary flow completed: {len(summary['rows'])} rows")
    return {
        'rows': summary['rows'],
        'diagnostics': summary['diagnostics'],
        'data_quality': quality_report
    }
