"""
Summary pipeline for the student wellbeing analysis
Coordinates: Load records -> Data quality checks -> Aggregate
"""

import time
from typing import Any, Dict, Iterable, List, Optional

from .aggregation.aggregator import Aggregator
from .config.config_manager import ConfigManager
from .load.student_table import StudentTableReader
from .models import StudentRecord
from .quality.data_quality import DataQualityChecker
from .utils.database_manager import DatabaseManager
from .utils.exceptions import PipelineError
from .utils.logging_config import setup_logging, get_logger, log_processing_step


class SummaryPipeline:
    """
    Main pipeline for the grouped wellbeing summary
    Single responsibility: Coordinate loading, checking and aggregation
    """

    def __init__(self, config_path: str):
        """
        Initialise summary pipeline

        Args:
            config_path: Path to configuration file
        """
        self.config_path = config_path
        self.config = ConfigManager(config_path)
        setup_logging(self.config.get_logging_config())
        self.logger = get_logger('pipeline')
        self.aggregation_config = self.config.get_aggregation_config()
        self.logger.info("Summary pipeline initialised successfully")

    def load_records(self) -> List[StudentRecord]:
        """Read student records from the configured DuckDB table"""
        log_processing_step(self.logger, 'load_records')
        db_config = self.config.get_database_config()

        reader = StudentTableReader(
            DatabaseManager(db_config['path']),
            table_name=db_config['table'],
            column_mapping=self.config.get_column_mapping(),
            id_column=db_config['id_column']
        )
        return reader.read_records()

    def check_data_quality(self, records: Iterable[StudentRecord]) -> Dict[str, Any]:
        """Run the configured data quality checks over the filtered population"""
        log_processing_step(self.logger, 'data_quality')
        checker = DataQualityChecker(self.config.get_data_quality_config(), self.config.get_range_rules())
        return checker.run(records, self.aggregation_config.filter_classification)

    def run(self, records: Optional[Iterable[StudentRecord]] = None) -> Dict[str, Any]:
        """
        Execute the pipeline

        Args:
            records: Records to summarise; read from the database when omitted

        Returns:
            Dictionary with rows, diagnostics, data quality report and timings

        Raises:
            PipelineError: Wrapping the failure of any step
        """
        start_time = time.time()
        timings = {}

        step = 'load_records'
        try:
            step_start = time.time()
            snapshot = tuple(records) if records is not None else tuple(self.load_records())
            timings['load_duration'] = time.time() - step_start

            step = 'data_quality'
            step_start = time.time()
            quality_report = self.check_data_quality(snapshot)
            timings['data_quality_duration'] = time.time() - step_start

            step = 'aggregate'
            step_start = time.time()
            log_processing_step(self.logger, 'aggregate')
            result = Aggregator(self.aggregation_config).run(snapshot)
            timings['aggregation_duration'] = time.time() - step_start

        except Exception as e:
            self.logger.error(f"Pipeline step '{step}' failed: {e}")
            raise PipelineError(f"Pipeline step '{step}' failed: {e}", step=step, original_error=e)

        timings['total_duration'] = time.time() - start_time
        self.logger.info(f"Pipeline completed: {len(result.rows)} summary rows in {timings['total_duration']:.2f}s")

        return {
            'rows': result.rows,
            'diagnostics': result.get_diagnostics(),
            'data_quality': quality_report,
            'performance_metrics': timings
        }
