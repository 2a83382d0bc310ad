"""
Student record sources
Turns a DataFrame or a pre-existing DuckDB table into StudentRecord objects
"""

from typing import Any, Dict, List, Optional

import pandas as pd

from ..models import Classification, RECORD_FIELDS, StudentRecord
from ..utils.common import format_number_with_commas, is_missing, safe_convert_numeric, to_python_scalar
from ..utils.database_manager import DatabaseManager
from ..utils.exceptions import DatabaseError, ValidationError
from ..utils.logging_config import get_logger, log_dataframe_summary

logger = get_logger('load')

# Source column -> StudentRecord field, as laid out in the survey's students table
DEFAULT_COLUMN_MAPPING = {
    'inter_dom': 'classification',
    'stay': 'stay_years',
    'todep': 'depression_score',
    'tosc': 'connectedness_score',
    'toas': 'acculturative_stress_score',
    'academic': 'academic_level',
}

# Record fields whose source column may be absent; they are read as null
OPTIONAL_RECORD_FIELDS = ('academic_level',)

_TEXT_FIELDS = ('classification', 'academic_level')
_ROW_ID_COLUMN = '__row_id'


def _validate_mapping(column_mapping: Dict[str, str]) -> None:
    unknown_targets = [target for target in column_mapping.values()
                       if target not in RECORD_FIELDS or target == 'record_id']
    if unknown_targets:
        raise ValidationError(f"Column mapping targets unknown record fields: {unknown_targets}",
                              column=unknown_targets[0])


def _present_mapping(column_mapping: Dict[str, str], columns) -> Dict[str, str]:
    """Drop optional source columns the source does not have"""
    return {source: target for source, target in column_mapping.items()
            if source in columns or target not in OPTIONAL_RECORD_FIELDS}


def records_from_dataframe(df: pd.DataFrame,
                           column_mapping: Dict[str, str] = None,
                           id_column: str = None) -> List[StudentRecord]:
    """
    Convert a DataFrame into student records

    Args:
        df: Source rows
        column_mapping: Source column -> StudentRecord field (survey layout when omitted)
        id_column: Column holding the record identifier; the row index is used otherwise

    Returns:
        One StudentRecord per row, in row order

    Raises:
        ValidationError: On missing columns or non-numeric / non-integral values
    """
    column_mapping = column_mapping or DEFAULT_COLUMN_MAPPING
    _validate_mapping(column_mapping)
    column_mapping = _present_mapping(column_mapping, df.columns)

    required = list(column_mapping) + ([id_column] if id_column else [])
    missing_columns = [col for col in required if col not in df.columns]
    if missing_columns:
        raise ValidationError(f"Missing source columns: {missing_columns}", column=missing_columns[0])

    log_dataframe_summary(logger, df, 'student_records')

    records = []
    unknown_classifications = []
    invalid_values = {}

    for index, row in zip(df.index, df.to_dict('records')):
        values = {}
        for source_column, target_field in column_mapping.items():
            raw = row[source_column]

            if target_field == 'classification':
                parsed = Classification.parse(raw)
                if parsed is None and not is_missing(raw):
                    unknown_classifications.append(raw)
            elif target_field == 'academic_level':
                parsed = None if is_missing(raw) else str(raw).strip()
            elif target_field == 'stay_years':
                parsed = safe_convert_numeric(raw, int)
            else:
                parsed = safe_convert_numeric(raw, float)

            if parsed is None and not is_missing(raw) and target_field not in _TEXT_FIELDS:
                invalid_values.setdefault(source_column, []).append(raw)

            values[target_field] = parsed

        record_id = row[id_column] if id_column else index
        records.append(StudentRecord(record_id=to_python_scalar(record_id), **_with_defaults(values)))

    if invalid_values:
        column, samples = next(iter(invalid_values.items()))
        raise ValidationError(f"Non-numeric or non-integral values in columns: {list(invalid_values)}",
                              column=column, sample_values=samples[:3])

    if unknown_classifications:
        logger.warning(f"{len(unknown_classifications)} unrecognised classification codes treated as null, "
                       f"sample: {unknown_classifications[:3]}")

    logger.info(f"Converted {format_number_with_commas(len(records))} rows into student records")
    return records


def _with_defaults(values: Dict[str, Any]) -> Dict[str, Any]:
    """Fill record fields the mapping does not cover with None"""
    return {name: values.get(name) for name in RECORD_FIELDS if name != 'record_id'}


class StudentTableReader:
    """
    Reads student records from a pre-existing DuckDB table
    Only the mapped columns are selected; the table is never modified
    """

    def __init__(self, db_manager: DatabaseManager, table_name: str = 'students',
                 column_mapping: Dict[str, str] = None, id_column: Optional[str] = None):
        """
        Initialise table reader

        Args:
            db_manager: Database manager for the DuckDB file
            table_name: Name of the students table
            column_mapping: Source column -> StudentRecord field
            id_column: Column holding the record identifier; DuckDB rowid otherwise
        """
        self.db_manager = db_manager
        self.table_name = table_name
        self.column_mapping = column_mapping or DEFAULT_COLUMN_MAPPING
        self.id_column = id_column
        _validate_mapping(self.column_mapping)

    def read_dataframe(self) -> pd.DataFrame:
        """
        Select the mapped columns from the table

        Raises:
            DatabaseError: If the table does not exist or the query fails
            ValidationError: If mapped columns are missing from the table
        """
        if not self.db_manager.table_exists(self.table_name):
            raise DatabaseError(f"Table {self.table_name} does not exist", table_name=self.table_name)

        schema = self.db_manager.get_table_schema(self.table_name)
        column_mapping = _present_mapping(self.column_mapping, schema)
        wanted = list(column_mapping) + ([self.id_column] if self.id_column else [])
        missing_columns = [col for col in wanted if col not in schema]
        if missing_columns:
            raise ValidationError(f"Table {self.table_name} is missing columns: {missing_columns}",
                                  column=missing_columns[0])

        selected = ', '.join(f'"{col}"' for col in column_mapping)
        if self.id_column:
            query = f'SELECT "{self.id_column}", {selected} FROM "{self.table_name}" ORDER BY "{self.id_column}"'
        else:
            query = f'SELECT rowid AS {_ROW_ID_COLUMN}, {selected} FROM "{self.table_name}" ORDER BY rowid'

        df = self.db_manager.execute_query(query)
        logger.info(f"Read {len(df)} rows from table '{self.table_name}'")
        return df

    def read_records(self) -> List[StudentRecord]:
        """Read the whole table as student records"""
        df = self.read_dataframe()
        return records_from_dataframe(df, self.column_mapping, self.id_column or _ROW_ID_COLUMN)
