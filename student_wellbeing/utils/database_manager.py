"""
Shared DuckDB database management utilities
Read-only connection handling for the pre-existing students table
"""

import duckdb
from pathlib import Path
from typing import Optional, List, Dict, Any
from contextlib import contextmanager

from .exceptions import DatabaseError
from .logging_config import get_logger

logger = get_logger('database')


class DatabaseManager:
    """
    Centralised database connection manager
    Opens one short-lived connection per operation so the file is never left locked
    """

    def __init__(self, db_path: str):
        """
        Initialise database manager

        Args:
            db_path: Path to DuckDB database file
        """
        self.db_path = Path(db_path)
        self._ensure_db_directory_exists()
        logger.info(f"Initialised DatabaseManager for: {self.db_path}")

    def _ensure_db_directory_exists(self) -> None:
        """Ensure database directory exists"""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def get_connection(self):
        """
        Context manager for database connections

        Usage:
            with db_manager.get_connection() as conn:
                result = conn.execute("SELECT * FROM students").fetchdf()
        """
        conn = None
        try:
            logger.debug(f"Opening connection to {self.db_path}")
            conn = duckdb.connect(str(self.db_path))
            yield conn
        except DatabaseError:
            raise
        except Exception as e:
            logger.error(f"Database error: {e}")
            raise DatabaseError(f"Database operation failed: {e}")
        finally:
            if conn:
                try:
                    conn.close()
                    logger.debug("Database connection closed")
                except Exception as e:
                    logger.warning(f"Error closing connection: {e}")

    def execute_query(self, query: str, params: Optional[List] = None) -> Any:
        """
        Execute a query and return results as a DataFrame

        Args:
            query: SQL query to execute
            params: Query parameters as a list (optional)

        Returns:
            pandas DataFrame with the query results
        """
        with self.get_connection() as conn:
            try:
                logger.debug(f"Executing query: {query[:100]}...")
                if params:
                    result = conn.execute(query, params).fetchdf()
                else:
                    result = conn.execute(query).fetchdf()
                logger.debug(f"Query returned {len(result)} rows")
                return result
            except duckdb.Error as e:
                logger.error(f"Query execution failed: {e}")
                raise DatabaseError(f"Query failed: {e}", query=query)

    def table_exists(self, table_name: str) -> bool:
        """
        Check if a table exists in the database

        Args:
            table_name: Name of table to check

        Returns:
            True if table exists, False otherwise
        """
        query = """
        SELECT COUNT(*) as count
        FROM information_schema.tables
        WHERE table_name = ? AND table_type = 'BASE TABLE'
        """
        result = self.execute_query(query, [table_name])
        return bool(result.iloc[0]['count'] > 0)

    def get_table_schema(self, table_name: str) -> Dict[str, str]:
        """
        Get schema information for a table

        Args:
            table_name: Name of table

        Returns:
            Dictionary mapping column names to data types
        """
        try:
            result = self.execute_query(f'DESCRIBE "{table_name}"')

            schema = {}
            for _, row in result.iterrows():
                schema[row['column_name']] = row['column_type']

            return schema
        except DatabaseError as e:
            logger.error(f"Error getting schema for table {table_name}: {e}")
            raise DatabaseError(f"Failed to get schema for table {table_name}: {e}", table_name=table_name)
