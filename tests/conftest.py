"""
Global test configuration and fixtures
"""
import sys
from pathlib import Path
import pytest

# Add project root to Python path so the package imports without installation
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Import fixtures from fixtures module
from tests.fixtures.config_fixtures import *
from tests.fixtures.record_fixtures import *
from tests.fixtures.database_fixtures import *
from tests.fixtures.mock_objects import *

@pytest.fixture
def temp_config_dir(tmp_path):
    """Create temporary directory for configuration files"""
    config_dir = tmp_path / "config"
    config_dir.mkdir(exist_ok=True)
    return config_dir

@pytest.fixture
def temp_data_dir(tmp_path):
    """Create temporary directory for DuckDB files"""
    data_dir = tmp_path / "data"
    data_dir.mkdir(exist_ok=True)
    return data_dir
