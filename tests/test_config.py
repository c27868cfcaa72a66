"""
Test configuration for database and MCP server
Creates isolated test database separate from production
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Prioritize .env.test for tests
env_test_path = Path(__file__).parent.parent / '.env.test'
env_path = Path(__file__).parent.parent / '.env'

if env_test_path.exists():
    load_dotenv(env_test_path)
elif env_path.exists():
    load_dotenv(env_path)

# Test Database Configuration
# Must match what DatabaseConfig.from_environment('test') connects to
TEST_DB_CONFIG = {
    'host': os.getenv('DB_HOST', 'localhost'),
    'port': int(os.getenv('DB_PORT', '5432')),
    'database': os.getenv('DB_NAME', 'productivity_test'),
    'user': os.getenv('DB_USER', 'postgres'),
    'password': os.getenv('DB_PASSWORD', ''),
}

# Schema file location
SCHEMA_FILE = Path(__file__).parent.parent / 'schema.sql'

# Test data
SAMPLE_USER_ID = "user-test-1"
OTHER_USER_ID = "user-test-2"
