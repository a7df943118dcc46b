"""
pytest configuration.

Makes src/ importable without an editable install and pins dummy AWS
settings before any boto3 client is created.
"""
import sys
import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
SRC_ROOT = PROJECT_ROOT / "src"


def pytest_configure(config):
    if str(SRC_ROOT) not in sys.path:
        sys.path.insert(0, str(SRC_ROOT))


os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("POWERTOOLS_LOG_DEDUPLICATION_DISABLED", "true")
