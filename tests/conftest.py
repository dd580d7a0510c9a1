"""
Point the service at throwaway directories before any module reads its config.
"""

import os
import tempfile

_TEST_ROOT = tempfile.mkdtemp(prefix="mss_widget_tests_")
os.environ.setdefault("MSS_DATA_DIR", os.path.join(_TEST_ROOT, "data"))
os.environ.setdefault("MSS_REPO_CONFIG_DIR", os.path.join(_TEST_ROOT, "repo"))
os.environ.setdefault("DEBUG", "false")
