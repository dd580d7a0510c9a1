#!/usr/bin/env python3
"""
Start the MSS Widget service with uvicorn.
"""

import argparse
import sys
from pathlib import Path

import uvicorn

# Add the parent directory to sys.path to import our modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from mss_widget.core.config import DATA_DIR, REPO_CONFIG_DIR, debug_enabled, validate_config


def main():
    parser = argparse.ArgumentParser(description='Serve the MSS Widget config and logging API')
    parser.add_argument('--port', type=int, default=10000,
                        help='Port to serve on (default: 10000)')
    parser.add_argument('--host', default='0.0.0.0',
                        help='Host to bind to (default: 0.0.0.0)')
    parser.add_argument('--reload', action='store_true',
                        help='Reload on code changes (development only)')

    args = parser.parse_args()

    issues = validate_config()
    if issues:
        for issue in issues:
            print(f"❌ {issue}")
        sys.exit(1)

    print("MSS Widget service")
    print(f"📁 Runtime data: {DATA_DIR}")
    print(f"📁 Repository config: {REPO_CONFIG_DIR}")

    uvicorn.run(
        "mss_widget.api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="debug" if debug_enabled() else "info",
    )


if __name__ == "__main__":
    main()
