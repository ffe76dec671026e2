#!/usr/bin/env python
"""
Run the Profile Pricing API with uvicorn.

Usage:
    python scripts/run_api.py [--reload]

Host and port come from PRICING_API_HOST / PRICING_API_PORT.
"""
import subprocess
import sys
from pathlib import Path

from profile_pricing.config.settings import get_settings


def main():
    project_root = Path(__file__).parent.parent
    settings = get_settings()

    cmd = [
        sys.executable, "-m", "uvicorn",
        "profile_pricing.api.main:app",
        "--host", settings.api_host,
        "--port", str(settings.api_port),
    ]
    if "--reload" in sys.argv[1:]:
        cmd.append("--reload")

    print(f"Starting Profile Pricing API: {' '.join(cmd)}")
    print(f"Docs available at http://localhost:{settings.api_port}/docs")
    try:
        subprocess.run(cmd, cwd=str(project_root))
    except KeyboardInterrupt:
        print("\nAPI stopped.")


if __name__ == "__main__":
    main()
