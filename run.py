#!/usr/bin/env python3
"""
AssetDesk - Launcher
Starts the API server with uvicorn after checking the required settings.
"""
import os
import subprocess
import sys
from pathlib import Path

# =============================================================================
# CONFIGURATION
# =============================================================================

BASE_DIR = Path(__file__).parent.resolve()
BACKEND_DIR = BASE_DIR / "backend"
VENV_DIR = BASE_DIR / "venv"

BACKEND_PORT = int(os.getenv("PORT", "8000"))
BACKEND_HOST = os.getenv("HOST", "127.0.0.1")


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def get_python():
    """Python of the virtual environment, when there is one."""
    if sys.platform == "win32":
        venv_python = VENV_DIR / "Scripts" / "python.exe"
    else:
        venv_python = VENV_DIR / "bin" / "python"
    return str(venv_python) if venv_python.exists() else sys.executable


def check_configuration():
    """Names of required settings that are missing."""
    sys.path.insert(0, str(BACKEND_DIR))
    from assetdesk.config import config
    return config.missing_required()


def print_banner():
    url = f"http://{BACKEND_HOST}:{BACKEND_PORT}"
    print("\n" + "=" * 65)
    print("   AssetDesk - IT asset register and ticketing")
    print("=" * 65)
    print(f"   Backend API:  {url}/api")
    print(f"   API Docs:     {url}/docs")
    print("=" * 65 + "\n")


# =============================================================================
# MAIN
# =============================================================================

def main():
    missing = check_configuration()
    if missing:
        print("\nCONFIGURATION ERRORS:\n")
        for name in missing:
            print(f"   {name} is not set (see .env.example)")
        print()
        sys.exit(1)

    print_banner()

    cmd = [
        get_python(), "-m", "uvicorn",
        "assetdesk.main:app",
        "--port", str(BACKEND_PORT),
        "--host", BACKEND_HOST,
    ]
    if "--reload" in sys.argv:
        cmd.append("--reload")

    backend = subprocess.Popen(
        cmd,
        cwd=str(BACKEND_DIR),
        env={**os.environ, "PYTHONUNBUFFERED": "1"}
    )
    try:
        sys.exit(backend.wait())
    except KeyboardInterrupt:
        print("\nStopping backend...")
        backend.terminate()
        try:
            backend.wait(timeout=5)
        except subprocess.TimeoutExpired:
            backend.kill()


if __name__ == "__main__":
    main()
