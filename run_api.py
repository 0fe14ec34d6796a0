"""
Helper script to run the API with auto-reload and a predictable sys.path.
Usage:
  python run_api.py
"""
import os
import sys

from uvicorn import run

ROOT = os.path.dirname(os.path.abspath(__file__))
BACKEND_PKG_DIR = os.path.join(ROOT, "backend", "portfolio")

if ROOT not in sys.path:
  sys.path.insert(0, ROOT)

# Ensure reloader subprocess can import backend.portfolio as well
os.environ["PYTHONPATH"] = os.pathsep.join(
  [ROOT] + [p for p in os.environ.get("PYTHONPATH", "").split(os.pathsep) if p]
)

if __name__ == "__main__":
  # Limit watch dirs to the package so the SQLite file does not trigger reloads
  log_level = os.environ.get("APP_LOG_LEVEL", "info").lower()
  run(
    "backend.portfolio.main:app",
    host=os.environ.get("API_HOST", "0.0.0.0"),
    port=int(os.environ.get("API_PORT", "8000")),
    reload=True,
    reload_dirs=[BACKEND_PKG_DIR],
    log_level=log_level,
    access_log=True,
  )
