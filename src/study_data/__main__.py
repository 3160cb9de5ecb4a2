"""
Entry point for running the study-data CLI as a module.

Usage:
    python -m src.study_data stats
    python -m src.study_data daily
    python -m src.study_data --help
"""
from .study_cli import main

if __name__ == "__main__":
    main()
