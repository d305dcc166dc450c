#!/usr/bin/env python
"""Command line entry point for the hospital records project."""
import os
import sys


def main() -> None:
    """Run administrative tasks with ``hospital_records.settings``."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'hospital_records.settings')
    try:
        from django.core.management import execute_from_command_line  # type: ignore
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Is it installed and available on your "
            "PYTHONPATH, and is the virtual environment active?"
        ) from exc
    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
