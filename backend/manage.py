#!/usr/bin/env python
"""
manage.py for the Sand Sample Data API backend.

Used to run the development server, apply the `samples` migrations and open
a shell against the sample database.
"""
import os
import sys


def main() -> None:
    """Run administrative tasks."""
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")
    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Install the project first "
            "(`pip install -e .` from the repository root)."
        ) from exc
    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
