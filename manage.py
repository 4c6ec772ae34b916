#!/usr/bin/env python
"""Django's command-line utility for administrative tasks."""
import os
import sys

from core.settings.base import DEBUG


def main():
    if DEBUG:
        os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'core.settings.development')
    else:
        os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'core.settings.production')
    from django.core.management import execute_from_command_line

    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
