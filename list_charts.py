#!/usr/bin/env python3
"""
helm-list-charts - List the charts published in a Helm chart repository.

Usage:
    list_charts.py --source URL                 # All charts, newest versions first
    list_charts.py --source URL --chart NAME    # One chart
    list_charts.py --source URL --type library  # Library charts only
    list_charts.py --source URL --no-pager      # Never page
"""

import os
import sys

# Add current directory to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from helm_list_charts.cli import entry_point


if __name__ == "__main__":
    entry_point()
