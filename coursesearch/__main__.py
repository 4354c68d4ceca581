"""
Package entry point.

Allows running the exporter via:

    python -m coursesearch

This simply forwards execution to coursesearch.cli.main().
"""

from coursesearch.cli import main

if __name__ == "__main__":
    main()
