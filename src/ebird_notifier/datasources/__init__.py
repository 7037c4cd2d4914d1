"""External data source integrations.

Each subdirectory is one data source::

    datasources/{name}/
    ├── __init__.py       # Public API re-exports
    ├── client.py         # API URLs, constants, authenticated requests
    └── {feature}.py      # Parsing + fetch functions

Only eBird is wired in today (``datasources/ebird``).
"""
