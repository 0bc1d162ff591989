"""
dbseed – render the idempotent account/schema bootstrap script that a
MySQL / Galera node runs as its ``--init-file`` on every boot.
"""

__version__ = "0.3.0"
