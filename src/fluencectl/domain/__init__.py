"""Domain layer: config kinds, schemas, migrations and validation rules.

Pure code: no file or network I/O. Infrastructure and services import from
here, never the reverse.
"""
