"""Allow ``python -m procschema``."""

from .cli.schema_reporter_cli import main

if __name__ == "__main__":
    main()
