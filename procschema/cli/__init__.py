"""Command-line entry points for procschema."""
