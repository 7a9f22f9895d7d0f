"""Command line interface for hulud-guard."""
