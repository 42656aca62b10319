"""Tracewise command line interface."""
