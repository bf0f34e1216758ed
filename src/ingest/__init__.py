"""Delimited text decoding engine.

This package splits raw lines into fields, projects them into records,
and drives configured sources into record sinks.
"""
