"""Health risk analytics core.

This package contains the scoring and pattern-detection logic plus the domain
models it works on, isolated from storage and transport so every scorer can be
tested as a plain function of its inputs.
"""
