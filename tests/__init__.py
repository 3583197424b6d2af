"""
Tests for Procedural Lightning

This package contains tests for:
- Atmosphere and discharge equations
- Segment generation backends
- Stochastic grammar and L-system driver
- Policies, metrics and adapters
"""
