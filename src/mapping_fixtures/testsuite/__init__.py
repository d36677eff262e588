# src/mapping_fixtures/testsuite/__init__.py
"""Reusable test cases that run against any mapping fixture."""

from .mapping_query import MappingQueryTestBase

__all__ = ['MappingQueryTestBase']
