"""
Test suite for the tournament chip planner

Contains:
- tests/unit/          : Unit tests for individual modules
"""
