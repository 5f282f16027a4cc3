"""Calculation orchestration services."""
