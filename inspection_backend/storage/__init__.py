"""Storage layer for inspection aggregates."""

from .repository import InspectionRepository, InMemoryInspectionRepository, JsonFileInspectionRepository

__all__ = ['InspectionRepository', 'InMemoryInspectionRepository', 'JsonFileInspectionRepository']
