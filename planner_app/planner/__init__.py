"""Daily planner core: plans, activities, statistics, and persistence."""

__version__ = "1.0.0"
