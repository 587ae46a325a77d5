from plateau_planner.models.planning import Planning

__all__ = [
    "Planning",
]
