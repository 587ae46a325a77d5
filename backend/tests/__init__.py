# Force SQLModel table registration at test discovery time
# This ensures all models are registered before any test database creation
from plateau_planner.models.planning import Planning  # noqa: F401
