from .demo import (  # noqa: F401
    list_people,
    rename_and_prune,
    run_demo,
    seed_sample_data,
)
from .models import Person  # noqa: F401

__all__ = [
    "Person",
    "list_people",
    "rename_and_prune",
    "run_demo",
    "seed_sample_data",
]
