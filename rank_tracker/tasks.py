# File: rank_tracker/tasks.py
"""rank_tracker.tasks: expansion of the input cross-product into fetch tasks."""

from __future__ import annotations

from typing import Iterable, List, Sequence, Union

from rank_tracker.models import Location, Query, Surface, Task

__all__ = ["surfaces_for", "generate_tasks"]


def surfaces_for(primary: Union[Surface, str], include_maps: bool = False) -> List[Surface]:
    """Primary surface first, then ``maps`` when requested (never twice)."""
    surfaces = [Surface(primary)]
    if include_maps and Surface.MAPS not in surfaces:
        surfaces.append(Surface.MAPS)
    return surfaces


def generate_tasks(
    queries: Sequence[Query],
    locations: Sequence[Location],
    surfaces: Iterable[Union[Surface, str]],
) -> List[Task]:
    """Return the full cross-product, query-major, location-next, surface-last.

    Nothing is filtered here: every combination becomes a task, and an empty
    query or location list simply gives an empty task list.
    """
    surface_list = [Surface(s) for s in surfaces]
    return [
        Task(query=query, location=location, surface=surface)
        for query in queries
        for location in locations
        for surface in surface_list
    ]
