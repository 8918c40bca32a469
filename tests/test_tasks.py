import pytest

from rank_tracker.models import Location, Query, Surface
from rank_tracker.tasks import generate_tasks, surfaces_for


def test_surfaces_for_primary_only():
    assert surfaces_for("search") == [Surface.SEARCH]


def test_surfaces_for_with_maps():
    assert surfaces_for(Surface.SEARCH, include_maps=True) == [Surface.SEARCH, Surface.MAPS]


def test_surfaces_for_maps_not_repeated():
    assert surfaces_for("maps", include_maps=True) == [Surface.MAPS]


def test_surfaces_for_unknown_surface():
    with pytest.raises(ValueError):
        surfaces_for("images")


@pytest.mark.parametrize("n_queries,n_locations,n_surfaces", [(1, 1, 1), (2, 3, 1), (3, 2, 2)])
def test_cross_product_size(n_queries, n_locations, n_surfaces):
    queries = [Query(f"q{i}") for i in range(n_queries)]
    locations = [Location(city=f"c{i}", country="US") for i in range(n_locations)]
    surfaces = [Surface.SEARCH, Surface.MAPS][:n_surfaces]

    tasks = generate_tasks(queries, locations, surfaces)

    assert len(tasks) == n_queries * n_locations * n_surfaces


def test_query_major_location_next_surface_last(queries, locations):
    tasks = generate_tasks(queries, locations, [Surface.SEARCH, Surface.MAPS])

    order = [(t.query.keyword, t.location.city, t.surface) for t in tasks]
    assert order == [
        ("coffee shops", "New York", Surface.SEARCH),
        ("coffee shops", "New York", Surface.MAPS),
        ("coffee shops", "London", Surface.SEARCH),
        ("coffee shops", "London", Surface.MAPS),
        ("best pizza near me", "New York", Surface.SEARCH),
        ("best pizza near me", "New York", Surface.MAPS),
        ("best pizza near me", "London", Surface.SEARCH),
        ("best pizza near me", "London", Surface.MAPS),
    ]


def test_empty_inputs_give_no_tasks(queries, locations):
    assert generate_tasks([], locations, ["search"]) == []
    assert generate_tasks(queries, [], ["search"]) == []


def test_identical_rows_are_not_merged():
    query = Query("pizza")
    location = Location(city="Paris", country="FR")
    tasks = generate_tasks([query, query], [location], ["search"])
    assert len(tasks) == 2


def test_task_description(task):
    assert task.description == '"coffee shops" in New York (search)'
