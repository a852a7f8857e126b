# tests/repositories/test_parameter_collection.py
"""Tests for grading parameters and their weighted categories."""

import pytest

from forum_desk.domain.entities import ParameterCategory
from forum_desk.repositories import ParameterCollection


@pytest.fixture()
def parameters() -> ParameterCollection:
    return ParameterCollection()


def _create(parameters, categories, /, **overrides):
    values = {
        "name": "Participation",
        "description": "Posts and replies",
        "is_active": True,
        "created_by_username": "staff",
        "required_posts": 2,
        "required_replies": 3,
        "topics": ["loops"],
        "thread_id": "THREAD_1",
        "categories": categories,
    }
    values.update(overrides)
    return parameters.create(**values)


def test_create_and_copy_inputs(parameters, categories) -> None:
    topics = ["loops"]
    result = _create(parameters, categories, topics=topics)
    assert result.entity_id == "PARAM_1"

    topics.append("later")
    categories[0].weight = 0.9
    stored = parameters.get_by_id(result.entity_id)
    assert stored.topics == ["loops"]
    assert stored.categories[0].weight == 0.5
    assert [c.category_name for c in stored.categories] == ["Clarity", "Accuracy"]


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"name": " "}, "Parameter name cannot be empty."),
        ({"required_posts": -1}, "Required posts must be 0 or greater."),
        ({"required_replies": -1}, "Required replies must be 0 or greater."),
        ({"topics": ["t"] * 21}, "Cannot have more than 20 topics."),
        ({"topics": ["x" * 101]}, "Each topic cannot exceed 100 characters."),
        ({"thread_id": ""}, "Thread selection is required."),
        ({"categories": []}, "At least one category is required."),
        ({"categories": [ParameterCategory("c", 0.1)] * 21}, "Cannot have more than 20 categories."),
        ({"categories": [ParameterCategory("", 0.1)]}, "Category name cannot be empty."),
    ],
)
def test_create_rejects_invalid(parameters, categories, overrides, message) -> None:
    result = _create(parameters, categories, **overrides)
    assert result.reason == message
    assert parameters.count() == 0


@pytest.mark.parametrize("weight", [0.0, 1.0])
def test_category_weight_bounds_accepted(parameters, weight) -> None:
    assert _create(parameters, [ParameterCategory("Edge", weight)]).ok


@pytest.mark.parametrize("weight", [-0.0001, 1.0001])
def test_category_weight_out_of_range(parameters, weight) -> None:
    result = _create(parameters, [ParameterCategory("Edge", weight)])
    assert result.reason == "Category weight must be between 0.0 and 1.0."


def test_update_keeps_creator_and_never_half_applies(parameters, categories) -> None:
    parameter_id = _create(parameters, categories).entity_id
    before = parameters.get_by_id(parameter_id)
    created_at = before.created_at

    bad = parameters.update(parameter_id, "Renamed", "Desc", False, 1, 1, [], "THREAD_1", [])
    assert bad.reason == "At least one category is required."
    assert parameters.get_by_id(parameter_id).name == "Participation"

    assert parameters.update(
        parameter_id, "Renamed", "Desc", False, 1, 1, ["x"], "THREAD_2", [ParameterCategory("Only", 1.0)]
    ).ok
    updated = parameters.get_by_id(parameter_id)
    assert updated.name == "Renamed"
    assert not updated.is_active
    assert updated.created_by_username == "staff"
    assert updated.created_at == created_at
    assert [c.category_name for c in updated.categories] == ["Only"]

    assert parameters.update("PARAM_404", "n", "d", True).reason == "Parameter not found."


def test_bulk_deletes(parameters, categories) -> None:
    a = _create(parameters, categories).entity_id
    b = _create(parameters, categories, created_by_username="other").entity_id
    c = _create(parameters, categories).entity_id

    assert parameters.delete_selected([b, "PARAM_404"])
    assert not parameters.delete_selected(["PARAM_404"])
    assert parameters.delete_all_by_creator("staff")
    assert not parameters.delete_all_by_creator("staff")
    assert not parameters.exists_by_id(a)
    assert not parameters.exists_by_id(c)
    assert not parameters.delete(a)


def test_listings_newest_first(parameters, categories) -> None:
    a = _create(parameters, categories).entity_id
    b = _create(parameters, categories, is_active=False).entity_id
    c = _create(parameters, categories, thread_id="THREAD_2").entity_id

    assert [p.parameter_id for p in parameters.all()] == [c, b, a]
    assert [p.parameter_id for p in parameters.all_active()] == [c, a]
    assert [p.parameter_id for p in parameters.active_by_creator("staff")] == [c, a]
    assert [p.parameter_id for p in parameters.by_thread("THREAD_1")] == [b, a]
    assert parameters.by_thread(None) == []
    assert parameters.active_count() == 2
