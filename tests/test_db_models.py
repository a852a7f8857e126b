"""Unit tests for the ORM models defined in forum_desk.models.

These tests verify basic mapping correctness: table names, the composite
primary key of parameter categories, and that the category relationship is
an instrumented, ordered attribute.
"""

from sqlalchemy.orm import attributes

from forum_desk import models


def test_table_names():
    """Model classes expose expected __tablename__ values."""
    assert models.PostRecord.__tablename__ == "post"
    assert models.ReplyRecord.__tablename__ == "reply"
    assert models.ThreadRecord.__tablename__ == "thread"
    assert models.RequestRecord.__tablename__ == "support_request"
    assert models.ParameterRecord.__tablename__ == "grading_parameter"
    assert models.ParameterCategoryRecord.__tablename__ == "grading_parameter_category"


def test_category_composite_primary_key():
    """Categories are keyed by (parameter_id, position)."""
    table = models.ParameterCategoryRecord.__table__
    assert {c.name for c in table.primary_key} == {"parameter_id", "position"}


def test_category_relationship_is_instrumented():
    assert isinstance(models.ParameterRecord.categories, attributes.InstrumentedAttribute)
    assert isinstance(models.ParameterCategoryRecord.parameter, attributes.InstrumentedAttribute)


def test_replies_have_no_foreign_key_to_posts():
    """Replies may outlive their post row in older stores."""
    assert not models.ReplyRecord.__table__.c.parent_post_id.foreign_keys
