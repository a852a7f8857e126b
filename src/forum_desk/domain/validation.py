"""Pure validators for forum entities.

Each validator returns an empty string when the entity is acceptable and a
user-facing message naming the first violated rule otherwise. Emptiness is
checked before length bounds, and structural rules run after field rules, so
the message for a given entity is always the same.
"""

from __future__ import annotations

from typing import Final

from forum_desk.domain.entities import (
    Parameter,
    ParameterCategory,
    Post,
    Reply,
    Request,
    Thread,
)

POST_MAX_TITLE: Final[int] = 100
POST_MAX_BODY: Final[int] = 5000
REPLY_MAX_BODY: Final[int] = 3000
THREAD_MAX_TITLE: Final[int] = 100
THREAD_MAX_DESCRIPTION: Final[int] = 500
REQUEST_MAX_TITLE: Final[int] = 200
REQUEST_MAX_DESCRIPTION: Final[int] = 2000
REQUEST_MAX_RESOLUTION_NOTES: Final[int] = 2000
REQUEST_MAX_REOPEN_REASON: Final[int] = 1000
PARAMETER_MAX_NAME: Final[int] = 100
PARAMETER_MAX_DESCRIPTION: Final[int] = 500
PARAMETER_MAX_TOPICS: Final[int] = 20
PARAMETER_MAX_TOPIC_LENGTH: Final[int] = 100
PARAMETER_MAX_CATEGORIES: Final[int] = 20
CATEGORY_MAX_NAME: Final[int] = 100
CATEGORY_WEIGHT_MIN: Final[float] = 0.0
CATEGORY_WEIGHT_MAX: Final[float] = 1.0
SEARCH_MAX_LENGTH: Final[int] = 100


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def validate_post(post: Post) -> str:
    if _blank(post.title):
        return "Post title cannot be empty."
    if _blank(post.body):
        return "Post body cannot be empty."
    if len(post.title) > POST_MAX_TITLE:
        return f"Post title cannot exceed {POST_MAX_TITLE} characters."
    if len(post.body) > POST_MAX_BODY:
        return f"Post body cannot exceed {POST_MAX_BODY} characters."
    return ""


def validate_reply(reply: Reply) -> str:
    if _blank(reply.body):
        return "Reply body cannot be empty."
    if len(reply.body) > REPLY_MAX_BODY:
        return f"Reply body cannot exceed {REPLY_MAX_BODY} characters."
    if _blank(reply.parent_post_id):
        return "Reply must reference an existing post."
    return ""


def validate_thread(thread: Thread) -> str:
    if _blank(thread.title):
        return "Thread title cannot be empty."
    if _blank(thread.description):
        return "Thread description cannot be empty."
    if len(thread.title) > THREAD_MAX_TITLE:
        return f"Thread title cannot exceed {THREAD_MAX_TITLE} characters."
    if len(thread.description) > THREAD_MAX_DESCRIPTION:
        return f"Thread description cannot exceed {THREAD_MAX_DESCRIPTION} characters."
    return ""


def validate_request(request: Request) -> str:
    if _blank(request.title):
        return "Request title cannot be empty."
    if _blank(request.description):
        return (
            "Request description cannot be empty. Please explain what you need help "
            "with and what you have done so far."
        )
    if request.category is None:
        return "Request category must be selected."
    if len(request.title) > REQUEST_MAX_TITLE:
        return f"Request title cannot exceed {REQUEST_MAX_TITLE} characters."
    if len(request.description) > REQUEST_MAX_DESCRIPTION:
        return f"Request description cannot exceed {REQUEST_MAX_DESCRIPTION} characters."
    return ""


def validate_resolution_notes(notes: str | None) -> str:
    if _blank(notes):
        return "Resolution notes are required when closing a request."
    if len(notes) > REQUEST_MAX_RESOLUTION_NOTES:
        return f"Resolution notes cannot exceed {REQUEST_MAX_RESOLUTION_NOTES} characters."
    return ""


def validate_reopen_reason(reason: str | None) -> str:
    if _blank(reason):
        return "Reopen reason is required when reopening a request."
    if len(reason) > REQUEST_MAX_REOPEN_REASON:
        return f"Reopen reason cannot exceed {REQUEST_MAX_REOPEN_REASON} characters."
    return ""


def validate_category(category: ParameterCategory) -> str:
    if _blank(category.category_name):
        return "Category name cannot be empty."
    if len(category.category_name) > CATEGORY_MAX_NAME:
        return f"Category name cannot exceed {CATEGORY_MAX_NAME} characters."
    if category.weight is None or not (
        CATEGORY_WEIGHT_MIN <= category.weight <= CATEGORY_WEIGHT_MAX
    ):
        return (
            f"Category weight must be between {CATEGORY_WEIGHT_MIN} "
            f"and {CATEGORY_WEIGHT_MAX}."
        )
    return ""


def validate_parameter(parameter: Parameter) -> str:
    """Validate a parameter's own fields, then each of its categories."""
    if _blank(parameter.name):
        return "Parameter name cannot be empty."
    if _blank(parameter.description):
        return "Parameter description cannot be empty."
    if len(parameter.name) > PARAMETER_MAX_NAME:
        return f"Parameter name cannot exceed {PARAMETER_MAX_NAME} characters."
    if len(parameter.description) > PARAMETER_MAX_DESCRIPTION:
        return f"Parameter description cannot exceed {PARAMETER_MAX_DESCRIPTION} characters."
    if parameter.required_posts < 0:
        return "Required posts must be 0 or greater."
    if parameter.required_replies < 0:
        return "Required replies must be 0 or greater."
    if len(parameter.topics) > PARAMETER_MAX_TOPICS:
        return f"Cannot have more than {PARAMETER_MAX_TOPICS} topics."
    for topic in parameter.topics:
        if topic is not None and len(topic) > PARAMETER_MAX_TOPIC_LENGTH:
            return f"Each topic cannot exceed {PARAMETER_MAX_TOPIC_LENGTH} characters."
    if _blank(parameter.thread_id):
        return "Thread selection is required."
    if not parameter.categories:
        return "At least one category is required."
    if len(parameter.categories) > PARAMETER_MAX_CATEGORIES:
        return f"Cannot have more than {PARAMETER_MAX_CATEGORIES} categories."
    for category in parameter.categories:
        error = validate_category(category)
        if error:
            return error
    return ""


def validate_search_keyword(keyword: str | None, max_length: int = SEARCH_MAX_LENGTH) -> str:
    """Reject keywords that should not run a search at all."""
    if keyword is not None and len(keyword) > max_length:
        return f"Search/filter input cannot exceed {max_length} characters."
    if _blank(keyword):
        return "Please enter a keyword to search."
    return ""
