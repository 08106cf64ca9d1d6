"""
Naming heuristics — small pure string transforms between table names,
relationship names and module names.

Pluralization is deliberately simple (no inflection dictionary):

    post     → posts         category → categories     day  → days
    box      → boxes         match    → matches        news → news

Words that already end in "s" are assumed to be plural.
"""
import re

_SIBILANT_ENDINGS = ("ch", "sh", "x", "z")
_VOWELS = "aeiou"
_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def pluralize(word: str) -> str:
    if not word or word.endswith("s"):
        return word
    if word.endswith("y") and len(word) > 1 and word[-2] not in _VOWELS:
        return word[:-1] + "ies"
    if word.endswith(_SIBILANT_ENDINGS):
        return word + "es"
    return word + "s"


def singularize(word: str) -> str:
    """Inverse of pluralize for the regular cases.

    categories → category, boxes → box, addresses → address,
    users → user, status → status ("us"/"ss" endings are kept).
    """
    if word.endswith("ies") and len(word) > 3:
        return word[:-3] + "y"
    if word.endswith("sses") or word.endswith(tuple(e + "es" for e in _SIBILANT_ENDINGS)):
        return word[:-2]
    if word.endswith(("ss", "us", "is")):
        return word
    if word.endswith("s") and len(word) > 1:
        return word[:-1]
    return word


def snake_case(name: str) -> str:
    """BlogPost → blog_post, HTTPLog → http_log, Post → post."""
    return _WORD_BOUNDARY.sub("_", name).lower().lstrip("_")


def module_to_table_name(module: str) -> str:
    """MyApp.Blog.PostComment → post_comments"""
    return pluralize(snake_case(module.split(".")[-1]))


def moduleize(table: str, namespace: str) -> str:
    """order_items → <namespace>.OrderItems"""
    resource = "".join(part.capitalize() for part in table.split("_") if part)
    return f"{namespace}.{resource}" if namespace else resource


def infer_relationship_name(column: str, referenced_table: str) -> str:
    """customer_id → customer; otherwise the singular referenced table."""
    if column.endswith("_id") and len(column) > 3:
        return column[:-3]
    return singularize(referenced_table)
