import pytest
from core.naming import (
    infer_relationship_name, module_to_table_name, moduleize, pluralize, singularize, snake_case,
)


@pytest.mark.parametrize("word, plural", [
    ("post", "posts"),
    ("comment", "comments"),
    ("category", "categories"),
    ("day", "days"),
    ("key", "keys"),
    ("box", "boxes"),
    ("match", "matches"),
    ("wish", "wishes"),
    ("quiz", "quizes"),
    ("posts", "posts"),
    ("status", "status"),
    ("", ""),
])
def test_pluralize(word, plural):
    assert pluralize(word) == plural


@pytest.mark.parametrize("word, singular", [
    ("users", "user"),
    ("categories", "category"),
    ("boxes", "box"),
    ("matches", "match"),
    ("addresses", "address"),
    ("status", "status"),
    ("analysis", "analysis"),
    ("staff", "staff"),
])
def test_singularize(word, singular):
    assert singularize(word) == singular


@pytest.mark.parametrize("word", ["post", "category", "box", "match", "user"])
def test_singularize_inverts_pluralize(word):
    assert singularize(pluralize(word)) == word


@pytest.mark.parametrize("name, snake", [
    ("Post", "post"),
    ("BlogPost", "blog_post"),
    ("HTTPLog", "http_log"),
    ("OrderItem2", "order_item2"),
])
def test_snake_case(name, snake):
    assert snake_case(name) == snake


def test_module_to_table_name():
    assert module_to_table_name("MyApp.Blog.Post") == "posts"
    assert module_to_table_name("MyApp.Blog.PostComment") == "post_comments"
    assert module_to_table_name("Category") == "categories"


def test_moduleize():
    assert moduleize("order_items", "GMiner.Resources") == "GMiner.Resources.OrderItems"
    assert moduleize("users", "") == "Users"
    assert moduleize("API_keys", "App") == "App.ApiKeys"


def test_infer_relationship_name():
    assert infer_relationship_name("customer_id", "customers") == "customer"
    assert infer_relationship_name("owner", "users") == "user"
    assert infer_relationship_name("parent", "categories") == "category"
