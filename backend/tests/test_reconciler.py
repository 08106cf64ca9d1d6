from core.legacy_miner import mine_legacy_schema
from core.reconciler import (
    DEFINE_MANUALLY, NO_REFERENCING_COLUMN, NO_REVERSE_FOREIGN_KEY, reconcile, through_resource,
)
from models.catalog import CatalogModel, ForeignKeyConstraint, ReverseForeignKey
from models.legacy import Association, LegacyModel

NS = "GMiner.Resources"


def _resolved(relationships):
    return [(r.kind, r.name, r.destination, r.source_field, r.destination_field)
            for r in relationships if r.resolved]


def test_catalog_only_names(orders_catalog):
    relationships, diagnostics = reconcile(orders_catalog, LegacyModel(), NS)
    assert _resolved(relationships) == [
        ("belongs_to", "customer", "GMiner.Resources.Customers", "customer_id", "id"),
    ]
    assert diagnostics == []


def test_reverse_foreign_key_without_legacy_is_pluralized_source_table():
    catalog = CatalogModel(
        table_name="posts",
        reverse_foreign_keys=[ReverseForeignKey(source_table="comments", source_column="post_id", target_column="id")],
    )
    relationships, diagnostics = reconcile(catalog, LegacyModel(), NS)
    assert _resolved(relationships) == [("has_many", "comments", "GMiner.Resources.Comments", "id", "post_id")]
    assert [r for r in relationships if not r.resolved] == []
    assert diagnostics == []


def test_legacy_names_take_over_matching_catalog_edges():
    catalog = CatalogModel(
        table_name="posts",
        foreign_keys=[ForeignKeyConstraint(column="writer_id", referenced_table="users",
                                           referenced_column="id", constraint_name="fk")],
        reverse_foreign_keys=[ReverseForeignKey(source_table="post_comments", source_column="post_id",
                                                target_column="id")],
    )
    legacy = LegacyModel(associations=[
        Association(kind="belongs_to", name="writer", module="MyApp.User"),
        Association(kind="has_many", name="feedback", module="MyApp.Blog.PostComment"),
    ])
    relationships, diagnostics = reconcile(catalog, legacy, NS)
    assert [r.name for r in relationships] == ["writer", "feedback"]
    assert all(r.resolved for r in relationships)
    assert diagnostics == []


def test_unmatched_legacy_associations_become_unresolved_directives(posts_catalog, post_schema_source):
    legacy, _ = mine_legacy_schema(post_schema_source)
    relationships, diagnostics = reconcile(posts_catalog, legacy, NS)

    assert [(r.kind, r.name, r.resolved) for r in relationships] == [
        ("belongs_to", "author", True),
        ("has_many", "comments", True),
        ("many_to_many", "tags", True),
        ("belongs_to", "editor", False),
        ("has_many", "revisions", False),
        ("has_one", "cover_image", False),
    ]
    reasons = {r.name: r.reason for r in relationships if not r.resolved}
    assert reasons == {
        "editor": NO_REFERENCING_COLUMN,
        "revisions": NO_REVERSE_FOREIGN_KEY,
        "cover_image": DEFINE_MANUALLY,
    }
    assert [d.subject for d in diagnostics if d.kind == "unresolved_relationship"] == [
        "editor", "revisions", "cover_image",
    ]
    tags = relationships[2]
    assert tags.destination == "MyApp.Blog.Tag"
    assert tags.through == "GMiner.Resources.PostsTags"
    assert tags.origin == "legacy"


def test_legacy_restating_catalog_keeps_resolved_set(posts_catalog):
    without_legacy, _ = reconcile(posts_catalog, LegacyModel(), NS)
    restating = LegacyModel(associations=[
        Association(kind="belongs_to", name="author", module="MyApp.Accounts.User"),
        Association(kind="has_many", name="comments", module="MyApp.Blog.Comment"),
    ])
    with_legacy, diagnostics = reconcile(posts_catalog, restating, NS)
    assert _resolved(with_legacy) == _resolved(without_legacy)
    assert diagnostics == []


def test_first_unconsumed_match_wins_and_is_used_once():
    catalog = CatalogModel(
        table_name="posts",
        reverse_foreign_keys=[
            ReverseForeignKey(source_table="comments", source_column="post_id", target_column="id"),
            ReverseForeignKey(source_table="comments", source_column="parent_post_id", target_column="id"),
        ],
    )
    legacy = LegacyModel(associations=[
        Association(kind="has_many", name="comments", module="MyApp.Comment"),
        Association(kind="has_many", name="replies", module="MyApp.Comment"),
    ])
    relationships, diagnostics = reconcile(catalog, legacy, NS)
    assert [r.name for r in relationships] == ["comments", "replies"]
    assert all(r.resolved for r in relationships)
    assert diagnostics == []


def test_duplicate_fallback_names_are_flagged():
    catalog = CatalogModel(
        table_name="posts",
        reverse_foreign_keys=[
            ReverseForeignKey(source_table="comments", source_column="post_id", target_column="id"),
            ReverseForeignKey(source_table="comments", source_column="parent_post_id", target_column="id"),
        ],
    )
    relationships, diagnostics = reconcile(catalog, LegacyModel(), NS)
    assert [r.name for r in relationships] == ["comments", "comments"]
    assert [d.kind for d in diagnostics] == ["duplicate_relationship_name"]


def test_foreign_key_without_id_suffix_uses_singular_table():
    catalog = CatalogModel(
        table_name="posts",
        foreign_keys=[ForeignKeyConstraint(column="owner", referenced_table="users",
                                           referenced_column="id", constraint_name="fk")],
    )
    relationships, _ = reconcile(catalog, LegacyModel(), NS)
    assert relationships[0].name == "user"


def test_through_resource():
    assert through_resource("posts_tags", NS) == "GMiner.Resources.PostsTags"
    assert through_resource("MyApp.Blog.PostTag", NS) == "GMiner.Resources.PostTag"
