import os
import sys

# Add the parent directory (backend) to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest
from fastapi.testclient import TestClient

from core import catalog_reader as cr
from main import app
from models.catalog import (
    CatalogColumn, CatalogModel, EnumColumn, ForeignKeyConstraint, ReverseForeignKey, UniqueConstraint,
)


class FakeResult:
    def __init__(self, rows):
        self._rows = rows

    def mappings(self):
        return self

    def all(self):
        return list(self._rows)


class FakeCatalogConnection:
    """Replays canned rows per catalog query; unknown queries return no rows."""

    def __init__(self, responses=None, error=None):
        self.responses = responses or []        # [(query, rows)]
        self.error = error
        self.calls = []

    def execute(self, query, params=None):
        self.calls.append((query, params))
        if self.error is not None:
            raise self.error
        for q, rows in self.responses:
            if q is query:
                return FakeResult(rows)
        return FakeResult([])


def column_row(name, data_type, nullable="YES", default=None, max_length=None,
               precision=None, scale=None, udt_name=None, position=1):
    return {
        "column_name": name,
        "data_type": data_type,
        "is_nullable": nullable,
        "column_default": default,
        "character_maximum_length": max_length,
        "numeric_precision": precision,
        "numeric_scale": scale,
        "udt_name": udt_name or data_type,
        "ordinal_position": position,
    }


@pytest.fixture(scope="session")
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def orders_connection():
    """Catalog rows for `orders`: integer id, text notes, uuid customer_id → customers.id."""
    return FakeCatalogConnection([
        (cr.COLUMNS_SQL, [
            column_row("id", "integer", "NO", "nextval('orders_id_seq'::regclass)", position=1),
            column_row("notes", "text", "YES", position=2),
            column_row("customer_id", "uuid", "NO", position=3),
        ]),
        (cr.PRIMARY_KEY_SQL, [{"column_name": "id"}]),
        (cr.FOREIGN_KEYS_SQL, [{
            "column_name": "customer_id",
            "foreign_table": "customers",
            "foreign_column": "id",
            "constraint_name": "orders_customer_id_fkey",
        }]),
        (cr.UNIQUE_INDEXES_SQL, [{"name": "orders_customer_id_index", "columns": ["customer_id"]}]),
    ])


@pytest.fixture
def orders_catalog():
    return CatalogModel(
        table_name="orders",
        columns=[
            CatalogColumn(name="id", data_type="integer", is_nullable=False,
                          column_default="nextval('orders_id_seq'::regclass)", ordinal_position=1),
            CatalogColumn(name="notes", data_type="text", is_nullable=True, ordinal_position=2),
            CatalogColumn(name="customer_id", data_type="uuid", is_nullable=False, ordinal_position=3),
        ],
        primary_key=["id"],
        foreign_keys=[ForeignKeyConstraint(
            column="customer_id", referenced_table="customers",
            referenced_column="id", constraint_name="orders_customer_id_fkey",
        )],
        unique_constraints=[UniqueConstraint(
            name="orders_customer_id_index", columns=["customer_id"], origin="index",
        )],
    )


@pytest.fixture
def posts_catalog():
    return CatalogModel(
        table_name="posts",
        columns=[
            CatalogColumn(name="id", data_type="bigint", is_nullable=False, ordinal_position=1),
            CatalogColumn(name="title", data_type="character varying", is_nullable=False,
                          character_maximum_length=255, ordinal_position=2),
            CatalogColumn(name="status", data_type="USER-DEFINED", udt_name="post_status", is_nullable=False,
                          column_default="'pending'::post_status", ordinal_position=3),
            CatalogColumn(name="author_id", data_type="bigint", is_nullable=True, ordinal_position=4),
            CatalogColumn(name="inserted_at", data_type="timestamp without time zone",
                          is_nullable=False, ordinal_position=5),
            CatalogColumn(name="updated_at", data_type="timestamp without time zone",
                          is_nullable=False, ordinal_position=6),
        ],
        primary_key=["id"],
        foreign_keys=[ForeignKeyConstraint(
            column="author_id", referenced_table="users",
            referenced_column="id", constraint_name="posts_author_id_fkey",
        )],
        enum_columns=[EnumColumn(column_name="status", type_name="post_status",
                                 labels=["pending", "active", "closed"])],
        reverse_foreign_keys=[ReverseForeignKey(
            source_table="comments", source_column="post_id", target_column="id",
        )],
    )


ECTO_POST_SCHEMA = '''\
defmodule MyApp.Blog.Post do
  use Ecto.Schema
  import Ecto.Changeset

  schema "posts" do
    field :title, :string
    field :status, Ecto.Enum, values: [:pending, :active, :closed]
    field :word_count, :integer, virtual: true
    field :preview, :string, virtual: true

    belongs_to :author, MyApp.Accounts.User
    belongs_to :editor, MyApp.Accounts.User
    has_many :comments, MyApp.Blog.Comment
    has_many :revisions, MyApp.Blog.Revision
    has_one :cover_image, MyApp.Media.Image
    many_to_many :tags, MyApp.Blog.Tag, join_through: "posts_tags"

    timestamps()
  end

  def changeset(post, attrs) do
    post
    |> cast(attrs, [:title, :status])
    |> validate_required([:title, :status])
    |> validate_length(:title, min: 3, max: 255)
    |> validate_inclusion(:status, [:pending, :active, :closed])
  end

  def publish_changeset(post, attrs) do
    changeset = cast(post, attrs, [:status])
    validate_format(changeset, :title, ~r/^[A-Z]/)
  end
end
'''


@pytest.fixture
def post_schema_source():
    return ECTO_POST_SCHEMA


@pytest.fixture
def post_schema_file(tmp_path):
    path = tmp_path / "post.ex"
    path.write_text(ECTO_POST_SCHEMA, encoding="utf-8")
    return str(path)
