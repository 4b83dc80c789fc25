"""
Shared test fixtures for SchemaLayout tests.

Provides reusable schemas, layout graphs and configurations for testing
the layout engine, relationship extraction and persistence.
"""

import random

import pytest
from typing import Dict, List

from schemalayout.layout.config import LayoutConfig
from schemalayout.layout.state import LayoutEdge, LayoutNode
from schemalayout.schema.abstraction import Schema


@pytest.fixture
def blog_schema_data() -> Dict:
    """Entity mapping for a small blogging schema."""
    return {
        "Blog": {
            "type": "Blog",
            "properties": [
                {"name": "Id", "type": "int", "isKey": True},
                {"name": "Title", "type": "string"},
                {"name": "UserId", "type": "int", "isForeignKey": True},
                {"name": "Posts", "type": "ICollection<Post>"},
            ],
        },
        "Post": {
            "type": "Post",
            "properties": [
                {"name": "Id", "type": "int", "isKey": True},
                {"name": "Content", "type": "string"},
                {"name": "BlogId", "type": "int", "isForeignKey": True},
                {"name": "AuthorId", "type": "int", "isForeignKey": True},
                {"name": "Blog", "type": "Blog"},
            ],
        },
        "User": {
            "type": "User",
            "properties": [
                {"name": "Id", "type": "int", "isKey": True},
                {"name": "Email", "type": "string"},
            ],
        },
        "AuditLog": {
            "type": "AuditLog",
            "properties": [
                {"name": "Id", "type": "long", "isKey": True},
                {"name": "Message", "type": "string"},
            ],
        },
    }


@pytest.fixture
def blog_schema(blog_schema_data) -> Schema:
    """Blogging schema: Blog->User, Post->Blog, Post.AuthorId unresolvable, AuditLog isolated."""
    return Schema.from_dict(blog_schema_data, name="blog")


@pytest.fixture
def two_tables() -> List[LayoutNode]:
    """Two 300x200 tables."""
    return [
        LayoutNode(name="A", width=300.0, height=200.0),
        LayoutNode(name="B", width=300.0, height=200.0),
    ]


@pytest.fixture
def disconnected_tables() -> List[LayoutNode]:
    """Five tables with no relationships, given out of alphabetical order."""
    return [
        LayoutNode(name=name, width=625.0, height=300.0)
        for name in ("Echo", "Alpha", "Delta", "Bravo", "Charlie")
    ]


@pytest.fixture
def dense_graph():
    """Twenty tables where each shares an edge with four others."""
    nodes = [
        LayoutNode(name=f"T{i:02d}", width=625.0 + 40 * (i % 3), height=250.0 + 55 * (i % 4))
        for i in range(20)
    ]
    edges = []
    for i in range(20):
        edges.append(LayoutEdge(source=f"T{i:02d}", target=f"T{(i + 1) % 20:02d}"))
        edges.append(LayoutEdge(source=f"T{i:02d}", target=f"T{(i + 2) % 20:02d}"))
    return nodes, edges


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def slow_cooling_config() -> LayoutConfig:
    """Long, slowly cooling phases so springs can reach their rest length."""
    return LayoutConfig.from_dict({
        "phase1": {
            "max_iterations": 600,
            "cooling_rate": 0.999,
            "min_temperature": 0.01,
            "convergence_threshold": 0.001,
        },
        "phase2": {
            "max_iterations": 300,
            "cooling_rate": 0.999,
            "min_temperature": 0.01,
            "convergence_threshold": 0.001,
        },
        "phase3": {
            "max_iterations": 300,
            "cooling_rate": 0.999,
            "min_temperature": 0.01,
            "convergence_threshold": 0.001,
        },
    })
