"""Shared test fixtures for constellation tests."""

import pytest

from constellation.config import Config, MapConfig, SiteConfig, StateConfig
from constellation.content import ContentIndex
from constellation.graph import GraphDataModel, load_graph
from constellation.interaction import MapInteraction
from constellation.models import ContentRecord
from constellation.progress import ProgressStore
from constellation.store import MemoryStateStore
from constellation.view_state import ViewStateStore

SAMPLE_GROUPS = {
    "core": {
        "name": "TinyCore ESP32",
        "color": "#6bb4ff",
        "nodes": [
            {
                "id": "intro", "name": "Introduction", "x": 0, "y": 0, "difficulty": 1,
                "subpages": [
                    {"id": "overview", "title": "ESP32 Overview"},
                    {"id": "features", "title": "Key Features"},
                    {"id": "comparison", "title": "ESP32 vs Other MCUs"},
                    {"id": "ecosystem", "title": "TinyCore Ecosystem"},
                ],
            },
            {
                "id": "setup", "name": "Getting Started", "x": 100, "y": -50, "difficulty": 2,
                "subpages": [
                    {"id": "prerequisites", "title": "Prerequisites"},
                    {"id": "installation", "title": "Software Installation"},
                ],
            },
        ],
        "links": [{"source": "intro", "target": "setup"}],
    },
    "sensors": {
        "name": "Sensors & Inputs",
        "color": "#6bffb4",
        "nodes": [
            {"id": "analog", "name": "Analog Sensors", "x": -200, "y": -150, "difficulty": 0},
            {"id": "digital", "name": "Digital Sensors", "x": -300, "y": -200},
        ],
        "links": [
            {"source": "analog", "target": "digital"},
            {"source": "intro", "target": "analog"},
        ],
    },
}


@pytest.fixture()
def graph():
    """Two groups, one cross-group link, every endpoint resolvable."""
    return GraphDataModel.from_dict(SAMPLE_GROUPS)


@pytest.fixture()
def packaged_graph():
    return load_graph(Config().resolved_graph_path)


@pytest.fixture()
def config(tmp_path):
    """Config whose every path points into a temp dir."""
    return Config(
        map=MapConfig(seed=7, background_stars=20),
        site=SiteConfig(
            content_dir=str(tmp_path / "content"),
            output_dir=str(tmp_path / "public"),
            preview_size=200,
        ),
        state=StateConfig(db_path=str(tmp_path / "state.db")),
    )


@pytest.fixture()
def store():
    return MemoryStateStore()


@pytest.fixture()
def progress(store, graph):
    return ProgressStore(store, graph)


@pytest.fixture()
def view_state(store):
    return ViewStateStore(store)


@pytest.fixture()
def content():
    return ContentIndex([
        ContentRecord(
            slug="intro/index",
            title="Introduction to TinyCore ESP32",
            html="<h1>Intro</h1><p>The TinyCore ESP32 is a compact microcontroller.</p><p>More.</p>",
        ),
        ContentRecord(slug="setup", title="Getting Started", excerpt="Install the toolchain."),
    ])


@pytest.fixture()
def navigations():
    """Routes passed to the navigate callback, in order."""
    return []


@pytest.fixture()
def interaction(packaged_graph, store, content, navigations):
    """Map view over the packaged curriculum with in-memory state."""
    view = MapInteraction(
        packaged_graph,
        ProgressStore(store, packaged_graph),
        ViewStateStore(store),
        content=content,
        width=1200,
        height=800,
        navigate=navigations.append,
    )
    view.mount()
    return view
