"""Static site generation: the constellation map page and one page per lesson.

The map page embeds the scene built in Python (background field, links, node
geometry) as JSON. In the browser, D3 handles zoom and pan, and progress arcs
are drawn from ``localStorage`` under the same keys the Python stores use.
"""

import json
import logging
import random
from dataclasses import dataclass, field
from pathlib import Path

from constellation.config import Config
from constellation.content import (
    PLACEHOLDER_HTML,
    PLACEHOLDER_TITLE,
    ContentIndex,
    describe,
    load_content,
)
from constellation.graph import GraphDataModel, load_graph
from constellation.models import ContentRecord, NavSection, PageRef, ProgressSnapshot, Scene
from constellation.navigation import load_navigation, page_route, page_sequence, prev_next
from constellation.preview import render_preview
from constellation.scene import FULL_COMPLETION, build_scene
from constellation.store import VIEW_SCALE_KEY, VIEW_X_KEY, VIEW_Y_KEY, VISITED_KEY
from constellation.svg import render_svg

logger = logging.getLogger(__name__)


def _esc(s: str) -> str:
    return s.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;").replace("'", "&#39;")


def _script_json(data: object) -> str:
    return json.dumps(data, ensure_ascii=False).replace("</", "<\\/")


@dataclass
class SiteResult:
    output_dir: Path
    pages: list[Path] = field(default_factory=list)
    redirects: list[Path] = field(default_factory=list)
    preview: Path | None = None
    placeholders: int = 0

    def __str__(self) -> str:
        return (
            f"Site written to {self.output_dir}: {len(self.pages)} pages "
            f"({self.placeholders} placeholders), {len(self.redirects)} redirects"
        )


STORAGE_KEYS = {
    "x": VIEW_X_KEY,
    "y": VIEW_Y_KEY,
    "scale": VIEW_SCALE_KEY,
    "visited": VISITED_KEY,
}


BASE_CSS = """
:root {
    --bg-color: #0b1021;
    --sidebar-bg: #141a2e;
    --text-color: #e6edf3;
    --highlight-color: #ffd76b;
}
* { margin: 0; padding: 0; box-sizing: border-box; }
body {
    background: var(--bg-color);
    color: var(--text-color);
    font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Helvetica, Arial, sans-serif;
    height: 100vh;
    display: flex;
    overflow: hidden;
}
a { color: inherit; }
.sidebar {
    width: 260px;
    flex-shrink: 0;
    background: var(--sidebar-bg);
    overflow-y: auto;
    padding: 1rem;
}
.sidebar h1 { font-size: 18px; margin-bottom: 1rem; }
.nav-section summary { cursor: pointer; padding: 6px 0; font-weight: 600; }
.nav-link { display: block; padding: 4px 12px; text-decoration: none; color: #8b949e; font-size: 14px; }
.nav-link:hover, .nav-link.active { color: var(--highlight-color); }
.content { flex: 1; position: relative; overflow-y: auto; }
"""


def _sidebar(navigation: list[NavSection], short_title: str, base: str, active: str | None = None) -> str:
    sections = []
    for i, section in enumerate(navigation):
        is_open = i == 0 or any(item.id == active for item in section.items)
        links = "".join(
            f'<a class="nav-link{" active" if item.id == active else ""}" '
            f'href="{base}{page_route(item.id)}">{_esc(item.name)}</a>'
            for item in section.items
        )
        sections.append(
            f'<details class="nav-section"{" open" if is_open else ""}>'
            f"<summary>{_esc(section.title)}</summary>{links}</details>"
        )
    return (
        f'<div class="sidebar"><h1><a href="{base}/" style="text-decoration:none">'
        f'{_esc(short_title)}</a></h1><nav class="navigation">{"".join(sections)}</nav></div>'
    )


def _map_payload(
    graph: GraphDataModel,
    scene: Scene,
    content: ContentIndex,
    config: Config,
) -> dict:
    nodes = {}
    for key, node in graph.iter_nodes():
        nodes[node.id] = {
            "name": node.name,
            "group": key,
            "difficulty": node.difficulty,
            "subpages": [s.model_dump() for s in node.subpages],
            "description": describe(content.for_node(node.id), config.map.tooltip_max_chars),
        }
    return {
        "scene": scene.model_dump(),
        "nodes": nodes,
        "keys": STORAGE_KEYS,
        "base": config.site.base_url.rstrip("/"),
        "map": {
            "defaultScale": config.map.default_scale,
            "minScale": config.map.min_scale,
            "maxScale": config.map.max_scale,
            "zoomIn": config.map.zoom_in_factor,
            "zoomOut": config.map.zoom_out_factor,
            "outerRadius": config.map.star_outer_radius,
            "fullCompletion": FULL_COMPLETION,
        },
    }


def render_map_html(payload: dict, navigation: list[NavSection], config: Config) -> str:
    data_json = _script_json(payload)
    title = _esc(config.site.title)
    description = _esc(config.site.description)
    base = payload["base"]
    sidebar = _sidebar(navigation, config.site.short_title, base)

    return f'''<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{title}</title>
<meta name="description" content="{description}">
<meta property="og:image" content="{base}/preview.png">
<style>
{BASE_CSS}
.constellation-container {{ position: absolute; inset: 0; overflow: hidden; }}
#constellation-map {{ display: block; cursor: grab; }}
.background-star {{ fill: white; }}
.link {{ stroke: rgba(255, 255, 255, 0.35); stroke-width: 1; }}
.node {{ cursor: pointer; }}
.node-label {{ font-size: 12px; pointer-events: none; }}
.constellation-group {{ transition: opacity 0.3s; }}
.constellation-group.dim {{ opacity: 0.3; }}
.zoom-controls {{ position: absolute; top: 12px; right: 12px; display: flex; gap: 6px; z-index: 10; }}
.zoom-controls button {{
    background: var(--sidebar-bg);
    border: 1px solid #30363d;
    color: var(--text-color);
    padding: 5px 12px;
    border-radius: 6px;
    cursor: pointer;
}}
.zoom-controls button:hover {{ background: #30363d; }}
.node-tooltip {{
    position: absolute;
    opacity: 0;
    background: rgba(22, 28, 44, 0.95);
    border-radius: 6px;
    padding: 12px 16px;
    box-shadow: 0 4px 12px rgba(0, 0, 0, 0.5);
    pointer-events: none;
    max-width: 300px;
    z-index: 1000;
    transition: opacity 0.2s ease;
}}
.node-tooltip h3 {{ margin: 0 0 6px 0; color: var(--highlight-color); }}
.node-tooltip .tt-difficulty {{ color: var(--highlight-color); margin-bottom: 4px; }}
.node-tooltip .tt-progress {{ color: #7ee787; font-size: 12px; margin-bottom: 6px; }}
.node-tooltip p {{ line-height: 1.5; font-size: 13px; }}
.subpage-menu {{
    position: absolute;
    display: none;
    background: rgba(22, 28, 44, 0.98);
    border: 1px solid #30363d;
    border-radius: 8px;
    padding: 10px 0;
    min-width: 220px;
    z-index: 1001;
    box-shadow: 0 4px 12px rgba(0, 0, 0, 0.5);
}}
.subpage-menu h4 {{ padding: 0 14px 6px; color: var(--highlight-color); }}
.subpage-menu a {{ display: flex; justify-content: space-between; padding: 5px 14px; text-decoration: none; font-size: 14px; }}
.subpage-menu a:hover {{ background: #30363d; }}
.subpage-menu .check {{ color: #7ee787; }}
.subpage-menu .bar {{ margin: 8px 14px 0; height: 4px; background: #30363d; border-radius: 2px; }}
.subpage-menu .bar div {{ height: 100%; background: var(--highlight-color); border-radius: 2px; }}
.subpage-menu .pct {{ padding: 4px 14px 0; font-size: 11px; color: #8b949e; }}
</style>
</head>
<body>
{sidebar}
<div class="content">
<div class="constellation-container" id="container">
    <div class="zoom-controls">
        <button id="zoom-in" title="Zoom in">+</button>
        <button id="zoom-out" title="Zoom out">-</button>
        <button id="reset-view" title="Reset view">Reset</button>
        <button id="reset-progress" title="Forget visited pages">Reset progress</button>
    </div>
    <svg id="constellation-map"></svg>
    <noscript><img src="{base}/map.svg" alt="{title}"></noscript>
    <div class="node-tooltip" id="tooltip"></div>
    <div class="subpage-menu" id="subpage-menu"></div>
</div>
</div>

<script src="https://d3js.org/d3.v7.min.js"></script>
<script>
const DATA = {data_json};
const KEYS = DATA.keys;
const CFG = DATA.map;

// --- Persisted state (no-ops when storage is unavailable) ---
function storageAvailable() {{
    try {{
        localStorage.setItem("__storage_test__", "1");
        localStorage.removeItem("__storage_test__");
        return true;
    }} catch (e) {{
        return false;
    }}
}}
const HAS_STORAGE = storageAvailable();

function loadVisited() {{
    if (!HAS_STORAGE) return {{}};
    try {{
        const v = JSON.parse(localStorage.getItem(KEYS.visited) || "{{}}");
        return (v && typeof v === "object" && !Array.isArray(v)) ? v : {{}};
    }} catch (e) {{
        return {{}};
    }}
}}
let visited = loadVisited();

function completion(id) {{
    const node = DATA.nodes[id];
    if (!node || !node.subpages.length) return 0;
    const pages = Array.isArray(visited[id]) ? [...new Set(visited[id])] : [];
    if (!pages.length) return 0;
    return Math.min(1, pages.length / (node.subpages.length + 1));
}}

function saveView(t) {{
    if (!HAS_STORAGE || !t) return;
    try {{
        localStorage.setItem(KEYS.x, t.x);
        localStorage.setItem(KEYS.y, t.y);
        localStorage.setItem(KEYS.scale, t.k);
    }} catch (e) {{
        // quota or security error: the view just isn't remembered
    }}
}}

// same grammar as view_state.NUMBER, so both sides accept the same values
const NUMBER = /^[+-]?(\\d+(\\.\\d*)?|\\.\\d+)([eE][+-]?\\d+)?$/;

function restoreView() {{
    if (!HAS_STORAGE) return null;
    const raw = [KEYS.x, KEYS.y, KEYS.scale].map(k => localStorage.getItem(k));
    if (raw.some(v => v === null || !NUMBER.test(v))) return null;
    const [x, y, k] = raw.map(Number);
    if (![x, y, k].every(Number.isFinite) || k <= 0) return null;
    return d3.zoomIdentity.translate(x, y).scale(k);
}}

// --- Scene ---
const containerEl = document.getElementById("container");
const svg = d3.select("#constellation-map");
function resize() {{
    svg.attr("width", containerEl.clientWidth).attr("height", containerEl.clientHeight);
}}
resize();
window.addEventListener("resize", resize);

function defaultTransform() {{
    return d3.zoomIdentity
        .translate(containerEl.clientWidth / 2, containerEl.clientHeight / 2)
        .scale(CFG.defaultScale);
}}

const defs = svg.append("defs");
const container = svg.append("g");
const tooltip = d3.select("#tooltip");
const menu = d3.select("#subpage-menu");

const zoom = d3.zoom()
    .scaleExtent([CFG.minScale, CFG.maxScale])
    .on("zoom", (event) => {{
        container.attr("transform", event.transform);
        hideTooltip();
        // only gestures carry a sourceEvent; restores and transitions do not
        if (event.sourceEvent) saveView(event.transform);
    }});
svg.call(zoom).on("dblclick.zoom", null);

const backgroundLayer = container.append("g").attr("class", "background");
for (const s of DATA.scene.background) {{
    backgroundLayer.append("circle")
        .attr("class", "background-star")
        .attr("cx", s.x).attr("cy", s.y).attr("r", s.radius)
        .style("opacity", s.opacity);
}}
const linkLayer = container.append("g").attr("class", "links");
const nodeLayer = container.append("g").attr("class", "nodes");

function wedgePath(c, r) {{
    const a = c * 2 * Math.PI;
    const large = c > 0.5 ? 1 : 0;
    return `M 0 0 L 0 ${{-r}} A ${{r}} ${{r}} 0 ${{large}} 1 ${{r * Math.sin(a)}} ${{-r * Math.cos(a)}} Z`;
}}

function drawScene() {{
    linkLayer.selectAll("*").remove();
    nodeLayer.selectAll("*").remove();
    defs.selectAll("*").remove();

    // every group's links go down before any node
    for (const group of DATA.scene.groups) {{
        const g = linkLayer.append("g")
            .attr("class", "constellation-group")
            .attr("data-group", group.key);
        for (const l of group.links) {{
            g.append("line").attr("class", "link")
                .attr("x1", l.x1).attr("y1", l.y1).attr("x2", l.x2).attr("y2", l.y2);
        }}
    }}
    for (const group of DATA.scene.groups) {{
        const g = nodeLayer.append("g")
            .attr("class", "constellation-group")
            .attr("id", `constellation-${{group.key}}`)
            .attr("data-group", group.key);
        for (const n of group.nodes) drawNode(g, n);
    }}
}}

function drawNode(parent, n) {{
    const points = n.star_points.map(p => p.join(",")).join(" ");
    const c = completion(n.node_id);
    const g = parent.append("g")
        .attr("class", "node")
        .attr("data-id", n.node_id)
        .attr("transform", `translate(${{n.x}}, ${{n.y}})`)
        .on("mouseover", (event) => showTooltip(event, n.node_id))
        .on("mouseout", hideTooltip)
        .on("click", (event) => {{
            event.stopPropagation();
            clickNode(event, n.node_id);
        }});

    g.append("polygon").attr("class", "node-star")
        .attr("points", points).attr("fill", n.color)
        .attr("fill-opacity", n.base_opacity)
        .attr("stroke", "rgba(255, 255, 255, 0.6)").attr("stroke-width", 1);
    if (c > 0 && c < CFG.fullCompletion) {{
        const clipId = `wedge-${{n.node_id}}`;
        defs.append("clipPath").attr("id", clipId)
            .append("path").attr("d", wedgePath(c, CFG.outerRadius + 2));
        g.append("polygon").attr("class", "node-progress")
            .attr("points", points).attr("fill", n.color)
            .attr("clip-path", `url(#${{clipId}})`);
    }}
    if (c >= CFG.fullCompletion) {{
        g.append("polygon").attr("class", "node-complete")
            .attr("points", points).attr("fill", n.color);
    }}
    g.append("circle").attr("cx", 0).attr("cy", 0).attr("r", n.dot_radius).attr("fill", "white");
    g.append("text").attr("class", "node-label")
        .attr("x", 0).attr("y", n.label_offset)
        .attr("text-anchor", "middle").style("fill", "white")
        .text(n.label);
}}

// --- Tooltip ---
function difficultyGlyphs(d) {{
    const filled = Math.max(0, Math.min(d, 5));
    return "\\u2605".repeat(filled) + "\\u2606".repeat(5 - filled);
}}

function showTooltip(event, id) {{
    if (menu.style("display") !== "none") return;
    const node = DATA.nodes[id];
    const c = completion(id);
    const rect = containerEl.getBoundingClientRect();
    tooltip.html("");
    tooltip.append("h3").text(node.name);
    tooltip.append("div").attr("class", "tt-difficulty").text(difficultyGlyphs(node.difficulty));
    if (c > 0) tooltip.append("div").attr("class", "tt-progress").text(`${{Math.round(c * 100)}}% complete`);
    tooltip.append("p").text(node.description);
    tooltip
        .style("left", `${{event.clientX - rect.left + 15}}px`)
        .style("top", `${{event.clientY - rect.top - 15}}px`)
        .style("opacity", 1);
}}

function hideTooltip() {{
    tooltip.style("opacity", 0);
}}

// --- Sub-page menu and navigation ---
function route(section, sub) {{
    return `${{DATA.base}}/page/${{section}}/${{sub || "index"}}`;
}}

function navigateTo(section, sub) {{
    saveView(d3.zoomTransform(svg.node()));
    window.location.href = route(section, sub);
}}

function closeMenu() {{
    menu.style("display", "none").html("");
}}

function highlightGroup(id) {{
    const key = DATA.nodes[id] ? DATA.nodes[id].group : null;
    d3.selectAll(".constellation-group").classed("dim", function () {{
        return key !== null && this.getAttribute("data-group") !== key;
    }});
}}

function clickNode(event, id) {{
    // a click while the menu is open only dismisses it
    if (menu.style("display") !== "none") {{
        closeMenu();
        return;
    }}
    hideTooltip();
    highlightGroup(id);
    const node = DATA.nodes[id];
    if (!node.subpages.length) {{
        navigateTo(id, "index");
        return;
    }}
    const seen = new Set(Array.isArray(visited[id]) ? visited[id] : []);
    const entries = [{{ id: "index", title: "Overview" }}].concat(node.subpages);
    const c = completion(id);
    const rect = containerEl.getBoundingClientRect();
    menu.html("");
    menu.append("h4").text(node.name);
    for (const e of entries) {{
        const a = menu.append("a").attr("href", route(id, e.id));
        a.append("span").text(e.title);
        a.append("span").attr("class", "check").text(seen.has(e.id) ? "\\u2713" : "");
        a.on("click", (ev) => {{
            ev.preventDefault();
            ev.stopPropagation();
            closeMenu();
            navigateTo(id, e.id);
        }});
    }}
    menu.append("div").attr("class", "bar").append("div").style("width", `${{Math.round(c * 100)}}%`);
    menu.append("div").attr("class", "pct").text(`${{Math.round(c * 100)}}% complete`);
    menu
        .style("left", `${{event.clientX - rect.left}}px`)
        .style("top", `${{event.clientY - rect.top}}px`)
        .style("display", "block");
}}

document.addEventListener("click", (event) => {{
    if (!menu.node().contains(event.target)) closeMenu();
}});

// --- Controls ---
document.getElementById("zoom-in").addEventListener("click", (event) => {{
    event.stopPropagation();
    svg.transition().duration(300).call(zoom.scaleBy, CFG.zoomIn)
        .on("end", () => saveView(d3.zoomTransform(svg.node())));
}});
document.getElementById("zoom-out").addEventListener("click", (event) => {{
    event.stopPropagation();
    svg.transition().duration(300).call(zoom.scaleBy, CFG.zoomOut)
        .on("end", () => saveView(d3.zoomTransform(svg.node())));
}});
document.getElementById("reset-view").addEventListener("click", (event) => {{
    event.stopPropagation();
    if (HAS_STORAGE) [KEYS.x, KEYS.y, KEYS.scale].forEach(k => localStorage.removeItem(k));
    svg.transition().duration(750).call(zoom.transform, defaultTransform());
}});
document.getElementById("reset-progress").addEventListener("click", (event) => {{
    event.stopPropagation();
    if (HAS_STORAGE) localStorage.removeItem(KEYS.visited);
    visited = {{}};
    drawScene();
}});

drawScene();
svg.call(zoom.transform, restoreView() || defaultTransform());
</script>
</body>
</html>'''


def render_page_html(
    page: PageRef,
    record: ContentRecord | None,
    navigation: list[NavSection],
    prev_page: PageRef | None,
    next_page: PageRef | None,
    config: Config,
) -> str:
    base = config.site.base_url.rstrip("/")
    if record is None:
        title = PLACEHOLDER_TITLE
        body = PLACEHOLDER_HTML
    else:
        title = record.title
        body = record.html or ""
    heading = _esc(title)
    nav_links = []
    if prev_page is not None:
        nav_links.append(
            f'<a class="nav-button prev-button" href="{base}{prev_page.route}">'
            f"&larr; Previous: {_esc(prev_page.title)}</a>"
        )
    if next_page is not None:
        nav_links.append(
            f'<a class="nav-button next-button" href="{base}{next_page.route}">'
            f"Next: {_esc(next_page.title)} &rarr;</a>"
        )
    visit = _script_json({
        "key": VISITED_KEY,
        "section": page.section_id,
        "page": page.subpage_id,
    })
    sidebar = _sidebar(navigation, config.site.short_title, base, active=page.section_id)

    return f'''<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{heading} | {_esc(config.site.short_title)}</title>
<style>
{BASE_CSS}
.content {{ padding: 2rem; }}
.top-nav {{
    position: sticky;
    top: 0;
    background: var(--sidebar-bg);
    padding: 0.75rem;
    margin-bottom: 1.5rem;
    border-radius: 0 0 8px 8px;
    display: flex;
    justify-content: space-between;
    align-items: center;
}}
.top-nav a {{ text-decoration: none; }}
.top-nav a:hover {{ color: var(--highlight-color); }}
.page-body {{ max-width: 800px; margin: 0 auto; }}
.page-body h1 {{ color: var(--highlight-color); margin-bottom: 1.5rem; }}
.page-body p, .page-body ul, .page-body ol, .page-body pre {{ margin-bottom: 1.5rem; line-height: 1.6; }}
.page-body ul, .page-body ol {{ padding-left: 1.5rem; }}
.page-body code {{ background: rgba(0, 0, 0, 0.3); padding: 0.2rem 0.4rem; border-radius: 3px; }}
.page-body pre {{ background: rgba(0, 0, 0, 0.3); padding: 1rem; border-radius: 4px; overflow-x: auto; }}
.page-navigation {{
    display: flex;
    justify-content: space-between;
    max-width: 800px;
    margin: 3rem auto 0;
    padding-top: 1.5rem;
    border-top: 1px solid rgba(255, 255, 255, 0.1);
}}
.nav-button {{ background: var(--sidebar-bg); padding: 0.75rem 1rem; border-radius: 4px; text-decoration: none; }}
.nav-button:hover {{ color: var(--highlight-color); }}
.next-button {{ margin-left: auto; }}
</style>
</head>
<body>
{sidebar}
<div class="content">
    <div class="top-nav">
        <a href="{base}/">&#10022; Back to Map</a>
        <h2>{heading}</h2>
        <div></div>
    </div>
    <div class="page-body">
        <h1>{heading}</h1>
        {body}
    </div>
    <div class="page-navigation">{"".join(nav_links)}</div>
</div>
<script>
(function () {{
    const VISIT = {visit};
    let raw;
    try {{
        raw = localStorage.getItem(VISIT.key);
    }} catch (e) {{
        return;  // storage unavailable
    }}
    let record;
    try {{
        record = JSON.parse(raw || "{{}}");
    }} catch (e) {{
        record = {{}};  // unreadable record starts over
    }}
    if (!record || typeof record !== "object" || Array.isArray(record)) record = {{}};
    const pages = Array.isArray(record[VISIT.section]) ? record[VISIT.section] : [];
    if (pages.includes(VISIT.page)) return;
    pages.push(VISIT.page);
    record[VISIT.section] = pages;
    try {{
        localStorage.setItem(VISIT.key, JSON.stringify(record));
    }} catch (e) {{
        // quota or security error: the visit just isn't recorded
    }}
}})();
</script>
</body>
</html>'''


def render_redirect_html(section_id: str, config: Config) -> str:
    target = f"{config.site.base_url.rstrip('/')}{page_route(section_id)}"
    return f'''<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta http-equiv="refresh" content="0; url={_esc(target)}">
<link rel="canonical" href="{_esc(target)}">
<title>Redirecting…</title>
<script>window.location.replace({_script_json(target)});</script>
</head>
<body style="background:#0b1021;color:#e6edf3;display:flex;justify-content:center;align-items:center;height:100vh">
Redirecting to <a href="{_esc(target)}">{_esc(section_id)} overview</a>...
</body>
</html>'''


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def build_site(
    config: Config,
    output_dir: Path | None = None,
    graph: GraphDataModel | None = None,
    navigation: list[NavSection] | None = None,
    records: list[ContentRecord] | None = None,
    preview: bool = True,
) -> SiteResult:
    """Write the whole static site. Returns what was written."""
    if graph is None:
        graph = load_graph(config.resolved_graph_path)
    if navigation is None:
        navigation = load_navigation(config.resolved_navigation_path)
    if records is None:
        records = load_content(config.resolved_content_dir)
    if output_dir is None:
        output_dir = config.resolved_output_dir

    content = ContentIndex(records)
    result = SiteResult(output_dir=output_dir)

    # progress lives in each visitor's browser, so the shipped scene starts empty
    scene = build_scene(
        graph, ProgressSnapshot(),
        config.site.canvas_width, config.site.canvas_height,
        config.map, random.Random(config.map.seed),
    )

    payload = _map_payload(graph, scene, content, config)
    _write(output_dir / "index.html", render_map_html(payload, navigation, config))
    _write(output_dir / "map.svg", render_svg(scene))

    sequence = page_sequence(navigation, graph)
    sections: list[str] = []
    for page in sequence:
        record = content.page(page.section_id, page.subpage_id)
        if record is None:
            result.placeholders += 1
        prev_page, next_page = prev_next(sequence, page.route)
        html = render_page_html(page, record, navigation, prev_page, next_page, config)
        result.pages.append(_write(output_dir / page.route.lstrip("/") / "index.html", html))
        if page.section_id not in sections:
            sections.append(page.section_id)

    for section_id in sections:
        path = output_dir / "page" / section_id / "index.html"
        result.redirects.append(_write(path, render_redirect_html(section_id, config)))

    if preview:
        result.preview = render_preview(scene, output_dir / "preview.png", config.site.preview_size)

    logger.info("%s", result)
    return result
