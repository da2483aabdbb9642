"""CLI entry point for the constellation site."""

import argparse
import logging
import random
import sys
from pathlib import Path

from constellation.config import Config, load_config
from constellation.content import ContentIndex, load_content
from constellation.graph import load_graph
from constellation.navigation import load_navigation, missing_nav_nodes, page_sequence
from constellation.progress import INDEX_PAGE, ProgressStore
from constellation.scene import build_scene
from constellation.site import build_site
from constellation.store import SqliteStateStore, open_store
from constellation.svg import render_svg
from constellation.view_state import ViewStateStore


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Constellation learning map")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    parser.add_argument("--state-db", type=Path, default=None, help="Local progress/view state database")
    sub = parser.add_subparsers(dest="command")

    # build command
    build_parser = sub.add_parser("build", help="Generate the static site")
    build_parser.add_argument("-o", "--output", type=Path, default=None, help="Output directory")
    build_parser.add_argument("--no-preview", action="store_true", help="Skip the PNG preview card")

    # render command
    render_parser = sub.add_parser("render", help="Render the map as SVG with local progress")
    render_parser.add_argument("-o", "--output", type=Path, default=Path("map.svg"))

    # progress command
    progress_parser = sub.add_parser("progress", help="Inspect or change local progress")
    progress_sub = progress_parser.add_subparsers(dest="action")
    progress_sub.add_parser("show", help="Completion per section")
    mark_parser = progress_sub.add_parser("mark", help="Mark a page visited")
    mark_parser.add_argument("section", help="Section (node) id")
    mark_parser.add_argument("page", nargs="?", default=INDEX_PAGE, help="Sub-page id (default: index)")
    progress_sub.add_parser("reset", help="Forget every visited page")

    # view command
    view_parser = sub.add_parser("view", help="Inspect or reset the stored camera")
    view_sub = view_parser.add_subparsers(dest="action")
    view_sub.add_parser("show", help="Print the stored transform")
    view_sub.add_parser("reset", help="Clear the stored transform")

    # check command
    sub.add_parser("check", help="Validate graph, navigation and content")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)

    try:
        if args.command == "build":
            result = build_site(config, output_dir=args.output, preview=not args.no_preview)
            print(result)
            return 0

        if args.command == "check":
            return _check(config)

        graph = load_graph(config.resolved_graph_path)
        store = open_store(args.state_db, config)
        try:
            progress = ProgressStore(store, graph)

            if args.command == "render":
                scene = build_scene(
                    graph, progress.snapshot(),
                    config.site.canvas_width, config.site.canvas_height,
                    config.map, random.Random(config.map.seed),
                )
                args.output.write_text(render_svg(scene, ViewStateStore(store).restore()))
                print(f"Map written to {args.output}")

            elif args.command == "progress":
                if args.action == "mark":
                    if args.section not in graph:
                        raise ValueError(f"Unknown section '{args.section}'")
                    node = graph.get_node(args.section)
                    pages = {INDEX_PAGE, *(s.id for s in node.subpages)}
                    if args.page not in pages:
                        raise ValueError(f"'{args.page}' is not a page of section '{args.section}'")
                    changed = progress.mark_visited(args.section, args.page)
                    print(f"{args.section}/{args.page}: {'marked' if changed else 'already visited'}")
                elif args.action == "reset":
                    progress.reset_all()
                    print("Progress reset.")
                else:
                    snapshot = progress.snapshot()
                    for key, group in graph.groups.items():
                        print(f"{group.name} ({key}):")
                        for node in group.nodes:
                            if not node.subpages:
                                continue
                            pct = snapshot.completion_for(node.id) * 100
                            pages = ", ".join(snapshot.visited.get(node.id, [])) or "-"
                            print(f"  {node.id:<14} {pct:5.1f}%  {pages}")

            elif args.command == "view":
                view_state = ViewStateStore(store)
                if args.action == "reset":
                    view_state.clear()
                    print("View reset.")
                else:
                    t = view_state.restore()
                    if t is None:
                        print("No stored view; the map opens centered at the default zoom.")
                    else:
                        print(f"x={t.translate_x} y={t.translate_y} scale={t.scale}")
        finally:
            if isinstance(store, SqliteStateStore):
                store.close()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def _check(config: Config) -> int:
    """Report data problems. Returns 1 when the graph has unresolved links."""
    graph = load_graph(config.resolved_graph_path)
    navigation = load_navigation(config.resolved_navigation_path)
    content = ContentIndex(load_content(config.resolved_content_dir))

    unresolved = graph.unresolved_links()
    for key, link in unresolved:
        print(f"  unresolved link in {key}: {link.source} -> {link.target}")

    for node_id in missing_nav_nodes(navigation, graph):
        print(f"  sidebar item without a map node: {node_id}")

    sequence = page_sequence(navigation, graph)
    missing = [p.route for p in sequence if content.page(p.section_id, p.subpage_id) is None]
    print(
        f"{len(graph.groups)} groups, {len(graph)} nodes, {len(sequence)} pages, "
        f"{len(missing)} without content, {len(unresolved)} unresolved links"
    )
    return 1 if unresolved else 0


if __name__ == "__main__":
    sys.exit(main())
