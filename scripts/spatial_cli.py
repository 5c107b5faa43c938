#!/usr/bin/env python3
"""
Spatial layout CLI

Usage modes:
- tree: compile a category hierarchy YAML, lay it out, print positions as JSON
- items: arrange an item list (YAML/JSON) with a layout pattern, plus connections
- camera: simulate a camera transition frame by frame
- Utility: list bundled sample files, show version, validate / export GraphML
"""

from __future__ import annotations

import argparse
import json
import logging
import math
import sys
from dataclasses import asdict
from glob import glob
from pathlib import Path
from typing import Any, Dict, List

import numpy as np

from spatial_core import __version__
from spatial_core.camera import OrbitConfiguration, StaticOrbitControls
from spatial_core.compiler import compile_items_from_file, compile_tree_from_file
from spatial_core.config import EngineSettings, load_config
from spatial_core.connections import ConnectionBuilder
from spatial_core.enums import Easing, LayoutPattern, RetriggerPolicy
from spatial_core.metrics import layout_bounds, nearest_neighbor_stats, visibility_counts
from spatial_core.patterns import PatternArranger
from spatial_core.tree_layout import TreeLayoutEngine

from spatial_anim.adapters.jsonl import write_events_jsonl
from spatial_anim.adapters.live import ChoreographerStepper
from spatial_anim.models.events import CameraFrame, LayoutDeclared


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Lay out hierarchies and item collections in 3D, simulate camera transitions",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # Utilities / meta
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument("-v", "--verbose", action="count", default=0, help="Increase verbosity (-v, -vv)")
    p.add_argument("--list-samples", action="store_true", help="List bundled sample YAML files and exit")
    p.add_argument("--config", type=str, default="", help="YAML settings file with layout:/camera: sections")
    p.add_argument("--out", type=str, default="", help="Optional output JSON file path")

    sub = p.add_subparsers(dest="command")

    tree = sub.add_parser("tree", help="Radial layout of a category hierarchy")
    tree.add_argument("yaml", help="Hierarchy YAML (nested or categories: table)")
    tree.add_argument("--expand", action="append", default=[], help="Expanded category id (repeatable)")
    tree.add_argument("--expand-all", action="store_true", help="Expand every category")
    tree.add_argument("--root", type=str, default="", help="Root id (defaults to the hierarchy's single root)")
    tree.add_argument("--level-distance", type=float, default=None, help="Horizontal distance per level")
    tree.add_argument("--frontier", action="store_true", help="Leave descendants of hidden nodes out of the map")
    tree.add_argument("--visible-only", action="store_true", help="Only print visible nodes")
    tree.add_argument("--validate", action="store_true", help="Validate the hierarchy and print issues")
    tree.add_argument("--export-graphml", type=str, default="", help="Export the hierarchy to GraphML at given path")
    tree.add_argument("--events", type=str, default="", help="Also record a LayoutDeclared event to this JSONL path")

    items = sub.add_parser("items", help="Arrange an item list with a layout pattern")
    items.add_argument("path", help="Items YAML/JSON")
    items.add_argument("--pattern", default=LayoutPattern.CONSTELLATION.value, help="Layout pattern name")
    items.add_argument("--radius", type=float, default=None, help="Layout radius")
    items.add_argument("--seed", type=int, default=None, help="Seed for jittered patterns")
    items.add_argument("--arms", type=int, default=None, help="Galaxy arm count")
    items.add_argument("--no-connections", action="store_true", help="Skip connection building")
    items.add_argument("--stats", action="store_true", help="Include nearest-neighbour statistics")

    cam = sub.add_parser("camera", help="Simulate a camera transition")
    cam.add_argument("--azimuth", type=float, default=math.pi * 0.8, help="Start azimuth (radians)")
    cam.add_argument("--polar", type=float, default=1.0, help="Start polar angle (radians)")
    cam.add_argument("--radius", type=float, default=40.0, help="Orbit radius")
    cam.add_argument("--target-azimuth", type=float, default=None, help="Target azimuth (radians)")
    cam.add_argument("--target-polar", type=float, default=None, help="Target polar angle (radians)")
    cam.add_argument("--duration", type=float, default=None, help="Transition duration in seconds")
    cam.add_argument("--fps", type=float, default=60.0, help="Frames per second")
    cam.add_argument("--easing", choices=[e.name.lower() for e in Easing], default=None, help="Easing curve")
    cam.add_argument("--retarget", action="store_true", help="Re-target when triggered mid-transition")
    cam.add_argument("--events", type=str, default="", help="Also record events to this JSONL path")

    return p.parse_args(argv)


def build_settings(args: argparse.Namespace) -> EngineSettings:
    settings = load_config(args.config) if args.config else EngineSettings()
    cmd = args.command
    if cmd == "tree":
        if args.level_distance is not None:
            settings.layout.level_distance = float(args.level_distance)
        if args.frontier:
            settings.layout.layout_hidden_subtrees = False
    elif cmd == "items":
        if args.arms is not None:
            settings.layout.galaxy_arms = int(args.arms)
        if args.no_connections:
            settings.layout.show_connections = False
    elif cmd == "camera":
        if args.duration is not None:
            settings.camera.transition_duration = float(args.duration)
        if args.easing:
            settings.camera.easing = Easing[args.easing.upper()]
        if args.target_azimuth is not None:
            settings.camera.target_azimuth = float(args.target_azimuth)
        if args.target_polar is not None:
            settings.camera.target_polar = float(args.target_polar)
        if args.retarget:
            settings.camera.retrigger_policy = RetriggerPolicy.RETARGET
    return settings


def setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def find_sample_files() -> List[str]:
    # Search relative to repo root and this script location
    here = Path(__file__).resolve()
    repo_root = here.parent.parent
    candidates = []
    for base in [repo_root, here.parent]:
        candidates.extend(sorted(glob(str(base / "*.yaml"))))
        candidates.extend(sorted(glob(str(base / "scripts" / "*.yaml"))))
    # Deduplicate while preserving order
    seen = set()
    result = []
    for c in candidates:
        if c not in seen:
            seen.add(c)
            result.append(c)
    return result


def run_tree(args: argparse.Namespace, settings: EngineSettings) -> Dict[str, Any] | int:
    logging.info("Compiling hierarchy from %s", args.yaml)
    tree = compile_tree_from_file(args.yaml)

    if args.validate:
        results = tree.validate_all()
        summary = results["summary"]
        logging.info("Validation issues: %d (errors=%d warnings=%d)", summary["total_issues"], summary["errors"], summary["warnings"])
        print(json.dumps(results, indent=2))
        return 1 if summary["errors"] > 0 else 0

    if args.export_graphml:
        logging.info("Exporting GraphML to %s", args.export_graphml)
        tree.export_graphml(args.export_graphml)

    root_id = args.root or tree.root_id
    expanded = set(tree) if args.expand_all else set(args.expand)
    layout = TreeLayoutEngine(settings.layout).layout(tree, expanded, root_id)

    nodes = [asdict(p) for p in layout.values() if p.visible or not args.visible_only]

    if args.events:
        emitted = {n["id"] for n in nodes}
        edges = [
            {"source": tree[n["id"]].parent_id, "target": n["id"]}
            for n in nodes
            if tree[n["id"]].parent_id in emitted
        ]
        logging.info("Recording layout of %d nodes to %s", len(nodes), args.events)
        write_events_jsonl(args.events, [LayoutDeclared(nodes=nodes, edges=edges, kind="tree", t=0.0)])

    return {
        "root": root_id,
        "expanded": sorted(expanded),
        "counts": visibility_counts(layout),
        "nodes": nodes,
    }


def run_items(args: argparse.Namespace, settings: EngineSettings) -> Dict[str, Any]:
    logging.info("Loading items from %s", args.path)
    items = compile_items_from_file(args.path)
    arranger = PatternArranger(settings.layout, np.random.default_rng(args.seed))
    positions = arranger.arrange(items, args.pattern, args.radius)

    connections = []
    if settings.layout.show_connections:
        connections = ConnectionBuilder(settings.layout.connection_strength).build(items, positions)

    result: Dict[str, Any] = {
        "pattern": LayoutPattern.parse(args.pattern).value,
        "positions": {k: list(v) for k, v in positions.items()},
        "connections": [asdict(c) for c in connections],
    }
    if args.stats:
        result["stats"] = {"nearest_neighbor": nearest_neighbor_stats(positions), "bounds": layout_bounds(positions)}
    return result


def run_camera(args: argparse.Namespace, settings: EngineSettings) -> Dict[str, Any]:
    controls = StaticOrbitControls(OrbitConfiguration(azimuth=args.azimuth, polar=args.polar, radius=args.radius))
    fps = args.fps if args.fps > 0 else 60.0
    stepper = ChoreographerStepper(controls, settings.camera, frame_dt=1.0 / fps)
    events = list(stepper.stream_events())

    if args.events:
        logging.info("Recording %d events to %s", len(events), args.events)
        write_events_jsonl(args.events, events)

    frames = [asdict(ev) for ev in events if isinstance(ev, CameraFrame)]
    return {
        "frames": frames,
        "final": controls.orbit.as_dict(),
        "camera_position": list(controls.camera_position()),
    }


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose)

    if args.version:
        print(__version__)
        return 0

    if args.list_samples:
        print(json.dumps(find_sample_files(), indent=2))
        return 0

    if not args.command:
        print("error: missing command (tree, items or camera; try --list-samples)", file=sys.stderr)
        return 2

    try:
        settings = build_settings(args)
        if args.command == "tree":
            result = run_tree(args, settings)
        elif args.command == "items":
            result = run_items(args, settings)
        else:
            result = run_camera(args, settings)
    except ValueError as exc:
        # UnknownPatternError included
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if isinstance(result, int):
        return result

    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            json.dump(result, f, indent=2)
    else:
        print(json.dumps(result, indent=2))

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
