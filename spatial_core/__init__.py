"""
Spatial Core Package.

This package contains the spatial layout and camera choreography engine used by
the 3D experiences, including:

- Category hierarchy data structures and compilers (CategoryTree, CategoryNode)
- Radial tree layout with derived visibility (TreeLayoutEngine)
- Point-distribution patterns for flat item collections (PatternArranger)
- Deduplicated relation edges between positioned items (ConnectionBuilder)
- Spherical-coordinate camera transitions (CameraChoreographer, CameraJourney)

Every component produces plain, serializable output (coordinates, edges,
camera poses); none of them touch rendering state.
"""

__version__ = "0.1.0"

from .enums import LayoutPattern, ChoreographerState, Easing, RetriggerPolicy, UnknownPatternError
from .config import LayoutConfig, CameraConfig, EngineSettings, load_config, settings_from_dict
from .hierarchy import CategoryNode, CategoryTree
from .tree_layout import PositionedNode, TreeLayoutEngine, is_visible, toggle_expansion
from .connections import FlatItem, Connection, ConnectionBuilder
from .patterns import PatternArranger, galaxy_arm
from .camera import (
    CameraChoreographer,
    OrbitConfiguration,
    OrbitControlSource,
    StaticOrbitControls,
    Transition,
    shortest_angle_delta,
    wrap_angle,
)
from .journey import CAMERA_PRESETS, CameraJourney, CameraPose
from .compiler import (
    compile_items_from_file,
    compile_items_from_list,
    compile_items_from_yaml,
    compile_tree_from_dict,
    compile_tree_from_file,
    compile_tree_from_yaml,
)
from .metrics import layout_bounds, nearest_neighbor_stats, visibility_counts
