"""Keep barrel index files in sync with the component files beside them."""

from .discovery import find_barrel_directories
from .errors import BarrelError, NoBarrelFoundError
from .kinds import BarrelKind
from .meta import (
    extract_metadata,
    has_metadata_export,
    infer_shape,
    merge_properties,
    render_meta_interface,
)
from .models import BarrelDirectory, BarrelResult, ExportEntry, MetaProperty
from .reconciler import Reconciler, init_barrel, reconcile, update_barrels
from .scanner import expected_exports
from .watch import BarrelWatcher, watch_barrels

__version__ = "0.1.0"

__all__ = [
    "BarrelDirectory",
    "BarrelError",
    "BarrelKind",
    "BarrelResult",
    "BarrelWatcher",
    "ExportEntry",
    "MetaProperty",
    "NoBarrelFoundError",
    "Reconciler",
    "expected_exports",
    "extract_metadata",
    "find_barrel_directories",
    "has_metadata_export",
    "infer_shape",
    "init_barrel",
    "merge_properties",
    "reconcile",
    "render_meta_interface",
    "update_barrels",
    "watch_barrels",
]
