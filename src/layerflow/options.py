from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any

from .errors import InvalidOptionError

# ============================================================================
# Layout defaults -- keyed by canonical (prefix-free) option names
# ============================================================================

LAYOUT_DEFAULTS: dict[str, Any] = {
    "algorithm": "layered",
    "direction": "DOWN",
    "spacing.nodeNode": 20.0,
    "spacing.edgeNode": 10.0,
    "spacing.edgeEdge": 10.0,
    "spacing.nodeLabel": 5.0,
    "spacing.nodeNodeBetweenLayers": 60.0,
    "edgeRouting": "ORTHOGONAL",
    "spline.curvature": 0.5,
    "spline.segments": 20,
    "hierarchical": False,
    "aspectRatio": 1.6,
    "padding": 12.0,
    "portConstraints": "UNDEFINED",
    "portSideAssignment": "AUTOMATIC",
    "portOrdering": "DEFAULT",
    "selfLoopSide": "EAST",
    "selfLoopOffset": 20.0,
    "selfLoopRouting": "ORTHOGONAL",
    "hierarchy.maxDepth": 256,
    "disco.componentAlgorithm": "layered",
    "disco.componentSpacing": 20.0,
    "disco.componentArrangement": "row",
    "nodeLabels.placement": "INSIDE TOP",
    "labels.placement.disabled": False,
}

DEFAULT_PADDING = 12.0

# External key -> typed field name
_TYPED_KEYS: dict[str, str] = {
    "algorithm": "algorithm",
    "direction": "direction",
    "spacing.nodeNode": "spacing_node_node",
    "spacing.edgeNode": "spacing_edge_node",
    "spacing.edgeEdge": "spacing_edge_edge",
    "spacing.nodeLabel": "spacing_node_label",
    "spacing.nodeNodeBetweenLayers": "spacing_layer",
    "edgeRouting": "edge_routing",
    "spline.curvature": "spline_curvature",
    "spline.segments": "spline_segments",
    "hierarchical": "hierarchical",
    "interactiveLayout": "interactive_layout",
    "aspectRatio": "aspect_ratio",
    "nodePlacement.strategy": "node_placement_strategy",
    "crossingMinimization.strategy": "crossing_minimization_strategy",
    "cycleBreaking.strategy": "cycle_breaking_strategy",
    "layerConstraint": "layer_constraint",
}
_FIELD_TO_KEY = {v: k for k, v in _TYPED_KEYS.items()}

_FLOAT_FIELDS = {
    "spacing_node_node",
    "spacing_edge_node",
    "spacing_edge_edge",
    "spacing_node_label",
    "spacing_layer",
    "spline_curvature",
    "aspect_ratio",
}
_INT_FIELDS = {"spline_segments"}
_BOOL_FIELDS = {"hierarchical", "interactive_layout"}
_UPPER_FIELDS = {"direction", "edge_routing"}

_PREFIXES = ("org.eclipse.elk.", "elk.")


def canonical_key(key: str) -> str:
    """Strip ``elk.``-style prefixes and map snake_case field names to external keys."""
    key = str(key)
    if key in _FIELD_TO_KEY:
        return _FIELD_TO_KEY[key]
    for prefix in _PREFIXES:
        if key.startswith(prefix):
            key = key[len(prefix):]
            break
    if key.startswith("layered.") and key[len("layered."):] in _TYPED_KEYS:
        key = key[len("layered."):]
    return key


def _coerce(field_name: str, value: Any) -> Any:
    if value is None:
        return None
    try:
        if field_name in _FLOAT_FIELDS:
            return float(value)
        if field_name in _INT_FIELDS:
            return int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidOptionError(
            f"Invalid value for {_FIELD_TO_KEY[field_name]}: {value!r}",
            option=_FIELD_TO_KEY[field_name],
            value=value,
        ) from exc
    if field_name in _BOOL_FIELDS:
        return _to_bool(value, _FIELD_TO_KEY[field_name])
    if field_name in _UPPER_FIELDS:
        return str(value).upper()
    return str(value)


def _to_bool(value: Any, option: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    if isinstance(value, (int, float)):
        return bool(value)
    raise InvalidOptionError(f"Invalid boolean for {option}: {value!r}", option=option, value=value)


# ============================================================================
# LayoutOptions -- typed well-known options plus a passthrough property bag
# ============================================================================

_MISSING = object()


@dataclass(slots=True)
class LayoutOptions:
    algorithm: str | None = None
    direction: str | None = None
    spacing_node_node: float | None = None
    spacing_edge_node: float | None = None
    spacing_edge_edge: float | None = None
    spacing_node_label: float | None = None
    spacing_layer: float | None = None
    edge_routing: str | None = None
    spline_curvature: float | None = None
    spline_segments: int | None = None
    hierarchical: bool | None = None
    interactive_layout: bool | None = None
    aspect_ratio: float | None = None
    node_placement_strategy: str | None = None
    crossing_minimization_strategy: str | None = None
    cycle_breaking_strategy: str | None = None
    layer_constraint: str | None = None
    properties: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> LayoutOptions:
        """Build options from external keys; unknown keys land in ``properties`` untouched."""
        opts = cls()
        for key, value in (data or {}).items():
            opts[key] = value
        return opts

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key, field_name in _TYPED_KEYS.items():
            value = getattr(self, field_name)
            if value is not None:
                result[key] = value
        result.update(self.properties)
        return result

    def merged(self, other: LayoutOptions | None) -> LayoutOptions:
        """New options with ``other`` layered on top of this one."""
        if other is None:
            return self.copy()
        result = LayoutOptions()
        for f in fields(LayoutOptions):
            if f.name == "properties":
                continue
            theirs = getattr(other, f.name)
            setattr(result, f.name, theirs if theirs is not None else getattr(self, f.name))
        result.properties = {**self.properties, **other.properties}
        return result

    def copy(self) -> LayoutOptions:
        return LayoutOptions().merged(self)

    def __setitem__(self, key: str, value: Any) -> None:
        canon = canonical_key(key)
        field_name = _TYPED_KEYS.get(canon)
        if field_name is not None:
            setattr(self, field_name, _coerce(field_name, value))
        else:
            self.properties[str(key)] = value

    def __getitem__(self, key: str) -> Any:
        return self.get(key, None)

    def __contains__(self, key: str) -> bool:
        return self._lookup(key) is not _MISSING

    def get(self, key: str, default: Any = _MISSING) -> Any:
        """Typed field, else property bag, else ``default``, else the built-in default."""
        value = self._lookup(key)
        if value is not _MISSING:
            return value
        if default is not _MISSING:
            return default
        return LAYOUT_DEFAULTS.get(canonical_key(key))

    def _lookup(self, key: str) -> Any:
        canon = canonical_key(key)
        field_name = _TYPED_KEYS.get(canon)
        if field_name is not None:
            value = getattr(self, field_name)
            if value is not None:
                return value
        for candidate in (str(key), canon, *(p + canon for p in _PREFIXES)):
            if candidate in self.properties:
                return self.properties[candidate]
        return _MISSING

    # -- port and self-loop accessors ---------------------------------------

    @property
    def port_constraints(self) -> str:
        return str(self.get("elk.portConstraints")).upper()

    @port_constraints.setter
    def port_constraints(self, value: str) -> None:
        self.properties["elk.portConstraints"] = value

    @property
    def port_side_assignment(self) -> str:
        return str(self.get("elk.portSideAssignment")).upper()

    @port_side_assignment.setter
    def port_side_assignment(self, value: str) -> None:
        self.properties["elk.portSideAssignment"] = value

    @property
    def port_ordering(self) -> str:
        return str(self.get("elk.portOrdering")).upper()

    @port_ordering.setter
    def port_ordering(self, value: str) -> None:
        self.properties["elk.portOrdering"] = value

    @property
    def self_loop_side(self) -> str:
        return str(self.get("elk.selfLoopSide")).upper()

    @self_loop_side.setter
    def self_loop_side(self, value: str) -> None:
        self.properties["elk.selfLoopSide"] = value

    @property
    def self_loop_offset(self) -> float:
        return float(self.get("elk.selfLoopOffset"))

    @self_loop_offset.setter
    def self_loop_offset(self, value: float) -> None:
        self.properties["elk.selfLoopOffset"] = value

    @property
    def self_loop_routing(self) -> str:
        return str(self.get("elk.selfLoopRouting")).upper()

    @self_loop_routing.setter
    def self_loop_routing(self, value: str) -> None:
        self.properties["elk.selfLoopRouting"] = value


# ============================================================================
# Padding
# ============================================================================


@dataclass(frozen=True, slots=True)
class Padding:
    left: float = DEFAULT_PADDING
    top: float = DEFAULT_PADDING
    right: float = DEFAULT_PADDING
    bottom: float = DEFAULT_PADDING

    @property
    def horizontal(self) -> float:
        return self.left + self.right

    @property
    def vertical(self) -> float:
        return self.top + self.bottom

    def __str__(self) -> str:
        return f"[left={self.left}, top={self.top}, right={self.right}, bottom={self.bottom}]"


_PADDING_SIDES = ("left", "top", "right", "bottom")
_PADDING_PART = re.compile(r"^\s*(left|top|right|bottom)\s*=\s*(-?[0-9.]+)\s*$")


def parse_padding(value: Any) -> Padding:
    """Parse a padding option value.

    Accepts a number (uniform), a mapping with any of ``left/top/right/bottom``
    (missing sides default to 12.0), or the ELK string form
    ``"[left=2, top=3, right=3, bottom=2]"``.
    """
    if value is None:
        return Padding()
    if isinstance(value, Padding):
        return value
    if isinstance(value, bool):
        raise InvalidOptionError(f"Invalid padding value: {value!r}", option="padding", value=value)
    if isinstance(value, (int, float)):
        v = float(value)
        return Padding(left=v, top=v, right=v, bottom=v)
    if isinstance(value, Mapping):
        unknown = set(map(str, value)) - set(_PADDING_SIDES)
        if unknown:
            raise InvalidOptionError(
                f"Invalid padding keys: {sorted(unknown)}", option="padding", value=value
            )
        return Padding(**{side: _padding_number(value.get(side, DEFAULT_PADDING), value) for side in _PADDING_SIDES})
    if isinstance(value, str):
        return _parse_padding_string(value)
    raise InvalidOptionError(f"Invalid padding value: {value!r}", option="padding", value=value)


def _parse_padding_string(text: str) -> Padding:
    content = text.strip()
    try:
        v = float(content)
    except ValueError:
        pass
    else:
        return Padding(left=v, top=v, right=v, bottom=v)

    content = content.removeprefix("[").removesuffix("]")
    sides: dict[str, float] = {}
    for part in filter(None, (p.strip() for p in content.split(","))):
        m = _PADDING_PART.match(part)
        if not m:
            raise InvalidOptionError(f"Invalid padding value: {text!r}", option="padding", value=text)
        sides[m.group(1)] = _padding_number(m.group(2), text)
    return Padding(**sides)


def _padding_number(raw: Any, given: Any) -> float:
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidOptionError(f"Invalid padding value: {given!r}", option="padding", value=given) from exc
