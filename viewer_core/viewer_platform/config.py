"""
    Platform configuration — layout tuning, viewer behaviour, serialization.

    Plain dataclasses with defaults; every component receives the piece of
    configuration it needs and falls back to these defaults when given none.
"""
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple


# Namespace colours for visual distinction, indexed by namespace position
NAMESPACE_PALETTE: Tuple[str, ...] = (
    "#4CAF50", "#2196F3", "#FF9800", "#9C27B0", "#F44336",
    "#00BCD4", "#FFEB3B", "#795548", "#607D8B", "#E91E63",
    "#3F51B5", "#009688", "#FFC107", "#8BC34A", "#673AB7",
)


@dataclass
class LayoutConfig:
    """
    Tuning of the force-directed layout.

    Attributes:
        width, height:        Canvas extent in logical units.
        margin_x, margin_y:   Minimum distance of a node from the canvas edges.
        iterations:           Number of relaxation passes.
        repulsion_strength:   Numerator of the inverse-square repulsion.
        attraction_strength:  Spring constant along relationships.
        damping:              Scale applied to the net force per pass.
        min_distance:         Floor for pairwise distance.
    """
    width: float = 1200.0
    height: float = 800.0
    margin_x: float = 100.0
    margin_y: float = 50.0
    iterations: int = 50
    repulsion_strength: float = 5000.0
    attraction_strength: float = 0.01
    damping: float = 0.1
    min_distance: float = 1.0

    def __post_init__(self):
        if self.width < 2 * self.margin_x or self.height < 2 * self.margin_y:
            raise ValueError("Canvas must be larger than twice its margins.")
        if self.iterations < 0:
            raise ValueError("iterations must be >= 0")


@dataclass
class ViewerConfig:
    """
    Interaction behaviour and presentation constants.

    Attributes:
        min_zoom, max_zoom:          Zoom clamp.
        wheel_zoom_out/_in:          Scroll factors (away / towards).
        button_zoom_in/_out:         Toolbar factors.
        system_namespaces:           Reserved names flagged as system-origin.
        namespace_palette:           Colours cycled by namespace position.
        legend_namespace_limit:      Namespaces listed in the legend.
        same_namespace_color:        Edge colour inside one namespace.
        cross_namespace_color:       Edge colour across namespaces.
    """
    min_zoom: float = 0.2
    max_zoom: float = 3.0
    wheel_zoom_out: float = 0.9
    wheel_zoom_in: float = 1.1
    button_zoom_in: float = 1.2
    button_zoom_out: float = 0.8
    system_namespaces: FrozenSet[str] = frozenset({"System"})
    namespace_palette: Tuple[str, ...] = NAMESPACE_PALETTE
    legend_namespace_limit: int = 10
    same_namespace_color: str = "#666"
    cross_namespace_color: str = "#FF5722"

    def clamp_zoom(self, zoom: float) -> float:
        return max(self.min_zoom, min(self.max_zoom, zoom))

    def namespace_color(self, index: int) -> str:
        if index < 0:
            return self.same_namespace_color
        return self.namespace_palette[index % len(self.namespace_palette)]


@dataclass
class SerializationConfig:
    """
    Controls what appears in serialized views.

    Attributes:
        include_attributes:  Embed entity attributes in rendered nodes.
        include_detail:      Embed the detail panel of the selected entity.
        include_legend:      Embed the legend.
        position_digits:     Round coordinates to this many digits
                             (``None`` keeps full precision).
    """
    include_attributes: bool = True
    include_detail: bool = True
    include_legend: bool = True
    position_digits: Optional[int] = 2


@dataclass
class PlatformConfig:
    """
    Top-level configuration for the viewer platform.

    Attributes:
        layout:            Force layout tuning.
        viewer:            Interaction behaviour.
        serialization:     Serialized view content.
        max_event_log:     How many dispatched events a session keeps
                           for replay.
        default_source:    Entry-point name of the default schema source plugin.
        default_renderer:  Entry-point name of the default render adapter plugin.
    """
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    viewer: ViewerConfig = field(default_factory=ViewerConfig)
    serialization: SerializationConfig = field(default_factory=SerializationConfig)
    max_event_log: int = 500
    default_source: Optional[str] = None
    default_renderer: Optional[str] = None
