"""SVG and HTML rendering for the calendar flower."""

from .flower import FlowerRenderer
from .scene import Scene, SceneElement
from .shell import LegendRenderer, ShellLayout, Viewport, resolve_shell
from .zoom_mirror import ZoomMirrorRenderer
