"""Arboretum: X-bar syntax trees from a generative model, laid out and animated."""

__version__ = "0.1.0"

from arboretum.animation import AnimationSchedule, AnimationTiming, build_schedule
from arboretum.errors import (
    CredentialMissingError,
    CredentialRejectedError,
    EmptyResponseError,
    InvalidJSONError,
    MalformedResponseError,
    ParseError,
    RequestInFlightError,
    TransportError,
)
from arboretum.hierarchy import PositionedNode, build_hierarchy
from arboretum.layout import LayoutConfig, ViewTransform, Viewport, layout_tree
from arboretum.metrics import calculate_stats
from arboretum.parser import SyntaxParser
from arboretum.render import Scene, render_scene, scene_to_html, scene_to_svg
from arboretum.session import ParseSession, SessionState
from arboretum.syntax import NULL_HEAD, ParseResult, PartOfSpeech, Phrasal, Terminal
from arboretum.validation import decode_parse_result, validate_parse_result
from arboretum.visualization import format_tree, print_tree, to_bracket_notation

__all__ = [
    "__version__",
    "AnimationSchedule",
    "AnimationTiming",
    "CredentialMissingError",
    "CredentialRejectedError",
    "EmptyResponseError",
    "InvalidJSONError",
    "LayoutConfig",
    "MalformedResponseError",
    "NULL_HEAD",
    "ParseError",
    "ParseResult",
    "ParseSession",
    "PartOfSpeech",
    "Phrasal",
    "PositionedNode",
    "RequestInFlightError",
    "Scene",
    "SessionState",
    "SyntaxParser",
    "Terminal",
    "TransportError",
    "ViewTransform",
    "Viewport",
    "build_hierarchy",
    "build_schedule",
    "calculate_stats",
    "decode_parse_result",
    "format_tree",
    "layout_tree",
    "print_tree",
    "render_scene",
    "scene_to_html",
    "scene_to_svg",
    "to_bracket_notation",
    "validate_parse_result",
]
