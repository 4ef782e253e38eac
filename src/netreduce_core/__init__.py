# src/netreduce_core/__init__.py
import logging
from .log_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)
logger.info("NetReduce Core package initialized.")

from .data_structures import Node, Group, Netlist
from .tree import Tree, Leaf, Series, Parallel, normalize
from .components import (
    ComponentBase, COMPONENT_REGISTRY, register_component, ComponentError,
    Resistor, Capacitor, Inductor, Potentiometer, Jack, SingleCoilPickup, HumbuckerPickup, ToggleSwitch,
)
from .config import AnalysisConfig, ConfigParsingError, parse_analysis_config, load_analysis_config
from .cache import AnalysisCache
from .parser import NetlistParser, ParsingError, SchemaValidationError
from .validation import NetlistValidator, NetlistValidationError, MalformedInternalLinkError, ValidationIssue
from .analysis import (
    TreeBuilder, TreeBuildResults, build_tree, build_trees, find_all_paths,
    TopologyAnalyzer, is_series_parallel,
    RecursionLimitExceededError, TreeBuildCancelledError, TreeAnalysisError,
)
from .errors import NetReduceError, DiagnosableError, FrameworkLogicError

__all__ = [
    # Data Structures
    "Node", "Group", "Netlist",
    # Trees
    "Tree", "Leaf", "Series", "Parallel", "normalize",
    # Components
    "ComponentBase", "COMPONENT_REGISTRY", "register_component", "ComponentError",
    "Resistor", "Capacitor", "Inductor", "Potentiometer", "Jack", "SingleCoilPickup", "HumbuckerPickup", "ToggleSwitch",
    # Configuration
    "AnalysisConfig", "ConfigParsingError", "parse_analysis_config", "load_analysis_config",
    # Cache
    "AnalysisCache",
    # Parser
    "NetlistParser", "ParsingError", "SchemaValidationError",
    # Validation
    "NetlistValidator", "NetlistValidationError", "MalformedInternalLinkError", "ValidationIssue",
    # Analysis
    "TreeBuilder", "TreeBuildResults", "build_tree", "build_trees", "find_all_paths",
    "TopologyAnalyzer", "is_series_parallel",
    # Top-Level Errors (Actionable Diagnostics)
    "NetReduceError", "DiagnosableError", "FrameworkLogicError",
    "RecursionLimitExceededError", "TreeBuildCancelledError", "TreeAnalysisError",
]
