"""
Read-only analyses over a knowledge graph.
"""
from .cycles import Cycle, CycleDetector, NoCycle, build_adjacency, detect_cycles
from .impact import ChangeImpactAnalyzer, analyze_impact, build_undirected_adjacency, group_impact

__all__ = [
    "Cycle",
    "CycleDetector",
    "NoCycle",
    "build_adjacency",
    "detect_cycles",
    "ChangeImpactAnalyzer",
    "analyze_impact",
    "build_undirected_adjacency",
    "group_impact",
]
