"""
Core version-resolution exports for vertrail.

    from vertrail.core import Resolver, BranchSettings
"""

from __future__ import annotations

from vertrail.core.aggregator import aggregate
from vertrail.core.branch import cleanse_branch_name, find_branch_name
from vertrail.core.classifier import ClassificationPatterns, classify
from vertrail.core.reconciler import MergeReconciler
from vertrail.core.resolver import BranchSettings, Resolution, Resolver
from vertrail.core.tags import build_tag_index, parse_tag
from vertrail.core.walker import GraphWalker

__all__ = [
    "ClassificationPatterns",
    "classify",
    "parse_tag",
    "build_tag_index",
    "GraphWalker",
    "MergeReconciler",
    "aggregate",
    "cleanse_branch_name",
    "find_branch_name",
    "BranchSettings",
    "Resolution",
    "Resolver",
]
