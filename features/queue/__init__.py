"""
Queue feature: the feature backlog, its lifecycle and its priorities.

Public API:
    from features.queue import QueueService, QueueView, Feature, FeatureStatus
    from features.queue import Snapshot, load_snapshot, parse_feature_text
"""

from features.queue.lifecycle import Action, allowed_actions
from features.queue.models import Feature, FeatureDraft, FeatureStatus, LogEntry, LogLevel, Session
from features.queue.parser import parse_feature_text
from features.queue.service import InsertPosition, QueueService
from features.queue.snapshot import Snapshot, load_snapshot
from features.queue.view import QueueView, StatusCounts

__all__ = [
    "Action", "Feature", "FeatureDraft", "FeatureStatus", "InsertPosition",
    "LogEntry", "LogLevel", "QueueService", "QueueView", "Session", "Snapshot",
    "StatusCounts", "allowed_actions", "load_snapshot", "parse_feature_text",
]
