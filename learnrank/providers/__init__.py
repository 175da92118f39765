"""Collaborators the ranking service depends on: model storage and loading."""

from learnrank.providers.model_loading import ModelLoader
from learnrank.providers.model_store import (
    FileTrainedModelProvider,
    InMemoryTrainedModelProvider,
    TrainedModelProvider,
)

__all__ = [
    "FileTrainedModelProvider",
    "InMemoryTrainedModelProvider",
    "ModelLoader",
    "TrainedModelProvider",
]
