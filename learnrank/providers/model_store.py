"""Trained model storage.

This module provides the lookup used to fetch stored trained-model records by
id. The ranking service depends only on the ``TrainedModelProvider``
protocol; two implementations are included:

- ``InMemoryTrainedModelProvider``: records registered in process
- ``FileTrainedModelProvider``: one YAML or JSON file per model in a directory

Example:
    provider = FileTrainedModelProvider("./models")
    model = await provider.get_trained_model("product-ranker")
"""

import asyncio
import logging
import re
import threading
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import yaml

from learnrank.framework.errors import ModelNotFoundError, StorageError
from learnrank.ltr.inference_config import TrainedModelConfig
from learnrank.ltr.records import parse_trained_model

logger = logging.getLogger(__name__)

RECORD_SUFFIXES = (".yaml", ".yml", ".json")

_MODEL_ID = re.compile(r"[A-Za-z0-9][A-Za-z0-9_.-]*")


@runtime_checkable
class TrainedModelProvider(Protocol):
    """Asynchronous lookup of stored trained models."""

    async def get_trained_model(
        self, model_id: str, include_definition: bool = True
    ) -> TrainedModelConfig:
        """Fetch a trained model record.

        Args:
            model_id: Model identifier
            include_definition: Whether the full definition is required

        Returns:
            The stored record

        Raises:
            ModelNotFoundError: If no model is stored under ``model_id``
            StorageError: If the store cannot be read
        """
        ...


class InMemoryTrainedModelProvider:
    """Trained model records held in a dict."""

    def __init__(self, models: list[TrainedModelConfig] | None = None) -> None:
        self._models: dict[str, TrainedModelConfig] = {}
        self._lock = threading.Lock()
        for model in models or []:
            self.put(model)

    def put(self, model: TrainedModelConfig) -> None:
        """Register or replace a model record."""
        with self._lock:
            self._models[model.model_id] = model

    def delete(self, model_id: str) -> None:
        with self._lock:
            self._models.pop(model_id, None)

    def list_model_ids(self) -> list[str]:
        with self._lock:
            return sorted(self._models)

    async def get_trained_model(
        self, model_id: str, include_definition: bool = True
    ) -> TrainedModelConfig:
        with self._lock:
            model = self._models.get(model_id)
        if model is None:
            raise ModelNotFoundError(model_id)
        return model


class FileTrainedModelProvider:
    """Trained model records stored as ``<model_id>.yaml|.yml|.json`` files.

    Files are read on every lookup; caching is left to callers.
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def list_model_ids(self) -> list[str]:
        if not self.directory.is_dir():
            return []
        return sorted(
            path.stem
            for path in self.directory.iterdir()
            if path.is_file() and path.suffix in RECORD_SUFFIXES
        )

    async def get_trained_model(
        self, model_id: str, include_definition: bool = True
    ) -> TrainedModelConfig:
        path = self._find_record(model_id)
        data = await asyncio.to_thread(self._read_record, path, model_id)

        model = parse_trained_model(data)
        if model.model_id != model_id:
            msg = f"Record [{path.name}] declares model_id [{model.model_id}]"
            raise StorageError(msg, model_id=model_id)

        logger.debug("Loaded trained model [%s] from %s", model_id, path)
        return model

    def _find_record(self, model_id: str) -> Path:
        if not _MODEL_ID.fullmatch(model_id):
            raise ModelNotFoundError(model_id)

        for suffix in RECORD_SUFFIXES:
            path = self.directory / f"{model_id}{suffix}"
            if path.is_file():
                return path
        raise ModelNotFoundError(model_id)

    @staticmethod
    def _read_record(path: Path, model_id: str) -> Any:
        # YAML is a superset of JSON, one parser covers both formats
        try:
            with open(path, encoding="utf-8") as f:
                return yaml.safe_load(f)
        except OSError as e:
            msg = f"Failed to read trained model record {path}"
            raise StorageError(msg, model_id=model_id, cause=e) from e
        except yaml.YAMLError as e:
            msg = f"Failed to parse trained model record {path}"
            raise StorageError(msg, model_id=model_id, cause=e) from e
