"""Model loading collaborator.

Loading and caching the scoring model of a trained model is owned by the
host application; learnrank only defines the seam it calls through.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ModelLoader(Protocol):
    """Asynchronous loader of scoring models."""

    async def get_model_for_learning_to_rank(self, model_id: str) -> Any:
        """Load the scoring model of a learning-to-rank model.

        Args:
            model_id: Model identifier

        Returns:
            The loaded model, in whatever form the host uses
        """
        ...
