"""
learnrank: ranking configuration resolution for learning-to-rank models

Given a trained ranking model and the parameters of a ranking request,
learnrank produces the model's feature extractors with every templated query
rendered, degrading features whose parameters are missing to a match-nothing
query instead of failing the request.

Public API modules:
- learnrank.ltr: ranking configs, extractors and the config resolver
- learnrank.ltr.service: the asynchronous ranking service
- learnrank.providers: model storage and loading collaborators
- learnrank.core.pipeline: the template engine
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("learnrank")
except PackageNotFoundError:
    # Development checkout, not installed via pip
    __version__ = "0.1.0"

from learnrank.ltr.resolver import RankingConfigResolver
from learnrank.ltr.service import LearningToRankService

__all__ = ["LearningToRankService", "RankingConfigResolver", "__version__"]
