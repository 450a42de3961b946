"""Grade commit messages and synthesize conventional commit messages from diffs."""

__version__ = "1.0.0"

from .diffs import synthesize_message
from .models import AnalysisResult, Commit, FileChange, RepoStats
from .quality import score_commit_message
from .stats import aggregate

__all__ = [
    "score_commit_message",
    "synthesize_message",
    "aggregate",
    "AnalysisResult",
    "Commit",
    "FileChange",
    "RepoStats",
    "__version__",
]
