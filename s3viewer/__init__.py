"""s3viewer - download S3 objects and open them in a viewer."""

from s3viewer.cli import main
from s3viewer.locator import Locator, validate
from s3viewer.orchestrator import RetrievalResult, RetrievalState, Retriever

__all__ = [
    "Locator",
    "RetrievalResult",
    "RetrievalState",
    "Retriever",
    "main",
    "validate",
]
