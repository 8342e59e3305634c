"""Console presentation of user-visible outcomes."""

from models.outcome import Outcome
from logger import get_logger

logger = get_logger()


def log_outcome(outcome: Outcome) -> None:
    """Log an outcome, as an error when it is destructive."""
    if outcome.is_destructive:
        logger.error(f"{outcome.title}: {outcome.description}")
    else:
        logger.info(f"✓ {outcome.title}: {outcome.description}")
