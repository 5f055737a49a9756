"""Ordered "first success wins" runner shared by the transcript and image chains."""

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from loguru import logger

from yt2notes.errors import ChainExhausted


@dataclass
class Strategy:
    """One link of a fallback chain.

    ``invoke`` takes no arguments. ``classify`` turns the raw exception into
    the error recorded for this attempt; without it the raw exception is kept.
    """
    label: str
    invoke: Callable[[], Any]
    classify: Optional[Callable[[Exception], Exception]] = None


def run_chain(strategies: Iterable[Strategy], accept: Optional[Callable[[Any], None]] = None):
    """
    Try each strategy once, in order, and return the first result.
    
    Args:
        strategies: Strategies in priority order
        accept: Optional check run on each result; raising rejects the result
            and counts as a failure of that strategy
        
    Returns:
        Result of the first strategy that succeeded
        
    Raises:
        ChainExhausted: every strategy failed
    """
    failures = []
    for strategy in strategies:
        logger.info("Trying {}...", strategy.label)
        try:
            result = strategy.invoke()
            if accept is not None:
                accept(result)
            return result
        except Exception as e:
            error = strategy.classify(e) if strategy.classify else e
            logger.warning("{} failed: {}", strategy.label, e)
            failures.append((strategy.label, error))
    raise ChainExhausted(failures)


def format_failures(failures) -> str:
    """Render failures as ``"<label>: <message>"`` joined by ``"; "``."""
    return "; ".join(f"{label}: {error}" for label, error in failures)
