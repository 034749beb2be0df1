"""Backup set resolution pipeline.

Composes the resolver and the exclusion filter into a single operation
that reports failure as a value rather than terminating the process.
"""

import logging

from confbk.core.exclusion import filter_excluded
from confbk.core.resolver import PathResolver, ResolutionError
from confbk.models.spec import InputSpec, ResolutionResult

logger = logging.getLogger(__name__)


def resolve_backup_set(
    spec: InputSpec,
    resolver: PathResolver | None = None,
) -> ResolutionResult:
    """Resolve an InputSpec into the final, filtered backup set.

    Resolution stops at the first invalid input; in that case the result
    carries the error and no paths.

    Args:
        spec: The backup request.
        resolver: Resolver to use. Defaults to a new PathResolver.

    Returns:
        ResolutionResult with the backup set or the first error.
    """
    resolver = resolver or PathResolver()

    try:
        resolved = resolver.resolve(spec)
    except ResolutionError as e:
        logger.debug("Resolution failed: %s", e)
        return ResolutionResult(error=e)

    kept = filter_excluded(resolved, spec.exclude)
    excluded = len(resolved) - len(kept)
    if excluded:
        logger.info("Excluded %d of %d path(s)", excluded, len(resolved))

    return ResolutionResult(paths=tuple(kept), excluded=excluded)
