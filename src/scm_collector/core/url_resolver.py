"""
Repository URL parsing.
"""
from urllib.parse import urlparse, unquote

from scm_collector.utils import get_logger
from .models import RepositoryLocator
from .exceptions import InvalidURLError, MissingPathSegmentsError

logger = get_logger(__name__)


def resolve_repository_url(repository_url: str) -> RepositoryLocator:
    """
    Split a repository URL into host, namespace and repository name.

    The namespace is everything between the leading slash and the last path
    segment, so nested GitLab groups are kept whole:
    ``https://gitlab.com/group/subgroup/project`` resolves to
    ``("gitlab.com", "group/subgroup", "project")``.

    Args:
        repository_url: Absolute repository URL

    Returns:
        RepositoryLocator for the URL

    Raises:
        InvalidURLError: If the URL cannot be parsed or has no scheme
        MissingPathSegmentsError: If the path lacks namespace or repository
    """
    try:
        parsed = urlparse(repository_url)
    except (ValueError, TypeError, AttributeError) as e:
        logger.error(f"Could not parse repository url {repository_url}: {e}")
        raise InvalidURLError("error in parsing the host", details=str(e))

    if not parsed.scheme:
        logger.error(f"Could not parse repository url {repository_url}: missing scheme")
        raise InvalidURLError("error in parsing the host")

    segments = parsed.path.split("/")
    if len(segments) < 3:
        raise MissingPathSegmentsError(
            f"missing org/repo in the repository url: {repository_url}"
        )

    repository_name = segments[-1]
    namespace = parsed.path[:-len(repository_name)] if repository_name else parsed.path
    namespace = namespace.strip("/")

    if not repository_name or not namespace:
        raise MissingPathSegmentsError(
            f"missing org/repo in the repository url: {repository_url}"
        )

    host = parsed.netloc.rpartition("@")[2]

    return RepositoryLocator(
        host=host,
        organization=unquote(namespace),
        repository_name=unquote(repository_name),
    )
