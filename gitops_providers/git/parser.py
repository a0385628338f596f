"""Repository URL normalization.

This module turns the many ways a user can spell a repository URL into one
canonical identity. All of the following normalize to
``ssh://git@github.com/acme/widgets.git``:

    - git@github.com:acme/widgets
    - git@github.com:acme/widgets.git
    - ssh://git@github.com/acme/widgets.git
    - https://github.com/acme/widgets
    - https://github.com/acme/widgets.git
    - https://github.com/acme/widgets/

GitLab URLs may carry nested groups; ``git@gitlab.com:group/sub/repo`` has
owner ``group/sub``.

Key Exports:
    normalize_repo_url: Build a NormalizedRepoURL from raw input.
    detect_provider_from_url: Map a URL's host to a provider name.

Example:
    >>> from gitops_providers.git.parser import normalize_repo_url
    >>> url = normalize_repo_url("https://gitlab.com/group/subgroup/repo")
    >>> url.owner
    'group/subgroup'
    >>> url.protocol
    <RepositoryURLProtocol.SSH: 'ssh'>

Thread Safety:
    All functions are pure and NormalizedRepoURL is immutable.
"""

import posixpath
from urllib.parse import urlsplit

from gitops_providers.enums import GitProviderName, RepositoryURLProtocol
from gitops_providers.git.exceptions import InvalidRepoURLError, UnsupportedHostError
from gitops_providers.git.models import NormalizedRepoURL

GIT_SUFFIX = ".git"
SCP_PREFIX = "git@"

_PROVIDERS_BY_HOST = {provider.hostname: provider for provider in GitProviderName}


def _expand_scp_form(raw: str) -> str:
    """Rewrite ``git@host:owner/repo`` into ``ssh://git@host/owner/repo``.

    Only the first ``:`` after the host is replaced.
    """
    if not raw.startswith(SCP_PREFIX):
        return raw

    host, sep, path = raw.partition(":")
    if not sep:
        return f"ssh://{raw}"
    return f"ssh://{host}/{path}"


def detect_provider_from_url(raw: str) -> GitProviderName:
    """Return the provider hosting the repository at ``raw``.

    Args:
        raw: Repository URL in ``ssh://``, ``https://`` or scp form.

    Returns:
        The matching GitProviderName.

    Raises:
        InvalidRepoURLError: If the URL cannot be parsed.
        UnsupportedHostError: If the host is not github.com or gitlab.com.

    Example:
        >>> detect_provider_from_url("git@gitlab.com:group/repo.git")
        <GitProviderName.GITLAB: 'gitlab'>
    """
    expanded = _expand_scp_form(raw.strip())

    try:
        hostname = urlsplit(expanded).hostname
    except ValueError as e:
        raise InvalidRepoURLError(raw, reason=f"could not parse git repo url: {e}") from e

    provider = _PROVIDERS_BY_HOST.get(hostname or "")
    if provider is None:
        raise UnsupportedHostError(hostname or "", raw)
    return provider


def normalize_repo_url_string(url: str, provider: GitProviderName) -> str:
    """Convert a recognized URL into ``ssh://git@<host>/<owner>/<repo>.git``.

    URLs that match neither the scp nor the https prefix of ``provider`` are
    returned with only the ``.git`` suffix ensured.

    Example:
        >>> normalize_repo_url_string("git@github.com:someuser/podinfo", GitProviderName.GITHUB)
        'ssh://git@github.com/someuser/podinfo.git'
    """
    url = url.rstrip("/")
    if not url.endswith(GIT_SUFFIX):
        url = url + GIT_SUFFIX

    trimmed = ""
    for prefix in (f"git@{provider.hostname}:", f"https://{provider.hostname}/"):
        if url.startswith(prefix):
            trimmed = url.removeprefix(prefix)

    if trimmed:
        return f"ssh://git@{provider.hostname}/{trimmed}"
    return url


def get_owner_from_url(normalized: str, provider: GitProviderName) -> str:
    """Extract the owner portion of a normalized URL.

    GitLab owners keep every group segment between the host and the
    repository (``group/sub/subsub``). Other providers take the segment
    directly before the repository name.

    Raises:
        InvalidRepoURLError: If the path has fewer than two segments.
    """
    try:
        path = urlsplit(normalized).path
    except ValueError as e:
        raise InvalidRepoURLError(normalized, reason=str(e)) from e

    segments = [segment for segment in path.split("/") if segment]
    if len(segments) < 2:
        raise InvalidRepoURLError(normalized, reason="could not get owner from url")

    if provider == GitProviderName.GITLAB:
        return "/".join(segments[:-1])
    return segments[-2]


def url_to_repo_name(raw: str) -> str:
    """Return the repository name from any URL form, without ``.git``.

    Example:
        >>> url_to_repo_name("git@github.com:acme/widgets.git")
        'widgets'
    """
    base = posixpath.basename(raw.strip().rstrip("/"))
    # scp form without a path separator: git@host:repo
    base = base.rpartition(":")[2]
    return base.removesuffix(GIT_SUFFIX)


def normalize_repo_url(raw: str) -> NormalizedRepoURL:
    """Parse a raw repository URL into its canonical identity.

    Args:
        raw: User supplied repository URL. Surrounding whitespace and a
            trailing slash are ignored.

    Returns:
        NormalizedRepoURL for the repository.

    Raises:
        InvalidRepoURLError: If the URL is malformed or names an unsupported
            host. No partial value is ever returned.
    """
    url = raw.strip().rstrip("/")
    provider = detect_provider_from_url(url)
    normalized = normalize_repo_url_string(url, provider)

    owner = get_owner_from_url(normalized, provider)
    repository_name = url_to_repo_name(url)
    if not repository_name:
        raise InvalidRepoURLError(raw, reason="repository name must not be empty")

    # only URLs left unrewritten by the normalizer keep an https scheme
    scheme = urlsplit(normalized).scheme
    protocol = RepositoryURLProtocol.HTTPS if scheme == "https" else RepositoryURLProtocol.SSH

    return NormalizedRepoURL(
        provider=provider,
        owner=owner,
        repository_name=repository_name,
        protocol=protocol,
        canonical=normalized,
        raw_url=raw,
    )
