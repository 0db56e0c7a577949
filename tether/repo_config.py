"""Load per-repository YAML configuration from the ``.github`` directory.

Apps keep their settings in ``.github/<file>`` inside each repository they are
installed on. :func:`load_repo_config` fetches that file from the repository's
default branch through the GitHub API client, parses it with a YAML 1.2 safe
loader, and shallow-merges it over application defaults.

Usage
-----
Inside an event handler::

    config = await load_repo_config(
        github, {"owner": "o", "repo": "r"}, "stale.yml", {"days_until_stale": 60}
    )

"""

from __future__ import annotations

import base64
import binascii
import posixpath
import typing as typ

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from tether.github.errors import PlatformError, ResponseShapeError
from tether.github.models import Result
from tether.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from tether.github.client import GitHubAPI

CONFIG_DIRECTORY = ".github"
YAML_VERSION = (1, 2)

_CONTENTS_ROUTE = "GET /repos/{owner}/{repo}/contents/{path}"

logger = get_logger(__name__)


class RepoConfigError(ValueError):
    """Raised when a repository configuration file cannot be parsed."""

    def __init__(self, path: str, detail: str) -> None:
        """Initialise with the offending path and a description."""
        self.path = path
        super().__init__(f"invalid configuration in {path}: {detail}")


def config_path(file_name: str) -> str:
    """Return the repository path for ``file_name`` in the config directory.

    Examples
    --------
    >>> config_path("config.yml")
    '.github/config.yml'

    """
    return posixpath.join(CONFIG_DIRECTORY, file_name)


def _yaml() -> YAML:
    yaml = YAML(typ="safe")
    yaml.version = YAML_VERSION
    yaml.allow_duplicate_keys = False
    return yaml


def _file_text(data: object, path: str) -> str:
    """Extract the text of a contents API file response."""
    if not isinstance(data, dict) or data.get("type", "file") != "file":
        raise ResponseShapeError.missing(f"{path} file contents")

    content = data.get("content")
    if not isinstance(content, str):
        raise ResponseShapeError.missing(f"{path} content")

    if data.get("encoding", "base64") != "base64":
        return content
    try:
        return base64.b64decode(content).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise RepoConfigError(path, f"undecodable content: {exc}") from exc


def parse_config_content(text: str, path: str) -> dict[str, typ.Any]:
    """Parse YAML text into a mapping; an empty document yields ``{}``."""
    try:
        loaded = _yaml().load(text)
    except YAMLError as exc:
        raise RepoConfigError(path, f"failed to parse YAML: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise RepoConfigError(path, "top-level YAML value must be a mapping")
    return dict(loaded)


def merge_config(
    default_config: cabc.Mapping[str, typ.Any] | None,
    loaded: cabc.Mapping[str, typ.Any],
) -> dict[str, typ.Any]:
    """Shallow-merge ``loaded`` over ``default_config``; loaded values win.

    Examples
    --------
    >>> merge_config({"a": 1, "b": 2}, {"b": 3})
    {'a': 1, 'b': 3}

    """
    return {**(default_config or {}), **loaded}


async def load_repo_config(
    github: GitHubAPI,
    params: cabc.Mapping[str, typ.Any],
    file_name: str,
    default_config: cabc.Mapping[str, typ.Any] | None = None,
) -> cabc.Mapping[str, typ.Any] | None:
    """Fetch ``.github/<file_name>`` and merge it over ``default_config``.

    Parameters
    ----------
    github
        Client used for the contents request; every hook applies.
    params
        Repository coordinates, at least ``owner`` and ``repo``.
    file_name
        Name of the YAML file inside ``.github``.
    default_config
        Defaults that loaded keys override.

    Returns
    -------
    dict | None
        The merged configuration. When the file does not exist,
        ``default_config`` unchanged, or ``None`` if no defaults were given.
        A value an ``error`` hook recovered the request with is returned as-is.

    Raises
    ------
    PlatformError
        For any API failure other than 404.
    RepoConfigError
        If the file is not valid YAML or is not a mapping.

    """
    path = config_path(file_name)
    try:
        result = await github.request(
            _CONTENTS_ROUTE,
            owner=params.get("owner"),
            repo=params.get("repo"),
            path=path,
        )
    except PlatformError as exc:
        if not exc.is_not_found:
            raise
        log_info(
            logger,
            "No %s in %s/%s; using defaults",
            path,
            params.get("owner"),
            params.get("repo"),
        )
        return default_config

    if not isinstance(result, Result):
        # an error hook recovered the request with a substitute value
        return result
    loaded = parse_config_content(_file_text(result.data, path), path)
    return merge_config(default_config, loaded)
