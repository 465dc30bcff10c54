"""Resolution of resource URIs to local files.

Three forms are understood:

* ``http://`` and ``https://`` URIs, downloaded once into a local cache;
* ``sodf://relative/path`` URIs, searched in the roots listed in the
  ``SODF_DATABASE_PATH`` environment variable (separated by ``os.pathsep``);
  a root may itself be an HTTP(S) base URL;
* anything else, taken as a file path, relative paths being based on the
  directory of the current document.
"""

from __future__ import annotations

import os
import re
import shutil
import tempfile
import urllib.error
import urllib.request
from dataclasses import dataclass
from pathlib import Path

SCHEME = "sodf://"
ENV_VAR = "SODF_DATABASE_PATH"
USER_AGENT = "sodf-resolver/1.0"
DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class Resolved:
    """Where a resource was found."""

    local_path: str
    from_cache: bool = False
    source_root: str = ""


def _is_http(text: str) -> bool:
    return text.startswith(("http://", "https://"))


def _split_roots(roots: str) -> list[str]:
    out: list[str] = []
    for part in roots.split(os.pathsep):
        # Keep "https://host/..." in one piece where the separator is ':'.
        if out and out[-1] in ("http", "https") and part.startswith("//"):
            out[-1] += os.pathsep + part
        elif part:
            out.append(part)
    return out


def _sanitize_relpath(rel: str) -> str:
    """Drop empty, '.' and '..' components to keep lookups inside a root."""
    parts = [p for p in re.split(r"[/\\]", rel) if p not in ("", ".", "..")]
    return "/".join(parts)


def _url_join(base_url: str, rel: str) -> str:
    base = base_url[:-1] if base_url.endswith("/") else base_url
    return f"{base}/{rel.strip('/' + chr(92))}"


def _cache_base_dir() -> Path:
    if os.name != "nt":
        home = os.environ.get("HOME")
        return Path(home) / ".cache" / "sodf" if home else Path("~/.cache/sodf")
    local = os.environ.get("LOCALAPPDATA")
    if local:
        return Path(local) / "sodf" / "cache"
    return Path(tempfile.gettempdir()) / "sodf-cache"


def _cache_path_for_url(url: str) -> Path:
    after = url.split("://", 1)[1] if "://" in url else url
    host, _, rest = after.partition("/")
    path = _cache_base_dir() / host / rest
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def _http_fetch_to_cache(url: str, timeout: float = DEFAULT_TIMEOUT) -> Path:
    """Download ``url`` into the cache unless it is already there."""
    dst = _cache_path_for_url(url)
    if dst.exists():
        return dst

    request = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
    status = 0
    ok = False
    try:
        with urllib.request.urlopen(request, timeout=timeout) as response, open(dst, "wb") as out:
            status = getattr(response, "status", None) or response.getcode()
            shutil.copyfileobj(response, out)
        ok = 200 <= status < 300
    except urllib.error.HTTPError as exc:
        status = exc.code
    except OSError:
        pass

    if not ok:
        dst.unlink(missing_ok=True)
        raise RuntimeError(f"HTTP fetch failed ({status}): {url}")
    return dst


def resolve_resource_uri(uri: str, current_xml_dir: str = "", env_roots: str | None = None) -> Resolved:
    """Resolve ``uri`` to a local file.

    ``env_roots`` overrides the ``SODF_DATABASE_PATH`` environment variable.
    Raises RuntimeError when no roots are configured or a direct download
    fails, and FileNotFoundError when a ``sodf://`` resource is in no root.
    """
    if _is_http(uri):
        cached = _http_fetch_to_cache(uri)
        return Resolved(os.path.realpath(cached), True, uri)

    if not uri.startswith(SCHEME):
        path = Path(uri)
        if not path.is_absolute() and current_xml_dir:
            path = Path(current_xml_dir) / path
        return Resolved(os.path.realpath(path), False, "")

    roots = env_roots if env_roots is not None else os.environ.get(ENV_VAR)
    if not roots:
        raise RuntimeError(
            f"{ENV_VAR} not set (use ':' or ';' to separate multiple roots)."
        )

    rel = _sanitize_relpath(uri[len(SCHEME):])
    for root in _split_roots(roots):
        if _is_http(root):
            try:
                cached = _http_fetch_to_cache(_url_join(root, rel))
            except RuntimeError:
                continue
            if cached.exists():
                return Resolved(os.path.realpath(cached), True, root)
        else:
            candidate = Path(root) / rel
            if candidate.exists():
                return Resolved(os.path.realpath(candidate), False, root)

    raise FileNotFoundError(f"sodf:// resource not found in any root: {uri}")