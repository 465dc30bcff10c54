import io
import os
import urllib.error
from pathlib import Path
from unittest import mock

import pytest

from sodf.uri_resolver import Resolved, resolve_resource_uri


class _Response(io.BytesIO):
    def __init__(self, data, status=200):
        super().__init__(data)
        self.status = status


@pytest.fixture
def cache_home(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("LOCALAPPDATA", str(home))
    return home


def _cached_files(home):
    return sorted(p.name for p in home.rglob("*") if p.is_file())


def test_local_file_absolute_path(tmp_path):
    mesh = tmp_path / "local_mesh.stl"
    mesh.write_text("solid local_abs\nendsolid local_abs\n")

    resolved = resolve_resource_uri(str(mesh))
    assert os.path.exists(resolved.local_path)
    assert resolved.local_path == os.path.realpath(mesh)
    assert resolved.from_cache is False
    assert resolved.source_root == ""
    assert "solid" in Path(resolved.local_path).read_text()


def test_local_file_relative_path_with_current_dir(tmp_path):
    mesh = tmp_path / "local_mesh_rel.stl"
    mesh.write_text("solid local_rel\nendsolid local_rel\n")

    resolved = resolve_resource_uri("local_mesh_rel.stl", current_xml_dir=str(tmp_path))
    assert resolved == Resolved(os.path.realpath(mesh), False, "")
    assert "endsolid" in Path(resolved.local_path).read_text()


def test_sodf_uri_searches_roots_in_order(tmp_path):
    missing_root = tmp_path / "no_such_root"
    root_a = tmp_path / "a"
    root_b = tmp_path / "b"
    (root_a / "meshes").mkdir(parents=True)
    (root_b / "meshes").mkdir(parents=True)
    (root_a / "meshes" / "part.stl").write_text("from a")
    (root_b / "meshes" / "part.stl").write_text("from b")

    roots = os.pathsep.join([str(missing_root), str(root_b), str(root_a)])
    resolved = resolve_resource_uri("sodf://meshes/part.stl", env_roots=roots)
    assert resolved.source_root == str(root_b)
    assert resolved.from_cache is False
    assert Path(resolved.local_path).read_text() == "from b"


def test_sodf_uri_uses_environment(tmp_path, monkeypatch):
    (tmp_path / "part.stl").write_text("env")
    monkeypatch.setenv("SODF_DATABASE_PATH", str(tmp_path))
    resolved = resolve_resource_uri("sodf://part.stl")
    assert resolved.local_path == os.path.realpath(tmp_path / "part.stl")


def test_sodf_uri_path_traversal_is_stripped(tmp_path):
    root = tmp_path / "root"
    root.mkdir()
    (root / "part.stl").write_text("inside")
    (tmp_path / "outside.stl").write_text("outside")

    resolved = resolve_resource_uri("sodf://../part.stl", env_roots=str(root))
    assert resolved.local_path == os.path.realpath(root / "part.stl")
    with pytest.raises(FileNotFoundError):
        resolve_resource_uri("sodf://../outside.stl", env_roots=str(root))


def test_sodf_uri_without_roots(monkeypatch):
    monkeypatch.delenv("SODF_DATABASE_PATH", raising=False)
    with pytest.raises(RuntimeError):
        resolve_resource_uri("sodf://part.stl")
    with pytest.raises(RuntimeError):
        resolve_resource_uri("sodf://part.stl", env_roots="")


def test_sodf_uri_not_found(tmp_path):
    with pytest.raises(FileNotFoundError):
        resolve_resource_uri("sodf://missing.stl", env_roots=str(tmp_path))


def test_http_uri_is_downloaded_once(cache_home):
    uri = "https://example.com/models/mesh.stl"
    with mock.patch("urllib.request.urlopen", return_value=_Response(b"solid x\nendsolid x\n")) as urlopen:
        first = resolve_resource_uri(uri)
        second = resolve_resource_uri(uri)

    assert urlopen.call_count == 1
    assert first == second
    assert first.from_cache is True
    assert first.source_root == uri
    expected = cache_home / ".cache" / "sodf" / "example.com" / "models" / "mesh.stl"
    if os.name == "nt":
        expected = cache_home / "sodf" / "cache" / "example.com" / "models" / "mesh.stl"
    assert first.local_path == os.path.realpath(expected)
    assert Path(first.local_path).read_bytes() == b"solid x\nendsolid x\n"


def test_http_uri_failure_raises_and_leaves_no_file(cache_home):
    with mock.patch("urllib.request.urlopen", side_effect=urllib.error.URLError("down")):
        with pytest.raises(RuntimeError):
            resolve_resource_uri("https://example.com/models/mesh.stl")
    assert _cached_files(cache_home) == []


def test_http_uri_bad_status_removes_partial_file(cache_home):
    with mock.patch("urllib.request.urlopen", return_value=_Response(b"nope", status=404)):
        with pytest.raises(RuntimeError, match="404"):
            resolve_resource_uri("https://example.com/models/mesh.stl")
    assert _cached_files(cache_home) == []


def test_http_root_is_used(cache_home):
    roots = "https://example.com/db/"
    with mock.patch("urllib.request.urlopen", return_value=_Response(b"remote")) as urlopen:
        resolved = resolve_resource_uri("sodf://meshes/part.stl", env_roots=roots)

    request = urlopen.call_args.args[0]
    assert request.full_url == "https://example.com/db/meshes/part.stl"
    assert resolved.from_cache is True
    assert resolved.source_root == roots
    assert Path(resolved.local_path).read_bytes() == b"remote"


def test_failing_http_root_falls_through_to_local(cache_home, tmp_path):
    local_root = tmp_path / "local"
    local_root.mkdir()
    (local_root / "part.stl").write_text("local")
    roots = os.pathsep.join(["https://example.com/db", str(local_root)])

    with mock.patch("urllib.request.urlopen", side_effect=urllib.error.URLError("down")):
        resolved = resolve_resource_uri("sodf://part.stl", env_roots=roots)

    assert resolved.source_root == str(local_root)
    assert resolved.from_cache is False
    assert Path(resolved.local_path).read_text() == "local"