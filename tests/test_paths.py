import os

import pytest

from deployconf.core.paths import (
    WORKING_DIRECTORY_ENV,
    is_remote,
    resolve_import_path,
    resolve_path,
)


class TestIsRemote:
    def test_gcs(self):
        assert is_remote("gs://bucket/config.yaml")

    def test_local(self):
        assert not is_remote("/tmp/config.yaml")
        assert not is_remote("gs:/not-quite")

    def test_custom_prefixes(self):
        assert is_remote("s3://b/c.yaml", prefixes=("s3://",))
        assert not is_remote("gs://b/c.yaml", prefixes=("s3://",))


class TestResolvePath:
    def test_absolute_is_normalized(self):
        assert resolve_path("/a/b/../c.yaml") == "/a/c.yaml"

    def test_remote_is_untouched(self):
        assert resolve_path("gs://bucket/a/../c.yaml") == "gs://bucket/a/../c.yaml"

    def test_relative_to_working_dir(self, tmp_dir):
        assert resolve_path("conf/a.yaml", working_dir=tmp_dir) == str(tmp_dir / "conf" / "a.yaml")

    def test_relative_to_env_working_dir(self, tmp_dir, monkeypatch):
        monkeypatch.setenv(WORKING_DIRECTORY_ENV, str(tmp_dir))
        assert resolve_path("a.yaml") == str(tmp_dir / "a.yaml")

    def test_explicit_working_dir_beats_env(self, tmp_dir, monkeypatch):
        monkeypatch.setenv(WORKING_DIRECTORY_ENV, "/elsewhere")
        assert resolve_path("a.yaml", working_dir=tmp_dir) == str(tmp_dir / "a.yaml")

    def test_relative_to_cwd(self, tmp_dir, monkeypatch):
        monkeypatch.delenv(WORKING_DIRECTORY_ENV, raising=False)
        monkeypatch.chdir(tmp_dir)
        assert resolve_path("a.yaml") == os.path.join(os.getcwd(), "a.yaml")

    def test_expands_env_vars(self, tmp_dir, monkeypatch):
        monkeypatch.setenv("CONF_ROOT", str(tmp_dir))
        assert resolve_path("$CONF_ROOT/a.yaml") == str(tmp_dir / "a.yaml")

    def test_expands_home(self, tmp_dir, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_dir))
        assert resolve_path("~/a.yaml") == str(tmp_dir / "a.yaml")

    def test_empty_path(self):
        with pytest.raises(ValueError):
            resolve_path("")


class TestResolveImportPath:
    def test_relative_to_declaring_dir(self):
        assert resolve_import_path("../b.yaml", "/conf/sub/a.yaml") == "/conf/b.yaml"

    def test_absolute(self):
        assert resolve_import_path("/x/b.yaml", "/conf/a.yaml") == "/x/b.yaml"

    def test_remote(self):
        assert resolve_import_path("gs://b/c.yaml", "/conf/a.yaml") == "gs://b/c.yaml"
