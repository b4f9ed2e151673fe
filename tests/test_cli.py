# ==============================================
# Tests for the CLI
# ==============================================

import pytest

from flatdb.cli import main
from flatdb.persistence import FlatStore


class TestInspect:

    def test_valid_file(self, store, cache, capsys):
        store.write(cache)
        code = main(["inspect", str(store.path), "--tag", "CACHE1", "--env", "aabbccdd"])
        out = capsys.readouterr().out
        assert code == 0
        assert "ok" in out
        assert f"payload: {len(cache.serialize())} bytes" in out

    def test_missing_file_is_not_fatal(self, tmp_path, capsys):
        code = main(["inspect", str(tmp_path / "nope.dat"), "--tag", "CACHE1", "--env", "aabbccdd"])
        assert code == 0
        assert "file_error" in capsys.readouterr().out

    def test_wrong_tag_is_fatal(self, store, cache, capsys):
        store.write(cache)
        code = main(["inspect", str(store.path), "--tag", "OTHER", "--env", "aabbccdd"])
        assert code == 1
        assert "incorrect_magic_message" in capsys.readouterr().out

    def test_wrong_environment_is_fatal(self, tmp_path, cache, capsys):
        FlatStore("cache.dat", "CACHE1", "01020304", data_dir=tmp_path).write(cache)
        code = main(["inspect", str(tmp_path / "cache.dat"), "--tag", "CACHE1", "--env", "aabbccdd"])
        assert code == 1
        assert "incorrect_magic_number" in capsys.readouterr().out

    def test_bad_env_argument(self, store, capsys):
        code = main(["inspect", str(store.path), "--tag", "CACHE1", "--env", "zz"])
        assert code == 2
        assert "Error" in capsys.readouterr().err

    def test_unknown_log_level_is_a_usage_error(self, store, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["inspect", str(store.path), "--tag", "CACHE1", "--log-level", "bogus"])
        assert exc_info.value.code == 2
        assert "--log-level" in capsys.readouterr().err

    def test_log_level_is_case_insensitive(self, store, cache):
        store.write(cache)
        assert main(["inspect", str(store.path), "--tag", "CACHE1", "--env", "aabbccdd", "--log-level", "info"]) == 0
