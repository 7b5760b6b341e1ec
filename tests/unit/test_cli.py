"""
Tests for the command line entry point.
"""

from pathlib import Path

import pytest

from contentkit.app_shell.cli import main


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    rules_path = tmp_path / "rules.yaml"
    rules_path.write_text("api:\n  default_limit: 10\n")
    monkeypatch.setenv("CONTENTKIT_RULES_PATH", str(rules_path))
    monkeypatch.setenv("CONTENTKIT_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("CONTENTKIT_BACKEND", "sqlite")
    return tmp_path


class TestCli:
    def test_types_empty(self, workspace: Path, capsys: pytest.CaptureFixture[str]) -> None:
        main(["types"])
        assert "No content types." in capsys.readouterr().out

    def test_seed_then_types(self, workspace: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """The sqlite backend keeps the seeded type between invocations."""
        main(["seed"])
        main(["types"])

        out = capsys.readouterr().out
        assert "Content type 'product' ready" in out
        assert "product\tProduct\t3 fields" in out

    def test_promote_due(self, workspace: Path, capsys: pytest.CaptureFixture[str]) -> None:
        main(["--backend", "memory", "promote-due"])
        assert "Promoted 0 entries." in capsys.readouterr().out

    def test_missing_rules_file(
        self, workspace: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("CONTENTKIT_RULES_PATH", str(workspace / "absent.yaml"))
        with pytest.raises(SystemExit) as exc_info:
            main(["types"])
        assert exc_info.value.code == 1
