import os
from pathlib import Path

import pytest
from click.testing import CliRunner

from lndir import __version__
from lndir.cli import lndir, run_testcases
from lndir.config import Config


@pytest.fixture
def runner() -> CliRunner:
    """click runner"""
    return CliRunner()


class TestLndir:
    @staticmethod
    def test_version(runner: CliRunner) -> None:
        """test --version"""

        result = runner.invoke(lndir, ["--version"])
        assert result.exit_code == 0
        assert result.output == f"lndir {__version__}\n"

    @staticmethod
    def test_help(runner: CliRunner) -> None:
        """test --help"""

        result = runner.invoke(lndir, ["--help"])
        assert result.exit_code == 0
        assert "--suffix" in result.output

    @staticmethod
    def test_mirror(runner: CliRunner, src: Path, dst: Path) -> None:
        """test lndir"""

        result = runner.invoke(lndir, ["--suffix", "-v7", str(src), str(dst)])

        assert result.exit_code == 0, result.output
        assert "Linking:" in result.output
        assert dst.joinpath("sub", "leaf-v7.txt").is_symlink()

    @staticmethod
    def test_quiet(runner: CliRunner, src: Path, dst: Path) -> None:
        """test lndir --quiet"""

        result = runner.invoke(lndir, ["-q", str(src), str(dst)])
        assert result.exit_code == 0
        assert result.output == ""
        assert dst.joinpath("b").is_symlink()

    @staticmethod
    def test_default_to_dir(runner: CliRunner, src: Path, dst: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """current directory is the default to-dir"""

        monkeypatch.chdir(dst)
        result = runner.invoke(lndir, [str(src)])
        assert result.exit_code == 0
        assert dst.joinpath("a.txt").is_symlink()

    @staticmethod
    def test_config_suffix(runner: CliRunner, src: Path, dst: Path, default_config: Config) -> None:
        """the configured suffix applies unless --suffix is given"""

        default_config.suffix = "_cfg"
        assert runner.invoke(lndir, ["-q", str(src), str(dst)]).exit_code == 0
        assert dst.joinpath("a_cfg.txt").is_symlink()

        other = dst.parent.joinpath("other")
        other.mkdir()
        assert runner.invoke(lndir, ["-q", "--suffix=", str(src), str(other)]).exit_code == 0
        assert other.joinpath("a.txt").is_symlink()

    @staticmethod
    def test_suffix_twice(runner: CliRunner, src: Path, dst: Path) -> None:
        """test lndir"""

        result = runner.invoke(lndir, ["--suffix", "a", "--suffix", "b", str(src), str(dst)])
        assert result.exit_code == 2
        assert "--suffix option specified more than once." in result.output
        assert list(dst.iterdir()) == []

    @staticmethod
    def test_suffix_without_text(runner: CliRunner, src: Path) -> None:
        """test lndir"""

        result = runner.invoke(lndir, [str(src), "--suffix"])
        assert result.exit_code == 2

    @staticmethod
    def test_missing_from_dir(runner: CliRunner) -> None:
        """test lndir"""

        result = runner.invoke(lndir, [])
        assert result.exit_code == 2
        assert "Missing <from-dir>" in result.output

    @staticmethod
    def test_invalid_directory(runner: CliRunner, src: Path, dst: Path) -> None:
        """test lndir"""

        result = runner.invoke(lndir, [str(src.joinpath("missing")), str(dst)])
        assert result.exit_code == 2
        assert "not a valid directory" in result.output

    @staticmethod
    def test_same_directory(runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """./a and a/ are the same directory"""

        tmp_path.joinpath("a").mkdir()
        tmp_path.joinpath("a", "f").write_text("")
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(lndir, ["./a", "a/"])
        assert result.exit_code == 2
        assert "same directory" in result.output
        assert os.listdir(tmp_path.joinpath("a")) == ["f"]

    @staticmethod
    def test_partial_failure(runner: CliRunner, src: Path, dst: Path, default_config: Config) -> None:
        """per-entry failures exit 1 unless fail_on_partial is off"""

        dst.joinpath("a.txt").write_text("")

        result = runner.invoke(lndir, ["-q", str(src), str(dst)])
        assert result.exit_code == 1
        assert "1 entries could not be linked" in result.output
        assert dst.joinpath("b").is_symlink()

        default_config.fail_on_partial = False
        result = runner.invoke(lndir, ["-q", str(src), str(dst)])
        assert result.exit_code == 0
        assert "could not be linked" in result.output

    @staticmethod
    def test_show_config(runner: CliRunner) -> None:
        """test --show-config"""

        result = runner.invoke(lndir, ["--show-config"])
        assert result.exit_code == 0
        assert "fail_on_partial" in result.output


class TestRunTestcases:
    @staticmethod
    def test_directory(runner: CliRunner, testcase_dir: Path, tmp_path: Path) -> None:
        """test lndir-test"""

        result = runner.invoke(run_testcases, ["-d", str(testcase_dir), "-w", str(tmp_path)])
        assert result.exit_code == 0, result.output
        assert 'Test: "nested_suffix", status=passed' in result.output
        assert list(tmp_path.iterdir()) == []

    @staticmethod
    def test_named(runner: CliRunner, testcase_dir: Path, tmp_path: Path) -> None:
        """test lndir-test"""

        result = runner.invoke(run_testcases, ["-w", str(tmp_path), str(testcase_dir.joinpath("suffix_in_name"))])
        assert result.exit_code == 0, result.output
        assert result.output.count("Test:") == 1

    @staticmethod
    def test_load_error(runner: CliRunner, tmp_path: Path) -> None:
        """test lndir-test"""

        result = runner.invoke(run_testcases, ["-w", str(tmp_path), str(tmp_path.joinpath("missing"))])
        assert result.exit_code == 1
        assert "Could not load the testcases" in result.output
