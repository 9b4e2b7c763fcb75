"""Tests for CLI self-update."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from torc.errors import DownloadFailed, SwapFailed, VerificationFailed
from torc.filesystem import RealFileSystem
from torc.update import CliUpdater, is_executable_image

ELF_PAYLOAD = b"\x7fELF\x02\x01\x01new-cli"
OLD_CLI = b"\x7fELF\x02\x01\x01old-cli"


class FakeReleases:
    """ReleaseSource double serving one payload."""

    def __init__(
        self,
        version: str | None = "v1.2.0",
        payload: bytes = ELF_PAYLOAD,
        error: Exception | None = None,
    ) -> None:
        self.version = version
        self.payload = payload
        self.error = error
        self.downloaded: list[tuple[str, Path]] = []

    def latest_version(self) -> str | None:
        return self.version

    def asset_url(self, version: str, asset_name: str) -> str:
        return f"https://releases.invalid/{version}/{asset_name}"

    def download(self, url: str, dest: Path) -> None:
        self.downloaded.append((url, dest))
        if self.error is not None:
            raise self.error
        dest.write_bytes(self.payload)


class CandidateMoveFails(RealFileSystem):
    """Filesystem whose moves of downloaded candidates fail."""

    def move(self, src: Path, dst: Path) -> None:
        if src.name.startswith("torc-update-"):
            raise PermissionError("read-only")
        super().move(src, dst)


@pytest.fixture
def installed_cli(linux_profile) -> Path:
    target = linux_profile.cli_binary_path
    target.parent.mkdir(parents=True)
    target.write_bytes(OLD_CLI)
    target.chmod(0o755)
    return target


def make_updater(profile, runner, filesystem, releases, scratch: Path) -> CliUpdater:
    return CliUpdater(profile, runner, filesystem, releases, scratch, machine="x86_64")


class TestCliUpdater:
    """Tests for CliUpdater."""

    def test_asset_name_linux(self, linux_profile, runner, real_fs, tmp_path: Path) -> None:
        updater = make_updater(linux_profile, runner, real_fs, FakeReleases(), tmp_path)
        assert updater.asset_name == "torc-linux-amd64"

    def test_asset_name_macos(self, mac_profile, runner, real_fs, tmp_path: Path) -> None:
        updater = CliUpdater(
            mac_profile, runner, real_fs, FakeReleases(), tmp_path, machine="arm64"
        )
        assert updater.asset_name == "torc-macos-arm64"

    def test_update_replaces_binary(
        self, linux_profile, runner, real_fs, installed_cli: Path, tmp_path: Path
    ) -> None:
        """Test a successful update swaps in the new binary and cleans up."""
        releases = FakeReleases()
        scratch = tmp_path / "scratch"
        updater = make_updater(linux_profile, runner, real_fs, releases, scratch)

        version = updater.update()

        assert version == "v1.2.0"
        assert installed_cli.read_bytes() == ELF_PAYLOAD
        assert not updater.backup_path.exists()
        assert list(scratch.iterdir()) == []
        assert releases.downloaded[0][0] == "https://releases.invalid/v1.2.0/torc-linux-amd64"

    def test_update_without_existing_binary(
        self, linux_profile, runner, real_fs, tmp_path: Path
    ) -> None:
        """Test a first install of the CLI needs no backup."""
        linux_profile.cli_binary_path.parent.mkdir(parents=True)
        updater = make_updater(linux_profile, runner, real_fs, FakeReleases(), tmp_path / "s")

        updater.update()

        assert linux_profile.cli_binary_path.read_bytes() == ELF_PAYLOAD

    def test_unknown_version(
        self, linux_profile, runner, real_fs, installed_cli: Path, tmp_path: Path
    ) -> None:
        """Test nothing is touched when the latest version is unknown."""
        releases = FakeReleases(version=None)
        updater = make_updater(linux_profile, runner, real_fs, releases, tmp_path / "s")

        with pytest.raises(DownloadFailed, match="latest version"):
            updater.update()

        assert installed_cli.read_bytes() == OLD_CLI
        assert releases.downloaded == []

    def test_download_failure_leaves_binary(
        self, linux_profile, runner, real_fs, installed_cli: Path, tmp_path: Path
    ) -> None:
        """Test a failed download leaves the installed CLI in place."""
        releases = FakeReleases(error=DownloadFailed("HTTP Error 404"))
        updater = make_updater(linux_profile, runner, real_fs, releases, tmp_path / "s")

        with pytest.raises(DownloadFailed):
            updater.update()

        assert installed_cli.read_bytes() == OLD_CLI
        assert os.access(installed_cli, os.X_OK)
        assert not updater.backup_path.exists()

    def test_verification_failure(
        self, linux_profile, runner, real_fs, installed_cli: Path, tmp_path: Path
    ) -> None:
        """Test a non-executable download is rejected and discarded."""
        scratch = tmp_path / "scratch"
        releases = FakeReleases(payload=b"<html>Not Found</html>")
        updater = make_updater(linux_profile, runner, real_fs, releases, scratch)

        with pytest.raises(VerificationFailed):
            updater.update()

        assert installed_cli.read_bytes() == OLD_CLI
        assert list(scratch.iterdir()) == []

    def test_swap_failure_restores_backup(
        self, linux_profile, runner, installed_cli: Path, tmp_path: Path
    ) -> None:
        """Test the previous binary is restored if the new one cannot be placed."""
        runner.script("mv", output="mv: Operation not permitted", exit_code=1)
        updater = make_updater(
            linux_profile, runner, CandidateMoveFails(), FakeReleases(), tmp_path / "s"
        )

        with pytest.raises(SwapFailed) as exc_info:
            updater.update()

        assert installed_cli.read_bytes() == OLD_CLI
        assert not updater.backup_path.exists()
        assert "Operation not permitted" in exc_info.value.output

    def test_privileged_move_fallback(
        self, linux_profile, runner, installed_cli: Path, tmp_path: Path
    ) -> None:
        """Test the move escalates when the unprivileged move fails."""
        updater = make_updater(
            linux_profile, runner, CandidateMoveFails(), FakeReleases(), tmp_path / "s"
        )

        updater.update()

        mv_calls = [call for call in runner.calls if call.args[0] == "mv"]
        assert len(mv_calls) == 1
        assert mv_calls[0].privileged
        assert mv_calls[0].args[2] == str(installed_cli)

    def test_stale_backup_replaced(
        self, linux_profile, runner, real_fs, installed_cli: Path, tmp_path: Path
    ) -> None:
        """Test a backup left by an interrupted run does not block the swap."""
        updater = make_updater(linux_profile, runner, real_fs, FakeReleases(), tmp_path / "s")
        updater.backup_path.write_bytes(b"ancient")

        updater.update()

        assert installed_cli.read_bytes() == ELF_PAYLOAD
        assert not updater.backup_path.exists()


class TestIsExecutableImage:
    """Tests for executable header detection."""

    @pytest.mark.parametrize(
        "header",
        [
            b"\x7fELF",
            b"\xcf\xfa\xed\xfe",
            b"\xce\xfa\xed\xfe",
            b"\xca\xfe\xba\xbe",
        ],
    )
    def test_accepts_native_images(self, header: bytes) -> None:
        assert is_executable_image(header)

    @pytest.mark.parametrize("header", [b"<htm", b"#!/b", b"", b"\x7fEL"])
    def test_rejects_other_content(self, header: bytes) -> None:
        assert not is_executable_image(header)
