"""Tests for the installer."""

import pytest

from promptkit.core.installer import InstallError, Installer, InstallLayout, plan_files


@pytest.fixture
def installer(test_config, plugin_dir):
    return Installer.from_config(test_config)


def test_layout_paths(tmp_path):
    layout = InstallLayout(tmp_path, "kit")

    assert layout.backup_path == tmp_path / "plugins" / "kit"
    assert layout.commands_path == tmp_path / "commands"
    assert layout.skills_path == tmp_path / "skills"
    assert layout.agents_path == tmp_path / "agents"


def test_plan_files(plugin_dir):
    files = plan_files(plugin_dir)

    assert files.commands == ["dev:fix.md", "dev:review.md"]
    assert files.modes == ["mode:brainstorm.md"]
    assert files.skills == ["languages-python"]
    assert files.agents == ["debugger.md"]


class TestInstall:
    def test_install_flattens_components(self, installer, test_config):
        result = installer.install()
        home = test_config.claude_home

        assert result.counts == {"commands": 2, "modes": 1, "skills": 1, "agents": 1}
        assert result.backup_path == home / "plugins" / "promptkit"
        assert (home / "plugins" / "promptkit" / "registry.yaml").exists()
        assert (home / "commands" / "dev:fix.md").read_text().startswith("---\ndescription: Fix a bug")
        assert (home / "commands" / "mode:brainstorm.md").exists()
        assert (home / "skills" / "languages-python" / "SKILL.md").exists()
        assert (home / "agents" / "debugger.md").exists()

    def test_reinstall_replaces_stale_backup(self, installer, test_config, plugin_dir):
        installer.install()
        (plugin_dir / "commands" / "dev" / "review.md").unlink()

        installer.install()

        backup = test_config.claude_home / "plugins" / "promptkit"
        assert not (backup / "commands" / "dev" / "review.md").exists()

    def test_missing_source(self, test_config):
        with pytest.raises(InstallError, match="Plugin source not found"):
            Installer.from_config(test_config).install()


class TestUninstall:
    def test_uninstall_removes_installed_files(self, installer, test_config):
        installer.install()
        home = test_config.claude_home
        foreign = home / "commands" / "other:thing.md"
        foreign.write_text("keep me")

        result = installer.uninstall()

        assert result.backup_removed is True
        assert result.counts == {"commands": 2, "modes": 1, "skills": 1, "agents": 1}
        assert not (home / "plugins" / "promptkit").exists()
        assert not (home / "commands" / "dev:fix.md").exists()
        assert not (home / "skills" / "languages-python").exists()
        assert foreign.exists()

    def test_uninstall_when_not_installed(self, installer):
        result = installer.uninstall()

        assert result.backup_removed is False
        assert sum(result.counts.values()) == 0


class TestDoctor:
    def test_not_installed(self, installer):
        report = installer.doctor()

        assert report.backup_installed is False
        assert report.is_installed is False
        assert report.expected == {"commands": 3, "skills": 1, "agents": 1}
        assert report.installed == {"commands": 0, "skills": 0, "agents": 0}

    def test_installed(self, installer):
        installer.install()

        report = installer.doctor()

        assert report.backup_installed is True
        assert report.is_installed is True
        assert report.installed == report.expected
        assert report.components == {
            "commands": True,
            "agents": True,
            "skills": True,
            "modes": True,
        }

    def test_uninstall_failure_raises_install_error(self, installer, test_config, monkeypatch):
        installer.install()

        def deny(path, *args, **kwargs):
            raise PermissionError(13, "Permission denied", str(path))

        monkeypatch.setattr("promptkit.core.installer.shutil.rmtree", deny)

        with pytest.raises(InstallError, match="Uninstall failed"):
            installer.uninstall()
        assert (test_config.claude_home / "plugins" / "promptkit").exists()
