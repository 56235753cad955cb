"""Tests for the Berkshelf API server declaration."""

import pytest
from pydantic import ValidationError

from berkshelf_api_installer.config import Settings
from berkshelf_api_installer.resources import (
    AutoChefServerEndpoint,
    BerkshelfApiServer,
    ChefServerEndpoint,
    GithubEndpoint,
    OpscodeEndpoint,
    is_release_version,
)


@pytest.fixture
def server() -> BerkshelfApiServer:
    return BerkshelfApiServer.from_settings("/srv/berkshelf-api", Settings())


class TestReleaseVersion:
    """Which version strings name a released gem."""

    @pytest.mark.parametrize("version", ["3.1.2", "4", "2.0", "10.20.30"])
    def test_release_versions(self, version):
        assert is_release_version(version)

    @pytest.mark.parametrize(
        "version",
        ["master", "feature/x", "3f2c1a9e8d7b6a5f4e3d2c1b0a9f8e7d6c5b4a3f", "v1.2.3", "1.2.3.4", "1.2.", ""],
    )
    def test_git_refs(self, version):
        assert not is_release_version(version)


class TestInstallFromGit:
    """Derivation of install_from_git from the version."""

    def test_release_version_installs_gem(self):
        server = BerkshelfApiServer.from_settings("/srv/b", Settings(), version="2.0")
        assert server.install_from_git is False

    def test_branch_installs_from_git(self):
        server = BerkshelfApiServer.from_settings("/srv/b", Settings(), version="master")
        assert server.install_from_git is True

    def test_explicit_value_wins(self):
        server = BerkshelfApiServer.from_settings("/srv/b", Settings(), version="master", install_from_git=False)
        assert server.install_from_git is False


class TestFromSettings:
    """Attribute defaulting from settings."""

    def test_defaults_from_settings(self, server):
        assert server.path == "/srv/berkshelf-api"
        assert server.version == "1.2.1"
        assert server.port == 26200
        assert server.user == "berkshelf-api"
        assert server.group == "berkshelf-api"
        assert server.ruby_version == "2.0.0-p353"
        assert server.install_path == "/opt/berkshelf-api"
        assert server.config == {}
        assert server.endpoints == []

    def test_env_defaults(self, monkeypatch):
        monkeypatch.setenv("BERKSHELF_API_USER", "berks")
        monkeypatch.setenv("BERKSHELF_API_PORT", "8080")

        server = BerkshelfApiServer.from_settings("/srv/b", Settings())
        assert server.user == "berks"
        assert server.port == 8080

    def test_explicit_attributes_override(self):
        server = BerkshelfApiServer.from_settings("/srv/b", Settings(), port=9000, user="api", config={"a": 1})
        assert server.port == 9000
        assert server.user == "api"
        assert server.config == {"a": 1}

    def test_none_attributes_fall_back(self):
        server = BerkshelfApiServer.from_settings("/srv/b", Settings(), port=None, user=None)
        assert server.port == 26200
        assert server.user == "berkshelf-api"

    def test_default_path(self):
        server = BerkshelfApiServer.from_settings(None, Settings())
        assert server.path == "/srv/berkshelf-api"

    def test_port_may_be_string(self):
        server = BerkshelfApiServer.from_settings("/srv/b", Settings(), port="26201")
        assert server.port == "26201"

    def test_invalid_attribute_type(self):
        with pytest.raises(ValidationError):
            BerkshelfApiServer.from_settings("/srv/b", Settings(), config="not a mapping")


class TestDerivedPaths:
    """config_path and binary_path."""

    def test_config_path(self, server):
        assert server.config_path == "/srv/berkshelf-api/config.json"

    def test_binary_path_for_gem(self, server):
        assert server.binary_path == "berks-api"

    def test_binary_path_for_git(self):
        server = BerkshelfApiServer.from_settings(
            "/srv/b", Settings(), version="master", install_path="/opt/api"
        )
        assert server.binary_path == "/opt/api/vendor/bin/berks-api"


class TestEndpointHelpers:
    """Helpers that declare endpoints on a server."""

    def test_opscode_endpoint_default_url(self, server):
        endpoint = server.opscode_endpoint()
        assert isinstance(endpoint, OpscodeEndpoint)
        assert endpoint.url == "http://cookbooks.opscode.com/api/v1"

    def test_opscode_endpoint_url_from_settings(self, monkeypatch):
        monkeypatch.setenv("BERKSHELF_API_OPSCODE_URL", "https://supermarket.chef.io")
        server = BerkshelfApiServer.from_settings("/srv/b", Settings())
        assert server.opscode_endpoint().url == "https://supermarket.chef.io"

    def test_helpers_append_in_order(self, server):
        server.opscode_endpoint("https://supermarket.chef.io")
        server.chef_server_endpoint("https://chef.example.com", "berks", "/etc/berks.pem")
        server.github_endpoint("acme", "token")
        server.auto_chef_server_endpoint()

        assert [type(e) for e in server.endpoints] == [
            OpscodeEndpoint,
            ChefServerEndpoint,
            GithubEndpoint,
            AutoChefServerEndpoint,
        ]

    def test_helper_returns_declaration_for_disable(self, server):
        server.github_endpoint("acme").disable()
        server.opscode_endpoint()

        assert [e.type for e in server.enabled_endpoints()] == ["opscode"]

    def test_auto_endpoint_uses_configured_client_config(self, monkeypatch):
        monkeypatch.setenv("BERKSHELF_API_CHEF_CLIENT_CONFIG", "/etc/chef/other.rb")
        server = BerkshelfApiServer.from_settings("/srv/b", Settings())
        assert server.auto_chef_server_endpoint().client_config == "/etc/chef/other.rb"

    def test_str(self, server):
        assert str(server) == "berkshelf_api[/srv/berkshelf-api]"
