import json

import pytest
from click.testing import CliRunner

from storage_transfer import cli
from storage_transfer.api import ApiResponse
from storage_transfer.exceptions import AuthError

from conftest import FakeAPI, FakeResolver


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GCLOUD_PROJECT", "my-project")
    monkeypatch.delenv("GOOGLE_CLOUD_PROJECT", raising=False)
    return CliRunner()


@pytest.fixture
def fake_api(monkeypatch):
    api = FakeAPI()
    resolver = FakeResolver()

    real_build_client = cli.build_client

    def build_client(settings):
        return real_build_client(settings, resolver=resolver, api_factory=lambda c: api)

    monkeypatch.setattr(cli, "build_client", build_client)
    api.resolver = resolver
    return api


@pytest.mark.parametrize("argv", [[], ["unknown"], ["help", "me"]])
def test_usage_exits_cleanly(runner, fake_api, argv):
    result = runner.invoke(cli.main, argv)
    assert result.exit_code == 0
    assert "create SRC_BUCKET_NAME DEST_BUCKET_NAME DATE TIME [DESCRIPTION]" in result.output
    assert "status [JOB_ID]" in result.output
    assert fake_api.resolver.calls == 0


def test_create_end_to_end(runner, fake_api):
    created = {"name": "transferJobs/1234567890", "description": "Move my files"}
    fake_api.create_response = ApiResponse(200, created)

    result = runner.invoke(
        cli.main, ["create", "my-bucket", "my-other-bucket", "2016/08/12", "16:30", "Move my files"]
    )

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == created
    (body,) = fake_api.created
    assert body["description"] == "Move my files"
    assert body["schedule"]["scheduleStartDate"] == {"year": 2016, "month": 8, "day": 12}
    assert body["schedule"]["startTimeOfDay"] == {"hours": 16, "minutes": 30}


def test_create_missing_bucket(runner, fake_api):
    result = runner.invoke(cli.main, ["create", "my-bucket"])
    assert result.exit_code == 1
    assert "error:" in result.output
    assert fake_api.created == []


def test_status_end_to_end(runner, fake_api):
    ops = [{"name": "transferOperations/a"}, {"name": "transferOperations/b"}]
    fake_api.list_response = ApiResponse(200, {"operations": ops})

    result = runner.invoke(cli.main, ["status", "1234567890"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"operations": ops}
    (_, raw), = fake_api.listed
    assert json.loads(raw) == {"project_id": "my-project", "job_names": ["1234567890"]}


def test_status_no_operations(runner, fake_api):
    result = runner.invoke(cli.main, ["status"])
    assert result.exit_code == 0
    assert result.output.strip() == "No operations found."


def test_status_not_found(runner, fake_api):
    fake_api.list_response = ApiResponse(404, {})
    result = runner.invoke(cli.main, ["status", "1234567890"])
    assert result.exit_code == 1
    assert "error: Not Found!" in result.output


def test_project_flag_overrides_env(runner, fake_api):
    runner.invoke(cli.main, ["--project", "other", "status"])
    (_, raw), = fake_api.listed
    assert json.loads(raw) == {"project_id": "other"}


def test_missing_project(runner, fake_api, monkeypatch):
    monkeypatch.delenv("GCLOUD_PROJECT")
    fake_api.resolver.project_id = None
    result = runner.invoke(cli.main, ["status"])
    assert result.exit_code == 1
    assert "No project id" in result.output


def test_auth_error_printed(runner, fake_api):
    fake_api.resolver.error = AuthError("Could not resolve Application Default Credentials")
    result = runner.invoke(cli.main, ["status"])
    assert result.exit_code == 1
    assert "error: Could not resolve" in result.output


@pytest.mark.parametrize("argv", [[], ["unknown"]])
def test_usage_ignores_broken_config(runner, fake_api, tmp_path, argv):
    (tmp_path / "config.toml").write_text("[project\n")
    result = runner.invoke(cli.main, argv)
    assert result.exit_code == 0
    assert "status [JOB_ID]" in result.output


def test_broken_config_reported_for_commands(runner, fake_api, tmp_path):
    (tmp_path / "config.toml").write_text("[project\n")
    result = runner.invoke(cli.main, ["status"])
    assert result.exit_code == 1
    assert "error: Invalid config file" in result.output


def test_config_project_not_a_table(runner, fake_api, tmp_path, monkeypatch):
    monkeypatch.delenv("GCLOUD_PROJECT")
    (tmp_path / "config.toml").write_text('project = "my-project"\n')
    result = runner.invoke(cli.main, ["status"])
    assert result.exit_code == 1
    assert "error: config.toml: [project] must be a table" in result.output
    assert fake_api.listed == []


def test_project_from_default_credentials(runner, fake_api, monkeypatch):
    monkeypatch.delenv("GCLOUD_PROJECT")
    fake_api.resolver.project_id = "adc-project"
    result = runner.invoke(cli.main, ["status"])
    assert result.exit_code == 0, result.output
    (_, raw), = fake_api.listed
    assert json.loads(raw) == {"project_id": "adc-project"}


def test_create_validates_before_credentials(runner, fake_api, monkeypatch):
    monkeypatch.delenv("GCLOUD_PROJECT")
    result = runner.invoke(cli.main, ["create", "my-bucket", "", "2016/08/12", "16:30"])
    assert result.exit_code == 1
    assert "destination_bucket" in result.output
    assert fake_api.resolver.calls == 0


def test_token_refresh_failure_printed(runner, monkeypatch):
    from google.auth.exceptions import RefreshError

    from storage_transfer.api import StorageTransferAPI

    class RevokedRequest:
        def execute(self):
            raise RefreshError("invalid_grant: token revoked")

    class Operations:
        def list(self, **kwargs):
            return RevokedRequest()

    class Service:
        def transferOperations(self):
            return Operations()

    real_build_client = cli.build_client
    monkeypatch.setattr(
        cli,
        "build_client",
        lambda settings: real_build_client(
            settings, resolver=FakeResolver(), api_factory=lambda c: StorageTransferAPI(Service())
        ),
    )
    result = runner.invoke(cli.main, ["status"])
    assert result.exit_code == 1
    assert "error: transferOperations.list failed, credentials could not be refreshed" in result.output
