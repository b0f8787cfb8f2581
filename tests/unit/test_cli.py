"""
Unit tests for the command line interface.
"""

import json
import os

import pytest
from click.testing import CliRunner

from blindbid.cli.main import cli
from blindbid.crypto import blind, bytes_to_hex
from blindbid.core.config import ENV_PREFIX
from blindbid.utils.logger import BlindBidLogger

BENEFICIARY = "0x" + "cd" * 20


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key)
    yield
    # Handlers created under the runner point at its captured streams
    BlindBidLogger.reset()


@pytest.fixture
def runner():
    return CliRunner()


class TestBlindCommand:
    
    def test_blind_ether_units(self, runner):
        result = runner.invoke(cli, ["blind", "5"])
        assert result.exit_code == 0
        assert bytes_to_hex(blind(5 * 10**18, False)) in result.output
    
    def test_blind_wei_fake(self, runner):
        result = runner.invoke(cli, ["blind", "5", "--wei", "--fake"])
        assert result.exit_code == 0
        assert bytes_to_hex(blind(5, True)) in result.output
    
    def test_blind_invalid_amount(self, runner):
        result = runner.invoke(cli, ["blind", "-3"])
        assert result.exit_code != 0


class TestDeployCommands:
    
    def test_deploy_and_show(self, runner, tmp_path):
        out_dir = tmp_path / "deployments"
        result = runner.invoke(cli, [
            "deploy",
            "--bidding-duration", "30",
            "--reveal-duration", "40",
            "--beneficiary", BENEFICIARY,
            "--out-dir", str(out_dir),
        ])
        assert result.exit_code == 0, result.output
        assert "Auction deployed to" in result.output
        
        address = json.loads((out_dir / "Auction-address.json").read_text())["Auction"]
        
        result = runner.invoke(cli, ["show", "--dir", str(out_dir)])
        assert result.exit_code == 0, result.output
        assert address in result.output
        assert '"reveal_duration": 40' in result.output
    
    def test_deploy_from_env(self, runner, tmp_path, monkeypatch):
        monkeypatch.setenv("BLINDBID_BENEFICIARY", BENEFICIARY)
        monkeypatch.setenv("BLINDBID_DEPLOYMENTS_DIR", str(tmp_path))
        
        result = runner.invoke(cli, ["deploy"])
        
        assert result.exit_code == 0, result.output
        assert (tmp_path / "Auction.json").exists()
    
    def test_deploy_without_beneficiary(self, runner, tmp_path):
        result = runner.invoke(cli, ["deploy", "--out-dir", str(tmp_path)])
        assert result.exit_code == 1
        assert "beneficiary" in result.output
    
    def test_deploy_negative_duration(self, runner, tmp_path):
        result = runner.invoke(cli, [
            "deploy", "--beneficiary", BENEFICIARY, "--bidding-duration", "-1",
            "--out-dir", str(tmp_path),
        ])
        assert result.exit_code == 1
    
    def test_show_missing(self, runner, tmp_path):
        result = runner.invoke(cli, ["show", "--dir", str(tmp_path / "none")])
        assert result.exit_code == 1
        assert "No deployment record" in result.output
    
    def test_invalid_env_config(self, runner, monkeypatch):
        monkeypatch.setenv("BLINDBID_BIDDING_DURATION", "later")
        result = runner.invoke(cli, ["blind", "1"])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output


class TestDemoCommand:
    
    def test_demo_runs(self, runner):
        result = runner.invoke(cli, ["demo"])
        assert result.exit_code == 0, result.output
        assert "Winner: Bob, paying 7" in result.output
        assert "Alice withdrew 9" in result.output
        assert "Bob: 93" in result.output
        assert "Beneficiary: 7" in result.output
        assert "Auction custody: 0" in result.output
