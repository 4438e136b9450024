"""Command-line test client driven by a scripted transport."""

import argparse
import json

import pytest

from dal_client import ClientSettings, DalClient
from dal_client import cli


def _args(**overrides):
    defaults = {
        "command": "list/genus",
        "base_url": None,
        "username": None,
        "group": None,
        "tags": None,
        "xml": False,
    }
    defaults.update(overrides)
    return argparse.Namespace(**defaults)


@pytest.fixture
def scripted_client(monkeypatch, transport):
    client = DalClient(
        ClientSettings(base_url="http://dal.example.org/dal/", local_error_delay_seconds=0),
        transport=transport,
    )
    monkeypatch.setattr(cli, "build_client", lambda args: client)
    return client


def test_parser_reads_command_and_options():
    args = cli.build_parser().parse_args(["get/version", "--group", "3", "--tag", "Info", "--xml"])

    assert args.command == "get/version"
    assert args.group == 3
    assert args.tags == ["Info"]
    assert args.xml is True


@pytest.mark.asyncio
async def test_run_prints_rows(scripted_client, transport, capsys):
    transport.reply_json({"Info": [{"Version": "2.3"}]})

    code = await cli.run(_args(command="get/version"))

    assert code == 0
    assert capsys.readouterr().out == f'Info: {json.dumps({"Version": "2.3"})}\n'


@pytest.mark.asyncio
async def test_run_logs_in_switches_group_and_logs_out(scripted_client, transport, monkeypatch):
    monkeypatch.setenv("DAL_PASSWORD", "secret")
    transport.reply_json({"User": [{"UserId": "7"}], "WriteToken": [{"Value": "t"}]})
    transport.reply_json({"Info": [{"GroupName": "G", "GAdmin": "FALSE"}]})
    transport.reply_json({"Genus": [{"GenusId": "1"}]})

    code = await cli.run(_args(username="bob", group=2))

    assert code == 0
    urls = [request.url for request in transport.requests]
    assert urls[0].endswith("login/bob/no")
    assert urls[1].endswith("switch/group/2?ctype=json")
    assert urls[2].endswith("list/genus?ctype=json")
    assert urls[3].endswith("logout?ctype=json")
    assert scripted_client.is_logged_in() is False


@pytest.mark.asyncio
async def test_run_reports_failed_login(scripted_client, transport, monkeypatch, capsys):
    monkeypatch.setenv("DAL_PASSWORD", "bad")
    transport.fail(420, "Unknown", json.dumps({"Error": [{"Message": "Wrong password"}]}))

    code = await cli.run(_args(username="bob"))

    assert code == 1
    assert "Login failed: Wrong password" in capsys.readouterr().err
