import pytest

from postakod.cli import parse_args


def test_parse_args_defaults():
    args = parse_args(["provinces"])
    assert args.command == "provinces"
    assert args.config_dir == "./config"
    assert args.overlay_config_dir is None
    assert args.dry_run is False
    assert args.limit is None


def test_parse_args_accepts_lookup_options():
    args = parse_args(["detail", "--province", "istanbul", "--district", "kadikoy", "--neighborhood", "acibadem"])
    assert (args.province, args.district, args.neighborhood) == ("istanbul", "kadikoy", "acibadem")


def test_parse_args_limit_is_int():
    assert parse_args(["search", "--query", "moda", "--limit", "5"]).limit == 5


def test_parse_args_rejects_unknown_command():
    with pytest.raises(SystemExit):
        parse_args(["harvest"])
