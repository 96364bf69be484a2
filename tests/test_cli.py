import json

from pizzeria.adapters.inbound.cli import run_cli
from pizzeria.adapters.outbound.static_identity import StaticIdentityProvider
from pizzeria.main import main


def _steps(*steps) -> str:
    return json.dumps(list(steps))


def _add(pizza_id, price, *toppings):
    return {"op": "add", "pizza": {"pizza_id": pizza_id, "price": price, "toppings": list(toppings)}}


def test_runs_a_whole_purchase(service, capsys):
    raw = _steps(
        _add("hawaii", "10.00", "pineapple"),
        _add("bufala", "20.00", "mozzarella"),
        {"op": "confirm"},
        {"op": "pick", "staff_id": "chef-1"},
        {"op": "complete"},
    )

    code = run_cli(service, StaticIdentityProvider("c-1"), raw)

    out = capsys.readouterr().out.splitlines()
    assert code == 0
    assert len(out) == 5
    assert out[-1].startswith("[ok] complete")
    assert "'state': 'SERVED'" in out[-1]
    assert "'amount': '28.00'" in out[-1]


def test_pick_with_empty_queue_prints_none(service, capsys):
    code = run_cli(service, StaticIdentityProvider("c-1"), _steps({"op": "pick", "staff_id": "s"}))

    assert code == 0
    assert capsys.readouterr().out.strip() == "[ok] pick None"


def test_domain_failure_stops_the_run(service, capsys):
    raw = _steps({"op": "confirm"}, _add("p", "1.00"))

    code = run_cli(service, StaticIdentityProvider("c-1"), raw)

    out = capsys.readouterr().out.splitlines()
    assert code == 1
    assert len(out) == 1
    assert out[0].startswith("[ng] step[0] confirm:")


def test_missing_identity_is_reported(service, capsys):
    code = run_cli(service, StaticIdentityProvider(None), _steps(_add("p", "1.00")))

    assert code == 1
    assert "no authenticated customer" in capsys.readouterr().out


def test_explicit_customer_overrides_identity(service, capsys):
    step = dict(_add("p", "1.00"), customer_id="c-2")

    code = run_cli(service, StaticIdentityProvider(None), _steps(step))

    assert code == 0
    assert "'customer_id': 'c-2'" in capsys.readouterr().out


def test_complete_before_pick_needs_an_id(service, capsys):
    code = run_cli(service, StaticIdentityProvider("c-1"), _steps({"op": "complete"}))

    assert code == 1
    assert "nothing picked yet" in capsys.readouterr().out


def test_invalid_input_returns_2(service, capsys):
    assert run_cli(service, StaticIdentityProvider("c-1"), "{not json") == 2
    assert run_cli(service, StaticIdentityProvider("c-1"), _steps({"op": "bake"})) == 2
    assert run_cli(service, StaticIdentityProvider("c-1"), _steps(_add("p", "-1"))) == 2
    assert capsys.readouterr().out.count("invalid_input") == 3


def test_out_of_range_prices_are_invalid_input(service, capsys):
    for price in ("1e27", "1000000.01", "0.004"):
        assert run_cli(service, StaticIdentityProvider("c-1"), _steps(_add("p", price))) == 2

    out = capsys.readouterr().out
    assert out.count("invalid_input") == 3
    assert "[ok]" not in out


def test_main_wires_settings_from_environment(monkeypatch, capsys):
    monkeypatch.setenv("PIZZERIA_CUSTOMER_ID", "c-5")
    monkeypatch.setenv("PIZZERIA_LOG_LEVEL", "WARNING")

    code = main([_steps(_add("p", "9.50"), {"op": "confirm"})])

    out = capsys.readouterr().out
    assert code == 0
    assert "'customer_id': 'c-5'" in out
    assert "'state': 'PLACED'" in out


def test_main_without_arguments_prints_usage(monkeypatch, capsys):
    monkeypatch.setattr("sys.argv", ["pizzeria"])

    assert main([]) == 2
    assert "usage" in capsys.readouterr().out


def test_main_rejects_bad_configuration(monkeypatch, capsys):
    monkeypatch.setenv("PIZZERIA_RELIEF_RATE", "2")

    assert main(["[]"]) == 2
    assert "invalid_config" in capsys.readouterr().out
