"""
Tests de las estrategias por vendor y del registry.
"""

import pytest

from conftest import CISCO_ROUTER
from mop_gen_core.domain_models import parse_extracted_data
from mop_gen_core.synthesis import (
    CiscoStrategy,
    DefaultStrategy,
    StrategyRegistry,
    build_default_registry,
    synthesize,
)


def _by_desc(steps):
    return {s.description: s for s in steps}


def test_registry_lookup_is_case_insensitive():
    registry = build_default_registry()
    assert registry.resolve("CISCO").name == "cisco"
    assert registry.resolve(" Juniper ").name == "juniper"
    assert registry.resolve("arista").name == "default"
    assert registry.resolve("").name == "default"
    assert registry.resolve(None).name == "default"
    assert registry.vendors == ["cisco", "juniper"]


def test_register_rejects_empty_vendor():
    with pytest.raises(ValueError):
        StrategyRegistry(default=DefaultStrategy()).register("  ", CiscoStrategy())


def test_unknown_vendor_uses_default_text():
    payload = dict(CISCO_ROUTER, vendor="arista", routing_protocols=["ospf", "bgp"])
    steps = synthesize(parse_extracted_data(payload))
    by_desc = _by_desc(steps)

    assert all(s.command and s.rollback for s in steps)
    assert by_desc["Enter privileged mode"].command == "enable\nPassword: ******"
    assert by_desc["Enter configuration mode"].command == "configure terminal"
    assert by_desc["Save configuration"].command == "write memory"
    # El default solo verifica running-config e interfaces
    assert by_desc["Verify configuration"].command == "show running-config\nshow ip interface brief"


def test_cisco_verify_covers_included_operations():
    payload = {
        "vendor": "Cisco",
        "device_type": "switch",
        "interfaces": [{"name": "Gi0/0", "ip": "10.0.0.1"}],
        "routing_protocols": ["ospf", "bgp"],
        "vlans": [{"id": 10, "name": "USERS"}],
    }
    verify = _by_desc(synthesize(parse_extracted_data(payload)))["Verify configuration"].command

    assert verify.splitlines() == [
        "show running-config",
        "show ip interface brief",
        "show ip ospf neighbor",
        "show ip bgp summary",
        "show vlan brief",
    ]


def test_cisco_verify_skips_operations_not_included():
    # VLANs en un router no generan paso, así que tampoco verificación
    payload = {"vendor": "cisco", "device_type": "router", "vlans": [{"id": 10, "name": "A"}]}
    verify = _by_desc(synthesize(parse_extracted_data(payload)))["Verify configuration"].command
    assert verify == "show running-config"


def test_rollbacks_are_explicit_per_operation():
    payload = dict(CISCO_ROUTER, routing_protocols=["ospf", "bgp"])
    by_desc = _by_desc(synthesize(parse_extracted_data(payload)))

    assert by_desc["Enter privileged mode"].rollback == "disable"
    assert by_desc["Enter configuration mode"].rollback == "end"
    assert by_desc["Configure interfaces"].rollback == "interface Gi0/0\n shutdown\n no ip address\n!"
    assert by_desc["Configure routing protocols"].rollback == "no router ospf 1\nno router bgp 65000"
    assert by_desc["Save configuration"].rollback == "No rollback needed"


def test_juniper_commands_and_rollbacks():
    payload = {
        "vendor": "juniper",
        "device_type": "switch",
        "interfaces": [{"name": "ge-0/0/0", "ip": "10.0.0.1", "subnet": "255.255.255.252"}],
        "vlans": [{"id": 10, "name": "USERS"}],
    }
    by_desc = _by_desc(synthesize(parse_extracted_data(payload)))

    assert by_desc["Enter privileged mode"].command == "cli\nedit"
    assert by_desc["Enter configuration mode"].command == "edit"
    assert by_desc["Configure interfaces"].command == "set interfaces ge-0/0/0 unit 0 family inet address 10.0.0.1/30"
    assert by_desc["Configure interfaces"].rollback == "delete interfaces ge-0/0/0 unit 0 family inet"
    assert by_desc["Configure VLANs"].rollback == "delete vlans USERS"
    assert by_desc["Save configuration"].command == "commit and-quit"
    assert by_desc["Verify configuration"].command.splitlines() == [
        "show configuration",
        "show interfaces terse",
        "show vlans",
    ]


def test_unknown_routing_protocol_becomes_manual_comment():
    payload = {"vendor": "cisco", "routing_protocols": ["rip", "ospf", "eigrp"]}
    routing = _by_desc(synthesize(parse_extracted_data(payload)))["Configure routing protocols"]

    lines = routing.command.splitlines()
    assert lines[0] == "router ospf 1"
    assert lines[-2:] == [
        "! eigrp: no template available, configure manually",
        "! rip: no template available, configure manually",
    ]
    assert "! rip: remove configuration manually" in routing.rollback


def test_custom_strategy_registration():
    class AristaStrategy(CiscoStrategy):
        name = "arista"

        def save(self, data):
            return "copy running-config startup-config"

    registry = build_default_registry()
    registry.register("Arista", AristaStrategy())

    steps = synthesize(parse_extracted_data({"vendor": "arista"}), registry=registry)
    assert _by_desc(steps)["Save configuration"].command == "copy running-config startup-config"
    # El registry de fábrica no se modifica
    default_steps = synthesize(parse_extracted_data({"vendor": "arista"}))
    assert _by_desc(default_steps)["Save configuration"].command == "write memory"
