from uuid import UUID

import httpx
import pytest
from fastapi.testclient import TestClient

from common.config import ClientSettings
from connectors.fleet_interface import TransportError
from connectors.vmapi_connector import VmapiConnector, VmapiSession
from mock_vmapi.daemon import app
from vmapi.enums import MachineState, MachineType
from vmapi.errors import InvalidDescriptor, InvalidResponse
from vmapi.filters import VmQuery

ZONE = UUID("5b4f8d6a-1c2e-4f7a-9b3d-0a1b2c3d4e01")
HVM = UUID("8a2d4f10-7c3b-4e5d-a6f7-0b1c2d3e4f02")
BROKEN = UUID("e1f2a3b4-c5d6-4e7f-8a9b-0c1d2e3f4a04")
OWNER = UUID("930896af-bf8c-48d4-885c-6573a94b1853")


@pytest.fixture
def session():
    s = VmapiSession("http://testserver", client=TestClient(app))
    yield s
    s.disconnect()


@pytest.fixture
def connector(session):
    return VmapiConnector(session)


def test_session_is_alive(session):
    assert session.is_alive
    session.connect()


def test_unreachable_session():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    s = VmapiSession("http://vmapi.invalid", client=httpx.Client(transport=httpx.MockTransport(refuse)))
    assert not s.is_alive
    with pytest.raises(ConnectionError):
        s.connect()


def test_status_and_info(connector):
    assert connector.status.healthy is True
    assert connector.info.type == "vmapi"
    assert connector.info.vmapiURL == "http://testserver"


def test_from_settings():
    s = VmapiSession.from_settings(ClientSettings(vmapi_url="http://vmapi.example.com/", timeout=4))
    assert s.base_URL == "http://vmapi.example.com"
    assert s.timeout == 4
    s.disconnect()


def test_fetch_with_filter(connector):
    vms = connector.fetch(VmQuery().with_owner_uuid(OWNER).with_brand("bhyve").build())
    assert [vm.uuid for vm in vms] == [HVM]
    assert vms[0].disks[1].size == 102400


def test_fetch_without_filter(connector):
    assert len(connector.fetch()) == 4


def test_filter_is_sent_as_query_parameters():
    seen = {}

    def handler(request):
        seen.update(request.url.params)
        return httpx.Response(200, json=[])

    s = VmapiSession("http://vmapi.example.com", client=httpx.Client(transport=httpx.MockTransport(handler)))
    VmapiConnector(s).fetch(VmQuery().with_alias("cloudapi").with_docker(True).build())
    assert seen == {"alias": "cloudapi", "docker": "true"}


def test_get_vm(connector):
    vm = connector.get_vm(ZONE, owner_uuid=OWNER)
    assert vm.uuid == ZONE
    assert vm.brand == "joyent-minimal"


def test_get_missing_vm_raises_transport_error(connector):
    with pytest.raises(TransportError) as excinfo:
        connector.get_vm(UUID("00000000-0000-0000-0000-000000000001"))
    assert excinfo.value.response.status_code == 404


def test_list_machines_keeps_partial_batch(connector):
    batch = connector.list_machines()
    machines = {m.id: m for m in batch.machines}
    assert set(machines) == {ZONE, HVM, UUID("c3e5a7b9-2d4f-4a6c-8e0a-2c3d4e5f6a03")}
    assert list(batch.errors) == [BROKEN]
    assert machines[ZONE].type is MachineType.SMART_MACHINE
    assert machines[HVM].state is MachineState.STOPPED
    assert machines[HVM].disk == 102400


def answering(body):
    def handler(request):
        if isinstance(body, str):
            return httpx.Response(200, text=body)
        return httpx.Response(200, json=body)

    return VmapiConnector(VmapiSession("http://vmapi.example.com", client=httpx.Client(transport=httpx.MockTransport(handler))))


MIXED = [
    {"uuid": str(ZONE), "brand": "joyent", "state": "running", "image_uuid": "3f0c8a1e-2b4d-4c6e-8f0a-1b2c3d4e5f60"},
    {"uuid": str(HVM), "brand": "bhyve", "ram": "lots", "create_timestamp": "yesterday",
     "image_uuid": "7d1e9c4a-5b3f-4a2e-9c8d-1e2f3a4b5c70"},
    {"alias": "lost", "brand": "kvm"},
]


def test_fetch_validates_each_record():
    vms = answering(MIXED).fetch()
    assert [vm.uuid for vm in vms] == [ZONE, HVM]
    assert vms[1].ram is None
    assert vms[1].create_timestamp is None


def test_list_machines_sets_aside_unidentified_record():
    batch = answering(MIXED).list_machines()
    assert [m.id for m in batch.machines] == [ZONE, HVM]
    assert batch.errors == {}
    assert len(batch.unidentified) == 1
    assert isinstance(batch.unidentified[0], InvalidDescriptor)


def test_fetch_records_are_returned_verbatim():
    assert answering(MIXED).fetch_records() == MIXED


@pytest.mark.parametrize("body", ["<html>gateway timeout</html>", {"code": "InternalError"}])
def test_unexpected_list_body(body, caplog):
    with pytest.raises(InvalidResponse):
        answering(body).fetch()
    assert any(record.levelname == "ERROR" for record in caplog.records)


def test_get_vm_without_identity():
    with pytest.raises(InvalidDescriptor):
        answering({"uuid": "garbage", "brand": "lx"}).get_vm(ZONE)


def test_get_vm_unexpected_body():
    with pytest.raises(InvalidResponse):
        answering([]).get_vm(ZONE)
