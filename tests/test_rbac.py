import pytest

from vectorclient.errors import ClientNotReadyError, ErrorCode, ServiceError, Status
from vectorclient.rbac import (
    CreateRoleRequest,
    DropRoleRequest,
    GrantEntity,
    OperatePrivilegeRequest,
    OperatePrivilegeType,
    OperateUserRoleRequest,
    OperateUserRoleType,
    PrivilegeObjectType,
    RbacMixin,
    Role,
    SelectRoleResponse,
    SelectUserResponse,
    User,
)

ROLE = "testRole"
USERNAME = "testUser"
COLLECTION = "test_collection"
OK = Status(error_code=ErrorCode.SUCCESS)
BAD = Status(ErrorCode.UNEXPECTED_ERROR, "mock failure")


class FakeService:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def __getattr__(self, name):
        def call(request):
            self.calls.append((name, request))
            if self.error is not None:
                raise self.error
            return self.reply

        return call


class Client(RbacMixin):
    def __init__(self, service=None):
        self.service = service


def _privilege(kind):
    entity = GrantEntity(role_name=ROLE, object_type="Collection", object_name=COLLECTION)
    return OperatePrivilegeRequest(entity=entity, type=kind)


MUTATIONS = {
    "create_role": (
        lambda client: client.create_role(ROLE),
        ("create_role", CreateRoleRequest(role_name=ROLE)),
    ),
    "drop_role": (
        lambda client: client.drop_role(ROLE),
        ("drop_role", DropRoleRequest(role_name=ROLE)),
    ),
    "add_user_role": (
        lambda client: client.add_user_role(USERNAME, ROLE),
        (
            "operate_user_role",
            OperateUserRoleRequest(USERNAME, ROLE, OperateUserRoleType.ADD_USER_TO_ROLE),
        ),
    ),
    "remove_user_role": (
        lambda client: client.remove_user_role(USERNAME, ROLE),
        (
            "operate_user_role",
            OperateUserRoleRequest(USERNAME, ROLE, OperateUserRoleType.REMOVE_USER_FROM_ROLE),
        ),
    ),
    "grant": (
        lambda client: client.grant(ROLE, PrivilegeObjectType.COLLECTION, COLLECTION),
        ("operate_privilege", _privilege(OperatePrivilegeType.GRANT)),
    ),
    "revoke": (
        lambda client: client.revoke(ROLE, PrivilegeObjectType.COLLECTION, COLLECTION),
        ("operate_privilege", _privilege(OperatePrivilegeType.REVOKE)),
    ),
}


def test_create_role():
    service = FakeService(reply=OK)
    assert Client(service).create_role(ROLE) is None
    assert service.calls == [("create_role", CreateRoleRequest(role_name=ROLE))]


def test_drop_role():
    service = FakeService(reply=OK)
    assert Client(service).drop_role(ROLE) is None
    assert service.calls == [("drop_role", DropRoleRequest(role_name=ROLE))]


def test_add_user_role():
    service = FakeService(reply=OK)
    assert Client(service).add_user_role(USERNAME, ROLE) is None
    expected = OperateUserRoleRequest(USERNAME, ROLE, OperateUserRoleType.ADD_USER_TO_ROLE)
    assert service.calls == [("operate_user_role", expected)]


def test_remove_user_role():
    service = FakeService(reply=OK)
    assert Client(service).remove_user_role(USERNAME, ROLE) is None
    expected = OperateUserRoleRequest(USERNAME, ROLE, OperateUserRoleType.REMOVE_USER_FROM_ROLE)
    assert service.calls == [("operate_user_role", expected)]


def test_grant():
    service = FakeService(reply=OK)
    assert Client(service).grant(ROLE, PrivilegeObjectType.COLLECTION, COLLECTION) is None
    assert service.calls == [("operate_privilege", _privilege(OperatePrivilegeType.GRANT))]


def test_revoke():
    service = FakeService(reply=OK)
    assert Client(service).revoke(ROLE, PrivilegeObjectType.COLLECTION, COLLECTION) is None
    assert service.calls == [("operate_privilege", _privilege(OperatePrivilegeType.REVOKE))]


@pytest.mark.parametrize("operation", sorted(MUTATIONS))
def test_mutation_rpc_error_propagates(operation):
    invoke, expected_call = MUTATIONS[operation]
    service = FakeService(error=RuntimeError("mock error"))
    with pytest.raises(RuntimeError, match="mock error"):
        invoke(Client(service))
    assert service.calls == [expected_call]


@pytest.mark.parametrize("operation", sorted(MUTATIONS))
def test_mutation_status_error_raises(operation):
    invoke, expected_call = MUTATIONS[operation]
    service = FakeService(reply=BAD)
    with pytest.raises(ServiceError, match="mock failure"):
        invoke(Client(service))
    assert service.calls == [expected_call]


@pytest.mark.parametrize("operation", sorted(MUTATIONS))
def test_mutation_without_service_raises(operation):
    invoke, _ = MUTATIONS[operation]
    with pytest.raises(ClientNotReadyError, match="not ready"):
        invoke(Client())


def test_list_roles():
    service = FakeService(reply=SelectRoleResponse(status=OK, role_names=[ROLE]))
    assert Client(service).list_roles() == [Role(name=ROLE)]
    assert service.calls[0][1].include_user_info is False


def test_list_roles_failures():
    failing = Client(FakeService(error=RuntimeError("mock error")))
    with pytest.raises(RuntimeError, match="mock error"):
        failing.list_roles()
    assert len(failing.service.calls) == 1
    with pytest.raises(ServiceError) as status_err:
        Client(FakeService(reply=SelectRoleResponse(status=BAD))).list_roles()
    assert "mock failure" in str(status_err.value)
    with pytest.raises(ClientNotReadyError) as not_ready:
        Client().list_roles()
    assert "not ready" in str(not_ready.value)


def test_list_users():
    service = FakeService(reply=SelectUserResponse(status=OK, user_names=[USERNAME]))
    assert Client(service).list_users() == [User(name=USERNAME)]
    assert service.calls[0][1].include_role_info is False


def test_list_users_failures():
    failing = Client(FakeService(error=RuntimeError("mock error")))
    with pytest.raises(RuntimeError, match="mock error"):
        failing.list_users()
    assert len(failing.service.calls) == 1
    with pytest.raises(ServiceError) as status_err:
        Client(FakeService(reply=SelectUserResponse(status=BAD))).list_users()
    assert "mock failure" in str(status_err.value)
    with pytest.raises(ClientNotReadyError) as not_ready:
        Client().list_users()
    assert "not ready" in str(not_ready.value)


def test_object_type_names():
    service = FakeService(reply=OK)
    client = Client(service)
    for object_type in PrivilegeObjectType:
        client.grant(ROLE, object_type, COLLECTION)
    sent = [request.entity.object_type for _, request in service.calls]
    assert sent == ["Collection", "Global", "User"]