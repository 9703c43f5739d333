from __future__ import annotations

import pytest

from vectorclient.client import (
    DescribeCollectionResponse,
    DescribeIndexResponse,
    FlushResponse,
    GenericIndex,
    GetIndexBuildProgressResponse,
    GetIndexStateResponse,
    GrpcClient,
    IndexDescription,
    IndexState,
    with_index_name,
)
from vectorclient.errors import (
    ClientNotReadyError,
    CollectionNotExistsError,
    ErrorCode,
    MilvusError,
    ServiceError,
    Status,
)
from vectorclient.partition import BoolResponse
from vectorclient.rows import Field, FieldType, Schema

COLLECTION = "test_go_sdk"
VECTOR_FIELD = "vector"


def default_schema() -> Schema:
    return Schema(
        collection_name=COLLECTION,
        fields=[
            Field("int64", FieldType.INT64, primary_key=True),
            Field("float", FieldType.FLOAT),
            Field(VECTOR_FIELD, FieldType.FLOAT_VECTOR, type_params={"dim": "128"}),
        ],
    )


class FakeService:
    def __init__(self) -> None:
        self.collections = {COLLECTION}
        self.requests: dict[str, list] = {}
        self.flush_status = Status()
        self.create_index_status = Status()
        self.describe_index_handler = lambda req: DescribeIndexResponse(status=Status())
        self.state_handler = lambda req: GetIndexStateResponse(status=Status())
        self.progress_handler = lambda req: GetIndexBuildProgressResponse(status=Status())

    def _record(self, name, req):
        self.requests.setdefault(name, []).append(req)

    def has_collection(self, req):
        return BoolResponse(status=Status(), value=req.collection_name in self.collections)

    def describe_collection(self, req):
        return DescribeCollectionResponse(status=Status(), schema=default_schema())

    def flush(self, req):
        self._record("flush", req)
        return FlushResponse(status=self.flush_status)

    def create_index(self, req):
        self._record("create_index", req)
        return self.create_index_status

    def describe_index(self, req):
        self._record("describe_index", req)
        return self.describe_index_handler(req)

    def drop_index(self, req):
        self._record("drop_index", req)
        return Status()

    def get_index_state(self, req):
        self._record("get_index_state", req)
        return self.state_handler(req)

    def get_index_build_progress(self, req):
        self._record("get_index_build_progress", req)
        return self.progress_handler(req)


@pytest.fixture
def service():
    return FakeService()


@pytest.fixture
def client(service):
    return GrpcClient(service, poll_interval=0.001)


FLAT_IP = GenericIndex("", "FLAT", {"metric_type": "IP"})


def test_async_create_index(client, service):
    client.create_index(COLLECTION, VECTOR_FIELD, FLAT_IP, True)
    (req,) = service.requests["create_index"]
    assert req.collection_name == COLLECTION
    assert req.field_name == VECTOR_FIELD
    assert req.extra_params == {"index_type": "FLAT", "metric_type": "IP"}
    assert service.requests["flush"][0].collection_names == [COLLECTION]
    assert "describe_index" not in service.requests


def test_create_index_flush_error(client, service):
    service.flush_status = Status(ErrorCode.ILLEGAL_ARGUMENT, "bad request")
    with pytest.raises(ServiceError):
        client.create_index(COLLECTION, VECTOR_FIELD, FLAT_IP, False)
    assert "create_index" not in service.requests


def test_sync_create_index_waits_for_finish(client, service):
    calls = []

    def handler(req):
        calls.append(req)
        state = IndexState.FINISHED if len(calls) >= 3 else IndexState.IN_PROGRESS
        return DescribeIndexResponse(
            status=Status(),
            index_descriptions=[
                IndexDescription(index_name=req.index_name, field_name=req.index_name, state=state)
            ],
        )

    service.describe_index_handler = handler
    result = client.create_index(
        COLLECTION, VECTOR_FIELD, FLAT_IP, False, with_index_name("test-index")
    )
    assert result is None
    assert len(calls) == 3
    assert all(r.index_name == "test-index" for r in calls)
    assert all(r.collection_name == COLLECTION for r in calls)
    assert service.requests["create_index"][0].index_name == "test-index"


def test_sync_create_index_failure(client, service):
    service.describe_index_handler = lambda req: DescribeIndexResponse(
        status=Status(),
        index_descriptions=[
            IndexDescription(
                field_name=VECTOR_FIELD,
                state=IndexState.FAILED,
                index_state_fail_reason="out of memory",
            )
        ],
    )
    with pytest.raises(MilvusError, match="create index failed, reason: out of memory"):
        client.create_index(COLLECTION, VECTOR_FIELD, FLAT_IP, False)


def test_create_index_status_error(client, service):
    service.create_index_status = Status(ErrorCode.UNEXPECTED_ERROR, "boom")
    with pytest.raises(ServiceError, match="boom"):
        client.create_index(COLLECTION, VECTOR_FIELD, FLAT_IP, True)


def test_drop_index(client, service):
    client.drop_index(COLLECTION, VECTOR_FIELD, with_index_name("idx"))
    (req,) = service.requests["drop_index"]
    assert (req.collection_name, req.field_name, req.index_name) == (COLLECTION, VECTOR_FIELD, "idx")


def test_describe_index(client, service):
    def handler(req):
        assert req.field_name == VECTOR_FIELD
        return DescribeIndexResponse(
            status=Status(),
            index_descriptions=[
                IndexDescription(
                    index_name="_default",
                    index_id=1,
                    field_name=req.field_name,
                    params={"nlist": "1024", "metric_type": "IP", "index_type": "IVF_FLAT"},
                )
            ],
        )

    service.describe_index_handler = handler
    indexes = client.describe_index(COLLECTION, VECTOR_FIELD)
    assert indexes == [
        GenericIndex(
            "_default", "IVF_FLAT", {"nlist": "1024", "metric_type": "IP", "index_type": "IVF_FLAT"}
        )
    ]
    assert indexes[0].params()["nlist"] == "1024"


def test_describe_index_service_errors(client, service):
    def broken(req):
        raise RuntimeError("mock error")

    service.describe_index_handler = broken
    with pytest.raises(RuntimeError):
        client.describe_index(COLLECTION, VECTOR_FIELD)

    service.describe_index_handler = lambda req: DescribeIndexResponse(
        status=Status(ErrorCode.UNEXPECTED_ERROR)
    )
    with pytest.raises(ServiceError):
        client.describe_index(COLLECTION, VECTOR_FIELD)


def test_get_index_build_progress(client, service):
    service.progress_handler = lambda req: GetIndexBuildProgressResponse(
        status=Status(), total_rows=700, indexed_rows=123
    )
    assert client.get_index_build_progress(COLLECTION, VECTOR_FIELD) == (700, 123)
    assert service.requests["get_index_build_progress"][0].collection_name == COLLECTION


def test_get_index_build_progress_errors(client, service):
    def broken(req):
        raise RuntimeError("mock error")

    service.progress_handler = broken
    with pytest.raises(RuntimeError):
        client.get_index_build_progress(COLLECTION, VECTOR_FIELD)

    service.progress_handler = lambda req: GetIndexBuildProgressResponse(
        status=Status(ErrorCode.UNEXPECTED_ERROR)
    )
    with pytest.raises(ServiceError):
        client.get_index_build_progress(COLLECTION, VECTOR_FIELD)


def test_get_index_state(client, service):
    service.state_handler = lambda req: GetIndexStateResponse(
        status=Status(), state=IndexState.FINISHED
    )
    assert client.get_index_state(COLLECTION, VECTOR_FIELD) is IndexState.FINISHED
    assert int(IndexState.FINISHED) == 3


def test_collection_not_exists(client):
    with pytest.raises(CollectionNotExistsError, match="collection haha does not exist"):
        client.create_index("haha", VECTOR_FIELD, FLAT_IP, True)


def test_field_not_exists(client):
    with pytest.raises(MilvusError, match="does not exist"):
        client.drop_index(COLLECTION, "exist")


def test_field_not_vector(client):
    with pytest.raises(MilvusError, match="is not vector field"):
        client.get_index_state(COLLECTION, "float")


def test_client_not_ready():
    with pytest.raises(ClientNotReadyError):
        GrpcClient().describe_index(COLLECTION, VECTOR_FIELD)


def test_generic_index_params_include_type():
    idx = GenericIndex("my_index", "HNSW", {"M": "8"})
    assert idx.params() == {"index_type": "HNSW", "M": "8"}
    assert GenericIndex("x", "", {"a": "1"}).params() == {"a": "1"}