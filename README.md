# vectorclient

Client-side logic for talking to a vector database service. The package opens
no network connections of its own. You hand it a *service* object whose
methods make the remote calls. The package builds the request objects, checks
the `Status` in each reply, polls long-running operations and raises Python
exceptions on failure.

## Modules

- `vectorclient.client`: `GrpcClient(service=None, poll_interval=0.1)`
  collects the index calls together with the partition, role and
  resource-group mixins below.
  - `create_index(collection_name, field_name, index, async_=False, *options)`
    first checks that the collection exists and that the field is a float or
    binary vector field. It then flushes the collection and asks the service
    to build the index. When `async_` is false it polls `describe_index`
    every `poll_interval` seconds until the index is `IndexState.FINISHED`.
    It raises `MilvusError` if the index ends up `IndexState.FAILED`.
  - `describe_index`, `drop_index`, `get_index_state` and
    `get_index_build_progress` return, in order: a list of `GenericIndex`,
    nothing, an `IndexState`, and `(total_rows, indexed_rows)`.
  - `with_index_name(name)` picks the index by name.
  - `GenericIndex(name, index_type, params)` is a ready-made index value.
    `params()` returns the parameters, with `index_type` included when it is
    set. Any object that has a `params()` method can be passed to
    `create_index`.
- `vectorclient.partition`: `PartitionMixin` provides `create_partition`,
  `drop_partition`, `has_partition`, `show_partitions` (a list of
  `Partition(id, name, loaded)`), `load_partitions` and
  `release_partitions`. A blocking `load_partitions` accepts a `timeout` in
  seconds and raises `DeadlineExceededError` once the timeout has passed.
- `vectorclient.rbac`: `RbacMixin` provides `create_role`, `drop_role`,
  `add_user_role`, `remove_user_role`, `list_roles` (returns `Role` values),
  `list_users` (returns `User` values), `grant` and `revoke`. The last two
  take a `PrivilegeObjectType` to say what kind of object is meant.
- `vectorclient.resource_group`: `ResourceGroupMixin` provides
  `list_resource_groups`, `create_resource_group`, `describe_resource_group`
  (returns a `ResourceGroup`), `drop_resource_group`, `transfer_node` and
  `transfer_replica`.
- `vectorclient.options` holds request dataclasses and option functions:
  - `with_consistency_level` and `with_collection_property` apply to
    `CreateCollectionRequest`.
  - `with_replica_number` applies to `LoadCollectionRequest`.
  - `with_start_ts` and `with_end_ts` apply to `ImportRequest`.
  - `with_ignore_growing`, `with_offset`, `with_limit`,
    `with_search_query_consistency_level`, `with_guarantee_timestamp` and
    `with_travel_timestamp` apply to `SearchQueryOption`.

  `make_search_query_option(collection_name, *options, cache=None)` works
  out the guarantee timestamp from the consistency level, as follows:
  - strong gives 0;
  - session gives the collection's last write timestamp, or 1 if there is none;
  - bounded gives 2;
  - eventually gives 1;
  - customized keeps the timestamp that was given.

  Setting a guarantee timestamp under any level other than customized raises
  `ValueError`.
- `vectorclient.meta_cache`: `MetaCache` is a thread-safe store of two
  things: the last write timestamp of each collection, which only ever
  increases, and cached `CollectionInfo` with its `ConsistencyLevel`.
  `META_CACHE` is the shared instance that is used by default.
- `vectorclient.metadata`: `CallContext` is an immutable per-call context. It
  carries outgoing metadata, extra values, an optional deadline and an
  optional cancel event.
  - `with_debug_log_level`, `with_info_log_level`, `with_warn_log_level` and
    `with_error_log_level` set the log level sent with the call.
  - `with_client_request_id` tags the call with a request id.
  - `authentication_metadata` adds a base64 `authorization` entry.
  - `create_authentication_interceptor` returns an interceptor that adds
    that entry to every call.
- `vectorclient.retry`: `retry_on_rate_limit_interceptor(max_retry, backoff)`
  calls again, up to `max_retry` times, while the reply's status is
  `ErrorCode.RATE_LIMIT`. It waits `backoff(ctx, attempt)` seconds between
  attempts, never more than 60. To turn retrying off for one call, set
  `RetryContextKey.RETRY_ON_RATE_LIMIT` to `False` in the context. The wait
  can end early: it raises `DeadlineExceededError` if the deadline passes and
  `CancelledError` if the context is cancelled.
- `vectorclient.rows`: `search_result_to_rows(schema, results, row_type)`
  turns a columnar `SearchResultData` into a list of instances of
  `row_type`, one `SearchResultByRows` per query. `row_type` must be a class
  that can be built with no arguments and has type-annotated attributes.
  `set_field_value` sets one attribute from one column. It raises
  `FieldTypeNotMatchError` when the field type, the attribute's annotation
  and the column data do not agree.
- `vectorclient.errors`: the exceptions. All of them derive from
  `MilvusError`:
  - `ClientNotReadyError`: the client has no service.
  - `ServiceError`: the service returned a failing status.
  - `CollectionNotExistsError` and `PartitionNotExistsError`.
  - `FieldTypeNotMatchError`.

  `handle_resp_status` and `require_service` are the checks the client uses.

## The service object

Each call goes to a method of the same name on the service. That method takes
one request dataclass and returns either a `Status` or a response with a
`.status` attribute. The methods used are:

- `has_collection`, `describe_collection`, `flush`
- `create_index`, `describe_index`, `drop_index`, `get_index_state`,
  `get_index_build_progress`
- `has_partition`, `create_partition`, `drop_partition`, `show_partitions`,
  `load_partitions`, `release_partitions`
- `create_role`, `drop_role`, `operate_user_role`, `select_role`,
  `select_user`, `operate_privilege`
- `list_resource_groups`, `create_resource_group`,
  `describe_resource_group`, `drop_resource_group`, `transfer_node`,
  `transfer_replica`

## Example

```python
from vectorclient.client import GenericIndex, GrpcClient, with_index_name

client = GrpcClient(service)  # service: your object that makes the remote calls
index = GenericIndex("my_index", "FLAT", {"metric_type": "IP"})
client.create_index("books", "vector", index, False, with_index_name("my_index"))
total, indexed = client.get_index_build_progress("books", "vector")
```

## What it does not do

- It has no transport. It does not connect to a server, serialize messages or
  speak any wire protocol; the service object has to do all of that.
- `GrpcClient` only covers what is listed above. It has no calls for
  creating, dropping or describing collections as a user-facing operation,
  and none for insert, delete, search or query.
- It has no command-line interface.

## Running the tests

```
pip install -e .[test]
pytest
```