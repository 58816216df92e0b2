from dataclasses import replace
from datetime import datetime, timedelta, timezone
from uuid import UUID

import pytest

from metacat.core.errors import InvalidArgument, NotFound
from metacat.core.models import (
    Dataset,
    DbTable,
    Field,
    Job,
    JobType,
    Namespace,
    Run,
    RunState,
    Stream,
)
from metacat.core.names import (
    DatasetId,
    DatasetName,
    JobId,
    NamespaceName,
    OwnerName,
    SourceName,
)
from metacat.core.project import (
    require,
    run_duration_ms,
    to_dataset_response,
    to_job_response,
    to_namespace_response,
    to_run_response,
    to_runs_response,
)
from metacat.core.responses import DbTableResponse, StreamResponse, as_payload

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)
RUN_ID = UUID("3f1c6a2e-9d4b-4c1e-8f2a-6b7c8d9e0f10")


def _dataset_kwargs(**extra):
    kwargs = {
        "id": DatasetId.of("ns", "orders"),
        "name": DatasetName("orders"),
        "physical_name": DatasetName("public.orders"),
        "created_at": T0,
        "updated_at": T0,
        "source_name": SourceName("pg"),
    }
    kwargs.update(extra)
    return kwargs


def _run(**extra) -> Run:
    return Run(id=RUN_ID, created_at=T0, updated_at=T0, **extra)


def test_run_duration_is_derived_from_start_and_end():
    run = _run(
        state=RunState.COMPLETED,
        started_at=T0,
        ended_at=T0 + timedelta(milliseconds=1500),
    )

    payload = as_payload(to_run_response(run))

    assert payload["durationMs"] == 1500
    assert payload["startedAt"] == "2024-01-01T00:00:00Z"
    assert payload["endedAt"] == "2024-01-01T00:00:01.500Z"
    assert payload["state"] == "COMPLETED"


def test_run_without_end_has_no_duration():
    run = _run(state=RunState.RUNNING, started_at=T0)

    assert run_duration_ms(run) is None
    payload = as_payload(to_run_response(run))
    assert "durationMs" not in payload
    assert "endedAt" not in payload
    assert payload["id"] == str(RUN_ID)


def test_run_state_is_rendered_as_stored():
    run = _run(started_at=T0, ended_at=T0 + timedelta(seconds=2))

    response = to_run_response(run)

    assert response.state == "NEW"
    assert response.duration_ms == 2000


def test_table_response_has_no_schema_location():
    table = DbTable(
        fields=(Field(name="id", type="INTEGER"),),
        tags={"SENSITIVE", "PII"},
        **_dataset_kwargs(),
    )

    response = to_dataset_response(table)
    payload = as_payload(response)

    assert isinstance(response, DbTableResponse)
    assert payload["type"] == "DB_TABLE"
    assert "schemaLocation" not in payload
    assert "lastModifiedAt" not in payload
    assert "description" not in payload
    assert payload["id"] == {"namespace": "ns", "name": "orders"}
    assert payload["tags"] == ["PII", "SENSITIVE"]
    assert payload["fields"] == [{"name": "id", "type": "INTEGER", "tags": []}]


def test_stream_response_carries_schema_location():
    stream = Stream(
        schema_location="http://registry/orders.avsc",
        last_modified_at=T0 + timedelta(minutes=5),
        **_dataset_kwargs(),
    )

    response = to_dataset_response(stream)
    payload = as_payload(response)

    assert isinstance(response, StreamResponse)
    assert payload["type"] == "STREAM"
    assert payload["schemaLocation"] == "http://registry/orders.avsc"
    assert payload["lastModifiedAt"] == "2024-01-01T00:05:00Z"


def test_dataset_of_unknown_variant_is_rejected():
    with pytest.raises(InvalidArgument, match="Unknown dataset type"):
        to_dataset_response(Dataset(**_dataset_kwargs()))


def test_job_response_embeds_latest_run():
    job = Job(
        id=JobId.of("ns", "load_orders"),
        type=JobType.BATCH,
        created_at=T0,
        updated_at=T0,
        inputs=(DatasetId.of("raw", "orders"),),
        outputs=(DatasetId.of("ns", "orders"),),
        latest_run=_run(),
    )

    payload = as_payload(to_job_response(job))

    assert payload["name"] == "load_orders"
    assert payload["namespace"] == "ns"
    assert payload["inputs"] == [{"namespace": "raw", "name": "orders"}]
    assert payload["latestRun"]["state"] == "NEW"
    assert "location" not in payload
    assert payload["context"] == {}


def test_job_response_without_runs_omits_latest_run():
    job = Job(
        id=JobId.of("ns", "load_orders"),
        type=JobType.STREAM,
        created_at=T0,
        updated_at=T0,
    )

    assert "latestRun" not in as_payload(to_job_response(job))


def test_namespace_response_omits_missing_description():
    namespace = Namespace(
        name=NamespaceName("ns"),
        created_at=T0,
        updated_at=T0,
        owner_name=OwnerName("me"),
    )

    assert as_payload(to_namespace_response(namespace)) == {
        "name": "ns",
        "createdAt": "2024-01-01T00:00:00Z",
        "updatedAt": "2024-01-01T00:00:00Z",
        "ownerName": "me",
    }


def test_list_responses_preserve_order():
    later = Run(
        id=UUID(int=1),
        created_at=T0 + timedelta(seconds=1),
        updated_at=T0,
    )

    response = to_runs_response([_run(), later])

    assert [r.id for r in response.runs] == [str(RUN_ID), str(UUID(int=1))]


def test_require_raises_not_found_for_missing_entities():
    assert require("x", "Namespace", "ns") == "x"
    with pytest.raises(NotFound, match="Namespace 'ns' not found"):
        require(None, "Namespace", "ns")


def test_run_args_and_job_context_are_read_only():
    source = {"mode": "full"}
    run = _run(args=source)
    job = Job(
        id=JobId.of("ns", "load_orders"),
        type=JobType.BATCH,
        created_at=T0,
        updated_at=T0,
        context={"sql": "select 1"},
        latest_run=run,
    )
    source["mode"] = "delta"

    with pytest.raises(TypeError):
        run.args["mode"] = "partial"
    with pytest.raises(TypeError):
        job.context["sql"] = "drop table"

    assert to_run_response(run).args == {"mode": "full"}
    assert as_payload(to_job_response(job))["context"] == {"sql": "select 1"}
    assert hash(job) == hash(replace(job))
    with pytest.raises(TypeError):
        replace(run, state=RunState.RUNNING).args["mode"] = "partial"
