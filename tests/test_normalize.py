from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID

import pytest

from metacat.core.errors import InvalidArgument
from metacat.core.models import (
    DbTableMeta,
    JobType,
    SourceType,
    StreamMeta,
)
from metacat.core.names import DatasetId, NamespaceName, OwnerName
from metacat.core.normalize import (
    resolve_job_io,
    to_dataset_meta,
    to_job_meta,
    to_namespace_meta,
    to_run_meta,
    to_source_meta,
)
from metacat.core.requests import (
    DatasetRequest,
    DbTableRequest,
    JobRequest,
    NamespaceRequest,
    RunRequest,
    SourceRequest,
    StreamRequest,
)

NS = NamespaceName("ns")
RUN_ID = "3f1c6a2e-9d4b-4c1e-8f2a-6b7c8d9e0f10"


def test_versioned_ids_win_over_legacy_names():
    request = JobRequest(
        type="BATCH",
        inputs=("d2",),
        input_ids=(DatasetId.of("other", "d1"),),
    )

    inputs, outputs = resolve_job_io(NS, request)

    assert inputs == (DatasetId.of("other", "d1"),)
    assert outputs == ()


def test_empty_versioned_ids_still_win():
    request = JobRequest(type="BATCH", inputs=("d2",), input_ids=())

    assert resolve_job_io(NS, request) == ((), ())


def test_versioned_outputs_alone_discard_legacy_inputs():
    request = JobRequest(
        type="BATCH",
        inputs=("d1",),
        output_ids=(DatasetId.of("x", "out"),),
    )

    inputs, outputs = resolve_job_io(NS, request)

    assert inputs == ()
    assert outputs == (DatasetId.of("x", "out"),)


def test_legacy_names_are_qualified_with_job_namespace_in_order():
    request = JobRequest(type="BATCH", inputs=("d1", "d2"))

    inputs, outputs = resolve_job_io(NS, request)

    assert inputs == (DatasetId.of("ns", "d1"), DatasetId.of("ns", "d2"))
    assert outputs == ()


def test_job_without_io_resolves_to_empty_tuples():
    assert resolve_job_io(NS, JobRequest(type="BATCH")) == ((), ())


def test_to_job_meta_parses_type_and_location():
    meta = to_job_meta(
        "ns",
        JobRequest(
            type="SERVICE",
            outputs=("orders",),
            location="https://git.example.com/etl/orders.py",
            context={"sql": "select 1"},
        ),
    )

    assert meta.type is JobType.SERVICE
    assert meta.outputs == (DatasetId.of("ns", "orders"),)
    assert meta.location == "https://git.example.com/etl/orders.py"
    assert meta.context == {"sql": "select 1"}
    assert meta.description is None


@pytest.mark.parametrize(
    "request_",
    [
        JobRequest(type="CRON"),
        JobRequest(type="BATCH", location="not a url"),
    ],
)
def test_to_job_meta_rejects_malformed_requests(request_: JobRequest):
    with pytest.raises(InvalidArgument):
        to_job_meta(NS, request_)


def test_to_namespace_meta_validates_owner():
    meta = to_namespace_meta(NamespaceRequest(owner_name=" data-team "))
    assert meta.owner_name == OwnerName("data-team")

    with pytest.raises(InvalidArgument, match="Owner name"):
        to_namespace_meta(NamespaceRequest(owner_name=" "))


def test_to_source_meta_parses_type_and_url():
    meta = to_source_meta(
        SourceRequest(
            type="POSTGRESQL", connection_url="jdbc:postgresql://db:5432/app"
        )
    )

    assert meta.type is SourceType.POSTGRESQL
    assert meta.connection_url == "jdbc:postgresql://db:5432/app"


@pytest.mark.parametrize(
    "type_, url",
    [("ORACLE", "jdbc:oracle://db/app"), ("MYSQL", "/no/scheme")],
)
def test_to_source_meta_rejects_malformed_requests(type_: str, url: str):
    with pytest.raises(InvalidArgument):
        to_source_meta(SourceRequest(type=type_, connection_url=url))


def test_to_dataset_meta_dispatches_on_variant():
    table = to_dataset_meta(
        DbTableRequest(physical_name="public.orders", source_name="pg", run_id=RUN_ID)
    )
    stream = to_dataset_meta(
        StreamRequest(
            physical_name="orders",
            source_name="kafka",
            schema_location="http://registry/orders.avsc",
        )
    )

    assert isinstance(table, DbTableMeta)
    assert table.run_id == UUID(RUN_ID)
    assert isinstance(stream, StreamMeta)
    assert stream.schema_location == "http://registry/orders.avsc"
    assert stream.description is None


def test_to_dataset_meta_rejects_unknown_variant():
    @dataclass(frozen=True, kw_only=True)
    class _ViewRequest(DatasetRequest):
        pass

    with pytest.raises(InvalidArgument, match="Unknown dataset request type"):
        to_dataset_meta(_ViewRequest(physical_name="v", source_name="pg"))


@pytest.mark.parametrize(
    "request_",
    [
        DbTableRequest(physical_name="t", source_name="pg", run_id="nope"),
        DbTableRequest(physical_name=" ", source_name="pg"),
        StreamRequest(physical_name="s", source_name="k", schema_location="x y"),
    ],
)
def test_to_dataset_meta_rejects_malformed_values(request_: DatasetRequest):
    with pytest.raises(InvalidArgument):
        to_dataset_meta(request_)


def test_to_run_meta_parses_nominal_window():
    meta = to_run_meta(
        RunRequest(nominal_start_time="2024-01-01T00:00:00Z", args={"k": "v"})
    )

    assert meta.nominal_start_time == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert meta.nominal_end_time is None
    assert meta.args == {"k": "v"}

    with pytest.raises(InvalidArgument):
        to_run_meta(RunRequest(nominal_end_time="2024-01-01T00:00:00"))


def test_normalized_context_and_args_are_read_only():
    context = {"sql": "select 1"}
    job_meta = to_job_meta(NS, JobRequest(type="BATCH", context=context))
    run_meta = to_run_meta(RunRequest(args={"mode": "full"}))
    context["sql"] = "select 2"

    assert job_meta.context == {"sql": "select 1"}
    with pytest.raises(TypeError):
        job_meta.context["sql"] = "select 3"
    with pytest.raises(TypeError):
        run_meta.args["mode"] = "delta"
