import pytest

from amq_admin.core.exceptions import (
    AlreadyExistsError,
    BrokerOperationError,
    ConfirmationDeclined,
    FilterSyntaxError,
    InvalidArgumentError,
    NotFoundError,
)
from amq_admin.domain.services.topic_service import TopicService
from conftest import FakeBroker


def _service(broker, console, **kw) -> TopicService:
    return TopicService(broker, console, max_workers=4, **kw)


def _names(table: str) -> list[str]:
    rows = [line for line in table.splitlines() if line.startswith("| ")][1:]
    return [row.split("|")[1].strip() for row in rows]


# ---------- existence guards ----------

def test_validate_topic_exists(broker, console_factory):
    svc = _service(broker, console_factory())
    svc.validate_topic_exists("A")
    with pytest.raises(NotFoundError):
        svc.validate_topic_exists("a")


def test_validate_topic_not_exists(broker, console_factory):
    svc = _service(broker, console_factory())
    svc.validate_topic_not_exists("C")
    with pytest.raises(AlreadyExistsError):
        svc.validate_topic_not_exists("B")


# ---------- add / remove ----------

def test_add_topic(broker, console_factory):
    assert _service(broker, console_factory()).add_topic("C") == "Topic 'C' added"
    assert broker.mutations == [("add_topic", "C")]


def test_add_existing_topic_issues_no_mutation(broker, console_factory):
    with pytest.raises(AlreadyExistsError, match="'A' already exists"):
        _service(broker, console_factory()).add_topic("A")
    assert broker.mutations == []


@pytest.mark.parametrize("name", ["", "   ", None])
def test_add_blank_name_is_rejected_before_broker_call(broker, console_factory, name):
    with pytest.raises(InvalidArgumentError):
        _service(broker, console_factory()).add_topic(name)
    assert broker.calls == []


def test_remove_topic_confirmed(broker, console_factory, yes):
    assert _service(broker, console_factory(yes)).remove_topic("A") == "Topic 'A' removed"
    assert yes.asked == 1
    assert broker.topic_names() == ["B"]


def test_remove_topic_forced_skips_prompt(broker, console_factory, no):
    _service(broker, console_factory(no)).remove_topic("A", force=True)
    assert no.asked == 0
    assert broker.mutations == [("remove_topic", "A")]


def test_remove_topic_declined_is_a_quiet_abort(broker, console_factory, no):
    with pytest.raises(ConfirmationDeclined):
        _service(broker, console_factory(no)).remove_topic("A")
    assert broker.mutations == []


def test_remove_missing_topic_issues_no_mutation(broker, console_factory, yes):
    with pytest.raises(NotFoundError, match="'X' not found"):
        _service(broker, console_factory(yes)).remove_topic("X")
    assert yes.asked == 0
    assert broker.mutations == []


# ---------- list ----------

def test_list_empty_broker(empty_broker, console_factory):
    assert _service(empty_broker, console_factory()).list_topics() == "No topics found"


def test_list_renders_table_and_total(broker, console_factory):
    out = _service(broker, console_factory()).list_topics()
    assert "Topic Name" in out and "Enqueued" in out and "Dequeued" in out
    assert _names(out) == ["A", "B"]
    assert out.splitlines()[-1] == "Total topics: 2"


@pytest.mark.parametrize("enqueued, expected", [(">4", ["A", "B"]), (">6", ["B"])])
def test_list_enqueued_threshold(broker, console_factory, enqueued, expected):
    out = _service(broker, console_factory()).list_topics(enqueued=enqueued)
    assert _names(out) == expected


def test_list_dequeued_threshold_without_match(broker, console_factory):
    assert _service(broker, console_factory()).list_topics(dequeued=">100") == "No topics found"


def test_list_name_filter_is_case_insensitive(console_factory):
    broker = FakeBroker({"shop.Orders": (1, 1), "shop.payments": (2, 2)})
    out = _service(broker, console_factory()).list_topics(filter="ORDER")
    assert _names(out) == ["shop.Orders"]
    # only the matching topic's bean is read
    assert [c for c in broker.calls if c[0] == "topic_view"] == [
        ("topic_view", broker.list_topics()[0])
    ]


def test_list_bad_filter_fails_before_broker_query(broker, console_factory):
    with pytest.raises(FilterSyntaxError):
        _service(broker, console_factory()).list_topics(enqueued="many")
    assert broker.calls == []


def test_sort_by_name_is_case_sensitive(console_factory):
    broker = FakeBroker({"b": (0, 0), "A": (0, 0), "a": (0, 0), "B": (0, 0)})
    assert _names(_service(broker, console_factory()).list_topics()) == ["A", "B", "a", "b"]


@pytest.mark.parametrize("field, expected", [("Enqueued", ["t9", "t10", "big"]), ("Dequeued", ["big", "t10", "t9"])])
def test_sort_by_counter_is_numeric(console_factory, field, expected):
    broker = FakeBroker({"t10": (10, 5), "t9": (9, 7), "big": (12_345_678_901, 1)})
    out = _service(broker, console_factory(), order_field=field).list_topics()
    assert _names(out) == expected


def test_list_is_idempotent(broker, console_factory):
    svc = _service(broker, console_factory())
    assert svc.list_topics(filter="a", enqueued=">=0") == svc.list_topics(filter="a", enqueued=">=0")


# ---------- bulk remove ----------

def test_remove_all_dry_run_never_removes(broker, console_factory, no):
    out = _service(broker, console_factory(no)).remove_all_topics(dry_run=True)
    assert out.splitlines() == [
        "Topic to be removed: 'A'",
        "Topic to be removed: 'B'",
        "Total topics to be removed: 2",
    ]
    assert no.asked == 0
    assert broker.mutations == []


def test_remove_all_confirms_once_for_the_batch(broker, console_factory, yes):
    out = _service(broker, console_factory(yes)).remove_all_topics()
    assert out.splitlines() == ["Topic removed: 'A'", "Topic removed: 'B'", "Total topics removed: 2"]
    assert yes.asked == 1
    assert broker.topic_names() == []


def test_remove_all_declined_removes_nothing(broker, console_factory, no):
    with pytest.raises(ConfirmationDeclined):
        _service(broker, console_factory(no)).remove_all_topics()
    assert broker.mutations == []
    assert broker.calls == []


def test_remove_all_with_filters(broker, console_factory):
    out = _service(broker, console_factory()).remove_all_topics(force=True, enqueued=">6")
    assert out.splitlines() == ["Topic removed: 'B'", "Total topics removed: 1"]
    assert broker.topic_names() == ["A"]


def test_remove_all_no_candidates(broker, console_factory):
    out = _service(broker, console_factory()).remove_all_topics(force=True, filter="zzz")
    assert out == "No topics found"
    assert broker.mutations == []


def test_remove_all_bad_filter_prompts_nothing(broker, console_factory, yes):
    with pytest.raises(FilterSyntaxError):
        _service(broker, console_factory(yes)).remove_all_topics(dequeued="<x")
    assert yes.asked == 0
    assert broker.calls == []


def test_remove_all_failure_is_not_rolled_back(console_factory):
    broker = FakeBroker({f"t{i:02d}": (0, 0) for i in range(6)})
    broker.fail_remove.add("t03")
    with pytest.raises(BrokerOperationError):
        _service(broker, console_factory()).remove_all_topics(force=True)
    assert "t03" in broker.topic_names()
    assert len(broker.topic_names()) < 6


def test_bulk_remove_returns_structured_result(broker, console_factory):
    result = _service(broker, console_factory()).bulk_remove(dry_run=True, filter="b")
    assert result.lines == ["Topic to be removed: 'B'"]
    assert result.summary == "Total topics to be removed: 1"
    assert _service(broker, console_factory()).bulk_remove(dry_run=True, filter="zzz") is None
