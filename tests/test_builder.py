"""Tests for the filter logging builder"""

import logging

import pytest

from filter_logging import (
    LoggedStream,
    LoggerMissingError,
    StreamBuilder,
    field,
    filter_with_logs,
    set_default_config,
)


class CountingSource:
    """Iterable that records how many items were pulled"""

    def __init__(self, items):
        self.items = items
        self.pulled = 0

    def __iter__(self):
        for item in self.items:
            self.pulled += 1
            yield item


class TestScenarios:
    def test_even_filter_logs_big_values(self, sink, is_even):
        stream = (
            filter_with_logs([1, 2, 3, 4], is_even)
            .log_when(lambda n: n > 2, "big:{}", lambda n: n)
            .build(sink)
        )

        assert list(stream) == [2, 4]
        assert sink.calls == [
            (logging.INFO, "big:{}", (3,)),
            (logging.INFO, "big:{}", (4,)),
        ]

    def test_no_rules_only_filters(self, sink, is_even):
        stream = filter_with_logs([1, 2, 3], is_even).build(sink)

        assert list(stream) == [2]
        assert sink.calls == []

    def test_missing_logger_fails_before_pulling(self, is_even):
        source = CountingSource([1, 2, 3])
        builder = filter_with_logs(source, is_even).log_when(lambda n: True, "seen {}", lambda n: n)

        with pytest.raises(LoggerMissingError) as exc_info:
            builder.build(None)

        assert isinstance(exc_info.value, RuntimeError)
        assert "build(logger)" in str(exc_info.value)
        assert source.pulled == 0


class TestOrdering:
    def test_log_precedes_yield_of_same_item(self, shared_sink, events, is_even):
        stream = (
            filter_with_logs([1, 2, 3, 4], is_even)
            .log_when(lambda n: n > 2, "big:{}", lambda n: n)
            .build(shared_sink)
        )

        for item in stream:
            events.append(("yield", item))

        assert events == [
            ("yield", 2),
            ("log", "big:{}", (3,)),
            ("log", "big:{}", (4,)),
            ("yield", 4),
        ]

    def test_rules_run_in_registration_order(self, sink):
        stream = (
            filter_with_logs(["a", "b"], lambda s: s == "a")
            .log_when(lambda s: True, "first {}", lambda s: s)
            .log_when(lambda s: True, "second {}", lambda s: s)
            .log_when(lambda s: s == "b", "third {}", lambda s: s)
            .build(sink)
        )

        assert list(stream) == ["a"]
        assert [(msg, args) for _, msg, args in sink.calls] == [
            ("first {}", ("a",)),
            ("second {}", ("a",)),
            ("first {}", ("b",)),
            ("second {}", ("b",)),
            ("third {}", ("b",)),
        ]

    def test_predicate_evaluated_before_rules(self):
        order = []

        def predicate(n):
            order.append(("predicate", n))
            return True

        def condition(n):
            order.append(("condition", n))
            return False

        stream = filter_with_logs([1, 2], predicate).log_when(condition, "never").build(
            logging.getLogger("test_predicate_order")
        )
        list(stream)

        assert order == [
            ("predicate", 1),
            ("condition", 1),
            ("predicate", 2),
            ("condition", 2),
        ]


class TestFiltering:
    def test_rejected_items_never_appear_even_when_logged(self, sink):
        stream = (
            filter_with_logs(range(6), lambda n: n < 2)
            .log_when(lambda n: True, "any {}", lambda n: n)
            .log_when(lambda n: n >= 2, "dropped {}", lambda n: n)
            .build(sink)
        )

        assert list(stream) == [0, 1]
        assert len(sink.calls) == 6 + 4

    def test_included_items_appear_exactly_once(self, sink):
        items = [5, 5, 6]
        stream = filter_with_logs(items, lambda n: True).build(sink)

        assert list(stream) == [5, 5, 6]

    def test_rule_without_fields_logs_plain_message(self, sink):
        stream = (
            filter_with_logs([1], lambda n: True)
            .log_when(lambda n: True, "no values here")
            .build(sink)
        )
        list(stream)

        assert sink.calls == [(logging.INFO, "no values here", ())]

    def test_placeholder_mismatch_is_not_validated(self, sink):
        stream = (
            filter_with_logs([1], lambda n: True)
            .log_when(lambda n: True, "{} {} {}", lambda n: n)
            .log_when(lambda n: True, "none", lambda n: n, lambda n: n * 2)
            .build(sink)
        )
        list(stream)

        assert sink.calls[0][2] == (1,)
        assert sink.calls[1][2] == (1, 2)

    def test_string_fields_resolve_keys(self, sink):
        orders = [{"id": 1, "total": 50}, {"id": 2, "total": 5000}]
        stream = (
            filter_with_logs(orders, lambda o: o["total"] > 10)
            .log_when(lambda o: o["total"] > 1000, "large order {} total {}", "id", field("total"))
            .build(sink)
        )

        assert [o["id"] for o in stream] == [1, 2]
        assert sink.calls == [(logging.INFO, "large order {} total {}", (2, 5000))]


class TestLaziness:
    def test_nothing_evaluated_until_pulled(self, sink):
        source = CountingSource([2, 4, 6])
        stream = filter_with_logs(source, lambda n: True).log_when(lambda n: True, "x").build(sink)

        assert source.pulled == 0
        assert sink.calls == []

        assert next(stream) == 2
        assert source.pulled == 1
        assert len(sink.calls) == 1

    def test_unpulled_items_are_not_logged(self, sink):
        stream = (
            filter_with_logs(range(100), lambda n: True)
            .log_when(lambda n: True, "item {}", lambda n: n)
            .build(sink)
        )

        assert [next(stream), next(stream)] == [0, 1]
        assert len(sink.calls) == 2

    def test_works_on_infinite_source(self, sink, is_even):
        def naturals():
            n = 0
            while True:
                yield n
                n += 1

        stream = filter_with_logs(naturals(), is_even).build(sink)

        assert [next(stream) for _ in range(3)] == [0, 2, 4]


class TestErrorPropagation:
    def test_condition_error_propagates_at_evaluation(self, sink):
        def failing(n):
            if n == 2:
                raise KeyError("boom")
            return True

        builder = filter_with_logs([1, 2, 3], lambda n: True).log_when(failing, "seen {}", lambda n: n)
        stream = builder.build(sink)

        assert next(stream) == 1
        with pytest.raises(KeyError):
            next(stream)

    def test_predicate_error_propagates(self, sink):
        stream = filter_with_logs([1, 0], lambda n: 1 / n > 0).build(sink)

        assert next(stream) == 1
        with pytest.raises(ZeroDivisionError):
            next(stream)

    def test_field_error_propagates(self, sink):
        stream = (
            filter_with_logs([{"id": 1}], lambda o: True)
            .log_when(lambda o: True, "missing {}", "name")
            .build(sink)
        )

        with pytest.raises(KeyError):
            list(stream)


class TestBuilder:
    def test_start_leaves_logging_untouched(self, monkeypatch):
        monkeypatch.setenv("FILTER_LOG_WORKERS", "many")
        set_default_config(None)
        builder_logger = logging.getLogger("filter_logging.streaming.builder")
        handlers_before = list(builder_logger.handlers)
        root_handlers_before = list(logging.getLogger().handlers)

        filter_with_logs([1], lambda n: True).log_when(lambda n: True, "x")

        assert builder_logger.handlers == handlers_before
        assert logging.getLogger().handlers == root_handlers_before

    def test_log_when_returns_same_builder(self):
        builder = filter_with_logs([], lambda n: True)
        assert isinstance(builder, StreamBuilder)
        assert builder.log_when(lambda n: True, "x") is builder
        assert len(builder.rules) == 1

    def test_build_returns_logged_stream(self, sink):
        stream = filter_with_logs([], lambda n: True).build(sink)
        assert isinstance(stream, LoggedStream)
        assert stream.collect() == []

    def test_building_twice_gives_same_inclusion(self, make_sink, is_even):
        builder = filter_with_logs([1, 2, 3, 4], is_even).log_when(lambda n: n > 2, "big:{}", lambda n: n)
        first_sink, second_sink = make_sink(), make_sink()

        assert builder.build(first_sink).collect() == builder.build(second_sink).collect()
        assert first_sink.calls == second_sink.calls

    def test_rules_added_after_build_do_not_affect_stream(self, sink):
        builder = filter_with_logs([1], lambda n: True)
        stream = builder.build(sink)
        builder.log_when(lambda n: True, "late")

        assert stream.collect() == [1]
        assert sink.calls == []

    def test_explicit_level(self, sink):
        stream = (
            filter_with_logs([1], lambda n: True)
            .log_when(lambda n: True, "warned")
            .build(sink, level="warning")
        )
        list(stream)

        assert sink.calls[0][0] == logging.WARNING

    def test_unknown_level_rejected(self, sink):
        with pytest.raises(ValueError):
            filter_with_logs([1], lambda n: True).build(sink, level="LOUD")

    def test_works_with_stdlib_logger(self, caplog, is_even):
        logger = logging.getLogger("test_stdlib_sink")

        with caplog.at_level(logging.INFO, logger="test_stdlib_sink"):
            result = (
                filter_with_logs([1, 2, 3, 4], is_even)
                .log_when(lambda n: n > 2, "big:%s", lambda n: n)
                .build(logger)
                .collect()
            )

        assert result == [2, 4]
        assert [r.getMessage() for r in caplog.records] == ["big:3", "big:4"]


class TestMetrics:
    def test_metrics_count_evaluations(self, sink, is_even):
        stream = (
            filter_with_logs([1, 2, 3, 4], is_even)
            .log_when(lambda n: n > 2, "big:{}", lambda n: n)
            .build(sink)
        )
        stream.collect()

        metrics = stream.get_metrics()
        assert metrics["summary"] == {
            "total_evaluated": 4,
            "passed_through": 2,
            "filtered_out": 2,
            "log_calls": 2,
        }
        assert metrics["rule_stats"] == {"0:big:{}": 2}
        assert metrics["pass_rate"] == 0.5

    def test_reset_metrics(self, sink):
        stream = filter_with_logs([1, 2], lambda n: True).build(sink)
        stream.collect()
        stream.reset_metrics()

        assert stream.get_metrics()["summary"]["total_evaluated"] == 0
        assert stream.get_metrics()["pass_rate"] == 0
