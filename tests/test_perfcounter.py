from datetime import timedelta

from gdtoolkit import perfcounter as pc


def _by_tag(entries):
    return {entry["tags"]: entry for entry in entries}


def _fresh():
    pc.init()
    pc.collect_report()


def test_timer_counts_and_equal_percentiles():
    timer = pc.Timer()
    for _ in range(7):
        timer.update(timedelta(milliseconds=5))
    assert timer.count() == 7
    assert timer.percentiles([0.5, 0.99]) == [5_000_000.0, 5_000_000.0]


def test_timer_percentiles_are_ordered_and_bounded():
    timer = pc.Timer()
    for ms in (3, 90, 12, 45, 7, 60, 1, 33):
        timer.update(timedelta(milliseconds=ms))
    values = timer.percentiles([0.1, 0.5, 0.9, 0.999])
    assert values == sorted(values)
    assert values[0] >= 1_000_000
    assert values[-1] <= 90_000_000


def test_empty_timer_percentiles_are_zero():
    assert pc.Timer().percentiles([0.95, 0.99]) == [0.0, 0.0]
    assert pc.Timer().count() == 0


def test_incr_is_reported_and_reset():
    _fresh()
    pc.incr("k_incr", 3)
    pc.incr("k_incr", 4)
    entry = _by_tag(pc.collect_report())["attr=k_incr"]
    assert entry["value"] == 7
    assert entry["metric"] == "gd"
    assert entry["step"] == 60
    assert entry["counterType"] == "GAUGE"
    again = _by_tag(pc.collect_report())["attr=k_incr"]
    assert again["value"] == 0


def test_cost_fail_and_error_incr_keys():
    _fresh()
    pc.cost_fail("svc", 2)
    pc.error_incr("svc", 1)
    tags = _by_tag(pc.collect_report())
    assert tags["attr=svc,sum=fail"]["value"] == 2
    assert tags["attr=svc,type=exceptionReport"]["value"] == 1


def test_few_costs_report_skip_keys():
    _fresh()
    for _ in range(5):
        pc.cost("few_t", timedelta(milliseconds=20))
    pc.cost_fail("few_t", 1)
    tags = _by_tag(pc.collect_report())
    assert tags["attr=few_t,sum=count"]["value"] == 5
    assert tags["attr=few_t,sum=skipCost_ms_p95"]["value"] == 20
    assert "attr=few_t,sum=skipFailRate" in tags
    assert "attr=few_t,sum=cost_ms_p99" not in tags


def test_many_costs_report_percentile_keys():
    _fresh()
    for _ in range(30):
        pc.cost("many_t", timedelta(milliseconds=20))
    tags = _by_tag(pc.collect_report())
    assert tags["attr=many_t,sum=count"]["value"] == 30
    for label in ("p95", "p99", "p995", "p999"):
        assert tags[f"attr=many_t,sum=cost_ms_{label}"]["value"] == 20


def test_run_port_tags_keys():
    _fresh()
    pc.set_run_port(8080)
    pc.incr("port_key", 1)
    tags = _by_tag(pc.collect_report())
    assert tags["attr=port_key,port=8080"]["value"] == 1
    pc.set_suffix_decider(None)
    assert "attr=port_key" in _by_tag(pc.collect_report())


def test_updater_values_are_reported():
    _fresh()
    pc.set_updater(lambda: {"upd_key": 7})
    tags = _by_tag(pc.collect_report())
    assert tags["attr=upd_key"]["value"] == 7
    pc.set_updater(None)


def test_goroutine_count_is_reported():
    _fresh()
    tags = _by_tag(pc.collect_report())
    assert tags["attr=" + pc.GO_PROJECTS_GOROUTINE_NUM]["value"] >= 1


def test_init_keys_are_reported():
    pc.init_perf_counter("", None, ["ignored_after_first_init"])
    entries = pc.collect_report()
    assert all(entry["tags"].startswith("attr=") for entry in entries)


def test_close_stops_counting():
    _fresh()
    pc.close_perf_counter()
    pc.incr("after_close", 1)
    pc.cost("after_close_t", timedelta(milliseconds=1))
    tags = _by_tag(pc.collect_report())
    assert not any("after_close" in tag for tag in tags)