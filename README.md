# gdtoolkit

Building blocks for long-running services: an insertion-ordered map, lenient
value conversion, slice and string helpers, time and file helpers, client IP
extraction, a sharded thread-safe map, per-thread context storage, per-command
timing statistics and perf counters.

The package uses only the Python standard library and needs Python 3.10 or
later. The tests are written for pytest, installed with the `test` extra.

```
pip install gdtoolkit
pip install "gdtoolkit[test]"
```

## Modules

| Module | What it offers |
| --- | --- |
| `gdtoolkit.orderedmap` | `OrderedMap`, `KVPair`, `LinkList` |
| `gdtoolkit.convert` | `must_string`, `try_string`, `must_int64`, `must_float64`, `convert_to_int64`, `slice_cutter`, `must_string_array`, `must_int64_array`, `string_map_to_any` |
| `gdtoolkit.slices` | `array_slice`, `cut_by_step`, `int64_array_to_string`, `string_in_slice` |
| `gdtoolkit.strutil` | `safe_sprintf` |
| `gdtoolkit.settings` | `fix_category_by_idc`, `check_if_use_lcs_by_idc` |
| `gdtoolkit.nodeinfo` | `NodeInfo` with `to_json` / `from_json` |
| `gdtoolkit.timeutil` | current time in seconds to nanoseconds, local date formatting and parsing, same-day checks, `YYYYMMDD` integers, `is_timeout_error` |
| `gdtoolkit.fileutil` | `exists`, `is_link`, `is_empty`, `list_dir`, `copy_file`, `ensure_dir`, `store_to_file`, `load_json`, stderr redirection with `dump` and `review_dump_panic` |
| `gdtoolkit.misc` | `human_size`, `parse_memory_size`, `marshal`, `with_recover`, `gd_encode` / `gd_decode`, `rand_string`, `trace_id`, `func_name` |
| `gdtoolkit.network` | `get_real_ip`, `get_xff_real_ip`, `is_local_ip`, `get_local_ip` |
| `gdtoolkit.shardmap` | `ConcurrentMap`, a map split into locked shards by `fnv32` hash |
| `gdtoolkit.glocal` | per-thread key/value context with `incr` / `decr` counters |
| `gdtoolkit.implmap` | a registry of classes recorded as implementations for a name |
| `gdtoolkit.stat` | `Stat` and `StatMgr`, periodic per-command timing tables written to a file |
| `gdtoolkit.perfcounter` | counters and latency `Timer`s, collected into report entries each minute |

## Examples

Ordered map, iterated in insertion order:

```python
from gdtoolkit.orderedmap import OrderedMap

om = OrderedMap()
om.set("a", 1)
om.set("b", 2)
om.set("c", 3)
om.delete("b")
print(len(om))                             # 2
print("b" in om)                           # False
print([str(kv) for kv in om.items()])      # ['a:1', 'c:3']
```

Lenient conversions fall back to the default you give:

```python
from gdtoolkit.convert import must_int64, must_string

must_int64("123", 1)     # 123
must_int64("aaa123", 1)  # 1
must_string(123, "1")    # "123"
```

Formatting that ignores surplus arguments:

```python
from gdtoolkit.strutil import safe_sprintf

safe_sprintf("test %s %d", "1", 1, 2)   # "test 1 1"
```

Splitting a list into steps:

```python
from gdtoolkit.slices import cut_by_step

count, groups = cut_by_step(["1", "2", "3", "4", "5"], 2)
# count == 3, groups == [["1", "2"], ["3", "4"], ["5"]]
```

Sizes:

```python
from gdtoolkit.misc import human_size, parse_memory_size

parse_memory_size("2k")   # 2048
human_size(2048)          # "2.0KB"
```

Client IP from request headers:

```python
from gdtoolkit.network import get_real_ip

get_real_ip({"X-Forwarded-For": "127.0.0.1, 120.52.112.1"})   # "127.0.0.1"
get_real_ip({}, "192.168.1.1:9999")                            # "192.168.1.1"
```

Per-thread context; `incr` returns the previous value:

```python
from gdtoolkit import glocal

glocal.init()
glocal.set("user", "alice")
glocal.incr("db_cost", 5)    # 0
glocal.incr("db_cost", 3)    # 5
glocal.get("db_cost")        # 8
glocal.close()
```

Per-command timing; a background thread writes a table to the stat file
every `stat_gap` seconds:

```python
from gdtoolkit.stat import Stat, stat_mgr_instance

stat_mgr_instance().init("stat.log", 5)
st = Stat().begin("user.login")
# ... work ...
st.end(0)
```

Perf counters; `init()` starts a thread that posts the collected entries as
JSON to a local agent at `http://127.0.0.1:1988/v1/push` once a minute:

```python
from gdtoolkit import perfcounter

perfcounter.init()
perfcounter.incr("requests", 1)
perfcounter.cost("db.query", 0.012)
entries = perfcounter.collect_report()   # also resets counters to zero
perfcounter.close_perf_counter()
```

## What the package does not do

It offers no dependency injection graph, no bounded worker pools or task
groups, and no operator console or runtime profiling dumps. `implmap` only
records which classes are candidates for a name; nothing in the package
builds or wires objects from it. There is no command-line program.