from unittest import mock

import pytest

from topgraph.widgets.proc import (
    DOWN_ARROW,
    Proc,
    ProcSortMethod,
    ProcWidget,
    group_procs,
    parse_ps_output,
)


def ps_line(pid, comm, cpu, mem, args):
    return (
        str(pid).rjust(10)
        + " "
        + comm.ljust(50)
        + "  "
        + cpu.rjust(5)
        + " "
        + mem.rjust(5)
        + args
    )


SAMPLE = [
    Proc(10, "bash", "/bin/bash -l", 1.5, 0.5),
    Proc(20, "python", "python app.py", 12.5, 3.0),
    Proc(30, "bash", "/bin/bash", 0.5, 0.25),
]


def make_widget(procs=None, cpu_count=1):
    data = list(SAMPLE if procs is None else procs)
    return ProcWidget(source=lambda: [Proc(**vars(p)) for p in data], cpu_count=cpu_count)


def test_parse_ps_output_reads_columns():
    output = "\n".join(
        [
            "header",
            ps_line(42, "bash", "1.5", "0.3", "/bin/bash -l"),
            ps_line(7, "init", "0.0", "0.1", "/sbin/init"),
        ]
    ) + "\n"
    procs = parse_ps_output(output)
    assert procs == [
        Proc(42, "bash", "/bin/bash -l", 1.5, 0.3),
        Proc(7, "init", "/sbin/init", 0.0, 0.1),
    ]


def test_parse_ps_output_bad_numbers_become_zero():
    output = "header\n" + ps_line("x", "cmd", "abc", "0.2", "cmd")
    (proc,) = parse_ps_output(output)
    assert proc.pid == 0
    assert proc.cpu == 0.0
    assert proc.mem == 0.2


def test_parse_ps_output_header_only():
    assert parse_ps_output("header\n") == []


def test_group_procs_counts_and_sums():
    grouped = {p.command_name: p for p in group_procs(SAMPLE)}
    bash = grouped["bash"]
    assert bash.pid == 2
    assert bash.cpu == pytest.approx(SAMPLE[0].cpu + SAMPLE[2].cpu)
    assert bash.mem == pytest.approx(SAMPLE[0].mem + SAMPLE[2].mem)
    assert bash.full_command == ""
    assert grouped["python"].pid == 1


def test_grouped_rows_sorted_by_cpu_descending():
    w = make_widget()
    cpus = [float(row[2]) for row in w.rows]
    assert cpus == sorted(cpus, reverse=True)
    assert [row[1] for row in w.rows] == ["python", "bash"]
    assert w.header[2].endswith(DOWN_ARROW)
    assert w.unique_col == 1


def test_cpu_divided_by_cpu_count():
    single = make_widget(cpu_count=1)
    double = make_widget(cpu_count=2)
    assert double.ungrouped_procs[0].cpu * 2 == pytest.approx(
        single.ungrouped_procs[0].cpu
    )


def test_toggle_shows_individual_processes():
    w = make_widget()
    w.toggle_showing_grouped_procs()
    assert w.unique_col == 0
    assert len(w.rows) == len(SAMPLE)
    assert {row[1] for row in w.rows} == {p.full_command for p in SAMPLE}
    assert not w.header[0].startswith("Count")


def test_sort_by_pid_ungrouped_is_ascending():
    w = make_widget()
    w.toggle_showing_grouped_procs()
    w.change_proc_sort_method("p")
    pids = [int(row[0]) for row in w.rows]
    assert pids == sorted(pids)
    assert w.header[0].endswith(DOWN_ARROW)


def test_sort_by_mem():
    w = make_widget()
    w.change_proc_sort_method(ProcSortMethod.MEM)
    mems = [float(row[3]) for row in w.rows]
    assert mems == sorted(mems, reverse=True)
    assert w.header[3].endswith(DOWN_ARROW)


def test_filter_through_entry_events():
    w = make_widget()
    w.set_editing_filter(True)
    for key in "app":
        assert w.handle_event(key) is True
    assert w.filter == "app"
    assert [row[1] for row in w.rows] == ["python"]
    assert w.handle_event("<Escape>") is True
    assert w.filter == ""
    assert len(w.rows) == 2


def test_events_ignored_when_not_editing():
    w = make_widget()
    assert w.handle_event("x") is False
    assert w.filter == ""


def test_failing_source_keeps_previous_rows():
    calls = {"n": 0}

    def source():
        calls["n"] += 1
        if calls["n"] > 1:
            raise RuntimeError("ps failed")
        return [Proc(**vars(p)) for p in SAMPLE]

    w = ProcWidget(source=source, cpu_count=1)
    before = [list(r) for r in w.rows]
    w.update()
    assert w.rows == before


def test_kill_proc_grouped_uses_pkill():
    w = make_widget()
    w.selected_row = 0
    with mock.patch("topgraph.widgets.proc.subprocess.run") as run:
        w.kill_proc("SIGTERM")
    run.assert_called_once_with(
        ["pkill", "--signal", "SIGTERM", w.rows[0][1]], check=False
    )


def test_kill_proc_ungrouped_uses_kill():
    w = make_widget()
    w.toggle_showing_grouped_procs()
    w.selected_row = 0
    with mock.patch("topgraph.widgets.proc.subprocess.run") as run:
        w.kill_proc("SIGKILL")
    run.assert_called_once_with(
        ["kill", "--signal", "SIGKILL", w.rows[0][0]], check=False
    )


def test_set_rect_places_entry_on_bottom_edge():
    w = make_widget()
    w.set_rect(0, 0, 40, 20)
    assert w.entry.rect.min_y == 19
    assert w.entry.rect.min_x == 2
    assert w.entry.rect.max_x == 38