"""Tests for pid extraction and process tree construction."""

import pytest

from conftest import cat, count_lines
from proctree.errors import (
    ExecutionError,
    HeaderError,
    IdentifierError,
    MissingFieldError,
    NegativeValueError,
    NumberFormatError,
    RootNotFoundError,
    RowShapeError,
)
from proctree.models import ProcNode
from proctree.tree import build_tree, get_pid, proc_tree, tree_from_command


def record(pid: str, ppid: str, cmd: str = "prog", **extra: str) -> dict[str, str]:
    return {"PID": pid, "PPID": ppid, **extra, "CMD": cmd}


class TestGetPid:
    """Tests for get_pid."""

    def test_valid(self) -> None:
        assert get_pid({"PID": "2247"}, "PID") == 2247

    def test_zero(self) -> None:
        assert get_pid({"PPID": "0"}, "PPID") == 0

    def test_leading_zeros(self) -> None:
        assert get_pid({"PID": "007"}, "PID") == 7

    def test_missing(self) -> None:
        with pytest.raises(MissingFieldError) as exc_info:
            get_pid({"PPID": "1"}, "PID")
        assert exc_info.value.key == "PID"

    def test_empty(self) -> None:
        with pytest.raises(MissingFieldError):
            get_pid({"PID": ""}, "PID")

    @pytest.mark.parametrize("value", ["12a", "x", "1.5", "0x10", " 1", "1_000", "--1"])
    def test_not_a_number(self, value: str) -> None:
        with pytest.raises(NumberFormatError) as exc_info:
            get_pid({"PID": value}, "PID")
        assert exc_info.value.value == value

    def test_negative(self) -> None:
        with pytest.raises(NegativeValueError) as exc_info:
            get_pid({"PID": "-5"}, "PID")
        assert "negative value" in str(exc_info.value)

    def test_errors_share_base(self) -> None:
        """Test all extraction failures are IdentifierErrors."""
        for bad in ({}, {"PID": "a"}, {"PID": "-1"}):
            with pytest.raises(IdentifierError):
                get_pid(bad, "PID")


class TestBuildTree:
    """Tests for build_tree."""

    def test_example_root(self) -> None:
        """Test the single init record builds a bare root."""
        root = build_tree([{"PID": "1", "PPID": "0", "%CPU": "0.1", "%MEM": "0.2", "CMD": "/sbin/init"}])
        assert root.pid == 1
        assert root.parent_pid == 0
        assert root.children == []
        assert root.stats == {"%CPU": "0.1", "%MEM": "0.2", "CMD": "/sbin/init"}

    def test_links_children(self) -> None:
        root = build_tree(
            [
                record("1", "0", "init"),
                record("10", "1", "a"),
                record("11", "10", "b"),
                record("12", "1", "c"),
            ]
        )
        assert [c.pid for c in root.children] == [10, 12]
        assert [c.pid for c in root.children[0].children] == [11]
        assert root.children[0].children[0].parent_pid == 10

    def test_children_follow_record_order(self) -> None:
        root = build_tree([record("1", "0"), record("30", "1"), record("20", "1"), record("25", "1")])
        assert [c.pid for c in root.children] == [30, 20, 25]

    def test_child_before_parent(self) -> None:
        """Test record order does not matter for linking."""
        root = build_tree([record("5", "4"), record("4", "1"), record("1", "0")])
        assert root.children[0].pid == 4
        assert root.children[0].children[0].pid == 5

    def test_unreachable_records_dropped(self) -> None:
        """Test kernel threads and orphans are excluded without error."""
        root = build_tree(
            [
                record("1", "0", "init"),
                record("2", "0", "[kthreadd]"),
                record("3", "2", "[rcu_gp]"),
                record("50", "49", "orphan"),
                record("51", "50", "orphan child"),
                record("60", "1", "daemon"),
            ]
        )
        assert root.count() == 2
        assert root.find(lambda n: n.pid in (2, 3, 50, 51)) is None

    def test_disconnected_cycle_dropped(self) -> None:
        root = build_tree([record("1", "0"), record("7", "8"), record("8", "7")])
        assert root.count() == 1

    def test_root_is_never_reparented(self) -> None:
        """Test a root pointing at its own descendant does not form a loop."""
        root = build_tree([record("1", "5"), record("5", "1")])
        assert [c.pid for c in root.children] == [5]
        assert root.children[0].children == []

    def test_self_parent_ignored(self) -> None:
        root = build_tree([record("1", "0"), record("9", "9")])
        assert root.count() == 1

    def test_stats_exclude_identifiers(self) -> None:
        root = build_tree([record("1", "0", "init", RSS="5200")])
        assert root.stats == {"RSS": "5200", "CMD": "init"}

    def test_duplicate_pid_last_wins(self) -> None:
        root = build_tree([record("1", "0"), record("7", "1", "first"), record("7", "1", "second")])
        assert [c.stats["CMD"] for c in root.children] == ["second"]

    def test_no_root(self) -> None:
        with pytest.raises(RootNotFoundError) as exc_info:
            build_tree([record("2", "0"), record("3", "2")])
        assert "pid 1" in str(exc_info.value)

    def test_empty(self) -> None:
        with pytest.raises(RootNotFoundError):
            build_tree([])

    def test_bad_pid(self) -> None:
        with pytest.raises(NumberFormatError):
            build_tree([record("1", "0"), record("abc", "1")])

    def test_bad_ppid(self) -> None:
        with pytest.raises(NegativeValueError):
            build_tree([record("1", "0"), record("3", "-1")])

    def test_missing_ppid(self) -> None:
        with pytest.raises(MissingFieldError):
            build_tree([{"PID": "1", "CMD": "init"}])

    def test_returns_proc_node(self) -> None:
        assert isinstance(build_tree([record("1", "0")]), ProcNode)


class TestTreeFromCommand:
    """Tests running the whole pipeline on captured 'ps' output."""

    def test_number_of_records(self) -> None:
        """Test every record reachable from pid 1 is in the tree."""
        root = tree_from_command(cat("valid-data"))
        # header and the three kernel threads are not processes in the tree
        assert root.count() == count_lines("valid-data") - 1 - 3

    def test_tree_shape(self) -> None:
        root = tree_from_command(cat("valid-data"))
        tree: dict[int, list[int]] = {}

        root.for_each(lambda node: tree.update({node.pid: sorted(c.pid for c in node.children)}))

        assert {pid: kids for pid, kids in tree.items() if kids} == {
            1: [117, 120, 346, 399, 2239],
            346: [350],
            399: [2233],
            2233: [2245],
            2245: [2247],
            2239: [2242],
        }

    def test_stats_as_printed(self) -> None:
        root = tree_from_command(cat("valid-data"))
        sshd = root.find(lambda n: n.pid == 399)
        assert sshd is not None
        assert sshd.stats["CMD"] == "sshd: /usr/sbin/sshd -D [listener] 0 of 10-100 startups"
        assert sshd.stats["UID"] == "root"
        assert "PID" not in sshd.stats

    def test_selected_columns(self) -> None:
        root = tree_from_command(cat("columns-data"))
        server = root.find(lambda n: n.pid == 512)
        assert server is not None
        assert server.parent_pid == 399
        assert server.stats == {"%CPU": "1.5", "%MEM": "0.3", "CMD": "/usr/bin/python3 -m http.server 8000"}

    @pytest.mark.parametrize(
        ("name", "error"),
        [
            ("invalid-number-of-columns", RowShapeError),
            ("negative-pid", NegativeValueError),
            ("bad-pid", NumberFormatError),
            ("bad-ppid", NumberFormatError),
            ("missing-pid-column", MissingFieldError),
            ("no-pid-1", RootNotFoundError),
            ("bad-header", HeaderError),
            ("header-only", RootNotFoundError),
        ],
    )
    def test_error_detection(self, name: str, error: type[Exception]) -> None:
        with pytest.raises(error):
            tree_from_command(cat(name))

    def test_missing_file(self) -> None:
        """Test a failing command surfaces as ExecutionError without program prefix."""
        with pytest.raises(ExecutionError) as exc_info:
            tree_from_command(cat("no-such-file"))
        err = exc_info.value
        assert err.returncode != 0
        assert not err.message.startswith("cat:")
        assert "no-such-file" in err.message

    def test_unknown_program(self) -> None:
        with pytest.raises(ExecutionError) as exc_info:
            tree_from_command(["proctree-no-such-program-xyz"])
        assert exc_info.value.returncode is None


class TestProcTree:
    """Tests for proc_tree command assembly."""

    def test_prefixes_ssh_command(self, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: list[list[str]] = []

        def fake(cmd):
            seen.append(list(cmd))
            return build_tree([record("1", "0")])

        monkeypatch.setattr("proctree.tree.tree_from_command", fake)
        proc_tree(["ssh", "pi@host"], ["%cpu", "cmd"])
        assert seen == [["ssh", "pi@host", "ps", "-ewwo", "pid,ppid,%cpu,cmd"]]

    def test_local_without_ssh(self, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: list[list[str]] = []
        monkeypatch.setattr(
            "proctree.tree.tree_from_command",
            lambda cmd: seen.append(list(cmd)) or build_tree([record("1", "0")]),
        )
        proc_tree()
        assert seen == [["ps", "-ewwF"]]
