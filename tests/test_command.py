"""Tests for ssh and ps command composition."""

import pytest

from proctree.command import column_name, ps_command, ssh_command


class TestSSHCommand:
    """Tests for ssh_command."""

    @pytest.mark.parametrize(
        ("password", "timeout", "expected"),
        [
            ("", 0, "ssh pi@192.168.0.16"),
            ("raspberry", 0, "sshpass -p raspberry ssh pi@192.168.0.16"),
            ("", 5, "ssh -o ConnectTimeout=5 pi@192.168.0.16"),
            ("raspberry", 5, "sshpass -p raspberry ssh -o ConnectTimeout=5 pi@192.168.0.16"),
        ],
    )
    def test_command_string(self, password: str, timeout: int, expected: str) -> None:
        """Test the composed command for each password/timeout combination."""
        cmd = ssh_command("192.168.0.16", "pi", password, timeout)
        assert " ".join(cmd) == expected

    def test_zero_timeout_has_no_option(self) -> None:
        """Test a timeout of 0 never emits ConnectTimeout."""
        cmd = ssh_command("host", "user", "secret", 0)
        assert "-o" not in cmd
        assert not any(arg.startswith("ConnectTimeout") for arg in cmd)

    def test_password_is_a_separate_argument(self) -> None:
        """Test passwords with spaces stay a single argument."""
        cmd = ssh_command("host", "user", "two words")
        assert cmd[:4] == ["sshpass", "-p", "two words", "ssh"]

    def test_target_is_last(self) -> None:
        """Test user@host is the last element."""
        assert ssh_command("example.org", "admin", timeout=3)[-1] == "admin@example.org"


class TestColumnName:
    """Tests for column_name."""

    def test_plain(self) -> None:
        assert column_name("%cpu") == "%cpu"

    def test_width(self) -> None:
        assert column_name("comm:20") == "comm"

    def test_rename(self) -> None:
        assert column_name("args=COMMAND") == "args"

    def test_width_and_rename(self) -> None:
        assert column_name("user:12=OWNER") == "user"


class TestPsCommand:
    """Tests for ps_command."""

    def test_no_columns(self) -> None:
        """Test an empty column list selects the full format."""
        assert ps_command([]) == ["ps", "-ewwF"]
        assert ps_command() == ["ps", "-ewwF"]

    def test_identifiers_first(self) -> None:
        """Test pid and ppid are always the first two columns."""
        cmd = ps_command(["%cpu"])
        assert cmd[:2] == ["ps", "-ewwo"]
        assert cmd[2].split(",")[:2] == ["pid", "ppid"]

    def test_identifiers_not_repeated(self) -> None:
        """Test requested pid/ppid columns are not emitted twice."""
        cmd = ps_command(["ppid", "rss", "pid"])
        assert cmd[2] == "pid,ppid,rss"

    @pytest.mark.parametrize("alias", ["args", "cmd", "command"])
    def test_command_column_last(self, alias: str) -> None:
        """Test the command line column is moved to the end."""
        cmd = ps_command([alias, "%cpu", "%mem"])
        assert cmd[2].split(",")[-1] == "cmd"

    def test_command_column_keeps_override(self) -> None:
        """Test a renamed command column keeps its form and stays last."""
        cmd = ps_command(["args=COMMAND", "rss"])
        assert cmd[2] == "pid,ppid,rss,args=COMMAND"

    def test_command_column_width_stripped_for_classification(self) -> None:
        """Test a width suffix does not hide the command column."""
        cmd = ps_command(["cmd:40", "etime"])
        assert cmd[2].split(",")[-1] == "cmd:40"

    def test_duplicates_dropped(self) -> None:
        """Test later duplicate requests are silently dropped."""
        cmd = ps_command(["%cpu", "%mem", "%cpu", "rss", "%mem"])
        columns = cmd[2].split(",")
        assert sorted(columns[2:]) == ["%cpu", "%mem", "rss"]

    def test_duplicate_with_width_dropped(self) -> None:
        """Test duplicates are detected on the bare column name."""
        cmd = ps_command(["user:12", "user"])
        assert cmd[2] == "pid,ppid,user:12"

    def test_middle_columns_in_request_order(self) -> None:
        """Test other columns keep their request order."""
        assert ps_command(["rss", "%cpu", "etime"])[2] == "pid,ppid,rss,%cpu,etime"

    def test_unknown_columns_passed_through(self) -> None:
        """Test column names are not validated."""
        assert ps_command(["bogus"])[2] == "pid,ppid,bogus"

    def test_only_identifiers(self) -> None:
        """Test requesting just the identifiers still uses -o."""
        assert ps_command(["pid"]) == ["ps", "-ewwo", "pid,ppid"]
