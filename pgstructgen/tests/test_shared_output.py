from pgstructgen.shared.output import status


class TestStatus:
    def test_status_writes_to_stderr(self, capsys):
        status("Working on: users")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "Working on: users\n"

    def test_status_quiet(self, capsys):
        status("Working on: users", verbose=False)
        assert capsys.readouterr().err == ""
