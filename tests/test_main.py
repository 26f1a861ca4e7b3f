"""Test the command-line entry point."""

from unittest.mock import MagicMock, patch

from lineview.__main__ import main
from lineview.settings import ViewerSettings
from lineview.terminal import TerminalError


def run_main(args):
    store = MagicMock()
    store.load.return_value = ViewerSettings()
    with patch('lineview.__main__.get_settings_store', return_value=store), \
         patch('lineview.viewer.TerminalInterface'):
        return main(args)


def test_version(capsys):
    with patch('lineview.__main__.get_version_string', return_value="lineview 0.0.1 (abc1234 today)"):
        assert main(["--version"]) == 0
    assert "lineview 0.0.1" in capsys.readouterr().out


def test_quit_exits_zero():
    with patch('lineview.viewer.Viewer.run') as mock_run:
        assert run_main([]) == 0
    mock_run.assert_called_once()


def test_file_is_loaded(tmp_path):
    path = tmp_path / "doc.txt"
    path.write_bytes(b"hello\n")
    with patch('lineview.viewer.Viewer.run'), \
         patch('lineview.viewer.Viewer.load_file') as mock_load:
        assert run_main([str(path)]) == 0
    mock_load.assert_called_once_with(str(path))


def test_missing_file_exits_nonzero(tmp_path, capsys):
    missing = str(tmp_path / "missing.txt")
    with patch('lineview.viewer.Viewer.run') as mock_run:
        assert run_main([missing]) == 1
    mock_run.assert_not_called()
    assert capsys.readouterr().err.startswith(f"lineview: {missing}: ")


def test_terminal_error_exits_nonzero(capsys):
    with patch('lineview.viewer.Viewer.run', side_effect=TerminalError("tcgetattr", "not a tty")):
        assert run_main([]) == 1
    assert capsys.readouterr().err.strip() == "lineview: tcgetattr: not a tty"
