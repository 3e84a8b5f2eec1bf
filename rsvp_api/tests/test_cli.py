from typer.testing import CliRunner

from cli import app

runner = CliRunner()


def test_create_guest_with_blank_name_fails_cleanly():
    result = runner.invoke(
        app, ["create-guest", "some-occasion", "   ", "Doe", "--host", "host-under-test", "--event", "e1"]
    )

    assert result.exit_code == 1
    assert "First name is required" in result.output
    assert result.exception is None or isinstance(result.exception, SystemExit)
