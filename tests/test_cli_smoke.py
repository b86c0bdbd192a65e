from typer.testing import CliRunner
from mdview.cli.cli import app

def test_cli_smoke():
    runner = CliRunner()
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for command in ("render", "events", "frontmatter"):
        assert command in result.output
