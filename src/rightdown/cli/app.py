import typer

from rightdown.cli.config import config_app
from rightdown.cli.format import format_files
from rightdown.cli.init import init
from rightdown.cli.lint import lint
from rightdown.cli.rules import rules

app = typer.Typer(
    name="rightdown",
    help="rightdown: format Markdown code blocks and lint Markdown structure.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("format")(format_files)
app.command("lint")(lint)
app.command("init")(init)
app.command("rules")(rules)
app.add_typer(config_app, name="config")


def main() -> None:
    app()
