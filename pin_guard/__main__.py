from pin_guard.cli import cli

cli()
