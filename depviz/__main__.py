from depviz.cli import cli

cli()
