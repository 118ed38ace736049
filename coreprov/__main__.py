from coreprov.main import cli

cli()
