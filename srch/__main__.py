from srch.cli import run

run()
