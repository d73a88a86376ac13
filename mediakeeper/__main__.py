"""Entry point for running mediakeeper as a module."""

from mediakeeper.cli.commands import app

if __name__ == "__main__":
    app()
