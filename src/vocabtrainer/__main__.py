"""Main entry point for the training engine."""
from vocabtrainer.cli import cli

if __name__ == "__main__":
    cli(prog_name="vocabtrainer")
