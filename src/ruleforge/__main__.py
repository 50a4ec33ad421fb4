"""Entry point for 'python -m ruleforge' command."""

from ruleforge.cli import main

if __name__ == "__main__":
    main()
