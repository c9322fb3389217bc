# clarity_organizer/main.py

# The entry point holds no application logic; it only hands control to the
# command-line shell, which talks to the core engine.
from clarity_organizer.cli.main import clarity


def main():
    """Runs the Clarity command-line interface."""
    clarity(prog_name="clarity")


if __name__ == '__main__':
    # Allows `python -m clarity_organizer.main`.
    main()
