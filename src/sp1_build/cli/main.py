"""Main CLI entry point for sp1-build."""

import sys

from sp1_build.cli import build as build_cli


def main() -> None:
    """Main CLI entry point."""
    if len(sys.argv) < 2:
        print("Usage: sp1-build <command> [args...]", file=sys.stderr)
        print("Commands:", file=sys.stderr)
        print(
            "  build [program_dir]  - Compile an SP1 program and copy its ELF (see build --help)",
            file=sys.stderr,
        )
        sys.exit(1)

    command = sys.argv[1]

    if command == "build":
        build_cli.run_build_argv()
    else:
        print(f"Error: Unknown command: {command}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
