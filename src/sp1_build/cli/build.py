"""`sp1-build build` — compile an SP1 program and copy its ELF."""

import argparse
import logging
import sys
from pathlib import Path

from sp1_build.build import build_program
from sp1_build.config import load_build_config, split_features
from sp1_build.errors import BuildError, ProcessFailure
from sp1_build.options import BuildOptions


def _parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="sp1-build build",
        description="Compile an SP1 program for riscv32im-succinct-zkvm-elf",
    )
    ap.add_argument(
        "program_dir",
        nargs="?",
        type=Path,
        default=None,
        help="Program directory containing Cargo.toml (default: cwd)",
    )
    ap.add_argument(
        "--docker",
        action="store_const",
        const=True,
        default=None,
        help="Run compilation using a Docker container for reproducible builds",
    )
    ap.add_argument(
        "--tag", default=None, help="The ghcr.io/succinctlabs/sp1 image tag to use with --docker"
    )
    ap.add_argument(
        "--features",
        action="append",
        default=None,
        help="Space or comma separated list of features to activate",
    )
    ap.add_argument(
        "--no-default-features",
        action="store_const",
        const=True,
        default=None,
        help="Do not activate the `default` feature",
    )
    ap.add_argument(
        "--ignore-rust-version",
        action="store_const",
        const=True,
        default=None,
        help="Ignore `rust-version` specification in packages",
    )
    ap.add_argument(
        "--locked",
        action="store_const",
        const=True,
        default=None,
        help="Assert that `Cargo.lock` will remain unchanged",
    )
    ap.add_argument("--binary", "--bin", default=None, help="Build only the specified binary")
    ap.add_argument("--elf-name", default=None, help="ELF binary name")
    ap.add_argument(
        "--output-directory",
        "--out-dir",
        default=None,
        help="Copy the compiled ELF to this directory (default: elf)",
    )
    ap.add_argument(
        "--config", type=Path, default=None, help="Build config file (default: sp1-build.yaml)"
    )
    ap.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return ap


def options_from_args(args: argparse.Namespace, config: dict) -> BuildOptions:
    """CLI flags over config file over defaults."""
    features = split_features(args.features) if args.features is not None else None
    return BuildOptions.from_config(
        config,
        use_container=args.docker,
        container_tag=args.tag,
        features=tuple(features) if features is not None else None,
        no_default_features=args.no_default_features,
        ignore_toolchain_version_check=args.ignore_rust_version,
        locked=args.locked,
        binary_name=args.binary,
        artifact_name=args.elf_name,
        output_directory=args.output_directory,
    )


def run_build_argv(argv: list[str] | None = None) -> None:
    """Parse argv and build. Exits with cargo's own code when the build fails."""
    if argv is None:
        argv = sys.argv[2:] if len(sys.argv) > 2 else []  # skip 'sp1-build build'
    args = _parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    program_dir = args.program_dir if args.program_dir is not None else Path.cwd()
    try:
        config = load_build_config(program_dir, args.config)
        options = options_from_args(args, config)
        elf_path = build_program(options, program_dir)
    except ProcessFailure as e:
        # cargo already printed why.
        sys.exit(e.returncode)
    except BuildError as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)
    print(f"✅ ELF written to {elf_path}")
    sys.exit(0)
