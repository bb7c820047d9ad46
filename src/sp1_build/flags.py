"""Translate BuildOptions into cargo arguments and the toolchain environment. No I/O."""

from __future__ import annotations

from sp1_build.options import BUILD_TARGET, BuildOptions

TOOLCHAIN_NAME = "succinct"

# cargo's CARGO_ENCODED_RUSTFLAGS convention: flags separated by 0x1F.
ENCODED_FLAGS_SEPARATOR = "\x1f"

RUST_COMPILER_FLAGS: tuple[str, ...] = (
    "-C",
    "passes=loweratomic",
    "-C",
    "link-arg=-Ttext=0x00200800",
    "-C",
    "panic=abort",
)


def get_program_build_args(options: BuildOptions) -> list[str]:
    """cargo arguments for a release build of the program against BUILD_TARGET."""
    build_args = ["build", "--release", "--target", BUILD_TARGET]

    if options.ignore_toolchain_version_check:
        build_args.append("--ignore-rust-version")

    if options.binary_name:
        build_args.extend(["--bin", options.binary_name])

    # Order kept exactly as given; duplicates are the caller's business.
    if options.features:
        build_args.extend(["--features", ",".join(options.features)])

    if options.no_default_features:
        build_args.append("--no-default-features")

    if options.locked:
        build_args.append("--locked")

    return build_args


def get_rust_compiler_flags() -> str:
    """Fixed rustc flags for the zkVM target, encoded for CARGO_ENCODED_RUSTFLAGS."""
    return ENCODED_FLAGS_SEPARATOR.join(RUST_COMPILER_FLAGS)


def toolchain_env() -> dict[str, str]:
    return {
        "RUSTUP_TOOLCHAIN": TOOLCHAIN_NAME,
        "CARGO_ENCODED_RUSTFLAGS": get_rust_compiler_flags(),
    }


def translate(options: BuildOptions) -> tuple[list[str], dict[str, str]]:
    """Return (cargo args, env overrides) for options."""
    return get_program_build_args(options), toolchain_env()
