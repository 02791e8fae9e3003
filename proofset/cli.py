"""CLI entry point for Proofset."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated, NoReturn

import typer
import yaml
from rich import print as rprint
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from proofset.chain import (
    ContentMatchResult,
    DetailSpacing,
    HashAlgorithm,
    MatchStatus,
    ProofsetConfig,
    build_hash_list_from_detail_lines,
    create_proofset_async,
    create_simple_proofset_async,
    detect_format,
    extract_detail_lines,
    extract_simple_proofset_lines,
    infer_algorithm,
    match_by_hash,
    match_by_path,
    match_single_file,
    parse_detail_line,
    parse_hash_list,
    parse_simple_proofset_line,
    verify_detail_line,
    verify_hash_in_list,
    verify_hashset_hash,
    verify_proofset,
    verify_simple_proofset_hash,
)
from proofset.chain.matcher import summarize
from proofset.chain.scanner import aiter_source_files, scan_directory
from proofset.chain.verifier import compute_hashset_hash
from proofset.config import ProofsetSettings, load_config
from proofset.config.loader import DEFAULT_CONFIG_TEMPLATE
from proofset.output import ProofsetWriter

app = typer.Typer(
    name="proofset",
    help="Create and verify proofsets: hashset commitment with selective disclosure.",
)

config_app = typer.Typer(help="Manage Proofset configuration.")
app.add_typer(config_app, name="config")

simple_app = typer.Typer(help="Simple (secretless, unchained) proofsets.")
app.add_typer(simple_app, name="simple")

logger = logging.getLogger(__name__)

# Global state
_config: ProofsetSettings | None = None

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return json.dumps({
            "time": self.formatTime(record),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        })


def setup_logging(cfg: ProofsetSettings) -> None:
    """Configure the root logger from ``log_level`` / ``log_format``."""
    handler = logging.StreamHandler()
    if cfg.log_format == "json":
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(name)s] %(levelname)s %(message)s")
        )
    logging.basicConfig(level=_LOG_LEVELS[cfg.log_level], handlers=[handler], force=True)


def _get_config() -> ProofsetSettings:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to proofset.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    setup_logging(_config)


def _read_exact(path: str) -> str:
    """Read a text artifact without newline translation.

    Path.read_text() would turn ``\\r\\n`` into ``\\n`` and change every
    hash computed over the content.
    """
    return Path(path).resolve().read_bytes().decode("utf-8")


def _fail(message: str) -> NoReturn:
    rprint(f"[red]Error:[/red] {message}")
    raise typer.Exit(1)


def _resolve_algorithm(algo: str | None, cfg: ProofsetSettings) -> HashAlgorithm:
    if algo is None:
        return cfg.chain.hash_algorithm
    try:
        return HashAlgorithm.from_name(algo)
    except ValueError as e:
        _fail(escape(str(e)))


# ---------------------------------------------------------------------------
# create
# ---------------------------------------------------------------------------


@app.command()
def create(
    source: Annotated[str, typer.Option("--source", "-s", help="Source files directory")],
    password: Annotated[
        str,
        typer.Option(
            "--password", "-p",
            help='Seed password (use "-" to prompt securely)',
            envvar="PROOFSET_SEED",
        ),
    ],
    output: Annotated[
        str | None, typer.Option("--output", "-o", help="Output directory for hashset files")
    ] = None,
    algo: Annotated[
        str | None, typer.Option("--algo", help="Hash algorithm (sha256 or sha512)")
    ] = None,
    legacy_spacing: Annotated[
        bool, typer.Option("--legacy-spacing", help="Two spaces before the path (v1 format)")
    ] = False,
    no_full_path: Annotated[
        bool, typer.Option("--no-full-path", help="Commit bare filenames only")
    ] = False,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Compute without writing")] = False,
) -> None:
    """Create a proofset from source files."""
    cfg = _get_config()
    source_dir = Path(source).resolve()
    if not source_dir.is_dir():
        _fail(f"Source directory not found: {escape(str(source_dir))}")

    seed = password
    if seed == "-":
        seed = typer.prompt("Seed password", hide_input=True, err=True)
    if not seed:
        _fail("No password provided.")

    algorithm = _resolve_algorithm(algo, cfg)
    spacing = DetailSpacing.LEGACY if legacy_spacing else cfg.chain.spacing
    include_full_path = cfg.chain.include_full_path and not no_full_path

    files = aiter_source_files(
        source_dir,
        ignore_patterns=cfg.scan.ignore_patterns,
        include_full_path=include_full_path,
    )
    try:
        result = asyncio.run(
            create_proofset_async(
                files,
                ProofsetConfig(seed_password=seed, algorithm=algorithm, spacing=spacing),
            )
        )
    except OSError as e:
        _fail(escape(str(e)))

    out_cfg = cfg.output
    if output:
        out_cfg = out_cfg.model_copy(update={"base_dir": output})
    written = ProofsetWriter(out_cfg).write(result, spacing=spacing, dry_run=dry_run)
    logger.info("details: %s, hash list: %s", written.details, written.hash_list)

    typer.echo(result.hashset_hash)


# ---------------------------------------------------------------------------
# verify
# ---------------------------------------------------------------------------

_HASH_TRUNC = 16
_MIN_DOTS = 3
_MISMATCH_LABEL = "File content mismatches"


def _trunc(h: str) -> str:
    return h[:_HASH_TRUNC] + "..."


def _content_summary(results: list[ContentMatchResult]) -> list[tuple[str, str]]:
    counts = summarize(results)
    entries = [("File content matches", str(counts[MatchStatus.MATCH]))]
    if counts[MatchStatus.MISMATCH]:
        entries.append((_MISMATCH_LABEL, str(counts[MatchStatus.MISMATCH])))
    if counts[MatchStatus.NOT_FOUND]:
        entries.append(("File content not found", str(counts[MatchStatus.NOT_FOUND])))
    return entries


def _print_summary(entries: list[tuple[str, str]]) -> None:
    """Summary block with dot leaders aligned on the longest label."""
    if not entries:
        return
    max_label = max(len(label) for label, _ in entries)
    max_value = max(len(value) for _, value in entries)
    width = max_label + 1 + _MIN_DOTS + 1 + max_value
    typer.echo("")
    typer.echo("--- Summary ---")
    for label, value in entries:
        dots = "." * max(_MIN_DOTS, width - len(label) - len(value) - 2)
        typer.echo(f"{label} {dots} {value}")


def _print_match_results(
    results: list[ContentMatchResult], only_matches: bool, no_header: bool, show_candidates: bool
) -> None:
    table = Table(show_header=not no_header, box=None, pad_edge=False)
    table.add_column("STATUS", no_wrap=True)
    table.add_column("DETAILS_HASH", no_wrap=True)
    table.add_column("CONTENT_HASH", no_wrap=True)
    table.add_column("FILE_PATH", overflow="fold")
    if show_candidates:
        table.add_column("MATCHED_FILES", overflow="fold")

    for r in results:
        if only_matches and r.status is not MatchStatus.MATCH:
            continue
        status = {
            MatchStatus.MATCH: "[green]PASS[/green]",
            MatchStatus.MISMATCH: "[red]FAIL[/red]",
            MatchStatus.NOT_FOUND: "[yellow]NOT FOUND[/yellow]",
        }[r.status]
        row = [
            status,
            _trunc(r.parsed.details_hash),
            _trunc(r.parsed.content_hash),
            escape(r.parsed.file_path),
        ]
        if show_candidates:
            row.append(escape(", ".join(r.matched_files)) if r.matched_files else "-")
        table.add_row(*row)
    rprint(table)

    for r in results:
        if r.status is MatchStatus.MISMATCH:
            rprint(f"[red]FAIL[/red] {escape(r.parsed.file_path)}")
            rprint(f"  expected content hash: {r.parsed.content_hash}")
            rprint(f"  computed content hash: {r.computed_hash}")


def _run_file_content_verification(
    lines: list[str],
    file_path: str,
    match_mode: str,
    only_matches: bool,
    no_header: bool,
    cfg: ProofsetSettings,
) -> list[ContentMatchResult]:
    """Check disclosed lines against a file or a directory of files."""
    target = Path(file_path).resolve()
    typer.echo("")
    if not no_header:
        typer.echo("--- File content verification ---")

    if target.is_file():
        results = match_single_file(lines, target.read_bytes())
        _print_match_results(results, False, no_header, show_candidates=False)
        return results
    if not target.is_dir():
        _fail(f"{escape(file_path)} is not a file or directory.")

    algorithm = infer_algorithm(parse_detail_line(lines[0]).content_hash)
    scan = scan_directory(
        target,
        algorithm,
        ignore_patterns=cfg.scan.ignore_patterns,
        max_workers=cfg.scan.max_workers,
    )
    if match_mode == "hash":
        typer.echo(f"Hashed {len(scan.files)} file(s) in {target}")
        results = match_by_hash(lines, scan.by_hash())
        _print_match_results(results, only_matches, no_header, show_candidates=True)
    else:
        results = match_by_path(lines, scan.files)
        _print_match_results(results, only_matches, no_header, show_candidates=False)
    return results


_VERIFY_USAGE = (
    "Invalid options. Use one of:\n"
    "  proofset verify -d <details>\n"
    "  proofset verify -d <details> -a <file-details-hash-list>\n"
    "  proofset verify -a <file-details-hash-list>\n"
    "  proofset verify -a <file-details-hash-list> -h <hashset_hash>\n"
    '  proofset verify -i "<detail-line>"\n'
    '  proofset verify -i "<detail-line>" -a <file-details-hash-list>\n'
    "\n"
    "Add -f <file-or-dir> to verify file contents against detail line hashes."
)


@app.command()
def verify(
    details: Annotated[
        str | None, typer.Option("--details", "-d", help="Details file path")
    ] = None,
    hash_list_file: Annotated[
        str | None,
        typer.Option("--file-details-hash-list", "-a", help="File details hash list file path"),
    ] = None,
    item: Annotated[
        str | None, typer.Option("--item", "-i", help="Single detail line to verify")
    ] = None,
    expected_hash: Annotated[
        str | None, typer.Option("--hash", "-h", help="Expected hashset_hash to verify against")
    ] = None,
    extract_hashes: Annotated[
        str | None,
        typer.Option("--extract-hashes", "-x", help="Write derived hash list to file (with -d)"),
    ] = None,
    file: Annotated[
        str | None,
        typer.Option("--file", "-f", help="File or directory to verify against content hashes"),
    ] = None,
    match: Annotated[
        str | None, typer.Option("--match", "-m", help='Match mode for directory -f: "path" or "hash"')
    ] = None,
    only_matches: Annotated[
        bool, typer.Option("--only-matches", help="With directory -f, show only matching entries")
    ] = False,
    no_header: Annotated[
        bool, typer.Option("--no-header", help="Suppress column headers (for scripting/piping)")
    ] = False,
) -> None:
    """Verify a proofset or individual items."""
    cfg = _get_config()

    if details and item:
        _fail("--details (-d) and --item (-i) cannot be used together.")
    if extract_hashes and not details:
        _fail("--extract-hashes (-x) requires --details (-d).")
    if expected_hash and not hash_list_file and not details:
        _fail("--hash (-h) requires --file-details-hash-list (-a).")
    if file and not details and not item:
        _fail("--file (-f) requires --details (-d) or --item (-i).")
    if match and not file:
        _fail("--match (-m) requires --file (-f).")
    if match and match not in ("path", "hash"):
        _fail(f'--match (-m) must be "path" or "hash", got "{escape(match)}".')

    match_mode = match or cfg.match.mode
    show_only_matches = only_matches or cfg.match.only_matches
    summary: list[tuple[str, str]] = []

    try:
        if details:
            _verify_details(
                details, hash_list_file, expected_hash, extract_hashes, file,
                match_mode, show_only_matches, no_header, cfg, summary,
            )
        elif item:
            _verify_item(item, hash_list_file, file, match_mode, show_only_matches, no_header, cfg, summary)
        elif hash_list_file:
            _verify_hash_list(hash_list_file, expected_hash)
        else:
            rprint(_VERIFY_USAGE)
            raise typer.Exit(1)
    except (ValueError, OSError) as e:
        _fail(escape(str(e)))

    _print_summary(summary)
    # content mismatches fail the run; entries not found do not
    if any(label == _MISMATCH_LABEL for label, _ in summary):
        raise typer.Exit(1)


def _verify_details(
    details: str,
    hash_list_file: str | None,
    expected_hash: str | None,
    extract_hashes: str | None,
    file: str | None,
    match_mode: str,
    only_matches: bool,
    no_header: bool,
    cfg: ProofsetSettings,
    summary: list[tuple[str, str]],
) -> None:
    """Modes 1 and 2: a details file, with or without its hash list."""
    content = _read_exact(details)
    hash_list = _read_exact(hash_list_file) if hash_list_file else None
    if hash_list is not None:
        parse_hash_list(hash_list)

    report = verify_proofset(content, hash_list, expected_hash)
    for failure in report.failures:
        if failure.reason == "not in hash list":
            rprint(f"[red]FAIL:[/red] file_details_hash not in hash list: {failure.details_hash}")
        else:
            rprint(f"[red]FAIL:[/red] {failure.details_hash}")

    typer.echo(f"hashset_hash: {report.computed_hashset_hash}")
    if report.hashset_hash_matches is False:
        rprint("[red]FAIL:[/red] hashset_hash does not match file details hash list.")
        rprint(f"  expected: {expected_hash}")
        rprint(f"  computed: {report.computed_hashset_hash}")
    if not report.valid:
        rprint("[red]Verification FAILED.[/red]")
        raise typer.Exit(1)

    summary.append(("Valid file detail entries", str(report.valid_lines)))

    lines = extract_detail_lines(content)
    if extract_hashes and hash_list is None:
        derived = build_hash_list_from_detail_lines(lines)
        dest = Path(extract_hashes).resolve()
        dest.write_bytes(derived.encode("ascii"))
        typer.echo(f"Hash list written to: {extract_hashes}")

    if file:
        results = _run_file_content_verification(lines, file, match_mode, only_matches, no_header, cfg)
        summary.extend(_content_summary(results))


def _verify_item(
    item: str,
    hash_list_file: str | None,
    file: str | None,
    match_mode: str,
    only_matches: bool,
    no_header: bool,
    cfg: ProofsetSettings,
    summary: list[tuple[str, str]],
) -> None:
    """Mode 3: a single disclosed line."""
    result = verify_detail_line(item)
    if not result.valid:
        rprint("[red]FAIL:[/red] H(file_details) != file_details_hash")
        raise typer.Exit(1)
    typer.echo(f"file_details_hash verified: {result.details_hash}")

    if hash_list_file:
        hash_list = _read_exact(hash_list_file)
        if not verify_hash_in_list(result.details_hash, hash_list):
            rprint("[red]FAIL:[/red] file_details_hash not found in hash list file")
            raise typer.Exit(1)
        typer.echo("file_details_hash found in hash list.")

    if file:
        results = _run_file_content_verification([item], file, match_mode, only_matches, no_header, cfg)
        summary.extend(_content_summary(results))


def _verify_hash_list(hash_list_file: str, expected_hash: str | None) -> None:
    """Mode 4: a bare hash list, optionally against a published root."""
    hash_list = _read_exact(hash_list_file)
    try:
        hashes = parse_hash_list(hash_list)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        rprint("  The file may contain detail lines. Did you mean to use -d instead of -a?")
        raise typer.Exit(1)
    if not hashes:
        _fail("File details hash list is empty.")

    computed = compute_hashset_hash(hash_list, hashes[0])
    if expected_hash is None:
        typer.echo(f"hashset_hash: {computed}")
        return

    if verify_hashset_hash(hash_list, expected_hash):
        typer.echo("Verified: hashset_hash matches file details hash list.")
    else:
        rprint("[red]FAIL:[/red] hashset_hash does not match file details hash list.")
        rprint(f"  expected: {expected_hash}")
        rprint(f"  computed: {computed}")
        raise typer.Exit(1)


# ---------------------------------------------------------------------------
# simple proofsets and format detection
# ---------------------------------------------------------------------------


@simple_app.command("create")
def simple_create(
    source: Annotated[str, typer.Option("--source", "-s", help="Source files directory")],
    output: Annotated[
        str | None, typer.Option("--output", "-o", help="Output directory")
    ] = None,
    algo: Annotated[
        str | None, typer.Option("--algo", help="Hash algorithm (sha256 or sha512)")
    ] = None,
) -> None:
    """Create a simple proofset listing."""
    cfg = _get_config()
    source_dir = Path(source).resolve()
    if not source_dir.is_dir():
        _fail(f"Source directory not found: {escape(str(source_dir))}")

    algorithm = _resolve_algorithm(algo, cfg)
    files = aiter_source_files(
        source_dir, ignore_patterns=cfg.scan.ignore_patterns, posix_relative=True
    )
    try:
        result = asyncio.run(create_simple_proofset_async(files, algorithm))
    except OSError as e:
        _fail(escape(str(e)))

    out_cfg = cfg.output
    if output:
        out_cfg = out_cfg.model_copy(update={"base_dir": output})
    ProofsetWriter(out_cfg).write_simple(result)
    typer.echo(result.hash)


@simple_app.command("verify")
def simple_verify(
    path: Annotated[str, typer.Argument(help="Simple proofset file")],
    expected_hash: Annotated[
        str | None, typer.Option("--hash", "-h", help="Expected root hash")
    ] = None,
) -> None:
    """Verify a simple proofset listing."""
    try:
        content = _read_exact(path)
        if detect_format(content) != "simple":
            _fail("Not a simple proofset (looks like a chained details file; use 'verify -d').")
        lines = extract_simple_proofset_lines(content)
        for line in lines:
            parse_simple_proofset_line(line)
        first_hash = lines[0].split(" ", 1)[0]
        computed = compute_hashset_hash(content, first_hash)
    except (ValueError, OSError) as e:
        _fail(escape(str(e)))

    typer.echo(f"hash: {computed}")
    typer.echo(f"entries: {len(lines)}")
    if expected_hash is not None:
        if verify_simple_proofset_hash(content, expected_hash):
            typer.echo("Verified: hash matches simple proofset.")
        else:
            rprint("[red]FAIL:[/red] hash does not match simple proofset.")
            raise typer.Exit(1)


@app.command()
def detect(
    path: Annotated[str, typer.Argument(help="Proofset file to classify")],
) -> None:
    """Print whether a file is a chained or simple proofset."""
    try:
        typer.echo(detect_format(_read_exact(path)))
    except (ValueError, OSError) as e:
        _fail(escape(str(e)))


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(mode="json"), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default proofset.yaml in current directory."""
    target = Path("proofset.yaml")
    if target.exists() and not force:
        rprint("[yellow]proofset.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(Panel(f"[green]Created[/green] {target}", border_style="green"))


if __name__ == "__main__":
    app()
