"""shuff CLI.

This is the stable CLI entrypoint (console-script: ``shuff``).

Output policy:
  - results go to stdout (``OK``, stats, code tables)
  - errors go to stderr as one ``[shuff] ...`` line; ``--debug`` re-raises
  - exit codes come from shuff.errors
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from shuff import __version__
from shuff.errors import EXIT_GENERIC, EXIT_IO, EXIT_OK, IoFailure, ShuffError


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--debug", action="store_true", help="Show stack traces on errors")


def _cmd_compress(input_path: Path, output_path: Path, *, stats: bool) -> int:
    from shuff.engine.huffman_file import compress_file
    from shuff.report import compression_ratio

    res = compress_file(input_path, output_path)
    if stats:
        print(f"original   : {input_path} ({res.n_symbols} bytes)")
        print(f"compressed : {output_path} ({res.compressed_size} bytes)")
        print(f"symbols    : {len(res.table)} distinct")
        print(f"ratio      : {compression_ratio(res.table, res.codes)}%")
    print("OK")
    return EXIT_OK


def _cmd_expand(input_path: Path, output_path: Path) -> int:
    from shuff.engine.huffman_file import expand_file

    expand_file(input_path, output_path)
    print("OK")
    return EXIT_OK


def _cmd_codes(input_path: Path, *, as_json: bool) -> int:
    from shuff.core.freq import count_stream
    from shuff.core.tree import build
    from shuff.report import code_rows, compression_ratio, render_code_table

    try:
        with open(input_path, "rb") as fp:
            table = count_stream(fp)
    except OSError as err:
        raise IoFailure(f"Impossibile aprire il file di input: {input_path}") from err

    _tree, codes = build(table)

    if as_json:
        obj = {
            "input": str(input_path),
            "n_symbols": table.total,
            "distinct": len(table),
            "ratio_percent": compression_ratio(table, codes),
            "codes": [r.as_dict() for r in code_rows(table, codes)],
        }
        print(json.dumps(obj, separators=(",", ":")))
    else:
        sys.stdout.write(render_code_table(table, codes))
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="shuff", description="Static Huffman compressor (shuff)")
    p.add_argument("--version", action="version", version=f"shuff {__version__}")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_c = sub.add_parser("compress", help="Compress a file")
    p_c.add_argument("input", type=Path)
    p_c.add_argument("output", type=Path)
    p_c.add_argument("--stats", action="store_true", help="Print sizes and compression ratio")
    _add_common_args(p_c)

    p_e = sub.add_parser("expand", help="Expand a file produced by 'shuff compress'")
    p_e.add_argument("input", type=Path)
    p_e.add_argument("output", type=Path)
    _add_common_args(p_e)

    p_t = sub.add_parser("codes", help="Show the Huffman code table of a file")
    p_t.add_argument("input", type=Path)
    p_t.add_argument("--json", action="store_true", help="Print one JSON object instead of a table")
    _add_common_args(p_t)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    p = build_parser()
    ns = p.parse_args(argv)

    try:
        if ns.cmd == "compress":
            return _cmd_compress(ns.input, ns.output, stats=bool(ns.stats))
        if ns.cmd == "expand":
            return _cmd_expand(ns.input, ns.output)
        if ns.cmd == "codes":
            return _cmd_codes(ns.input, as_json=bool(ns.json))
        raise AssertionError("unreachable")

    except SystemExit:
        raise
    except ShuffError as e:
        if getattr(ns, "debug", False):
            raise
        print(f"[shuff] {e}", file=sys.stderr)
        return int(getattr(e, "exit_code", EXIT_GENERIC) or EXIT_GENERIC)
    except OSError as e:
        if getattr(ns, "debug", False):
            raise
        print(f"[shuff] {e}", file=sys.stderr)
        return EXIT_IO
    except Exception as e:
        if getattr(ns, "debug", False):
            raise
        print(f"[shuff] error: {e}", file=sys.stderr)
        return EXIT_GENERIC


if __name__ == "__main__":
    raise SystemExit(main())
