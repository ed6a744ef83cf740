from __future__ import annotations
import argparse, pathlib, sys
from . import decode, write
from .config import get_indent, get_output_format, load_config
from .errors import MalformedRecord

SUFFIXES = {"json": ".json", "yaml": ".yaml"}

def _convert(in_path: pathlib.Path, out_target: str, fmt: str, indent: int, cfg: dict) -> int:
    try:
        beatmap = decode.decode_file(in_path, cfg)
    except (MalformedRecord, OSError, UnicodeDecodeError) as exc:
        print(f"[cli] ERROR: {in_path}: {exc}", file=sys.stderr)
        return 2

    if out_target == "-":
        sys.stdout.write(write.render(beatmap, fmt, indent))
        sys.stdout.write("\n")
    else:
        write.write_output(beatmap, out_target, fmt, indent)
        print(f"[cli] {fmt:<5} -> {out_target}", file=sys.stderr)

    print(f"[cli] Done. timingPoints={len(beatmap.timing_points)} hitObjects={len(beatmap.hit_objects)}",
          file=sys.stderr)
    return 0

def main(argv=None):
    p = argparse.ArgumentParser(description=".osu beatmap -> JSON/YAML")
    p.add_argument("--in", dest="infile", required=True, help="Input beatmap (.osu)")
    p.add_argument("--out", dest="outfile", default=None, help="Output file ('-' for stdout); default: input with .json/.yaml suffix")
    p.add_argument("--format", dest="fmt", choices=sorted(SUFFIXES), default=None, help="Output format (default from config: json)")
    p.add_argument("--indent", dest="indent", type=int, default=None, help="JSON indentation (0 = compact)")
    p.add_argument("--config", dest="config", default=None, help="YAML config (defaults applied if omitted)")
    p.add_argument("--watch", action="store_true", help="Re-decode whenever the input file changes")

    args = p.parse_args(argv)

    in_path = pathlib.Path(args.infile).expanduser().resolve()
    if not in_path.exists():
        print(f"[cli] ERROR: Input not found: {in_path}", file=sys.stderr)
        return 1

    cfg = load_config(args.config)
    fmt = args.fmt or get_output_format(cfg)
    indent = args.indent if args.indent is not None else get_indent(cfg)

    if args.outfile:
        out_target = args.outfile if args.outfile == "-" else str(pathlib.Path(args.outfile).expanduser().resolve())
    else:
        out_target = str(in_path.with_suffix(SUFFIXES[fmt]))

    rc = _convert(in_path, out_target, fmt, indent, cfg)
    if not args.watch:
        return rc

    from .watch import watch_file
    print(f"[watch] watching {in_path} (Ctrl+C to stop)", file=sys.stderr)

    def on_change():
        print(f"[watch] change detected: {in_path.name}", file=sys.stderr)
        _convert(in_path, out_target, fmt, indent, cfg)

    watch_file(str(in_path), on_change, debounce=float(cfg["watch"]["debounce_seconds"]))
    return 0

if __name__ == "__main__":
    sys.exit(main())
