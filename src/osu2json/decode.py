from __future__ import annotations
import logging
import re
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, Optional, TextIO, Union
from .beatmap import SAMPLE_SET_NAMES, Beatmap, SampleSet
from .hitobjects import MAX_REPEAT_COUNT, HitObjectDecoder
from .timing import parse_timing_point
from .util.number import is_nan, to_number

logger = logging.getLogger(__name__)

_SECTION_RE = re.compile(r"\[(\w+)\]", re.ASCII)

class Section(str, Enum):
    GENERAL = "General"
    DIFFICULTY = "Difficulty"
    TIMING_POINTS = "TimingPoints"
    HIT_OBJECTS = "HitObjects"

    @classmethod
    def lookup(cls, name: str) -> Optional["Section"]:
        for s in cls:
            if s.value == name:
                return s
        return None

def _key_value(line: str):
    split = [s.strip() for s in line.split(":")]
    if len(split) != 2:
        return None
    return split[0], split[1]

def _sample_set_from(value: str) -> Optional[SampleSet]:
    if value in SAMPLE_SET_NAMES:
        return SAMPLE_SET_NAMES[value]
    num = to_number(value)
    if not is_nan(num) and num in (0, 1, 2, 3):
        return SampleSet(int(num))
    return None

def parse_general(line: str, beatmap: Beatmap) -> None:
    kv = _key_value(line)
    if kv is None:
        return
    key, value = kv
    if key == "SampleSet":
        sample_set = _sample_set_from(value)
        if sample_set is None:
            logger.debug("unknown SampleSet %r ignored", value)
            return
        beatmap.general[key] = sample_set
        return
    num = to_number(value)
    beatmap.general[key] = value if is_nan(num) else num

def parse_difficulty(line: str, beatmap: Beatmap) -> None:
    kv = _key_value(line)
    if kv is None:
        return
    key, value = kv
    beatmap.difficulty[key] = to_number(value)

class BeatmapDecoder:
    """
    Line-by-line decoder. Feed lines in file order, then close() for the result.

        dec = BeatmapDecoder()
        for line in lines:
            dec.feed(line)
        beatmap = dec.close()
    """

    def __init__(self, cfg: Optional[Dict[str, Any]] = None):
        dcfg = (cfg or {}).get("decode", {}) or {}
        self.beatmap = Beatmap()
        self.current_section = ""
        self.line_no = 0
        self.closed = False
        self.hit_objects = HitObjectDecoder(
            max_repeat_count=dcfg.get("max_repeat_count", MAX_REPEAT_COUNT),
            start_time_offset=dcfg.get("start_time_offset", 0),
        )

    def feed(self, line: str) -> None:
        if self.closed:
            raise RuntimeError("decoder already closed")
        self.line_no += 1
        if line.startswith("["):
            m = _SECTION_RE.search(line)
            if m:
                self.current_section = m.group(1)
            return
        self._route(line)

    def _route(self, line: str) -> None:
        section = Section.lookup(self.current_section)
        if section is Section.GENERAL:
            parse_general(line, self.beatmap)
        elif section is Section.DIFFICULTY:
            parse_difficulty(line, self.beatmap)
        elif section is Section.TIMING_POINTS:
            parse_timing_point(line, self.beatmap)
        elif section is Section.HIT_OBJECTS:
            self.hit_objects.decode(line, self.beatmap, line_no=self.line_no)
        # Metadata, Events, Colours, ...: nothing to do

    def close(self) -> Beatmap:
        self.closed = True
        return self.beatmap

# --- line sources ---

def iter_lines(stream: Iterable[str]) -> Iterator[str]:
    for raw in stream:
        yield raw.strip()

def decode_lines(lines: Iterable[str], cfg: Optional[Dict[str, Any]] = None) -> Beatmap:
    dec = BeatmapDecoder(cfg)
    for line in iter_lines(lines):
        dec.feed(line)
    return dec.close()

def decode_text(text: str, cfg: Optional[Dict[str, Any]] = None) -> Beatmap:
    return decode_lines(text.splitlines(), cfg)

def decode_stream(stream: TextIO, cfg: Optional[Dict[str, Any]] = None) -> Beatmap:
    return decode_lines(stream, cfg)

def decode_file(path: Union[str, Path], cfg: Optional[Dict[str, Any]] = None) -> Beatmap:
    # utf-8-sig: most editors write a BOM in front of "osu file format vNN"
    with open(path, "r", encoding="utf-8-sig") as f:
        beatmap = decode_stream(f, cfg)
    logger.debug("decoded %s: %d timing points, %d hit objects",
                 path, len(beatmap.timing_points), len(beatmap.hit_objects))
    return beatmap
