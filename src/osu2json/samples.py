from __future__ import annotations
from typing import List, Optional
from .beatmap import SampleBankInfo, SampleInfo, SoundType
from .util.number import to_flags, to_number, is_nan

def bank_name(index) -> Optional[str]:
    """
    Legacy bank index -> lowercase bank name.
    0 ("none") and anything outside the known range mean "no bank here".
    """
    if is_nan(index):
        return None
    if index == 1:
        return "normal"
    if index == 2:
        return "soft"
    if index == 3:
        return "drum"
    return None

def read_custom_sample_banks(token: str, info: SampleBankInfo) -> SampleBankInfo:
    """
    Decodes "bank:addbank[:index][:volume][:filename]" into `info` (in place).
    index/volume are only overwritten when present; filename is always reset.
    """
    parts = [p.strip() for p in token.split(":")]

    normal = bank_name(to_number(parts[0]))
    add_token = parts[1] if len(parts) > 1 else ""
    # empty addbank → same bank as the normal sound
    add = normal if add_token == "" else bank_name(to_number(add_token))

    info.normal = normal
    info.add = add
    if len(parts) > 2:
        info.custom_sample_bank = to_number(parts[2])
    if len(parts) > 3:
        info.volume = to_number(parts[3])
    info.filename = parts[4] if len(parts) > 4 else None
    return info

def _sample(bank: Optional[str], name: str, info: SampleBankInfo) -> SampleInfo:
    return SampleInfo(bank=bank, name=name, volume=info.volume,
                      custom_sample_bank=info.custom_sample_bank)

def convert_sound_type(sound_type, info: SampleBankInfo) -> List[SampleInfo]:
    # explicit file wins over everything else
    if info.filename:
        return [SampleInfo(filename=info.filename)]

    flags = to_flags(sound_type)
    samples = [_sample(info.normal, "hitnormal", info)]
    # order matters: finish, whistle, clap
    if flags & SoundType.FINISH:
        samples.append(_sample(info.add, "hitfinish", info))
    if flags & SoundType.WHISTLE:
        samples.append(_sample(info.add, "hitwhistle", info))
    if flags & SoundType.CLAP:
        samples.append(_sample(info.add, "hitclap", info))
    return samples
