# application/dto/fry_report_dto.py
# Summary of a finished deep-fry run.

from dataclasses import dataclass, field
from typing import List


@dataclass
class FryReportDTO:
    """What a run consumed and produced."""
    input_path: str
    output_path: str
    sample_rate: int = 0
    input_frames: int = 0
    output_frames: int = 0
    frames_trimmed: int = 0
    bitrates_used: List[int] = field(default_factory=list)
    elapsed_sec: float = 0.0

    @property
    def iterations(self) -> int:
        return len(self.bitrates_used)
