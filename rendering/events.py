import logging
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class FrameEvent:
    data: np.ndarray    # read-only (height, width, channels) view of the buffer
    width: int
    height: int
    seq: int            # render sequence number


@dataclass(frozen=True)
class LogEvent:
    message: str
    level: int = logging.INFO
