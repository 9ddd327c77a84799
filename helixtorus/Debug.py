import coalpy.gpu as gpu
import numpy as np

from dataclasses import dataclass
from helixtorus import ParticleRasterizer


@dataclass
class Stats:
    particleCount: int
    particleCountVisible: int
    helixCount: int
    time: float
    zoomFactor: float


class Debug:
    def __init__(self):
        self.visible_last = 0

    def compute_stats(self, rasterizer: ParticleRasterizer.ParticleRasterizer, context, state) -> Stats:
        # Reads back the counter of the last scheduled frame.
        download = gpu.ResourceDownloadRequest(rasterizer.b_visible_counter)
        download.resolve()
        result = np.frombuffer(download.data_as_bytearray(), dtype='I')
        self.visible_last = int(result[0])

        return Stats(
            context.particle_count,
            self.visible_last,
            state.grid.helix_count,
            state.time,
            state.zoom_factor
        )
