import math
import numpy as np
import coalpy.gpu as gpu

from dataclasses import dataclass
from helixtorus import Budgets
from helixtorus import Device
from helixtorus import ParticleDeviceMemory


@dataclass
class Context:
    cmd: gpu.CommandList
    w: int
    h: int
    matrix_v: np.ndarray
    matrix_p: np.ndarray
    particles: ParticleDeviceMemory.ParticleDeviceMemory
    particle_count: int
    target: gpu.Texture


def constant_data(context) -> np.ndarray:
    return np.array([
        # _MatrixV
        context.matrix_v[0, 0:4],
        context.matrix_v[1, 0:4],
        context.matrix_v[2, 0:4],
        context.matrix_v[3, 0:4],

        # _MatrixP
        context.matrix_p[0, 0:4],
        context.matrix_p[1, 0:4],
        context.matrix_p[2, 0:4],
        context.matrix_p[3, 0:4],

        # _SplatParams0
        [context.particle_count, context.w, context.h, Budgets.POINT_SIZE_SCALE],

        # _SplatParams1
        [Budgets.ACCUMULATION_SCALE, Budgets.MAX_SPLAT_RADIUS, 0, 0],
    ], dtype='f')


class ParticleRasterizer:

    def __init__(self, w, h):

        self.mW = 0
        self.mH = 0

        # Kernels
        self.s_splat = gpu.Shader(file="ParticleSplat.hlsl", name="ParticleSplat", main_function="ParticleSplat")
        self.s_resolve = gpu.Shader(file="ParticleResolve.hlsl", name="ParticleResolve", main_function="ParticleResolve")

        # Constant Buffers
        self.cb_splat = gpu.Buffer(
            name="ConstantBufferSplat",
            type=gpu.BufferType.Structured,
            stride=((4 * 4) * 4) + ((4 * 4) * 4) + (4 * 4) + (4 * 4),  # Matrix V, Matrix P, Params
            element_count=1,
            is_constant_buffer=True
        )

        # Resource Buffers
        self.b_visible_counter = gpu.Buffer(
            name="VisibleParticleCounter",
            type=gpu.BufferType.Standard,
            format=gpu.Format.R32_UINT,
            element_count=1
        )

        # Resolution Dependent
        self.b_accumulation = None
        self.update_resolution_dependent_buffers(w, h)

    def update_resolution_dependent_buffers(self, w, h):
        if w <= self.mW and h <= self.mH:
            return

        self.mW = w
        self.mH = h

        self.b_accumulation = gpu.Buffer(
            name="AccumulationBuffer",
            type=gpu.BufferType.Raw,
            element_count=w * h * (Budgets.BYTE_SIZE_ACCUMULATION_FORMAT // 4)
        )

    def clear_buffers(self, context):
        context.cmd.begin_marker("ClearAccumulation")

        Device.clear_buffer(
            context.cmd,
            0,
            1,
            self.b_visible_counter
        )

        Device.clear_buffer(
            context.cmd,
            0,
            context.w * context.h * (Budgets.BYTE_SIZE_ACCUMULATION_FORMAT // 4),
            self.b_accumulation,
            Device.ClearMode.RAW
        )

        context.cmd.end_marker()

    def splat(self, context):
        context.cmd.begin_marker("ParticleSplat")

        context.cmd.dispatch(
            shader=self.s_splat,

            constants=[
                self.cb_splat
            ],

            inputs=[
                context.particles.b_particles
            ],

            outputs=[
                self.b_accumulation,
                self.b_visible_counter
            ],

            x=math.ceil(context.particle_count / Budgets.NUM_LANE_PER_WAVE)
        )

        context.cmd.end_marker()

    def resolve(self, context):
        context.cmd.begin_marker("ParticleResolve")

        context.cmd.dispatch(
            shader=self.s_resolve,

            constants=[
                self.cb_splat
            ],

            inputs=[
                self.b_accumulation
            ],

            outputs=[
                context.target
            ],

            x=math.ceil(context.w / Budgets.RESOLVE_TILE_SIZE),
            y=math.ceil(context.h / Budgets.RESOLVE_TILE_SIZE)
        )

        context.cmd.end_marker()

    def go(self, context):
        context.cmd.begin_marker("Raster (Particles)")

        self.update_resolution_dependent_buffers(context.w, context.h)

        context.cmd.upload_resource(
            source=constant_data(context),
            destination=self.cb_splat
        )

        self.clear_buffers(context)

        # 1) Project every particle and accumulate its core and glow halo.
        self.splat(context)

        # 2) Normalize the accumulated color per pixel into the display target.
        self.resolve(context)

        context.cmd.end_marker()
