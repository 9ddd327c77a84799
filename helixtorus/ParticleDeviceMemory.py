import math
import coalpy.gpu as gpu

from helixtorus import Budgets
from helixtorus import Simulation


class ParticleDeviceMemory:

    def __init__(self):

        self.particle_count = 0

        self.b_particles = gpu.Buffer(
            name="GlobalParticleBuffer",
            type=gpu.BufferType.Structured,
            stride=Budgets.BYTE_SIZE_PARTICLE_FORMAT,
            element_count=math.ceil(Budgets.BYTE_SIZE_PARTICLE_POOL / Budgets.BYTE_SIZE_PARTICLE_FORMAT)
        )

    def layout(self, particle_count):
        if particle_count > Budgets.MAX_PARTICLES:
            raise ValueError(
                "Particle count {} exceeds the device budget of {}".format(particle_count, Budgets.MAX_PARTICLES)
            )

        self.particle_count = particle_count

    def bind_particle_data(self, state: Simulation.SimulationState, cmd=None):
        packed = Simulation.pack_particles(state)

        # Upload with the frame's command list when we have one.
        if cmd is not None:
            cmd.upload_resource(
                source=packed,
                destination=self.b_particles
            )
            return

        cmd = gpu.CommandList()

        cmd.upload_resource(
            source=packed,
            destination=self.b_particles
        )

        gpu.schedule(cmd)
