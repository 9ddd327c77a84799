# GPU Memory Allocation Budgets, and Hardware Resource Limits.

# Particles
# --------------------------------------------------------------

# Primitive Cap
MAX_PARTICLES                   = 1 << 20

# Position (3), size, color (3), glow
PARTICLE_FORMAT_FLOATS          = 8
BYTE_SIZE_PARTICLE_FORMAT       = 4 * PARTICLE_FORMAT_FLOATS
BYTE_SIZE_PARTICLE_POOL         = MAX_PARTICLES * BYTE_SIZE_PARTICLE_FORMAT

# Splatting
# --------------------------------------------------------------

# Largest splat footprint in pixels, glow halo included.
MAX_SPLAT_RADIUS                = 16

# Fixed point scale for the additive color accumulation.
ACCUMULATION_SCALE              = 1024

# R, G, B, alpha as uint per pixel
BYTE_SIZE_ACCUMULATION_FORMAT   = 4 * 4

# Point size attenuation, size * POINT_SIZE_SCALE / view depth
POINT_SIZE_SCALE                = 300.0

# Hardware
# --------------------------------------------------------------

NUM_LANE_PER_WAVE   = 64
RESOLVE_TILE_SIZE   = 8
